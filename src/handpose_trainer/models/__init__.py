"""
Classifier models.

Provides:
    - PoseNet: small MLP over 63-dim hand vectors
    - TorchClassifierBackend: add/normalize/train/classify/save/load
"""
from .backend import ClassifierConfig, TorchClassifierBackend
from .pose_net import PoseNet

__all__ = ["ClassifierConfig", "PoseNet", "TorchClassifierBackend"]

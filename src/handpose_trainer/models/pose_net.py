"""
PoseNet: small MLP classifying wrist-relative hand vectors.

Architecture:
    Input  : 63 features (21 landmarks x 3 axes, min-max scaled)
    Hidden : one or more Linear + ReLU layers (default: 16 units)
    Output : num_classes logits (softmax applied in predict_proba)
"""

import logging
from typing import Sequence

import torch
import torch.nn as nn

from ..core.types import FEATURE_DIM

logger = logging.getLogger(__name__)

DEFAULT_HIDDEN_UNITS = (16,)


class PoseNet(nn.Module):
    """Feed-forward classifier over hand feature vectors."""

    def __init__(self, num_classes: int, input_dim: int = FEATURE_DIM,
                 hidden_units: Sequence[int] = DEFAULT_HIDDEN_UNITS):
        super().__init__()
        if num_classes < 1:
            raise ValueError("PoseNet needs at least one class")

        self.input_dim = input_dim
        self.num_classes = num_classes
        self.hidden_units = list(hidden_units)

        layers = []
        in_features = input_dim
        for units in self.hidden_units:
            layers.append(nn.Linear(in_features, units))
            layers.append(nn.ReLU(inplace=True))
            in_features = units
        self.features = nn.Sequential(*layers)
        self.classifier = nn.Linear(in_features, num_classes)

        self._init_weights()

    def _init_weights(self):
        for m in self.modules():
            if isinstance(m, nn.Linear):
                nn.init.kaiming_normal_(m.weight, nonlinearity="relu")
                nn.init.zeros_(m.bias)

    def forward(self, x):
        """(batch, input_dim) -> (batch, num_classes) raw logits."""
        return self.classifier(self.features(x))

    def predict_proba(self, x):
        """Softmax probabilities, computed in eval mode without gradients."""
        self.eval()
        with torch.no_grad():
            return torch.softmax(self.forward(x), dim=1)

    def topology(self) -> dict:
        return {
            "input_dim": self.input_dim,
            "hidden_units": list(self.hidden_units),
            "num_classes": self.num_classes,
        }

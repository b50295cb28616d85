"""
Hand Pose Trainer
==================

Label webcam hand poses and train a small classifier on them.

Modules:
    - capture: Camera frame acquisition
    - detection: MediaPipe hand landmark detection
    - features: Wrist-relative feature vectors
    - data: Sample store and train/test split
    - models: PyTorch classifier backend
    - evaluation: Held-out evaluation and confusion matrix
    - session: Explicit training session state
    - utils: Configuration, logging, visualization
"""

__version__ = "1.0.0"

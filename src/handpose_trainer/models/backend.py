"""
PyTorch ClassifierBackend.

Accumulates (feature vector, label) pairs, min-max normalizes the
inputs, trains a PoseNet for a fixed number of epochs and classifies
single vectors into a ranked list of predictions.

A saved model is two files in one directory:
    <name>.json          topology, class labels, normalization ranges
    <name>.weights.pth   PoseNet state dict
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

import numpy as np
import torch
import torch.nn as nn
import torch.optim as optim
from torch.utils.data import DataLoader, TensorDataset

from ..core.interfaces import Prediction
from ..utils.logger import log_timing
from .pose_net import PoseNet

logger = logging.getLogger(__name__)

TOPOLOGY_SUFFIX = ".json"
WEIGHTS_SUFFIX = ".weights.pth"


def min_max_scale(inputs: np.ndarray, lo: Optional[np.ndarray], hi: Optional[np.ndarray]) -> np.ndarray:
    """Map inputs to [0, 1] per column; zero-width ranges map to 0."""
    if lo is None or hi is None:
        return np.asarray(inputs, dtype=np.float32)

    span = hi - lo
    flat = span == 0
    safe_span = np.where(flat, 1.0, span)
    scaled = (inputs - lo) / safe_span
    return np.where(flat, 0.0, scaled).astype(np.float32)


@dataclass
class ClassifierConfig:
    """Classifier and optimizer settings."""
    hidden_units: List[int] = field(default_factory=lambda: [16])
    learning_rate: float = 0.01
    batch_size: int = 32
    epochs: int = 50
    seed: Optional[int] = 42
    device: str = "cpu"

    @classmethod
    def from_dict(cls, config: dict) -> "ClassifierConfig":
        return cls(
            hidden_units=list(config.get("hidden_units", [16])),
            learning_rate=config.get("learning_rate", 0.01),
            batch_size=config.get("batch_size", 32),
            epochs=config.get("epochs", 50),
            seed=config.get("seed", 42),
            device=config.get("device", "cpu"),
        )


class TorchClassifierBackend:
    """
    Classifier trainer backed by PyTorch.

    Example:
        >>> backend = TorchClassifierBackend(ClassifierConfig(epochs=50))
        >>> backend.add_data(vector, "happy")
        >>> backend.normalize_data()
        >>> backend.train()
        >>> backend.classify(vector)[0].label
        'happy'
    """

    def __init__(self, config: Optional[ClassifierConfig] = None):
        self.config = config or ClassifierConfig()
        self._device = torch.device(self.config.device)

        self._inputs: List[np.ndarray] = []
        self._labels: List[str] = []

        # Ranges of the accumulated data, adopted by the model on train()
        self._data_min: Optional[np.ndarray] = None
        self._data_max: Optional[np.ndarray] = None
        # Ranges the live model scales with
        self._input_min: Optional[np.ndarray] = None
        self._input_max: Optional[np.ndarray] = None

        self._model: Optional[PoseNet] = None
        self._class_names: List[str] = []
        self._history: List[float] = []

    # ------------------------------------------------------------------
    # Data accumulation
    # ------------------------------------------------------------------

    def add_data(self, features: Sequence[float], label: str) -> None:
        vector = np.asarray(features, dtype=np.float32).reshape(-1)
        if self._inputs and vector.shape != self._inputs[0].shape:
            raise ValueError("Expected %d features, got %d" % (self._inputs[0].size, vector.size))
        self._inputs.append(vector)
        self._labels.append(str(label))

    def clear_data(self) -> None:
        self._inputs = []
        self._labels = []
        self._data_min = None
        self._data_max = None

    @property
    def data_size(self) -> int:
        return len(self._inputs)

    def normalize_data(self) -> None:
        """Record per-input min/max over the accumulated data.

        The ranges take effect for classify() and save() only once train()
        has produced a model from them.
        """
        if not self._inputs:
            raise RuntimeError("No data to normalize; call add_data() first")

        stacked = np.stack(self._inputs)
        self._data_min = stacked.min(axis=0)
        self._data_max = stacked.max(axis=0)
        logger.debug("Normalization ranges computed over %d samples", len(stacked))

    def _scale(self, inputs: np.ndarray) -> np.ndarray:
        return min_max_scale(inputs, self._input_min, self._input_max)

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------

    @log_timing
    def train(self, epochs: Optional[int] = None) -> List[float]:
        """
        Train a fresh PoseNet on the accumulated data.

        Args:
            epochs: number of passes; defaults to config.epochs

        Returns:
            Mean loss per epoch
        """
        if not self._inputs:
            raise RuntimeError("No training data; call add_data() first")

        epochs = self.config.epochs if epochs is None else epochs
        if self.config.seed is not None:
            torch.manual_seed(self.config.seed)

        class_names = list(dict.fromkeys(self._labels))
        index = {name: i for i, name in enumerate(class_names)}

        data_min, data_max = self._data_min, self._data_max
        features = torch.from_numpy(min_max_scale(np.stack(self._inputs), data_min, data_max))
        targets = torch.tensor([index[label] for label in self._labels], dtype=torch.long)

        generator = torch.Generator()
        if self.config.seed is not None:
            generator.manual_seed(self.config.seed)
        loader = DataLoader(
            TensorDataset(features, targets),
            batch_size=self.config.batch_size,
            shuffle=True,
            generator=generator,
        )

        model = PoseNet(
            num_classes=len(class_names),
            input_dim=features.shape[1],
            hidden_units=self.config.hidden_units,
        ).to(self._device)
        criterion = nn.CrossEntropyLoss()
        optimizer = optim.Adam(model.parameters(), lr=self.config.learning_rate)

        logger.info("Training PoseNet: %d samples, %d classes, %d epochs",
                    len(targets), len(class_names), epochs)

        history = []
        for epoch in range(1, epochs + 1):
            model.train()
            running_loss = 0.0
            for batch_x, batch_y in loader:
                batch_x = batch_x.to(self._device)
                batch_y = batch_y.to(self._device)

                optimizer.zero_grad()
                loss = criterion(model(batch_x), batch_y)
                loss.backward()
                optimizer.step()

                running_loss += loss.item() * batch_x.size(0)

            epoch_loss = running_loss / len(targets)
            history.append(epoch_loss)
            if epoch % 10 == 0 or epoch == 1 or epoch == epochs:
                logger.info("Epoch %3d/%d | loss=%.4f", epoch, epochs, epoch_loss)

        model.eval()
        self._model = model
        self._input_min = data_min
        self._input_max = data_max
        self._class_names = class_names
        self._history = history
        return history

    @property
    def is_trained(self) -> bool:
        return self._model is not None

    @property
    def class_names(self) -> List[str]:
        return list(self._class_names)

    @property
    def history(self) -> List[float]:
        return list(self._history)

    # ------------------------------------------------------------------
    # Inference
    # ------------------------------------------------------------------

    def classify(self, features: Sequence[float]) -> List[Prediction]:
        """Ranked predictions for one vector, highest confidence first."""
        if self._model is None:
            raise RuntimeError("Model is not trained")

        vector = np.asarray(features, dtype=np.float32).reshape(-1)
        if vector.size != self._model.input_dim:
            raise ValueError("Expected %d features, got %d" % (self._model.input_dim, vector.size))

        tensor = torch.from_numpy(self._scale(vector)).unsqueeze(0).to(self._device)
        probs = self._model.predict_proba(tensor).cpu().numpy().squeeze(0)

        ranked = [Prediction(name, float(p)) for name, p in zip(self._class_names, probs)]
        ranked.sort(key=lambda p: p.confidence, reverse=True)
        return ranked

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, name: str = "model", directory: str = "models") -> List[str]:
        """Write topology and weights; returns both paths."""
        if self._model is None:
            raise RuntimeError("Nothing to save; train the model first")

        out_dir = Path(directory)
        out_dir.mkdir(parents=True, exist_ok=True)
        topology_path = out_dir / (name + TOPOLOGY_SUFFIX)
        weights_path = out_dir / (name + WEIGHTS_SUFFIX)

        normalization = None
        if self._input_min is not None:
            normalization = {
                "min": self._input_min.tolist(),
                "max": self._input_max.tolist(),
            }

        with open(topology_path, "w") as f:
            json.dump({
                "name": name,
                "topology": self._model.topology(),
                "class_names": self._class_names,
                "normalization": normalization,
                "epochs_trained": len(self._history),
                "final_loss": self._history[-1] if self._history else None,
            }, f, indent=2)
        torch.save(self._model.state_dict(), weights_path)

        logger.info("Model saved to %s and %s", topology_path, weights_path)
        return [str(topology_path), str(weights_path)]

    def load(self, name: str = "model", directory: str = "models") -> None:
        """Restore a model written by save()."""
        in_dir = Path(directory)
        with open(in_dir / (name + TOPOLOGY_SUFFIX), "r") as f:
            meta = json.load(f)

        topology = meta["topology"]
        model = PoseNet(
            num_classes=topology["num_classes"],
            input_dim=topology["input_dim"],
            hidden_units=topology["hidden_units"],
        )
        state_dict = torch.load(in_dir / (name + WEIGHTS_SUFFIX),
                                map_location=self._device, weights_only=True)
        model.load_state_dict(state_dict)
        model.to(self._device)
        model.eval()

        normalization = meta.get("normalization")
        if normalization:
            self._input_min = np.asarray(normalization["min"], dtype=np.float32)
            self._input_max = np.asarray(normalization["max"], dtype=np.float32)
        else:
            self._input_min = None
            self._input_max = None

        self._model = model
        self._class_names = list(meta["class_names"])
        self._history = []
        logger.info("Loaded PoseNet (%d classes) from %s", len(self._class_names), in_dir)

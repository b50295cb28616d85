"""
Lightweight event bus for session notifications.

Each TrainingSession owns one bus; the interactive app subscribes to
learn when background training finishes instead of polling.

Usage:
    bus = EventBus()
    bus.subscribe(Events.TRAINING_COMPLETE, on_done)
    bus.emit(Events.TRAINING_COMPLETE, losses=[...])
"""

import logging
import threading
from collections import defaultdict
from typing import Callable

logger = logging.getLogger(__name__)


class EventBus:
    """Thread-safe publish/subscribe bus; listeners run in subscription order."""

    def __init__(self):
        self._listeners = defaultdict(list)  # event_name -> [callback]
        self._lock = threading.Lock()

    def subscribe(self, event_name: str, callback: Callable):
        with self._lock:
            self._listeners[event_name].append(callback)
        logger.debug("Subscribed to '%s': %s",
                     event_name, getattr(callback, "__name__", callback))

    def emit(self, event_name: str, **kwargs):
        """Dispatch an event to every listener with **kwargs.

        Emitting thread runs the callbacks; a failing listener is logged
        and does not stop the others.
        """
        with self._lock:
            listeners = list(self._listeners.get(event_name, []))

        for callback in listeners:
            try:
                callback(**kwargs)
            except Exception:
                logger.exception("Event handler error [%s -> %s]",
                                 event_name, getattr(callback, "__name__", callback))


class Events:
    """Event names emitted by TrainingSession."""

    LABEL_SELECTED = "label_selected"
    SAMPLE_ADDED = "sample_added"
    TRAINING_STARTED = "training_started"
    TRAINING_COMPLETE = "training_complete"
    TRAINING_FAILED = "training_failed"
    PREDICTION = "prediction"
    MODEL_SAVED = "model_saved"
    EVALUATION_COMPLETE = "evaluation_complete"

"""Accessory classification: preprocess, run the model, pick the top label."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np
from PIL import Image

from .assets import AssetStore, EngineFactory, LabelTable, ModelHandle, load_labels, load_model
from .config import ClassifierConfig
from .engine import TFLiteEngine
from .errors import ErrorKind, Failure
from .preprocess import Normalization, to_input_tensor

logger = logging.getLogger(__name__)

UNKNOWN_LABEL = "Unknown"


@dataclass(frozen=True)
class ClassificationResult:
    """Top prediction with its raw, unthresholded confidence."""

    label: str
    confidence: float


UNKNOWN_RESULT = ClassificationResult(UNKNOWN_LABEL, 0.0)


def _interpret(output: np.ndarray, labels: LabelTable) -> ClassificationResult:
    probabilities = np.asarray(output).reshape(-1)
    if probabilities.size == 0:
        return UNKNOWN_RESULT
    if probabilities.size != len(labels):
        logger.warning(
            "Model output has %d values but the label table has %d entries",
            probabilities.size,
            len(labels),
        )
    # np.argmax returns the first index on ties
    index = int(np.argmax(probabilities))
    if index >= len(labels):
        logger.warning("Top index %d outside label table of %d entries", index, len(labels))
        return UNKNOWN_RESULT
    return ClassificationResult(labels[index], float(probabilities[index]))


def classify(
    image: Image.Image,
    model: ModelHandle,
    labels: LabelTable,
    width: int,
    height: int,
    normalization: Normalization = Normalization.RAW,
) -> Union[ClassificationResult, Failure]:
    """Classify ``image`` with one engine opened and closed for this call.

    Any error raised while preprocessing, opening the engine or running it is
    returned as a ``CLASSIFY_ERROR`` failure.
    """
    try:
        tensor = to_input_tensor(image, width, height, normalization)
        with model.open_engine() as engine:
            output = engine.run(tensor)
    except Exception as exc:
        logger.exception("Classification failed")
        return Failure(ErrorKind.CLASSIFY_ERROR, f"Classification failed: {exc}", exc)

    result = _interpret(output, labels)
    logger.debug("Classified as %s (%.3f)", result.label, result.confidence)
    return result


class AccessoryClassifier:
    """Holds the label table and model handle loaded from an asset store.

    Assets are loaded on the first call and reused afterwards; an engine is
    still opened per classification.
    """

    def __init__(
        self,
        config: Optional[ClassifierConfig] = None,
        store: Optional[AssetStore] = None,
        engine_factory: EngineFactory = TFLiteEngine,
    ) -> None:
        self.config = config or ClassifierConfig()
        self.store = store or AssetStore.bundled()
        self.engine_factory = engine_factory
        self._lock = threading.Lock()
        self._labels: Optional[LabelTable] = None
        self._model: Optional[ModelHandle] = None

    def load(self) -> Optional[Failure]:
        """Load labels and model if not loaded yet; return a failure if either is missing."""
        with self._lock:
            if self._labels is not None and self._model is not None:
                return None

            labels = load_labels(self.store, self.config.labels_asset)
            if isinstance(labels, Failure):
                return labels
            model = load_model(self.store, self.config.model_asset, self.engine_factory)
            if isinstance(model, Failure):
                return model

            self._labels = labels
            self._model = model
            return None

    @property
    def labels(self) -> Optional[LabelTable]:
        return self._labels

    def classify(self, image: Image.Image) -> Union[ClassificationResult, Failure]:
        failure = self.load()
        if failure is not None:
            return failure
        assert self._model is not None and self._labels is not None
        return classify(
            image,
            self._model,
            self._labels,
            self.config.input_width,
            self.config.input_height,
            self.config.normalization,
        )

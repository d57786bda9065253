"""View state behind the app screen and its display policy."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from PIL import Image

from .classifier import UNKNOWN_LABEL, ClassificationResult
from .errors import Failure


@dataclass
class ViewState:
    """What the screen shows: the current image, last result, error and busy flag."""

    image: Optional[Image.Image] = None
    result: Optional[ClassificationResult] = None
    error: Optional[str] = None
    loading: bool = False

    def set_image(self, image: Image.Image) -> None:
        self.image = image
        self.result = None
        self.error = None

    def set_error(self, message: Optional[str]) -> None:
        self.error = message

    def begin_classification(self) -> bool:
        """Mark a classification as pending; False if one cannot start now."""
        if self.image is None:
            self.set_error("No image has been captured")
            return False
        if self.loading:
            return False
        self.loading = True
        self.result = None
        self.error = None
        return True

    def finish_classification(self, outcome: Union[ClassificationResult, Failure]) -> None:
        if isinstance(outcome, Failure):
            self.set_error(f"Error classifying the accessory: {outcome.message}")
        else:
            self.result = outcome
        self.loading = False

    @property
    def can_classify(self) -> bool:
        return self.image is not None and not self.loading


def displayed_result(
    result: ClassificationResult,
    label_threshold: float = 0.5,
    confidence_threshold: float = 0.8,
) -> ClassificationResult:
    """Apply the UI policy: weak predictions read "Unknown", uncertain ones 0%."""
    label = UNKNOWN_LABEL if result.confidence < label_threshold else result.label
    confidence = 0.0 if result.confidence < confidence_threshold else result.confidence
    return ClassificationResult(label, confidence)


def format_result(
    result: ClassificationResult,
    label_threshold: float = 0.5,
    confidence_threshold: float = 0.8,
) -> str:
    shown = displayed_result(result, label_threshold, confidence_threshold)
    return f"Result: {shown.label} ({shown.confidence * 100:.1f}%)"

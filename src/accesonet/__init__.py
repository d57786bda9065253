"""On-device classification of fashion accessory photos."""
from __future__ import annotations

from .assets import AssetStore, ModelHandle, load_labels, load_model
from .classifier import AccessoryClassifier, ClassificationResult, classify
from .config import ClassifierConfig, load_config
from .errors import ErrorKind, Failure
from .geometry import rotate, scale_to_max
from .loader import Orientation, load_from_source
from .preprocess import Normalization, to_input_tensor

__all__ = [
    "AccessoryClassifier",
    "AssetStore",
    "ClassificationResult",
    "ClassifierConfig",
    "ErrorKind",
    "Failure",
    "ModelHandle",
    "Normalization",
    "Orientation",
    "classify",
    "load_config",
    "load_from_source",
    "load_labels",
    "load_model",
    "rotate",
    "scale_to_max",
    "to_input_tensor",
]

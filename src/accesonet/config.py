"""Classifier configuration, historical presets and YAML loading."""
from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict

import yaml

from .preprocess import Normalization


@dataclass
class ClassifierConfig:
    """Settings that must agree with the bundled model."""

    model_asset: str = "accesonet_model.tflite"
    labels_asset: str = "labels.txt"
    input_width: int = 224
    input_height: int = 224
    normalization: Normalization = Normalization.RAW
    # Images are shrunk to this before classification and preview
    max_dimension: int = 128
    # Fixed clockwise rotation applied to camera captures
    capture_rotation: int = 0
    # Display policy; classification results themselves stay raw
    label_threshold: float = 0.5
    confidence_threshold: float = 0.8

    def __post_init__(self) -> None:
        self.model_asset = str(self.model_asset)
        self.labels_asset = str(self.labels_asset)
        self.input_width = int(self.input_width)
        self.input_height = int(self.input_height)
        self.normalization = Normalization(self.normalization)
        self.max_dimension = int(self.max_dimension)
        self.capture_rotation = int(self.capture_rotation)
        self.label_threshold = float(self.label_threshold)
        self.confidence_threshold = float(self.confidence_threshold)


PRESETS: Dict[str, ClassifierConfig] = {
    "accesonet": ClassifierConfig(),
    # First release: 500x500 input scaled to [-1, 1]
    "ary": ClassifierConfig(
        model_asset="ary.tflite",
        input_width=500,
        input_height=500,
        normalization=Normalization.SYMMETRIC,
    ),
}

DEFAULT_PRESET = "accesonet"


def get_preset(name: str) -> ClassifierConfig:
    try:
        return replace(PRESETS[name])
    except KeyError:
        raise KeyError(f"Unknown preset: {name}") from None


def _ensure_positive_int(data: dict, key: str) -> int:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"`{key}` must be an integer.")
    if value <= 0:
        raise ValueError(f"`{key}` must be positive.")
    return value


def _ensure_threshold(data: dict, key: str) -> float:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"`{key}` must be a numeric value.")
    if not 0.0 <= float(value) <= 1.0:
        raise ValueError(f"`{key}` must be between 0 and 1.")
    return float(value)


def load_config(path: str) -> ClassifierConfig:
    """Load and validate a :class:`ClassifierConfig` from ``path``.

    The optional ``preset`` key selects the base configuration; every other
    key overrides a field of that preset.
    """

    config_path = Path(path)
    if not config_path.is_file():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    if not isinstance(data, dict):
        raise ValueError("Configuration file must contain a mapping of options.")

    config = get_preset(str(data.pop("preset", DEFAULT_PRESET)))

    known = set(ClassifierConfig.__dataclass_fields__)
    unknown = set(data).difference(known)
    if unknown:
        unknown_list = ", ".join(sorted(unknown))
        raise KeyError(f"Unknown configuration keys: {unknown_list}")

    for key in ("input_width", "input_height", "max_dimension"):
        if key in data:
            _ensure_positive_int(data, key)
    for key in ("label_threshold", "confidence_threshold"):
        if key in data:
            _ensure_threshold(data, key)

    if "normalization" in data:
        try:
            Normalization(data["normalization"])
        except ValueError:
            choices = ", ".join(n.value for n in Normalization)
            raise ValueError(f"`normalization` must be one of: {choices}.") from None

    if "capture_rotation" in data and data["capture_rotation"] not in (0, 90, 180, 270):
        raise ValueError("`capture_rotation` must be 0, 90, 180 or 270.")

    for key in ("model_asset", "labels_asset"):
        if key in data and (not isinstance(data[key], str) or not data[key]):
            raise ValueError(f"`{key}` must be a non-empty string.")

    return replace(config, **data)

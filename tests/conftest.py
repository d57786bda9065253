"""Shared fixtures: synthetic images, fake model assets and a stub engine."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional, Sequence

import numpy as np
import pytest
from PIL import Image

from accesonet.assets import AssetStore

FAKE_TFLITE = b"\x1c\x00\x00\x00TFL3" + b"\x00" * 24
LABELS = ["Anillos", "Aretes", "Billetera", "Bolsos"]


class StubEngine:
    """Returns a fixed output vector and records what it was given."""

    instances: List["StubEngine"] = []

    def __init__(
        self,
        output: Sequence[float],
        model_path: Optional[str] = None,
        model_content: Optional[bytes] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.output = np.asarray(output)
        self.model_path = model_path
        self.model_content = model_content
        self.error = error
        self.inputs: List[np.ndarray] = []
        self.closed = False
        StubEngine.instances.append(self)

    def run(self, tensor: np.ndarray) -> np.ndarray:
        self.inputs.append(tensor)
        if self.error is not None:
            raise self.error
        return self.output

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def stub_engine_factory() -> Callable[..., Callable[..., StubEngine]]:
    """Build an engine factory returning StubEngines with a given output."""
    StubEngine.instances = []

    def make(output: Sequence[float], error: Optional[Exception] = None) -> Callable[..., StubEngine]:
        def factory(**kwargs: object) -> StubEngine:
            return StubEngine(output, error=error, **kwargs)  # type: ignore[arg-type]

        return factory

    return make


@pytest.fixture()
def asset_dir(tmp_path: Path) -> Path:
    (tmp_path / "accesonet_model.tflite").write_bytes(FAKE_TFLITE)
    (tmp_path / "labels.txt").write_text("\n".join(LABELS) + "\n", encoding="utf-8")
    return tmp_path


@pytest.fixture()
def store(asset_dir: Path) -> AssetStore:
    return AssetStore(asset_dir)


def solid_image(width: int, height: int, color=(255, 0, 0), mode: str = "RGB") -> Image.Image:
    return Image.new(mode, (width, height), color)


def gradient_image(width: int, height: int) -> Image.Image:
    """An image whose pixels are all distinct enough to detect moves."""
    xs = np.arange(width, dtype=np.int64)[None, :].repeat(height, axis=0)
    ys = np.arange(height, dtype=np.int64)[:, None].repeat(width, axis=1)
    arr = (np.stack([xs, ys, xs + ys], axis=-1) % 256).astype(np.uint8)
    return Image.fromarray(arr, "RGB")

"""Locate the bundled model and label assets.

``load_model`` and ``load_labels`` return a ``Failure`` of kind
``ASSET_MISSING`` instead of raising when an asset is absent or unusable.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterator, Optional, Tuple, Union

from .engine import InferenceEngine, TFLiteEngine
from .errors import ErrorKind, Failure

logger = logging.getLogger(__name__)

BUNDLED_ASSETS_DIR = Path(__file__).with_name("data")

# TFLite flatbuffers carry this file identifier at byte offset 4.
_TFLITE_IDENTIFIER = b"TFL3"

LabelTable = Tuple[str, ...]
EngineFactory = Callable[..., InferenceEngine]


class AssetStore:
    """Read-only directory of assets shipped with the application."""

    def __init__(self, root: Union[str, Path]) -> None:
        self.root = Path(root)

    @classmethod
    def bundled(cls) -> "AssetStore":
        return cls(BUNDLED_ASSETS_DIR)

    def path(self, name: str) -> Path:
        return self.root / name

    def exists(self, name: str) -> bool:
        return self.path(name).is_file()

    def __repr__(self) -> str:
        return f"AssetStore({str(self.root)!r})"


@dataclass(frozen=True)
class ModelHandle:
    """A located model asset that can open inference engines."""

    name: str
    path: Optional[Path] = None
    content: Optional[bytes] = None
    engine_factory: EngineFactory = field(default=TFLiteEngine, repr=False)

    @contextmanager
    def open_engine(self) -> Iterator[InferenceEngine]:
        """Open an engine for one call and always close it afterwards."""
        if self.path is not None:
            engine = self.engine_factory(model_path=str(self.path))
        else:
            engine = self.engine_factory(model_content=self.content)
        try:
            yield engine
        finally:
            engine.close()


def load_model(
    store: AssetStore,
    name: str = "accesonet_model.tflite",
    engine_factory: EngineFactory = TFLiteEngine,
) -> Union[ModelHandle, Failure]:
    path = store.path(name)
    try:
        with path.open("rb") as handle:
            header = handle.read(8)
    except OSError as exc:
        logger.error("Model asset %s not found in %s", name, store)
        return Failure(ErrorKind.ASSET_MISSING, f"Model asset not found: {name}", exc)

    if header[4:8] != _TFLITE_IDENTIFIER:
        logger.error("Model asset %s is not a TFLite flatbuffer", name)
        return Failure(ErrorKind.ASSET_MISSING, f"Model asset is not a TFLite model: {name}")

    logger.info("Located model %s at %s", name, path)
    return ModelHandle(name=name, path=path, engine_factory=engine_factory)


def load_labels(store: AssetStore, name: str = "labels.txt") -> Union[LabelTable, Failure]:
    path = store.path(name)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Labels asset %s not readable in %s", name, store)
        return Failure(ErrorKind.ASSET_MISSING, f"Labels asset not found: {name}", exc)

    labels = tuple(line.strip() for line in text.splitlines() if line.strip())
    if not labels:
        return Failure(ErrorKind.ASSET_MISSING, f"Labels asset is empty: {name}")
    logger.info("Loaded %d labels from %s", len(labels), name)
    return labels

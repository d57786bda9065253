"""Inference engine seam and its TFLite implementation."""
from __future__ import annotations

import logging
from typing import Optional, Protocol

import numpy as np

logger = logging.getLogger(__name__)


class InferenceEngine(Protocol):
    """A loaded model that maps one input tensor to one output vector."""

    def run(self, tensor: np.ndarray) -> np.ndarray:
        ...

    def close(self) -> None:
        ...


class TFLiteEngine:
    """Runs a ``.tflite`` model with ``tf.lite.Interpreter``.

    Give either ``model_path`` (the interpreter memory-maps the file) or
    ``model_content`` (an in-memory flatbuffer).
    """

    def __init__(
        self,
        model_path: Optional[str] = None,
        model_content: Optional[bytes] = None,
        num_threads: Optional[int] = None,
    ) -> None:
        if (model_path is None) == (model_content is None):
            raise ValueError("Provide exactly one of model_path or model_content.")

        # TensorFlow is heavy; only needed once a model is actually opened
        import tensorflow as tf  # local import

        self._interpreter = tf.lite.Interpreter(
            model_path=model_path,
            model_content=model_content,
            num_threads=num_threads,
        )
        self._interpreter.allocate_tensors()
        self._input = self._interpreter.get_input_details()[0]
        self._output = self._interpreter.get_output_details()[0]
        logger.debug(
            "Opened TFLite model (input=%s %s, output=%s)",
            self._input["shape"],
            self._input["dtype"],
            self._output["shape"],
        )

    def run(self, tensor: np.ndarray) -> np.ndarray:
        if self._interpreter is None:
            raise RuntimeError("Engine is closed.")
        shape = self._input["shape"]
        expected = int(np.prod(shape))
        if tensor.size != expected:
            raise ValueError(
                f"Input tensor has {tensor.size} values; model expects {expected} {tuple(shape)}."
            )
        x = tensor.reshape(shape).astype(self._input["dtype"], copy=False)
        self._interpreter.set_tensor(self._input["index"], x)
        self._interpreter.invoke()
        return np.array(self._interpreter.get_tensor(self._output["index"])).reshape(-1)

    def close(self) -> None:
        # The interpreter frees its native buffers once unreferenced.
        self._interpreter = None

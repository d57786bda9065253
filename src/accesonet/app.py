"""
accesonet.app
-------------
Phone-friendly Gradio screen for classifying fashion accessories.

- Take a photo with the webcam or pick one from the gallery.
- Captures are shrunk to ``max_dimension`` (and optionally rotated) before
  they become the current image; gallery picks are EXIF-corrected first.
- "Classify Accessory" runs the bundled TFLite model in a Gradio worker
  thread. The button stays disabled while a classification is pending.
- Results follow the display policy in :mod:`accesonet.state`.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import gradio as gr
import numpy as np
from PIL import Image

from .classifier import AccessoryClassifier
from .config import ClassifierConfig
from .errors import Failure
from .geometry import rotate, scale_to_max
from .loader import load_from_source
from .state import ViewState, format_result

logger = logging.getLogger(__name__)

Rendered = Tuple[Optional[Image.Image], str, str, ViewState]


class AccesoNetApp:
    """Gradio wrapper around an :class:`AccessoryClassifier`."""

    def __init__(
        self,
        classifier: Optional[AccessoryClassifier] = None,
        config: Optional[ClassifierConfig] = None,
    ) -> None:
        self.classifier = classifier or AccessoryClassifier(config)
        self.config = config or self.classifier.config

    # ---------- Image acquisition ----------
    def _prepare_capture(self, image: Image.Image) -> Image.Image:
        scaled = scale_to_max(image, self.config.max_dimension)
        if self.config.capture_rotation:
            return rotate(scaled, self.config.capture_rotation)
        return scaled

    def _render(self, state: ViewState) -> Rendered:
        result_text = ""
        if state.result is not None:
            result_text = format_result(
                state.result,
                self.config.label_threshold,
                self.config.confidence_threshold,
            )
        error_text = f"Error: {state.error}" if state.error else ""
        return state.image, result_text, error_text, state

    # ---------- Gradio Handlers ----------
    def capture_gr(self, frame: Optional[np.ndarray], state: Optional[ViewState]) -> Rendered:
        state = state or ViewState()
        if frame is None:
            state.set_error("Error taking the photo")
            return self._render(state)
        try:
            image = Image.fromarray(frame).convert("RGB")
        except (TypeError, ValueError) as exc:
            logger.warning("Unusable camera frame: %s", exc)
            state.set_error("Error processing the image")
            return self._render(state)
        state.set_image(self._prepare_capture(image))
        return self._render(state)

    def gallery_gr(self, path: Optional[str], state: Optional[ViewState]) -> Rendered:
        state = state or ViewState()
        if not path:
            state.set_error("No image was selected from the gallery.")
            return self._render(state)
        loaded = load_from_source(path)
        if isinstance(loaded, Failure):
            state.set_error(f"Error loading the gallery image: {loaded.message}")
            return self._render(state)
        state.set_image(scale_to_max(loaded, self.config.max_dimension))
        return self._render(state)

    def classify_gr(self, state: Optional[ViewState]) -> Tuple[str, str, ViewState, dict]:
        state = state or ViewState()
        if state.begin_classification():
            assert state.image is not None
            state.finish_classification(self.classifier.classify(state.image))
        _, result_text, error_text, state = self._render(state)
        return result_text, error_text, state, gr.update(interactive=state.can_classify)

    @staticmethod
    def _lock_button() -> dict:
        return gr.update(interactive=False)

    # ---------- Build UI ----------
    def build_demo(self) -> gr.Blocks:
        with gr.Blocks(title="AccesoNet") as demo:
            gr.Markdown("## Classify Accessory")
            state = gr.State(ViewState())

            with gr.Tab("Take Photo"):
                cam_in = gr.Image(sources=["webcam"], type="numpy", label="Camera")
                cam_btn = gr.Button("Use Photo")
            with gr.Tab("Gallery"):
                gallery_in = gr.Image(sources=["upload"], type="filepath", label="Select an image")
                gallery_btn = gr.Button("Use Image")

            preview = gr.Image(label="Accessory to classify", interactive=False, height=250)
            classify_btn = gr.Button("Classify Accessory", variant="primary", interactive=False)
            result_out = gr.Textbox(label="Result", interactive=False)
            error_out = gr.Textbox(label="Log", interactive=False)

            acquired = [preview, result_out, error_out, state]
            cam_btn.click(self.capture_gr, inputs=[cam_in, state], outputs=acquired).then(
                lambda s: gr.update(interactive=s.can_classify), inputs=[state], outputs=[classify_btn]
            )
            gallery_btn.click(self.gallery_gr, inputs=[gallery_in, state], outputs=acquired).then(
                lambda s: gr.update(interactive=s.can_classify), inputs=[state], outputs=[classify_btn]
            )
            classify_btn.click(self._lock_button, outputs=[classify_btn]).then(
                self.classify_gr,
                inputs=[state],
                outputs=[result_out, error_out, state, classify_btn],
                concurrency_limit=1,
            )

            gr.Markdown("Tip: launch with `share=True` to use it from your phone.")
        return demo

    def launch(self, **kwargs):
        demo = self.build_demo()
        return demo.launch(**kwargs)

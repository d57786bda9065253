"""Command line entry point: classify a file or serve the app."""
from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from .assets import AssetStore
from .classifier import AccessoryClassifier
from .config import ClassifierConfig, get_preset, load_config
from .errors import Failure
from .geometry import scale_to_max
from .loader import load_from_source
from .state import format_result

logger = logging.getLogger(__name__)


def _resolve_config(args: argparse.Namespace) -> ClassifierConfig:
    config_path = args.config or os.environ.get("ACCESONET_CONFIG")
    if config_path:
        return load_config(config_path)
    return get_preset(args.preset)


def _resolve_store(args: argparse.Namespace) -> AssetStore:
    assets_dir = args.assets or os.environ.get("ACCESONET_ASSETS")
    if assets_dir:
        return AssetStore(assets_dir)
    return AssetStore.bundled()


def classify_file(path: str, classifier: AccessoryClassifier) -> int:
    image = load_from_source(path)
    if isinstance(image, Failure):
        print(f"Error: {image.message}", file=sys.stderr)
        return 1
    result = classifier.classify(scale_to_max(image, classifier.config.max_dimension))
    if isinstance(result, Failure):
        print(f"Error: {result.message}", file=sys.stderr)
        return 1
    print(format_result(result, classifier.config.label_threshold, classifier.config.confidence_threshold))
    print(f"raw: {result.label} {result.confidence:.4f}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="accesonet", description="Classify fashion accessories in photos.")
    parser.add_argument("--config", help="Path to a YAML configuration file.")
    parser.add_argument("--preset", default="accesonet", help="Configuration preset when no config file is given.")
    parser.add_argument("--assets", help="Directory holding the model and labels assets.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")

    sub = parser.add_subparsers(dest="command", required=True)
    classify_p = sub.add_parser("classify", help="Classify a single image file.")
    classify_p.add_argument("image", help="Path to the image.")
    serve_p = sub.add_parser("serve", help="Launch the Gradio app.")
    serve_p.add_argument("--share", action="store_true", help="Create a public link for phones.")
    serve_p.add_argument("--port", type=int, default=None)
    return parser


def cli(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    config = _resolve_config(args)
    classifier = AccessoryClassifier(config, _resolve_store(args))
    logger.info(
        "Using model %s (%dx%d, %s) from %s",
        config.model_asset,
        config.input_width,
        config.input_height,
        config.normalization.value,
        classifier.store,
    )

    if args.command == "classify":
        return classify_file(args.image, classifier)

    from .app import AccesoNetApp  # gradio is only needed to serve

    AccesoNetApp(classifier).launch(share=args.share, server_port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(cli())

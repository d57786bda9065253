"""Tests for the command line entry point."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from accesonet import cli as cli_module
from accesonet.classifier import ClassificationResult
from accesonet.config import ClassifierConfig
from accesonet.errors import ErrorKind, Failure
from conftest import gradient_image


@pytest.fixture()
def image_path(tmp_path: Path) -> str:
    path = tmp_path / "photo.png"
    gradient_image(256, 128).save(path)
    return str(path)


class TestClassifyCommand:
    @patch("accesonet.cli.AccessoryClassifier.classify")
    def test_prints_result(self, mock_classify, image_path: str, capsys: pytest.CaptureFixture[str]) -> None:
        mock_classify.return_value = ClassificationResult("Collares", 0.88)
        assert cli_module.cli(["classify", image_path]) == 0
        out = capsys.readouterr().out
        assert "Result: Collares (88.0%)" in out
        assert "raw: Collares 0.8800" in out
        (scaled,) = mock_classify.call_args.args
        assert scaled.size == (128, 64)

    @patch("accesonet.cli.AccessoryClassifier.classify")
    def test_failure_exit_code(self, mock_classify, image_path: str, capsys: pytest.CaptureFixture[str]) -> None:
        mock_classify.return_value = Failure(ErrorKind.ASSET_MISSING, "Model asset not found: accesonet_model.tflite")
        assert cli_module.cli(["classify", image_path]) == 1
        assert "Model asset not found" in capsys.readouterr().err

    def test_undecodable_image(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        path = tmp_path / "bad.jpg"
        path.write_bytes(b"garbage")
        assert cli_module.cli(["classify", str(path)]) == 1
        assert "Could not decode image" in capsys.readouterr().err

    def test_missing_model_in_asset_dir(self, tmp_path: Path, image_path: str, capsys: pytest.CaptureFixture[str]) -> None:
        (tmp_path / "labels.txt").write_text("Gafas\n", encoding="utf-8")
        assert cli_module.cli(["--assets", str(tmp_path), "classify", image_path]) == 1
        assert "Model asset not found" in capsys.readouterr().err


class TestResolution:
    def test_config_from_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config_path = tmp_path / "c.yaml"
        config_path.write_text("preset: ary\n", encoding="utf-8")
        monkeypatch.setenv("ACCESONET_CONFIG", str(config_path))
        args = cli_module.build_parser().parse_args(["classify", "x.jpg"])
        assert cli_module._resolve_config(args).model_asset == "ary.tflite"

    def test_preset_flag(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ACCESONET_CONFIG", raising=False)
        args = cli_module.build_parser().parse_args(["--preset", "ary", "classify", "x.jpg"])
        assert cli_module._resolve_config(args).input_width == 500

    def test_assets_from_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ACCESONET_ASSETS", str(tmp_path))
        args = cli_module.build_parser().parse_args(["classify", "x.jpg"])
        assert cli_module._resolve_store(args).root == tmp_path

    def test_default_store_is_bundled(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("ACCESONET_ASSETS", raising=False)
        args = cli_module.build_parser().parse_args(["classify", "x.jpg"])
        assert cli_module._resolve_store(args).root.name == "data"


def test_serve_launches_app() -> None:
    pytest.importorskip("gradio")
    with patch("accesonet.app.AccesoNetApp.launch") as mock_launch:
        assert cli_module.cli(["--preset", "ary", "serve", "--share"]) == 0
    mock_launch.assert_called_once_with(share=True, server_port=None)


def test_default_config_type(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ACCESONET_CONFIG", raising=False)
    args = cli_module.build_parser().parse_args(["classify", "x.jpg"])
    assert isinstance(cli_module._resolve_config(args), ClassifierConfig)

from __future__ import annotations

import tomllib
from pathlib import Path
from unittest.mock import patch

import pytest

from backend import main as entrypoint
from backend.app.main import app

PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def test_healio_api_script_targets_run() -> None:
    scripts = tomllib.loads(PYPROJECT.read_text(encoding="utf-8"))["project"]["scripts"]

    module, _, attr = scripts["healio-api"].partition(":")
    assert module == entrypoint.__name__
    assert getattr(entrypoint, attr) is entrypoint.run


def test_run_serves_healio_app_with_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("HOST", raising=False)
    monkeypatch.delenv("PORT", raising=False)

    with patch("uvicorn.run") as run_mock:
        entrypoint.run()

    run_mock.assert_called_once()
    args, kwargs = run_mock.call_args
    assert args == (app,)
    assert kwargs["host"] == "0.0.0.0"
    assert kwargs["port"] == 8000
    assert kwargs["log_config"] is None


def test_run_honours_host_and_port(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HOST", "127.0.0.1")
    monkeypatch.setenv("PORT", "5001")

    with patch("uvicorn.run") as run_mock:
        entrypoint.run()

    _, kwargs = run_mock.call_args
    assert kwargs["host"] == "127.0.0.1"
    assert kwargs["port"] == 5001

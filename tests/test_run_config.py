"""Tests for SwapConfig and host path helpers."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from devswap.constants import DEFAULT_BRANCH, DEFAULT_IMAGE, DEFAULT_TARGET
from devswap.errors import ValidationError
from devswap.paths import resolve_home, resolve_source
from devswap.run_config import SwapConfig


class TestSwapConfig:
    """Tests for SwapConfig."""

    def test_defaults(self, tmp_path: Path) -> None:
        config = SwapConfig.from_cli(name="api", source=str(tmp_path), home="/home/dev")
        assert config.target == DEFAULT_TARGET == "/app"
        assert config.image == DEFAULT_IMAGE == "docker-dev-golang:latest"
        assert config.branch == DEFAULT_BRANCH == "master"
        assert config.remote is None
        assert config.home == "/home/dev"

    def test_source_made_absolute(self, tmp_path: Path) -> None:
        with patch("os.getcwd", return_value=str(tmp_path)):
            config = SwapConfig.from_cli(name="api", source="code", home="/h")
        assert config.source is not None
        assert os.path.isabs(config.source)

    def test_remote_overrides_source(self) -> None:
        config = SwapConfig.from_cli(
            name="api", source="/src", remote="git@host:org/repo.git", home="/h"
        )
        assert config.source is None
        assert config.remote == "git@host:org/repo.git"

    def test_name_required(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            SwapConfig.from_cli(name="  ", source="/src")
        assert "-name" in str(exc_info.value)

    def test_source_or_remote_required(self) -> None:
        with pytest.raises(ValidationError):
            SwapConfig.from_cli(name="api")

    def test_home_from_environment(self) -> None:
        with patch.dict(os.environ, {"HOME": "/home/someone"}):
            config = SwapConfig.from_cli(name="api", source="/src")
        assert config.home == "/home/someone"

    def test_frozen(self) -> None:
        config = SwapConfig.from_cli(name="api", source="/src", home="/h")
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.image = "other"  # type: ignore[misc]


class TestPaths:
    """Tests for path helpers."""

    def test_resolve_home_uses_env(self) -> None:
        with patch.dict(os.environ, {"HOME": "/custom/home"}):
            assert resolve_home() == "/custom/home"

    def test_resolve_home_fallback(self) -> None:
        with patch.dict(os.environ, {}, clear=True), patch(
            "devswap.paths.Path.home", return_value=Path("/fallback")
        ):
            assert resolve_home() == "/fallback"

    def test_resolve_source_absolute_unchanged(self) -> None:
        assert resolve_source("/srv/api") == "/srv/api"

    def test_resolve_source_missing_path_allowed(self, tmp_path: Path) -> None:
        missing = tmp_path / "does-not-exist"
        assert resolve_source(str(missing)) == str(missing)

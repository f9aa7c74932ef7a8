"""Tests for TOML config file loading."""

from __future__ import annotations

import argparse
from pathlib import Path

import pytest

from exprlens.cli import build_parser, load_config, main, resolve_options


class TestLoadConfig:
    def test_missing_config_returns_empty(self, tmp_path: Path) -> None:
        assert load_config(None, tmp_path) == {}

    def test_explicit_path(self, tmp_path: Path) -> None:
        cfg = tmp_path / "custom.toml"
        cfg.write_text('[output]\nmode = "evaluate"\n')
        result = load_config(cfg, tmp_path)
        assert result["output"] == {"mode": "evaluate"}

    def test_auto_discover_exprlens_toml(self, tmp_path: Path) -> None:
        cfg = tmp_path / "exprlens.toml"
        cfg.write_text("[output]\njson = true\n")
        result = load_config(None, tmp_path)
        assert result["output"] == {"json": True}


class TestConfigMerge:
    def test_defaults_without_config(self, tmp_path: Path) -> None:
        ns = build_parser().parse_args(["x"])
        opts = resolve_options(ns, tmp_path)
        assert opts.mode == "simplify"
        assert opts.json is False
        assert opts.expressions == ["x"]

    def test_config_mode_used(self, tmp_path: Path) -> None:
        (tmp_path / "exprlens.toml").write_text('[output]\nmode = "analyze"\njson = true\n')
        ns = build_parser().parse_args(["x"])
        opts = resolve_options(ns, tmp_path)
        assert opts.mode == "analyze"
        assert opts.json is True

    def test_cli_overrides_config_mode(self, tmp_path: Path) -> None:
        (tmp_path / "exprlens.toml").write_text('[output]\nmode = "analyze"\n')
        ns = build_parser().parse_args(["-m", "tokens", "x"])
        opts = resolve_options(ns, tmp_path)
        assert opts.mode == "tokens"

    def test_invalid_mode_rejected(self, tmp_path: Path) -> None:
        (tmp_path / "exprlens.toml").write_text('[output]\nmode = "solve"\n')
        ns = build_parser().parse_args(["x"])
        with pytest.raises(argparse.ArgumentTypeError):
            resolve_options(ns, tmp_path)

    def test_non_table_output_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "exprlens.toml").write_text('output = "json"\n')
        ns = build_parser().parse_args(["x"])
        assert resolve_options(ns, tmp_path).mode == "simplify"


class TestConfigViaMain:
    def test_explicit_config_flag(self, tmp_path: Path, capsys) -> None:
        cfg = tmp_path / "custom.toml"
        cfg.write_text('[output]\nmode = "evaluate"\n')
        assert main(["--config", str(cfg), "1/2"]) == 0
        assert capsys.readouterr().out == "0.5\n"

    def test_invalid_mode_exit_code(self, tmp_path: Path, capsys) -> None:
        cfg = tmp_path / "custom.toml"
        cfg.write_text('[output]\nmode = "solve"\n')
        assert main(["--config", str(cfg), "1"]) == 2
        assert "invalid mode" in capsys.readouterr().err

    def test_malformed_toml_exit_code(self, tmp_path: Path) -> None:
        cfg = tmp_path / "custom.toml"
        cfg.write_text("[output\n")
        assert main(["--config", str(cfg), "1"]) == 2

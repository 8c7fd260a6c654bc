from __future__ import annotations

from pathlib import Path

import pytest

from gomake.config import (
    DEFAULT_COMMANDS,
    BuildOptions,
    ConfigError,
    MakeConfig,
    config_from_mapping,
    host_arch,
    host_os,
    load_config,
)


def test_defaults_match_eventlist_layout() -> None:
    cfg = MakeConfig()
    assert cfg.program == "eventlist"
    assert cfg.tag_prefix == "tools/eventlist"
    assert cfg.resource_file == "./cmd/eventlist/resource.syso"
    assert cfg.commands == DEFAULT_COMMANDS


def test_missing_default_file_gives_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    assert load_config() == MakeConfig()


def test_default_file_is_picked_up(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "gomake.yaml").write_text("program: otherlist\ncopyright_year: 2023\n", encoding="utf-8")
    cfg = load_config()
    assert cfg.program == "otherlist"
    assert cfg.copyright_year == 2023


def test_explicit_path_must_exist(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.yaml")


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    p = tmp_path / "gomake.yaml"
    p.write_text("", encoding="utf-8")
    assert load_config(p) == MakeConfig()


def test_top_level_must_be_mapping(tmp_path: Path) -> None:
    p = tmp_path / "gomake.yaml"
    p.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(p)


def test_invalid_yaml(tmp_path: Path) -> None:
    p = tmp_path / "gomake.yaml"
    p.write_text("program: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(p)


def test_unknown_key_rejected() -> None:
    with pytest.raises(ConfigError, match="bogus"):
        config_from_mapping({"bogus": 1})


def test_command_override_keeps_other_defaults() -> None:
    cfg = config_from_mapping({"commands": {"coverage-report": "go tool cover -func={{ cover_profile }}"}})
    assert cfg.commands["coverage_report"] == "go tool cover -func={{ cover_profile }}"
    assert cfg.commands["build"] == DEFAULT_COMMANDS["build"]


def test_unknown_command_template_rejected() -> None:
    with pytest.raises(ConfigError):
        config_from_mapping({"commands": {"deploy": "echo"}})


def test_copyright_year_must_be_int() -> None:
    with pytest.raises(ConfigError):
        config_from_mapping({"copyright_year": "2022"})


def test_tag_prefix_needs_two_segments() -> None:
    with pytest.raises(ConfigError):
        config_from_mapping({"tag_prefix": "eventlist"})


def test_build_options_resolve_host_defaults() -> None:
    opts = BuildOptions(outdir="").resolved()
    assert opts.target_os == host_os()
    assert opts.target_arch == host_arch()
    assert opts.outdir == "build"


def test_build_options_keep_explicit_values() -> None:
    opts = BuildOptions(target_os="windows", target_arch="386", outdir="out").resolved()
    assert opts == BuildOptions(target_os="windows", target_arch="386", outdir="out")


def test_host_arch_uses_go_names(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("platform.machine", lambda: "x86_64")
    assert host_arch() == "amd64"
    monkeypatch.setattr("platform.machine", lambda: "aarch64")
    assert host_arch() == "arm64"


def test_tag_prefix_slashes_are_stripped() -> None:
    assert config_from_mapping({"tag_prefix": "/tools/eventlist/"}).tag_prefix == "tools/eventlist"


def test_copyright_with_both_quote_kinds_rejected() -> None:
    with pytest.raises(ConfigError, match="quotes"):
        config_from_mapping({"copyright": "Arm's \"Tools\" team"})


def test_config_file_not_utf8(tmp_path: Path) -> None:
    p = tmp_path / "gomake.yaml"
    p.write_bytes(b"program: \xff\n")
    with pytest.raises(ConfigError):
        load_config(p)

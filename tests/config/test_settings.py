"""Tests for PayrollSettings — unified settings with TOML source."""

from pathlib import Path

import pytest

from payrollctl.config.settings import (
    CONFIG_FILENAME,
    ConfigFileError,
    PayrollSettings,
    locate_project,
)


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = PayrollSettings.from_cli(root=tmp_path)
        assert settings.root == tmp_path
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.actor is None
        assert settings.database.url == ""
        assert settings.seed.name == "Default User"
        assert settings.security.hash_method == "pbkdf2:sha256"

    def test_frozen(self, tmp_path: Path) -> None:
        settings = PayrollSettings.from_cli(root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "payrollctl.toml").write_text(
            '[seed]\nemail = "ops@example.com"\n[security]\nsalt_length = 32\n'
        )
        settings = PayrollSettings.from_cli(root=tmp_path)
        assert settings.seed.email == "ops@example.com"
        assert settings.seed.name == "Default User"
        assert settings.security.salt_length == 32

    def test_root_from_config_location(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "payrollctl.toml").write_text("")
        child = tmp_path / "sub"
        child.mkdir()
        monkeypatch.chdir(child)
        settings = PayrollSettings.from_cli()
        assert settings.root.resolve() == tmp_path.resolve()
        assert settings.config_path is not None
        assert settings.config_path.resolve() == (tmp_path / "payrollctl.toml").resolve()

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        path = tmp_path / "other.toml"
        path.write_text('actor = "admin@example.com"\n')
        settings = PayrollSettings.from_cli(config_path=str(path))
        assert settings.actor == "admin@example.com"
        assert settings.root == tmp_path

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "payrollctl.toml").write_text("[seed\n")
        with pytest.raises(ConfigFileError, match="Invalid TOML"):
            PayrollSettings.from_cli(root=tmp_path)


class TestPriority:
    def test_env_beats_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "payrollctl.toml").write_text('[database]\nurl = "sqlite:///toml.db"\n')
        monkeypatch.setenv("PAYROLLCTL_DATABASE__URL", "sqlite:///env.db")
        settings = PayrollSettings.from_cli(root=tmp_path)
        assert settings.database.url == "sqlite:///env.db"

    def test_cli_beats_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PAYROLLCTL_ACTOR", "env@example.com")
        settings = PayrollSettings.from_cli(root=tmp_path, actor="cli@example.com")
        assert settings.actor == "cli@example.com"

    def test_none_flags_fall_through(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PAYROLLCTL_ACTOR", "env@example.com")
        settings = PayrollSettings.from_cli(root=tmp_path, actor=None, json_output=None)
        assert settings.actor == "env@example.com"
        assert settings.json_output is False


class TestLocateProject:
    def test_config_in_start_dir(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text('[seed]\nname = "Ops"\n')
        assert locate_project(tmp_path) == (tmp_path.resolve(), config_file.resolve())

    def test_walks_up_to_config(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("")
        child = tmp_path / "payroll" / "2026"
        child.mkdir(parents=True)
        assert locate_project(child) == (tmp_path.resolve(), config_file.resolve())

    def test_data_dir_marks_root_without_config(self, tmp_path: Path) -> None:
        (tmp_path / ".payrollctl").mkdir()
        child = tmp_path / "exports"
        child.mkdir()
        assert locate_project(child) == (tmp_path.resolve(), None)

    def test_nearest_marker_wins(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        inner = tmp_path / "site"
        (inner / ".payrollctl").mkdir(parents=True)
        assert locate_project(inner) == (inner.resolve(), None)

    def test_env_var_overrides_walk(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        custom = tmp_path / "conf" / "custom.toml"
        custom.parent.mkdir()
        custom.write_text("")
        (tmp_path / CONFIG_FILENAME).write_text("")
        monkeypatch.setenv("PAYROLLCTL_CONFIG", str(custom))
        assert locate_project(tmp_path) == (custom.parent, custom)

    def test_env_var_missing_file_is_an_error(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PAYROLLCTL_CONFIG", str(tmp_path / "nope.toml"))
        with pytest.raises(ConfigFileError, match="missing file"):
            locate_project(tmp_path)


class TestConfigErrors:
    def test_explicit_path_must_exist(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigFileError, match="Config file not found"):
            PayrollSettings.from_cli(config_path=str(tmp_path / "absent.toml"))

    @pytest.mark.parametrize("section", ["database", "seed", "security"])
    def test_section_must_be_table(self, tmp_path: Path, section: str) -> None:
        (tmp_path / CONFIG_FILENAME).write_text(f'{section} = "sqlite:///x.db"\n')
        with pytest.raises(ConfigFileError, match=rf"\[{section}\] .* must be a table"):
            PayrollSettings.from_cli(root=tmp_path)

    def test_cli_reports_config_error(self, tmp_path: Path) -> None:
        from click.testing import CliRunner

        from payrollctl.cli import cli

        result = CliRunner().invoke(cli, ["-c", str(tmp_path / "absent.toml"), "list", "projects"])
        assert result.exit_code == 1
        assert "Config file not found" in result.output

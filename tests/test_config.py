"""Tests for the configuration loader.

Every test works on files inside tmp_path through the config_manager
fixture, never on the real home directory.
"""

import json
from pathlib import Path

import pytest

from git_ai_commit.config import (
    CONFIG_FILENAME,
    CLIOptions,
    Config,
    ConfigManager,
    Provider,
    parse_bool,
)
from git_ai_commit.errors import ConfigError


def write_json(path: Path, data) -> None:
    path.write_text(json.dumps(data), encoding="utf-8")


class TestLoad:
    def test_defaults_when_no_files(self, config_manager):
        config = config_manager.load()
        assert config == Config(provider=Provider.OPENAI, verbose=False, dry_run=False)

    def test_global_file_used_when_no_local(self, config_manager):
        write_json(config_manager.global_path, {"provider": "gemini", "verbose": True})

        assert config_manager.load() == Config(provider=Provider.GEMINI, verbose=True)

    def test_local_file_wins_over_global(self, config_manager):
        write_json(config_manager.global_path, {"provider": "gemini", "verbose": True, "dryRun": True})
        write_json(config_manager.local_path, {"provider": "anthropic"})

        # Exactly the local values: nothing is merged in from global or defaults.
        assert config_manager.load() == Config(provider=Provider.ANTHROPIC)

    @pytest.mark.parametrize("content", [
        "{not json",
        "[1, 2, 3]",
        '"openai"',
        "",
    ])
    def test_malformed_local_falls_back_to_global(self, config_manager, content):
        config_manager.local_path.write_text(content, encoding="utf-8")
        write_json(config_manager.global_path, {"provider": "anthropic", "dryRun": True})

        assert config_manager.load() == Config(provider=Provider.ANTHROPIC, dry_run=True)

    def test_malformed_files_fall_back_to_defaults(self, config_manager):
        config_manager.local_path.write_text("{", encoding="utf-8")
        config_manager.global_path.write_text("}", encoding="utf-8")

        assert config_manager.load() == Config.defaults()

    def test_unknown_provider_is_loaded_as_written(self, config_manager):
        write_json(config_manager.local_path, {"provider": "claude"})
        write_json(config_manager.global_path, {"provider": "gemini"})

        # A parseable local file still hides the global one.
        assert config_manager.load() == Config(provider="claude")

    def test_unknown_keys_are_ignored(self, config_manager):
        write_json(config_manager.local_path, {"provider": "openai", "theme": "dark"})
        assert config_manager.load() == Config(provider=Provider.OPENAI)

    def test_default_paths(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        manager = ConfigManager()

        assert manager.local_path == tmp_path / CONFIG_FILENAME
        assert manager.global_path == Path.home() / CONFIG_FILENAME


class TestSave:
    def test_save_global_is_pretty_printed(self, config_manager, capsys):
        config = Config(provider=Provider.ANTHROPIC, verbose=True, dry_run=False)
        path = config_manager.save(config)

        assert path == config_manager.global_path
        assert not config_manager.local_path.exists()
        assert path.read_text(encoding="utf-8") == json.dumps(
            {"provider": "anthropic", "verbose": True, "dryRun": False}, indent=2
        )
        assert "Configuration saved to" in capsys.readouterr().out

    def test_save_local(self, config_manager):
        config_manager.save(Config(provider=Provider.GEMINI), "local")

        assert json.loads(config_manager.local_path.read_text()) == {"provider": "gemini"}
        assert not config_manager.global_path.exists()

    def test_saved_file_round_trips(self, config_manager):
        config = Config(provider=Provider.GEMINI, verbose=False, dry_run=True)
        config_manager.save(config, "local")
        assert config_manager.load() == config

    def test_unwritable_path(self, tmp_path):
        manager = ConfigManager(
            local_path=tmp_path / "missing" / "dir" / CONFIG_FILENAME,
            global_path=tmp_path / "also-missing" / CONFIG_FILENAME,
        )
        with pytest.raises(ConfigError, match="Failed to save config"):
            manager.save(Config.defaults(), "global")

    def test_unknown_scope(self, config_manager):
        with pytest.raises(ConfigError):
            config_manager.save(Config.defaults(), "system")


class TestResolveOptions:
    def test_defaults(self, config_manager):
        assert config_manager.resolve_options() == CLIOptions(
            provider=Provider.OPENAI, dry_run=False, verbose=False
        )

    def test_file_values_apply(self, config_manager):
        write_json(config_manager.local_path, {"provider": "gemini", "dryRun": True})
        options = config_manager.resolve_options()

        assert options == CLIOptions(provider=Provider.GEMINI, dry_run=True, verbose=False)

    def test_cli_overrides_win(self, config_manager):
        write_json(config_manager.local_path, {"provider": "gemini", "dryRun": True, "verbose": True})
        options = config_manager.resolve_options(provider="anthropic", dry_run=False, verbose=False)

        assert options == CLIOptions(provider=Provider.ANTHROPIC, dry_run=False, verbose=False)

    def test_partial_file_fills_from_defaults(self, config_manager):
        write_json(config_manager.global_path, {"verbose": True})
        options = config_manager.resolve_options()

        assert options.provider is Provider.OPENAI
        assert options.verbose is True
        assert options.dry_run is False

    def test_invalid_provider(self, config_manager):
        with pytest.raises(ConfigError) as excinfo:
            config_manager.resolve_options(provider="mistral")
        assert "Invalid provider: mistral" in str(excinfo.value)
        assert "openai, anthropic, gemini" in str(excinfo.value)

    @pytest.mark.parametrize("scope_attr", ["local_path", "global_path"])
    def test_invalid_provider_in_file(self, config_manager, scope_attr):
        write_json(getattr(config_manager, scope_attr), {"provider": "claude"})

        with pytest.raises(ConfigError, match="Invalid provider: claude"):
            config_manager.resolve_options()

    def test_invalid_local_provider_does_not_fall_back_to_global(self, config_manager):
        write_json(config_manager.local_path, {"provider": "claude"})
        write_json(config_manager.global_path, {"provider": "gemini"})

        with pytest.raises(ConfigError, match="Invalid provider: claude"):
            config_manager.resolve_options()

    def test_flag_replaces_invalid_file_provider(self, config_manager):
        write_json(config_manager.local_path, {"provider": "claude"})

        options = config_manager.resolve_options(provider="anthropic")
        assert options.provider is Provider.ANTHROPIC


class TestShow:
    def test_reports_values_and_files(self, config_manager, capsys):
        write_json(config_manager.global_path, {"provider": "anthropic", "verbose": True})
        config_manager.show()

        out = capsys.readouterr().out
        assert "Provider: anthropic" in out
        assert "Verbose:  True" in out
        assert "Dry Run:  False" in out
        assert "✓" in out
        assert out.count("(not found)") == 1

    def test_no_files(self, config_manager, capsys):
        config_manager.show()

        out = capsys.readouterr().out
        assert "Provider: openai" in out
        assert out.count("(not found)") == 2

    def test_shows_provider_as_written(self, config_manager, capsys):
        write_json(config_manager.local_path, {"provider": "claude"})
        config_manager.show()

        assert "Provider: claude" in capsys.readouterr().out


@pytest.mark.parametrize("value,expected", [
    ("true", True),
    ("True", True),
    (" TRUE ", True),
    ("false", False),
    ("yes", False),
    ("1", False),
])
def test_parse_bool(value, expected):
    assert parse_bool(value) is expected


def test_provider_parse():
    assert Provider.parse("gemini") is Provider.GEMINI
    assert Provider.names() == ["openai", "anthropic", "gemini"]
    with pytest.raises(ConfigError):
        Provider.parse("OpenAI")

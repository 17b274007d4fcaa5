"""Tests for configuration loading."""

from pathlib import Path

import pytest

from config import Config, _write_config, get_config_path, get_migrations_dir, load_config


class TestLoadConfig:
    """Tests for load_config."""

    def test_creates_default_file(self, tmp_path):
        config_path = tmp_path / "config" / "dindin.toml"

        config = load_config(config_path)

        assert config_path.exists()
        assert config.db_filename == "dindin.db"
        assert config.llm_enabled is False
        assert config.due_soon_days == 7

    def test_reads_sections(self, tmp_path):
        config_path = tmp_path / "dindin.toml"
        config_path.write_text(
            f"""
base_dir = "{tmp_path.as_posix()}/data"

[database]
filename = "finance.db"

[logging]
level = "DEBUG"

[llm]
enabled = true
provider = "openai"
openai_api_key = "sk-test"
openai_model = "gpt-4o"

[ledger]
due_soon_days = 3
"""
        )

        config = load_config(config_path)

        assert config.db_path == tmp_path / "data" / "db" / "finance.db"
        assert config.log_level == "DEBUG"
        assert config.log_dir == tmp_path / "data" / "logs"
        assert config.llm_enabled is True
        assert config.llm_openai_api_key == "sk-test"
        assert config.llm_openai_model == "gpt-4o"
        assert config.due_soon_days == 3

    def test_write_then_load(self, tmp_path, test_config):
        config_path = tmp_path / "dindin.toml"
        test_config.due_soon_days = 10

        _write_config(test_config, config_path)
        loaded = load_config(config_path)

        assert loaded.db_path == test_config.db_path
        assert loaded.log_dir == test_config.log_dir
        assert loaded.llm_openai_model == "gpt-4o-mini"
        assert loaded.due_soon_days == 10

    def test_config_path_from_environment(self, tmp_path, monkeypatch):
        config_path = tmp_path / "custom.toml"
        monkeypatch.setenv("DINDIN_CONFIG", str(config_path))

        assert get_config_path() == config_path
        load_config()
        assert config_path.exists()

    def test_api_key_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")

        config = load_config(tmp_path / "dindin.toml")

        assert config.llm_openai_api_key == "sk-env"

    def test_file_key_wins_over_environment(self, tmp_path, monkeypatch, test_config):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        test_config.llm_openai_api_key = "sk-file"
        config_path = tmp_path / "dindin.toml"
        _write_config(test_config, config_path)

        assert load_config(config_path).llm_openai_api_key == "sk-file"

    def test_invalid_values(self, tmp_path):
        config_path = tmp_path / "dindin.toml"
        config_path.write_text('[logging]\nlevel = "loud"\n')
        with pytest.raises(ValueError):
            load_config(config_path)

        config_path.write_text("[ledger]\ndue_soon_days = -1\n")
        with pytest.raises(ValueError):
            load_config(config_path)

    def test_default(self):
        config = Config.default()

        assert config.db_path == Path.home() / "data" / "dindin" / "db" / "dindin.db"

    def test_migrations_dir(self):
        assert (get_migrations_dir() / "001_create_kv_store.sql").exists()

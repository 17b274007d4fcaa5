"""Configuration management for DinDin.

Settings live in a TOML file (``~/.config/dindin.toml`` unless ``DINDIN_CONFIG``
points elsewhere), created with defaults on first run. ``OPENAI_API_KEY`` is
used when the file does not hold an API key.
"""

import os
from pathlib import Path
from dataclasses import dataclass
from typing import Any, Dict, Optional
import tomllib
import tomli_w

CONFIG_ENV_VAR = "DINDIN_CONFIG"
OPENAI_KEY_ENV_VAR = "OPENAI_API_KEY"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Config:
    """Application configuration.

    Attributes:
        base_dir: Root of the data directory.
        db_data_dir: Directory holding the SQLite file.
        db_filename: Name of the SQLite file.
        log_level: One of LOG_LEVELS.
        log_dir: Directory for the dated log files.
        llm_enabled: Whether assistant features may call the provider.
        llm_provider: Provider name; empty disables the assistant.
        llm_openai_api_key: API key for the OpenAI provider.
        llm_openai_model: Model override; the prompt's model is used when None.
        due_soon_days: Look-ahead window for upcoming bills.
    """

    base_dir: Path
    db_data_dir: Path
    db_filename: str
    log_level: str
    log_dir: Path
    llm_enabled: bool = False
    llm_provider: Optional[str] = "openai"
    llm_openai_api_key: str = ""
    llm_openai_model: Optional[str] = None
    due_soon_days: int = 7

    @property
    def db_path(self) -> Path:
        """Full path of the SQLite file."""
        return self.db_data_dir / self.db_filename

    @classmethod
    def default(cls) -> "Config":
        """Create a Config with default values."""
        base_dir = Path.home() / "data" / "dindin"
        return cls(
            base_dir=base_dir,
            db_data_dir=base_dir / "db",
            db_filename="dindin.db",
            log_level="INFO",
            log_dir=base_dir / "logs",
        )


def get_config_path() -> Path:
    """Path of the config file, honouring DINDIN_CONFIG."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "dindin.toml"


def get_migrations_dir() -> Path:
    """Get the path to the migrations directory.

    This is always relative to the code location, not configurable.
    """
    return Path(__file__).parent / "db" / "migrations"


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration, writing a default file on first run.

    Args:
        config_path: Config file location; defaults to get_config_path().

    Returns:
        Config object with loaded or default values.

    Raises:
        ValueError: If the log level or due_soon_days is invalid.
    """
    config_path = config_path or get_config_path()

    if not config_path.exists():
        config = Config.default()
        _write_config(config, config_path)
    else:
        with open(config_path, "rb") as f:
            config = _from_toml(tomllib.load(f))

    if not config.llm_openai_api_key:
        config.llm_openai_api_key = os.environ.get(OPENAI_KEY_ENV_VAR, "")

    _validate(config)
    return config


def _from_toml(data: Dict[str, Any]) -> Config:
    defaults = Config.default()
    base_dir = Path(data.get("base_dir", defaults.base_dir)).expanduser()

    db_section = data.get("database", {})
    log_section = data.get("logging", {})
    llm_section = data.get("llm", {})
    ledger_section = data.get("ledger", {})

    return Config(
        base_dir=base_dir,
        db_data_dir=Path(db_section.get("data_dir", base_dir / "db")).expanduser(),
        db_filename=db_section.get("filename", defaults.db_filename),
        log_level=str(log_section.get("level", defaults.log_level)).upper(),
        log_dir=Path(log_section.get("log_dir", base_dir / "logs")).expanduser(),
        llm_enabled=bool(llm_section.get("enabled", False)),
        llm_provider=llm_section.get("provider", "openai"),
        llm_openai_api_key=llm_section.get("openai_api_key", ""),
        llm_openai_model=llm_section.get("openai_model") or None,
        due_soon_days=int(ledger_section.get("due_soon_days", defaults.due_soon_days)),
    )


def _validate(config: Config) -> None:
    if config.log_level not in LOG_LEVELS:
        raise ValueError(
            f"Invalid logging.level '{config.log_level}', expected one of {', '.join(LOG_LEVELS)}"
        )
    if config.due_soon_days < 0:
        raise ValueError("ledger.due_soon_days cannot be negative")


def _write_config(config: Config, config_path: Path) -> None:
    """Write config to a TOML file, creating its directory."""
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "base_dir": str(config.base_dir),
        "database": {
            "data_dir": str(config.db_data_dir),
            "filename": config.db_filename,
        },
        "logging": {
            "level": config.log_level,
            "log_dir": str(config.log_dir),
        },
        "llm": {
            "enabled": config.llm_enabled,
            "provider": config.llm_provider or "",
            "openai_api_key": config.llm_openai_api_key,
            "openai_model": config.llm_openai_model or "",
        },
        "ledger": {
            "due_soon_days": config.due_soon_days,
        },
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)

"""Configuration Management Package

Sources, highest priority first: CLI arguments, environment variables
(including .env and ~/.agent-config), .commitagentrc, built-in defaults.
"""

import json
import os
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from commit_agent import COMMIT_TYPE_NAMES
from commit_agent.git.executor import DEFAULT_TIMEOUT_MS
from commit_agent.output import print_warning

# Valid configuration values
VALID_PROVIDERS = {"auto", "claude", "ollama"}
VALID_DETAIL_LEVELS = {"brief", "normal", "detailed"}
VALID_AUTO_STAGE = {"all", "modified", "none"}
SUBJECT_LENGTH_RANGE = (20, 200)

GLOBAL_ENV_FILE = ".agent-config"

# Environment variable -> (config field, kind)
ENV_VARS = {
    "CA_PROVIDER": ("provider", str),
    "CA_MODEL": ("model", str),
    "COMMIT_TYPE": ("commit_type", str),
    "COMMIT_SCOPE": ("scope", str),
    "COMMIT_SUBJECT_MAX_LENGTH": ("subject_max_length", int),
    "COMMIT_DETAIL_LEVEL": ("detail_level", str),
    "COMMIT_FILE_BREAKDOWN": ("file_breakdown", bool),
    "AUTO_STAGE": ("auto_stage", str),
    "PUSH": ("allow_push", bool),
    "SKIP_VERIFICATION": ("skip_verification", bool),
    "CONVENTIONAL_STRICT": ("conventional_strict", bool),
    "DRY_RUN": ("dry_run", bool),
    "VERBOSE": ("verbose", bool),
    "GIT_TIMEOUT_MS": ("git_timeout_ms", int),
}


@dataclass
class Config:
    """Agent configuration with sensible defaults."""
    provider: str = "auto"
    model: Optional[str] = None
    # Commit message format
    commit_type: Optional[str] = None
    scope: Optional[str] = None
    subject_max_length: int = 72
    detail_level: str = "normal"
    file_breakdown: bool = True
    # Behavior
    auto_stage: str = "all"
    allow_push: bool = False
    skip_verification: bool = False
    conventional_strict: bool = True
    # Execution
    dry_run: bool = False
    verbose: bool = False
    git_timeout_ms: int = DEFAULT_TIMEOUT_MS

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}

    def validate(self) -> list[str]:
        """Validate config values and return list of warnings.

        Invalid values are replaced with defaults after warning.
        """
        warnings = []
        defaults = Config()

        if self.provider not in VALID_PROVIDERS:
            warnings.append(f"Invalid provider '{self.provider}', using '{defaults.provider}'")
            self.provider = defaults.provider

        if self.commit_type is not None and self.commit_type not in COMMIT_TYPE_NAMES:
            warnings.append(f"Invalid commit_type '{self.commit_type}', letting the agent decide")
            self.commit_type = None

        low, high = SUBJECT_LENGTH_RANGE
        if not isinstance(self.subject_max_length, int) or not low <= self.subject_max_length <= high:
            warnings.append(
                f"Invalid subject_max_length '{self.subject_max_length}' (must be {low}-{high}), "
                f"using {defaults.subject_max_length}"
            )
            self.subject_max_length = defaults.subject_max_length

        if self.detail_level not in VALID_DETAIL_LEVELS:
            warnings.append(f"Invalid detail_level '{self.detail_level}', using '{defaults.detail_level}'")
            self.detail_level = defaults.detail_level

        if self.auto_stage not in VALID_AUTO_STAGE:
            warnings.append(f"Invalid auto_stage '{self.auto_stage}', using '{defaults.auto_stage}'")
            self.auto_stage = defaults.auto_stage

        if not isinstance(self.git_timeout_ms, int) or self.git_timeout_ms <= 0:
            warnings.append(f"Invalid git_timeout_ms '{self.git_timeout_ms}', using {defaults.git_timeout_ms}")
            self.git_timeout_ms = defaults.git_timeout_ms

        return warnings

    def merged(self, overrides: dict) -> 'Config':
        """Return a copy with every non-None override applied."""
        data = asdict(self)
        data.update({k: v for k, v in overrides.items() if v is not None})
        return Config.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict) -> 'Config':
        valid_keys = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        config = cls(**filtered)
        for warning in config.validate():
            print_warning(f"Config warning: {warning}")
        return config


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes", "on")


def load_environment() -> None:
    """Load a local .env and ~/.agent-config into os.environ.

    Existing variables are never overwritten, so the real environment beats
    .env, which beats the global file.
    """
    local_path = Path.cwd() / ".env"
    if local_path.exists():
        load_dotenv(local_path)
    global_path = Path.home() / GLOBAL_ENV_FILE
    if global_path.exists():
        load_dotenv(global_path)


def config_from_env(environ: dict | None = None) -> dict:
    """Read configuration overrides from environment variables."""
    environ = os.environ if environ is None else environ
    overrides = {}
    for var, (key, kind) in ENV_VARS.items():
        raw = environ.get(var)
        if raw is None or raw.strip() == "":
            continue
        if kind is bool:
            overrides[key] = _parse_bool(raw)
        elif kind is int:
            try:
                overrides[key] = int(raw)
            except ValueError:
                print_warning(f"Config warning: Ignoring {var}={raw!r}, expected an integer")
        else:
            overrides[key] = raw.strip().lower() if key in ("detail_level", "auto_stage", "provider") else raw.strip()
    return overrides


class ConfigManager:
    """Manages loading and saving configuration."""

    CONFIG_FILENAME = ".commitagentrc"

    def __init__(self):
        self._config: Optional[Config] = None
        self._config_path: Optional[Path] = None

    def load(self) -> Config:
        if self._config is not None:
            return self._config

        local_path = Path.cwd() / self.CONFIG_FILENAME
        if local_path.exists():
            self._config = self._load_from_file(local_path)
            self._config_path = local_path
            return self._config

        home_path = Path.home() / self.CONFIG_FILENAME
        if home_path.exists():
            self._config = self._load_from_file(home_path)
            self._config_path = home_path
            return self._config

        self._config = Config()
        return self._config

    def _load_from_file(self, path: Path) -> Config:
        try:
            with open(path, 'r') as f:
                data = json.load(f)
            return Config.from_dict(data)
        except (json.JSONDecodeError, IOError) as e:
            print_warning(f"Could not load {path}: {e}")
            return Config()

    def save(self, config: Config, global_config: bool = True) -> Path:
        path = Path.home() / self.CONFIG_FILENAME if global_config else Path.cwd() / self.CONFIG_FILENAME
        with open(path, 'w') as f:
            json.dump(config.to_dict(), f, indent=2)
        return path

    def get_config_path(self) -> Optional[Path]:
        return self._config_path


_manager = ConfigManager()


def load_config(cli_overrides: dict | None = None) -> Config:
    """Build the final config: file < environment < CLI."""
    load_environment()
    config = _manager.load()
    config = config.merged(config_from_env())
    if cli_overrides:
        config = config.merged(cli_overrides)
    return config


def save_config(config: Config, global_config: bool = True) -> Path:
    return _manager.save(config, global_config)


def get_config_path() -> Optional[Path]:
    return _manager.get_config_path()


__all__ = [
    "Config",
    "ConfigManager",
    "load_config",
    "load_environment",
    "config_from_env",
    "save_config",
    "get_config_path",
    "VALID_PROVIDERS",
    "VALID_DETAIL_LEVELS",
    "VALID_AUTO_STAGE",
]

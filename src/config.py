"""YAML configuration loader with env var resolution and Pydantic validation.

Loads config from (priority order):
1. An explicit path passed to load_config()
2. ./dhlship.yaml (working directory)
3. ~/.dhlship/config.yaml (user home)

Environment variables override YAML: DHLSHIP_<SECTION>_<KEY>.
${VAR} references in YAML values resolve from environment at load time.

Example dhlship.yaml:

    dhl:
      site_id: ${DHL_SITE_ID}
      password: ${DHL_PASSWORD}
      account_number: "123456789"
      environment: test
      country_names_file: countries.yaml
    logging:
      level: debug
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, field_validator

from src.services.connection_types import DHLCredentials, resolve_base_url
from src.services.dhl_transport import DEFAULT_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

ENV_PREFIX = "DHLSHIP_"


def resolve_env_vars(value: str) -> str:
    """Resolve ${VAR} references in a string from environment variables.

    Missing env vars resolve to empty string.
    """
    def _replace(match: re.Match) -> str:
        return os.environ.get(match.group(1), "")

    return _ENV_VAR_PATTERN.sub(_replace, value)


def _resolve_env_vars_recursive(data: Any) -> Any:
    if isinstance(data, str):
        return resolve_env_vars(data)
    elif isinstance(data, dict):
        return {k: _resolve_env_vars_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_resolve_env_vars_recursive(item) for item in data]
    return data


class DHLConfig(BaseModel):
    """DHL XML-PI connection settings."""

    site_id: str = ""
    password: str = ""
    account_number: str = ""
    environment: Literal["test", "production"] = "test"
    base_url: str | None = None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    country_names_file: str | None = None

    @field_validator("timeout_seconds")
    @classmethod
    def positive_timeout(cls, value: float) -> float:
        """Reject zero or negative timeouts."""
        if value <= 0:
            raise ValueError("timeout_seconds must be positive")
        return value

    def to_credentials(self) -> DHLCredentials:
        """Build typed credentials.

        Raises:
            ValueError: If site_id, password or account_number is empty.
        """
        missing = [
            name for name in ("site_id", "password", "account_number")
            if not getattr(self, name)
        ]
        if missing:
            raise ValueError(f"Missing DHL credentials: {', '.join(missing)}")
        return DHLCredentials(
            site_id=self.site_id,
            password=self.password,
            account_number=self.account_number,
        )

    def endpoint(self) -> str:
        """Explicit base_url if set, else the environment's endpoint."""
        return self.base_url or resolve_base_url(self.environment)


class LoggingConfig(BaseModel):
    """Log level and format for configure_logging()."""

    level: str = "info"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class AppConfig(BaseModel):
    """Top-level configuration."""

    dhl: DHLConfig = DHLConfig()
    logging: LoggingConfig = LoggingConfig()


def _find_config_file() -> Path | None:
    candidates = [
        Path.cwd() / "dhlship.yaml",
        Path.cwd() / "dhlship.yml",
        Path.home() / ".dhlship" / "config.yaml",
        Path.home() / ".dhlship" / "config.yml",
    ]
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def _coerce_env_value(value: str) -> Any:
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    return value


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Apply DHLSHIP_<SECTION>_<KEY> env var overrides to config data.

    For example, ``DHLSHIP_DHL_SITE_ID`` sets section ``dhl``, field
    ``site_id``. Sections are matched longest-first.
    """
    known_sections = sorted(AppConfig.model_fields.keys(), key=len, reverse=True)
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        suffix = key[len(ENV_PREFIX):].lower()
        matched_section = None
        matched_field = None
        for section in known_sections:
            section_prefix = section + "_"
            if suffix.startswith(section_prefix):
                matched_section = section
                matched_field = suffix[len(section_prefix):]
                break
        if matched_section is None or not matched_field:
            continue
        section_data = data.setdefault(matched_section, {})
        if not isinstance(section_data, dict):
            continue
        # Credentials stay strings even when they look numeric.
        if matched_section == "dhl" and matched_field in ("site_id", "password", "account_number"):
            section_data[matched_field] = value
        else:
            section_data[matched_field] = _coerce_env_value(value)
    return data


def load_config(config_path: str | None = None) -> AppConfig:
    """Load configuration from YAML with env var resolution.

    Args:
        config_path: Explicit path to config file. If None, searches
            standard locations (cwd, then ~/.dhlship/). When nothing is
            found, defaults plus env overrides are used.

    Returns:
        Validated AppConfig.

    Raises:
        FileNotFoundError: If config_path is given and does not exist.
        pydantic.ValidationError: If the merged data is invalid.
    """
    if config_path:
        path: Path | None = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        path = _find_config_file()

    raw_data: dict[str, Any] = {}
    if path is not None:
        logger.info("Loading config from %s", path)
        with open(path) as f:
            raw_data = yaml.safe_load(f) or {}

    data = _resolve_env_vars_recursive(raw_data)
    data = _apply_env_overrides(data)
    return AppConfig(**data)


def load_country_names(path: str | Path) -> dict[str, str]:
    """Load the country code -> country name table from YAML.

    The file is a flat mapping, e.g. ``DE: Germany``. Codes are
    upper-cased. Note that YAML reads a bare ``NO`` as a boolean, so
    Norway must be quoted.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the document is not a mapping of strings.
    """
    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Country names file must contain a mapping: {path}")

    names: dict[str, str] = {}
    for code, name in raw.items():
        if not isinstance(code, str) or not isinstance(name, str):
            raise ValueError(f"Invalid country entry {code!r}: {name!r}")
        names[code.strip().upper()] = name.strip()
    logger.debug("Loaded %d country names from %s", len(names), path)
    return names


def configure_logging(config: LoggingConfig) -> None:
    """Configure root logging from config."""
    logging.basicConfig(
        level=config.level.upper(),
        format=config.format,
    )

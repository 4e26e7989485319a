"""Configuration loading and validation for the shop ledger."""

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from shop_ledger.processing.ai.models import DEFAULT_END_DATE, DEFAULT_START_DATE
from shop_ledger.utils.decimal_utils import LOCALE_FORMATS
from shop_ledger.utils.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path("config") / "settings.yaml"


class ConfigError(Exception):
    """Exception raised for configuration errors."""

    pass


@dataclass
class DisplayConfig:
    """Configuration for how amounts are rendered.

    Attributes:
        currency: ISO currency code shown next to amounts.
        locale: Number layout, one of the supported display locales.
    """

    currency: str = "MAD"
    locale: str = "fr-MA"

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "DisplayConfig":
        """Create from dictionary."""
        locale = str(data.get("locale", "fr-MA"))
        if locale not in LOCALE_FORMATS:
            supported = ", ".join(sorted(LOCALE_FORMATS))
            raise ConfigError(f"Unsupported locale '{locale}' (supported: {supported})")
        currency = str(data.get("currency", "MAD")).upper()
        if len(currency) != 3 or not currency.isalpha():
            raise ConfigError(f"Currency must be a 3-letter ISO code, got '{currency}'")
        return cls(currency=currency, locale=locale)


@dataclass
class AIConfig:
    """Configuration for the AI summary.

    Attributes:
        api_key_env: Environment variable holding the API key.
        model: Model to use.
        max_tokens: Maximum tokens for the summary response.
        timeout: Transport timeout in seconds.
    """

    api_key_env: str = "ANTHROPIC_API_KEY"
    model: str = "claude-sonnet-4-5-20250929"
    max_tokens: int = 400
    timeout: float = 60.0

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "AIConfig":
        """Create from dictionary."""
        try:
            max_tokens = int(data.get("max_tokens", 400))  # type: ignore[arg-type]
            timeout = float(data.get("timeout", 60.0))  # type: ignore[arg-type]
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid ai settings: {e}") from e
        if max_tokens <= 0:
            raise ConfigError(f"ai.max_tokens must be positive, got {max_tokens}")
        if timeout <= 0:
            raise ConfigError(f"ai.timeout must be positive, got {timeout}")
        return cls(
            api_key_env=str(data.get("api_key_env", "ANTHROPIC_API_KEY")),
            model=str(data.get("model", "claude-sonnet-4-5-20250929")),
            max_tokens=max_tokens,
            timeout=timeout,
        )


@dataclass
class SummaryPeriodConfig:
    """Free-text period descriptors passed to the AI summary.

    Attributes:
        start_date: Start of the summarized period.
        end_date: End of the summarized period.
    """

    start_date: str = DEFAULT_START_DATE
    end_date: str = DEFAULT_END_DATE

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "SummaryPeriodConfig":
        """Create from dictionary."""
        return cls(
            start_date=str(data.get("start_date", DEFAULT_START_DATE)),
            end_date=str(data.get("end_date", DEFAULT_END_DATE)),
        )


@dataclass
class LoggingConfig:
    """Configuration for logging.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Path to log file; empty disables file logging.
    """

    level: str = "INFO"
    file: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "LoggingConfig":
        """Create from dictionary."""
        return cls(
            level=str(data.get("level", "INFO")),
            file=str(data.get("file") or ""),
        )


@dataclass
class Config:
    """Main configuration container.

    Attributes:
        display: Currency display settings.
        ai: AI summary settings.
        summary_period: Period descriptors for the AI summary.
        logging: Logging settings.
    """

    display: DisplayConfig = field(default_factory=DisplayConfig)
    ai: AIConfig = field(default_factory=AIConfig)
    summary_period: SummaryPeriodConfig = field(default_factory=SummaryPeriodConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_yaml_file(path: Path) -> dict[str, object]:
    """Load a YAML file whose top level is a mapping.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed YAML content (empty dict for an empty file).

    Raises:
        FileNotFoundError: If file doesn't exist.
        ConfigError: If the path is not a readable file, or the content is
            not valid YAML or not a mapping.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    if not path.is_file():
        raise ConfigError(f"Config path is not a file: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except (UnicodeDecodeError, OSError) as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(content).__name__}")
    return content


def _section(data: dict[str, object], name: str) -> dict[str, object]:
    value = data.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{name}' must be a mapping, got {type(value).__name__}")
    return value


def load_config(settings_path: Path | None = None) -> Config:
    """Load configuration from settings.yaml.

    A missing file is not an error: defaults are used and a warning logged.

    Args:
        settings_path: Path to settings.yaml (default: config/settings.yaml).

    Returns:
        Complete Config object.

    Raises:
        ConfigError: If the file exists but is invalid.
    """
    if settings_path is None:
        settings_path = DEFAULT_CONFIG_PATH

    if not settings_path.exists():
        logger.warning(f"Settings file not found: {settings_path}, using defaults")
        return Config()

    data = load_yaml_file(settings_path)

    config = Config(
        display=DisplayConfig.from_dict(_section(data, "display")),
        ai=AIConfig.from_dict(_section(data, "ai")),
        summary_period=SummaryPeriodConfig.from_dict(_section(data, "summary_period")),
        logging=LoggingConfig.from_dict(_section(data, "logging")),
    )
    logger.info(f"Loaded settings from {settings_path}")
    return config

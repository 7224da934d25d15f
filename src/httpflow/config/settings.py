import enum
import os
import typing as t
from dataclasses import dataclass, fields

from ..domain.exceptions import ConfigurationError
from ..domain.parsing import JsonMode
from ..domain.retry import DelayStrategy

ENV_PREFIX = "HTTPFLOW_"


class Environment(enum.StrEnum):
    """Runtime environment for the application.

    Kept small and explicit to support simple environment-driven behavior
    such as the log format.
    """

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(enum.StrEnum):
    """Log levels understood by loguru."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass(frozen=True)
class Settings:
    """Settings container used to bootstrap clients.

    Attributes:
        environment: Selects the log format
        log_level: Minimum level emitted by the logger
        timeout: Total timeout per attempt in seconds (None = transport default)
        default_retries: max_attempts for targets created without ``retries``
        default_delay: Retry delay for targets created without ``delay``
        delay_strategy: Linear backoff or fixed delay between retries
        json_mode: Lenient or strict handling of malformed JSON by the default
            GET/OPTIONS parser
        parser_workers: Threads in the background executor that runs parsers
    """

    environment: Environment = Environment.PRODUCTION
    log_level: LogLevel = LogLevel.INFO
    timeout: float | None = None
    default_retries: int = 0
    default_delay: float = 0.0
    delay_strategy: DelayStrategy = DelayStrategy.LINEAR
    json_mode: JsonMode = JsonMode.LENIENT
    parser_workers: int = 4

    def __post_init__(self) -> None:
        if self.parser_workers < 1:
            raise ConfigurationError(
                f"parser_workers must be at least 1, got {self.parser_workers}"
            )
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")


def build_settings(**overrides: t.Any) -> Settings:
    """Create Settings, ignoring overrides that are None.

    Lets callers forward optional values (CLI flags, env lookups) without
    clobbering defaults.
    """
    return Settings(**{k: v for k, v in overrides.items() if v is not None})


_CONVERTERS: dict[str, t.Callable[[str], t.Any]] = {
    "environment": Environment,
    "log_level": lambda value: LogLevel(value.upper()),
    "timeout": float,
    "default_retries": int,
    "default_delay": float,
    "delay_strategy": DelayStrategy,
    "json_mode": JsonMode,
    "parser_workers": int,
}


def settings_from_env(environ: t.Mapping[str, str] | None = None) -> Settings:
    """Build Settings from ``HTTPFLOW_*`` environment variables.

    Example: ``HTTPFLOW_DEFAULT_RETRIES=3`` sets ``default_retries``.

    Raises:
        ConfigurationError: If a variable cannot be converted
    """
    environ = os.environ if environ is None else environ
    overrides: dict[str, t.Any] = {}

    for settings_field in fields(Settings):
        raw = environ.get(f"{ENV_PREFIX}{settings_field.name.upper()}")
        if raw is None or raw == "":
            continue
        try:
            overrides[settings_field.name] = _CONVERTERS[settings_field.name](raw)
        except ValueError as exc:
            raise ConfigurationError(
                f"Invalid value for {ENV_PREFIX}{settings_field.name.upper()}: {raw!r}"
            ) from exc

    return build_settings(**overrides)

"""Settings models for neogm.

Every settings class is a ``pydantic-settings`` model, so values can come
from keyword arguments or from ``NEOGM_*`` environment variables.
"""

import typing as t
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Base class for all neogm settings."""

    model_config = SettingsConfigDict(
        env_prefix="NEOGM_",
        extra="ignore",
        validate_default=True,
    )


class RepositorySettings(Settings):
    """Naming conventions shared by the repository and the statement builder."""

    model_config = SettingsConfigDict(env_prefix="NEOGM_REPOSITORY_")

    id_pseudo_field: str = Field(
        default="id()",
        description="Filter key that denotes an identity lookup",
    )
    value_suffix: str = Field(
        default="_value",
        description="Row key suffix carrying the value bag",
    )
    id_suffix: str = Field(
        default="_id",
        description="Row key suffix carrying the identity of an inserted node",
    )
    delete_counter_key: str = Field(
        default="ctr",
        description="Row key carrying the number of deleted records",
    )
    log_statements: bool = False

    @field_validator("value_suffix", "id_suffix", "delete_counter_key")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            msg = "row keys cannot be blank"
            raise ValueError(msg)
        return v

    def value_key(self, identifier: str) -> str:
        return f"{identifier}{self.value_suffix}"

    def id_key(self, identifier: str) -> str:
        return f"{identifier}{self.id_suffix}"


class Neo4jSettings(Settings):
    """Connection settings for :class:`neogm.client.Neo4jClient`."""

    model_config = SettingsConfigDict(env_prefix="NEOGM_NEO4J_")

    scheme: str = "bolt"
    host: SecretStr = SecretStr("127.0.0.1")
    port: int | None = 7687
    user: SecretStr | None = None
    password: SecretStr | None = None
    database: str = "neo4j"
    encrypted: bool = False

    # Connection pooling
    max_connections: int = Field(default=50, ge=1)
    max_connection_lifetime: float = 3600.0
    connection_acquisition_timeout: float = 60.0

    # Managed transaction retries
    max_transaction_retry_time: float = 30.0
    initial_retry_delay: float = 1.0
    retry_delay_multiplier: float = 2.0
    retry_delay_jitter_factor: float = 0.2

    @property
    def uri(self) -> str:
        host = self.host.get_secret_value()
        if self.port is None:
            return f"{self.scheme}://{host}"
        return f"{self.scheme}://{host}:{self.port}"

    @property
    def auth(self) -> tuple[str, str] | None:
        if self.user and self.password:
            return (self.user.get_secret_value(), self.password.get_secret_value())
        return None


_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def _normalise_level(value: str) -> str:
    level = value.upper()
    if level not in _LOG_LEVELS:
        msg = f"unknown log level: {value}"
        raise ValueError(msg)
    return level


class LoggerSettings(Settings):
    """Loguru sink settings used by :func:`neogm.logger.configure_logging`."""

    model_config = SettingsConfigDict(env_prefix="NEOGM_LOG_")

    log_level: str = "INFO"
    format: dict[str, str] = {
        "time": "<b><e>[</e> <w>{time:YYYY-MM-DD HH:mm:ss.SSS}</w> <e>]</e></b>",
        "level": " <level>{level:>8}</level>",
        "sep": " <b><w>in</w></b> ",
        "name": "<b>{name:>20}</b>",
        "line": "<b><e>[</e><w>{line:^5}</w><e>]</e></b>",
        "message": "  <level>{message}</level>",
    }
    level_per_module: dict[str, str] = {}
    serialize: bool = False
    colorize: bool = True
    backtrace: bool = False
    diagnose: bool = False

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        return _normalise_level(v)

    @field_validator("level_per_module")
    @classmethod
    def validate_level_per_module(cls, v: dict[str, str]) -> dict[str, str]:
        return {module: _normalise_level(level) for module, level in v.items()}

    @property
    def format_string(self) -> str:
        return "".join(self.format.values())

    def level_for(self, module_name: str) -> str:
        """Return the most specific level configured for ``module_name``."""
        best: tuple[int, str] = (-1, self.log_level)
        for prefix, level in self.level_per_module.items():
            if module_name == prefix or module_name.startswith(f"{prefix}."):
                if len(prefix) > best[0]:
                    best = (len(prefix), level)
        return best[1]


def settings_summary(settings: Settings) -> dict[str, t.Any]:
    """Dump settings for logging with secrets masked."""
    return settings.model_dump(mode="json")

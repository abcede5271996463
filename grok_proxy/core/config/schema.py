"""Declarative schema for environment variable configuration.

Each option is declared once with its default, type and validation rule;
``validation.load_env_var`` does the reading and coercion.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class EnvVarSpec:
    """Specification for a single environment variable.

    Attributes:
        name: Environment variable name (e.g., "PORT", "LOG_LEVEL")
        default: Default value if env var not set
        type_hint: Type for validation (int, str, float, bool)
        description: Human-readable description for docs
        validator: Optional custom validation function
        coerce: Optional function to convert string to target type
    """

    name: str
    default: Any
    type_hint: type
    description: str
    validator: Callable[[Any], bool] | None = None
    coerce: Callable[[str], Any] | None = None


class ConfigSchema:
    """Registry of all configuration environment variables."""

    # === Upstream Settings ===

    GROK_API_BASE = EnvVarSpec(
        name="GROK_API_BASE",
        default="https://api.grok.ai",
        type_hint=str,
        description="Base URL of the Grok API",
        validator=lambda x: x.startswith(("http://", "https://")),
    )

    GROK_API_KEY = EnvVarSpec(
        name="GROK_API_KEY",
        default=None,
        type_hint=str,
        description="Fallback API key used when a request carries no credential",
    )

    GROK_DEFAULT_MODEL = EnvVarSpec(
        name="GROK_DEFAULT_MODEL",
        default="grok-1",
        type_hint=str,
        description="Model used when the requested model is not a Grok model",
        validator=lambda x: bool(x.strip()),
    )

    GROK_MODEL_PREFIX = EnvVarSpec(
        name="GROK_MODEL_PREFIX",
        default="grok-",
        type_hint=str,
        description="Model id prefix that is forwarded to the upstream unchanged",
    )

    # === Server Settings ===

    HOST = EnvVarSpec(
        name="HOST",
        default="0.0.0.0",
        type_hint=str,
        description="Server host address to bind to",
    )

    PORT = EnvVarSpec(
        name="PORT",
        default=3000,
        type_hint=int,
        description="Server port number",
        validator=lambda x: 1 <= x <= 65535,
    )

    LOG_LEVEL = EnvVarSpec(
        name="LOG_LEVEL",
        default="INFO",
        type_hint=str,
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        # Extract just the first word to tolerate trailing comments
        coerce=lambda x: x.split()[0].upper() if x.split() else "INFO",
        validator=lambda x: x in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
    )

    # === Timeout Settings ===

    REQUEST_TIMEOUT = EnvVarSpec(
        name="REQUEST_TIMEOUT",
        default=90,
        type_hint=int,
        description="Upstream request timeout in seconds",
        validator=lambda x: x > 0,
    )

    STREAMING_READ_TIMEOUT_SECONDS = EnvVarSpec(
        name="STREAMING_READ_TIMEOUT_SECONDS",
        default=None,
        type_hint=float,
        description="Read timeout for streaming SSE requests (None = unlimited)",
        validator=lambda x: x is None or x > 0,
    )

    # === Transport Settings ===

    STREAMING_ENABLED = EnvVarSpec(
        name="STREAMING_ENABLED",
        default=True,
        type_hint=bool,
        description="Whether the HTTP server offers SSE streaming responses",
    )

    @classmethod
    def all_specs(cls) -> list[EnvVarSpec]:
        """Return every declared spec, in declaration order."""
        return [value for value in vars(cls).values() if isinstance(value, EnvVarSpec)]

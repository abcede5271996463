"""Runtime configuration for Grok Proxy.

``ProxyConfig`` is an immutable value built once from the environment and
handed explicitly to the dispatcher and the app factory.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

from grok_proxy.core.config.schema import ConfigSchema
from grok_proxy.core.config.validation import load_env_var


@dataclass(frozen=True, slots=True)
class ProxyConfig:
    """Upstream, server and transport settings."""

    api_base: str = ConfigSchema.GROK_API_BASE.default
    fallback_api_key: str | None = None
    default_model: str = ConfigSchema.GROK_DEFAULT_MODEL.default
    model_prefix: str = ConfigSchema.GROK_MODEL_PREFIX.default
    host: str = ConfigSchema.HOST.default
    port: int = ConfigSchema.PORT.default
    log_level: str = ConfigSchema.LOG_LEVEL.default
    request_timeout: int = ConfigSchema.REQUEST_TIMEOUT.default
    streaming_read_timeout: float | None = None
    streaming_enabled: bool = True

    @classmethod
    def from_env(cls) -> ProxyConfig:
        """Load every setting from the environment.

        Raises:
            ConfigError: If any variable fails coercion or validation.
        """
        return cls(
            api_base=load_env_var(ConfigSchema.GROK_API_BASE).rstrip("/"),
            fallback_api_key=load_env_var(ConfigSchema.GROK_API_KEY),
            default_model=load_env_var(ConfigSchema.GROK_DEFAULT_MODEL),
            model_prefix=load_env_var(ConfigSchema.GROK_MODEL_PREFIX),
            host=load_env_var(ConfigSchema.HOST),
            port=load_env_var(ConfigSchema.PORT),
            log_level=load_env_var(ConfigSchema.LOG_LEVEL),
            request_timeout=load_env_var(ConfigSchema.REQUEST_TIMEOUT),
            streaming_read_timeout=load_env_var(ConfigSchema.STREAMING_READ_TIMEOUT_SECONDS),
            streaming_enabled=load_env_var(ConfigSchema.STREAMING_ENABLED),
        )

    def upstream_url(self, path: str) -> str:
        return f"{self.api_base.rstrip('/')}{path}"

    @property
    def api_key_hash(self) -> str:
        return (
            "<not-set>"
            if not self.fallback_api_key
            else "sha256:" + hashlib.sha256(self.fallback_api_key.encode()).hexdigest()[:16] + "..."
        )

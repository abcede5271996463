from grok_proxy.core.config.config import ProxyConfig
from grok_proxy.core.config.schema import ConfigSchema, EnvVarSpec
from grok_proxy.core.config.validation import ConfigError, load_env_var

__all__ = ["ConfigError", "ConfigSchema", "EnvVarSpec", "ProxyConfig", "load_env_var"]

from .proxy import ProxyConfig, get_proxy_config
from .settings import OutputSettings, load_settings
from .tls import TLSConfig, get_tls_config

__all__ = [
    "ProxyConfig",
    "get_proxy_config",
    "OutputSettings",
    "load_settings",
    "TLSConfig",
    "get_tls_config",
]

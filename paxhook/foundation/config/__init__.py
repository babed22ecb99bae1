from .manager import ConfigManager
from .schema import AppConfig, HookSettings, InterceptConfig, ProviderConfig, ProviderName, SystemConfig

__all__ = ["ConfigManager", "AppConfig", "HookSettings", "InterceptConfig", "ProviderConfig", "ProviderName", "SystemConfig"]

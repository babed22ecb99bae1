import os
import yaml
from threading import Lock
from typing import Any, Callable, List, Optional
from dotenv import load_dotenv
from .schema import AppConfig, HookSettings, ProviderConfig

SettingsListener = Callable[[ProviderConfig], None]


class ConfigManager:
    """Singleton Manager for loading and accessing AppConfig."""
    _instance: Optional['ConfigManager'] = None
    _lock: Lock = Lock()

    def __init__(self):
        self._config: Optional[AppConfig] = None
        self._listeners: List[SettingsListener] = []

    @classmethod
    def get_instance(cls) -> 'ConfigManager':
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    def load_config(self, config_path: str = "config.yaml") -> AppConfig:
        """Loads configuration from a YAML file."""
        # Environment may carry the API key (see HookSettings.api_key_env)
        load_dotenv()

        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                raw_data = yaml.safe_load(f) or {}

            self._config = AppConfig(**raw_data)
            return self._config
        except Exception as e:
            raise RuntimeError(f"Failed to load configuration: {e}")

    def load_defaults(self) -> AppConfig:
        """Installs an all-defaults config (env still consulted for the key)."""
        load_dotenv()
        self._config = AppConfig()
        return self._config

    @property
    def config(self) -> AppConfig:
        if self._config is None:
             raise RuntimeError("Configuration has not been loaded. Call load_config() first.")
        return self._config

    def get_settings(self) -> ProviderConfig:
        """Snapshot of the active provider settings. Safe to call per request."""
        return self.config.hook.snapshot()

    def update_settings(self, **changes: Any) -> ProviderConfig:
        """
        Applies changes to the hook settings (validated) and notifies listeners.
        Nothing is written back to disk.
        """
        merged = self.config.hook.model_dump()
        merged.update(changes)
        hook = HookSettings.model_validate(merged)
        self._config = self.config.model_copy(update={"hook": hook})

        snapshot = hook.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)
        return snapshot

    def add_listener(self, listener: SettingsListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: SettingsListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

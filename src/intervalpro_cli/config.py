"""Configuration management for IntervalPro CLI."""

import json
from pathlib import Path
from typing import Any, Optional

from platformdirs import user_config_dir, user_data_dir
from pydantic import BaseModel, Field

from intervalpro_cli.utils.logger import get_logger

logger = get_logger("config")


class SoundConfig(BaseModel):
    """Cue sound configuration."""

    effect_volume: float = Field(default=1.0, ge=0.0, le=1.0)
    bell: bool = Field(default=True)


class TimerConfig(BaseModel):
    """Timer display configuration."""

    refresh_per_second: int = Field(default=4, ge=1, le=20)
    show_cues: bool = Field(default=True)
    fullscreen: bool = Field(default=True)


class DefaultsConfig(BaseModel):
    """Fallback values used when workout input cannot be parsed."""

    work_duration: int = Field(default=30, ge=0)
    repeat_count: int = Field(default=0, ge=0)
    prep_time: int = Field(default=5, ge=0)
    pre_start_time: int = Field(default=3, ge=0)
    cycle_rest_time: int = Field(default=0, ge=0)
    cycle_count: int = Field(default=0, ge=0)


class Config(BaseModel):
    """Main configuration."""

    sound: SoundConfig = Field(default_factory=SoundConfig)
    timer: TimerConfig = Field(default_factory=TimerConfig)
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)


class ConfigManager:
    """Manages IntervalPro CLI configuration."""

    def __init__(self, profile: str = "default"):
        self.profile = profile
        self.config_dir = Path(user_config_dir("intervalpro-cli"))
        self.data_dir = Path(user_data_dir("intervalpro-cli"))
        self.config_file = self.config_dir / f"{profile}.json"

        # Ensure directories exist
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self._config: Optional[Config] = None

    @property
    def config(self) -> Config:
        """Get the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> Config:
        """Load configuration from file, falling back to defaults if unreadable."""
        if self.config_file.exists():
            try:
                with open(self.config_file, "r") as f:
                    data = json.load(f)
                return Config(**data)
            except Exception:
                logger.warning(
                    "Config file %s is unreadable, using defaults",
                    self.config_file,
                    exc_info=True,
                )
                return Config()
        return Config()

    def save_config(self, config: Optional[Config] = None) -> None:
        """Save configuration to file."""
        if config is None:
            config = self.config

        with open(self.config_file, "w") as f:
            json.dump(config.model_dump(), f, indent=2)

    def get(self, key: str) -> Any:
        """Get a configuration value by dot-separated key."""
        return self.get_from_config(self.config, key)

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dot-separated key.

        Raises:
            KeyError: If *key* does not name an existing setting.
            pydantic.ValidationError: If *value* is out of range for the setting.
        """
        if self.get(key) is None:
            raise KeyError(key)

        keys = key.split(".")
        config_dict = self.config.model_dump()

        current = config_dict
        for k in keys[:-1]:
            current = current[k]
        current[keys[-1]] = value

        self._config = Config(**config_dict)
        self.save_config()

    def reset(self, key: Optional[str] = None) -> None:
        """Reset configuration to defaults."""
        if key is None:
            self._config = Config()
        else:
            default_value = self.get_from_config(Config(), key)
            if default_value is not None:
                self.set(key, default_value)
        self.save_config()

    def get_from_config(self, config: Config, key: str) -> Any:
        """Get value from a config object using dot notation."""
        value: Any = config
        for k in key.split("."):
            if isinstance(value, BaseModel):
                value = getattr(value, k, None)
            else:
                return None
        return value

    @property
    def effect_volume(self) -> float:
        """Effect volume read by the cue dispatcher."""
        return self.config.sound.effect_volume


# Global config manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager(profile: str = "default") -> ConfigManager:
    """Get or create the global config manager."""
    global _config_manager
    if _config_manager is None or _config_manager.profile != profile:
        _config_manager = ConfigManager(profile)
    return _config_manager

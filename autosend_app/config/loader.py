"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import ConfigurationError
from .defaults import DefaultConfig, get_default_config
from .settings import SchedulerSettings
from .transport import TransportConfig, parse_transport_config

SETTINGS_FILE_NAME = "autosend.yaml"


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    @property
    def settings_file(self) -> Path:
        return self.config_dir / SETTINGS_FILE_NAME

    def load_file_config(self) -> dict[str, Any]:
        """Load the persisted settings file, empty when it does not exist."""
        if not self.settings_file.exists():
            return {}

        try:
            with open(self.settings_file, encoding="utf-8") as f:
                file_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Cannot parse {self.settings_file}: {e}",
                context={"path": str(self.settings_file)},
            ) from e

        if file_config is None:
            return {}
        if not isinstance(file_config, dict):
            raise ConfigurationError(
                f"{self.settings_file} must contain a mapping",
                context={"path": str(self.settings_file)},
            )
        return file_config

    def merge_config(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Call-site overrides (highest priority)
        2. Settings file
        3. Global defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)

        config = self._deep_merge(config, self.load_file_config())

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def load_settings(self, overrides: Optional[dict[str, Any]] = None) -> SchedulerSettings:
        """Merge, validate and build the settings store."""
        return SchedulerSettings.from_dict(self.merge_config(overrides))

    def load_transport_config(self, overrides: Optional[dict[str, Any]] = None) -> TransportConfig:
        """Build the transport selection from the ``transport`` section."""
        return parse_transport_config(self.merge_config(overrides).get("transport"))

    def load_display_names(self) -> dict[str, str]:
        """Destination display names from the ``display_names`` section."""
        names = self.load_file_config().get("display_names") or {}
        if not isinstance(names, dict):
            raise ConfigurationError("display_names must be a mapping", field="display_names")
        return {str(key): str(value) for key, value in names.items()}

    def save_settings(self, settings: SchedulerSettings) -> Path:
        """
        Write settings back to the settings file.

        Sections the settings store does not own (transport, display_names)
        are preserved.
        """
        file_config = self.load_file_config()
        file_config.update(settings.to_dict())

        self.config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.settings_file, "w", encoding="utf-8") as f:
            yaml.safe_dump(file_config, f, sort_keys=False, allow_unicode=True)
        return self.settings_file

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name, _field in obj.__dataclass_fields__.items():
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                elif isinstance(value, list):
                    result[field_name] = list(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

"""Configuration access with runtime overrides."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..config import ArchiveConfig, LowQualityConfig, PreviewConfig
from ..config import get_config as _get_global_config

if TYPE_CHECKING:
    from pathlib import Path

LOG = logging.getLogger(__name__)


@dataclass
class ProcessingOptions:
    """Processing options that can override configuration."""

    dry_run: bool = False
    push: bool | None = None
    commit_message: str | None = None
    crf: int | None = None
    width: int | None = None
    show_progress: bool | None = None


class ConfigManager:
    """Configuration manager with override and context support."""

    def __init__(self, config_path: Path | None = None, config: ArchiveConfig | None = None) -> None:
        """
        Initialize configuration manager.

        Args:
            config_path: Optional path to config file
            config: Ready-made configuration, takes precedence over config_path

        """
        if config is not None:
            self._config = config
        elif config_path is not None:
            self._config = ArchiveConfig.load_from_file(config_path)
        else:
            self._config = _get_global_config()
        self._overrides: dict[str, Any] = {}
        self._context_stack: list[dict[str, Any]] = []

    @property
    def config(self) -> ArchiveConfig:
        """Get the base configuration."""
        return self._config

    @property
    def dry_run(self) -> bool:
        """Whether filesystem and subprocess side effects are suppressed."""
        return bool(self.get_value("global_.dry_run", default=False))

    def get_value(self, key_path: str, default: object = None) -> Any:
        """Get configuration value with override support."""
        # Check overrides first
        if key_path in self._overrides:
            return self._overrides[key_path]

        # Try to get from underlying config
        try:
            value: Any = self._config
            for part in key_path.split("."):
                value = getattr(value, part)
        except AttributeError:
            return default
        else:
            return value

    def set_override(self, key_path: str, value: object) -> None:
        """Set a temporary configuration override."""
        self._overrides[key_path] = value

    def push_context(self, overrides: dict[str, Any]) -> None:
        """Push a new configuration context."""
        self._context_stack.append(self._overrides.copy())
        self._overrides.update(overrides)

    def pop_context(self) -> None:
        """Pop the current configuration context."""
        if self._context_stack:
            self._overrides = self._context_stack.pop()

    def apply_processing_options(self, options: ProcessingOptions) -> None:
        """Apply processing options as configuration overrides."""
        overrides: dict[str, Any] = {"global_.dry_run": options.dry_run}

        if options.push is not None:
            overrides["git.push"] = options.push
        if options.commit_message is not None:
            overrides["git.commit_message"] = options.commit_message
        if options.crf is not None:
            if options.crf < 0:
                msg = f"CRF must not be negative, got {options.crf}"
                raise ValueError(msg)
            overrides["low_quality.crf"] = options.crf
        if options.width is not None:
            if options.width <= 0:
                msg = f"Width must be a positive number of pixels, got {options.width}"
                raise ValueError(msg)
            overrides["low_quality.width"] = options.width
        if options.show_progress is not None:
            overrides["global_.show_progress"] = options.show_progress

        for key, value in overrides.items():
            self.set_override(key, value)

    def low_quality_settings(self) -> LowQualityConfig:
        """Effective low-quality encoding settings, overrides applied."""
        base = self._config.low_quality
        return LowQualityConfig(
            width=int(self.get_value("low_quality.width", base.width)),
            crf=int(self.get_value("low_quality.crf", base.crf)),
            codec=str(self.get_value("low_quality.codec", base.codec)),
            preset=str(self.get_value("low_quality.preset", base.preset)),
            audio_codec=str(self.get_value("low_quality.audio_codec", base.audio_codec)),
        )

    def preview_settings(self) -> PreviewConfig:
        """Effective preview extraction settings, overrides applied."""
        base = self._config.preview
        return PreviewConfig(
            seek_seconds=float(self.get_value("preview.seek_seconds", base.seek_seconds)),
            quality=int(self.get_value("preview.quality", base.quality)),
        )


class ConfigContext:
    """Context manager for temporary configuration changes."""

    def __init__(self, config_manager: ConfigManager, overrides: dict[str, Any]) -> None:
        self.config_manager = config_manager
        self.overrides = overrides

    def __enter__(self) -> ConfigManager:
        """Enter the configuration context."""
        self.config_manager.push_context(self.overrides)
        return self.config_manager

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        """Exit the configuration context."""
        self.config_manager.pop_context()


def with_config_overrides(config_manager: ConfigManager, **overrides: object) -> ConfigContext:
    """Create a context with configuration overrides."""
    return ConfigContext(config_manager, overrides)

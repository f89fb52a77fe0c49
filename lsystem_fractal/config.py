"""
Rendering configuration.

Settings come from defaults, an optional JSON config file and
``LSYSTEM_FRACTAL_*`` environment variables, applied in that order.
"""

import os
import json
import logging
from dataclasses import dataclass, fields, asdict
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

logger = logging.getLogger(__name__)

ENV_PREFIX = "LSYSTEM_FRACTAL_"

_COLOR_FIELDS = ('background', 'gradient_start', 'gradient_end')


@dataclass
class RenderConfig:
    """Configuration for fractal rendering."""

    # Image parameters
    width: int = 1024
    height: int = 1024
    margin: int = 16
    line_width: int = 1

    # Coloring (RGBA, 0-255)
    background: Tuple[int, int, int, int] = (0, 0, 48, 255)
    gradient_start: Tuple[int, int, int, int] = (255, 255, 255, 255)
    gradient_end: Tuple[int, int, int, int] = (128, 128, 128, 255)
    gradient_count: int = 256

    # Safety
    max_symbols: int = 5_000_000

    # Output
    jpeg_quality: int = 95
    save_metadata: bool = True

    def validate(self):
        """Validate configuration parameters."""
        if self.width <= 0 or self.height <= 0:
            raise ValueError("Width and height must be positive")

        if self.margin < 0:
            raise ValueError("margin must be >= 0")

        if 2 * self.margin >= min(self.width, self.height):
            raise ValueError("margin leaves no room to draw")

        if self.line_width < 1:
            raise ValueError("line_width must be >= 1")

        for name in _COLOR_FIELDS:
            color = getattr(self, name)
            if len(color) != 4 or not all(0 <= int(c) <= 255 for c in color):
                raise ValueError(f"{name} must be 4 channels between 0 and 255")

        if self.gradient_count < 2:
            raise ValueError("gradient_count must be >= 2")

        if self.max_symbols <= 0:
            raise ValueError("max_symbols must be positive")

        if not 1 <= self.jpeg_quality <= 100:
            raise ValueError("jpeg_quality must be between 1 and 100")

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a JSON-friendly dictionary."""
        data = asdict(self)
        for name in _COLOR_FIELDS:
            data[name] = list(data[name])
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'RenderConfig':
        """Create configuration from dictionary, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown render settings: {', '.join(unknown)}")

        values = dict(data)
        for name in _COLOR_FIELDS:
            if name in values:
                values[name] = tuple(int(c) for c in values[name])
        config = cls(**values)
        config.validate()
        return config


class EnvironmentConfig:
    """Reads RenderConfig overrides from environment variables."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None, prefix: str = ENV_PREFIX):
        self.environ = os.environ if environ is None else environ
        self.prefix = prefix

    def overrides(self) -> Dict[str, Any]:
        """
        Collect overrides for every RenderConfig field present in the environment.

        Returns:
            Mapping of field name to parsed value
        """
        result = {}
        for f in fields(RenderConfig):
            raw = self.environ.get(self.prefix + f.name.upper())
            if raw is None:
                continue
            result[f.name] = self._parse(f.name, f.default, raw)
        return result

    @staticmethod
    def _parse(name: str, default: Any, raw: str) -> Any:
        try:
            if isinstance(default, bool):
                return raw.strip().lower() in ('1', 'true', 'yes', 'on')
            if isinstance(default, int):
                return int(raw)
            if isinstance(default, tuple):
                return tuple(int(part) for part in raw.split(','))
        except ValueError:
            raise ValueError(f"Invalid value for {name}: {raw!r}") from None
        return raw

    def apply(self, config: RenderConfig) -> RenderConfig:
        """Apply environment overrides to ``config`` in place."""
        for key, value in self.overrides().items():
            logger.debug(f"Environment override: {key}={value!r}")
            setattr(config, key, value)
        return config


class ConfigManager:
    """Loads and saves JSON configuration files."""

    def load_config(self, filepath: Union[str, Path]) -> Dict[str, Any]:
        """
        Load a configuration file.

        Args:
            filepath: Path to a JSON file

        Returns:
            Parsed configuration dictionary
        """
        filepath = Path(filepath)
        with open(filepath, 'r', encoding='utf-8') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON in {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Configuration in {filepath} must be a JSON object")

        logger.info(f"Loaded configuration: {filepath}")
        return data

    def save_config(self, config: RenderConfig, filepath: Union[str, Path]) -> None:
        """Save a render configuration under a ``render`` section."""
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump({'render': config.to_dict()}, f, indent=2)
            f.write("\n")

    def create_render_config(self, data: Mapping[str, Any]) -> RenderConfig:
        """Build a RenderConfig from the ``render`` section of ``data``."""
        section = data.get('render', {})
        if not isinstance(section, dict):
            raise ValueError("'render' section must be an object")
        return RenderConfig.from_dict(section)


def load_config_from_args(config_file: Optional[Union[str, Path]] = None,
                          environ: Optional[Mapping[str, str]] = None) -> RenderConfig:
    """
    Build the effective render configuration.

    Args:
        config_file: Optional JSON configuration file
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Validated RenderConfig
    """
    if config_file:
        manager = ConfigManager()
        config = manager.create_render_config(manager.load_config(config_file))
    else:
        config = RenderConfig()

    EnvironmentConfig(environ).apply(config)
    config.validate()
    return config

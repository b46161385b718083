#packetlabel/infrastructure/config/json_config_repository.py

"""
JSON-based implementation of the configuration repository.

Stores the grid palette and label set in a JSON file on disk.
"""
import os
import json
import re
from typing import Dict, Any

from packetlabel.domain.services.i_config_repository_service import IConfigRepository
from packetlabel.domain.services.i_logger_service import ILoggerService
from packetlabel.domain.models.byte_node import HighlightPalette
from packetlabel.domain.common.result import Result
from packetlabel.domain.common.errors import ConfigurationError

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")

PALETTE_KEYS = (
    "canvas_background",
    "even_background",
    "odd_background",
    "even_foreground",
    "odd_foreground",
    "highlight_foreground",
    "default_highlight",
)


class JsonConfigRepository(IConfigRepository):
    """
    JSON-based implementation of the configuration repository.

    The file is re-read when its modification time changes.
    """

    def __init__(self, config_file: str, logger: ILoggerService):
        """
        Initialize the repository.

        Args:
            config_file: Path to the JSON configuration file
            logger: Logger service
        """
        self.config_file = config_file
        self.logger = logger
        self._config_cache = None
        self._last_modified = 0.0

        defaults = HighlightPalette()
        self.DEFAULT_CONFIG = {
            **{key: getattr(defaults, key) for key in PALETTE_KEYS},
            "inactive_opacity": defaults.inactive_opacity,
            "bytes_per_row": 16,
            "control_name": "labels",
            "to_name": "packet",
            "labels": {
                "HEADER": "#3a7ca5",
                "LENGTH": "#d1495b",
                "PAYLOAD": "#66a182",
                "CHECKSUM": "#edae49",
            },
        }

    def load_config(self, force_reload: bool = False) -> Result[Dict[str, Any]]:
        """
        Load configuration from storage.

        A missing file is created with the defaults. Missing keys are merged
        in and malformed values replaced, then the file is rewritten.
        """
        try:
            if os.path.exists(self.config_file):
                mtime = os.path.getmtime(self.config_file)
                if mtime > self._last_modified:
                    force_reload = True
        except OSError as e:
            self.logger.debug(f"Error checking config file modification time: {e}")

        if self._config_cache is not None and not force_reload:
            return Result.ok(self._config_cache)

        if not os.path.exists(self.config_file):
            self.logger.warning("Config file not found. Creating new configuration with default settings.",
                                path=self.config_file)
            config = json.loads(json.dumps(self.DEFAULT_CONFIG))
            save_result = self.save_config(config)
            if save_result.is_failure:
                return Result.fail(save_result.error)
            return Result.ok(config)

        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                config = json.load(f)
            if not isinstance(config, dict):
                raise ValueError("top-level value must be an object")
        except (OSError, ValueError) as e:
            error = ConfigurationError(
                message=f"Error loading config from {self.config_file}: {e}",
                details={"path": self.config_file},
                inner_error=e
            )
            self.logger.error(str(error))
            return Result.fail(error)

        self.logger.info(f"Config loaded successfully from {self.config_file}")
        self._last_modified = os.path.getmtime(self.config_file)

        if self._normalize(config):
            save_result = self.save_config(config)
            if save_result.is_failure:
                return Result.fail(save_result.error)

        self._config_cache = config
        return Result.ok(config)

    def _normalize(self, config: Dict[str, Any]) -> bool:
        """Fill missing keys and repair malformed values. Returns True if changed."""
        updated = False
        for key, default_value in self.DEFAULT_CONFIG.items():
            if key not in config:
                config[key] = json.loads(json.dumps(default_value))
                updated = True

        for key in PALETTE_KEYS:
            if not isinstance(config[key], str) or not _HEX_COLOR.match(config[key]):
                self.logger.warning(f"Invalid color for {key}, using default", value=config[key])
                config[key] = self.DEFAULT_CONFIG[key]
                updated = True

        try:
            opacity = float(config["inactive_opacity"])
        except (ValueError, TypeError):
            opacity = self.DEFAULT_CONFIG["inactive_opacity"]
        opacity = min(max(opacity, 0.0), 1.0)
        if opacity != config["inactive_opacity"]:
            config["inactive_opacity"] = opacity
            updated = True

        try:
            per_row = int(config["bytes_per_row"])
        except (ValueError, TypeError):
            per_row = self.DEFAULT_CONFIG["bytes_per_row"]
        per_row = min(max(per_row, 4), 64)
        if per_row != config["bytes_per_row"]:
            config["bytes_per_row"] = per_row
            updated = True

        labels = config["labels"]
        if not isinstance(labels, dict):
            config["labels"] = dict(self.DEFAULT_CONFIG["labels"])
            updated = True
        else:
            for label, color in list(labels.items()):
                if not isinstance(color, str) or not _HEX_COLOR.match(color):
                    self.logger.warning(f"Invalid color for label {label}, using default highlight")
                    labels[label] = config["default_highlight"]
                    updated = True
        return updated

    def save_config(self, config: Dict[str, Any]) -> Result[bool]:
        """
        Save configuration to storage.

        Writes to a temporary file first and replaces the original.
        """
        try:
            config_dir = os.path.dirname(self.config_file)
            if config_dir:
                os.makedirs(config_dir, exist_ok=True)

            temp_path = f"{self.config_file}.tmp"
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(config, f, indent=4)
            os.replace(temp_path, self.config_file)

            self.logger.info(f"Config saved successfully to {self.config_file}")
            self._config_cache = config
            self._last_modified = os.path.getmtime(self.config_file)
            return Result.ok(True)
        except OSError as e:
            error = ConfigurationError(
                message=f"Failed to save config: {e}",
                details={"path": self.config_file},
                inner_error=e
            )
            self.logger.error(str(error))
            return Result.fail(error)

    def get_global_setting(self, key: str, default: Any = None) -> Any:
        config_result = self.load_config()
        if config_result.is_failure:
            self.logger.error(f"Error loading config: {config_result.error}")
            return default
        return config_result.value.get(key, default)

    def get_highlight_palette(self) -> HighlightPalette:
        """
        Build the palette from the stored colors.

        Falls back to the built-in palette when the file cannot be read.
        """
        config_result = self.load_config()
        if config_result.is_failure:
            self.logger.warning(f"Using default palette: {config_result.error}")
            return HighlightPalette()

        config = config_result.value
        return HighlightPalette(
            **{key: config[key] for key in PALETTE_KEYS},
            inactive_opacity=float(config["inactive_opacity"]),
        )

    def get_label_colors(self) -> Dict[str, str]:
        return dict(self.get_global_setting("labels", self.DEFAULT_CONFIG["labels"]))

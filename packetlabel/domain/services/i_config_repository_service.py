# packetlabel/domain/services/i_config_repository_service.py
"""
Configuration repository interface for application settings.

Settings cover the byte grid palette and the label set offered to the user.
"""
from abc import ABC, abstractmethod
from typing import Dict, Any

from packetlabel.domain.common.result import Result
from packetlabel.domain.models.byte_node import HighlightPalette


class IConfigRepository(ABC):
    """
    Interface for configuration repository.
    """

    @abstractmethod
    def load_config(self, force_reload: bool = False) -> Result[Dict[str, Any]]:
        """
        Load configuration from storage.

        Args:
            force_reload: Whether to force a reload from storage

        Returns:
            Result containing the configuration dictionary
        """
        pass

    @abstractmethod
    def save_config(self, config: Dict[str, Any]) -> Result[bool]:
        """Save configuration to storage."""
        pass

    @abstractmethod
    def get_global_setting(self, key: str, default: Any = None) -> Any:
        """Get a setting, or default if the key is missing."""
        pass

    @abstractmethod
    def get_highlight_palette(self) -> HighlightPalette:
        """Build the palette used to paint byte cells."""
        pass

    @abstractmethod
    def get_label_colors(self) -> Dict[str, str]:
        """Label value -> color for the default labeling control."""
        pass

#packetlabel/domain/services/i_ui_service.py

from abc import ABC, abstractmethod
from packetlabel.domain.common.result import Result


class IUIService(ABC):
    """Interface for UI operations."""

    @abstractmethod
    def show_message(self, title: str, message: str, message_type: str = "info") -> Result[bool]:
        """
        Show a message dialog to the user.

        Args:
            title: Dialog title
            message: Message text
            message_type: Type of message ("info", "warning", "error")

        Returns:
            Result indicating success or failure
        """
        pass

    @abstractmethod
    def show_confirmation(self, title: str, message: str) -> Result[bool]:
        """
        Show a confirmation dialog and return the user's choice.

        Returns:
            Result containing True if confirmed, False if canceled
        """
        pass

    @abstractmethod
    def select_file(self, title: str, filter_pattern: str, save: bool = False) -> Result[str]:
        """
        Show a file selection dialog.

        Args:
            title: Dialog title
            filter_pattern: File type filter pattern
            save: Ask for a path to write instead of an existing file

        Returns:
            Result containing selected file path or empty string if canceled
        """
        pass

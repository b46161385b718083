# packetlabel/infrastructure/ui/qt_ui_service.py

from typing import Optional

from PySide6.QtWidgets import QMessageBox, QFileDialog, QWidget

from packetlabel.domain.services.i_ui_service import IUIService
from packetlabel.domain.services.i_logger_service import ILoggerService
from packetlabel.domain.common.result import Result
from packetlabel.domain.common.errors import UIError


class QtUIService(IUIService):
    """
    Qt implementation of the UI service.

    All labeling work runs on the Qt main thread, so dialogs are shown
    directly and block until the user answers.
    """

    def __init__(self, logger: ILoggerService, parent: Optional[QWidget] = None):
        self.logger = logger
        self.parent = parent

    def set_parent(self, parent: QWidget) -> None:
        """Center later dialogs over parent."""
        self.parent = parent

    def show_message(self, title: str, message: str, message_type: str = "info") -> Result[bool]:
        """Show a message dialog to the user."""
        self.logger.debug(f"Showing message dialog: {title} ({message_type})")
        try:
            if message_type == "warning":
                QMessageBox.warning(self.parent, title, message)
            elif message_type == "error":
                QMessageBox.critical(self.parent, title, message)
            else:
                QMessageBox.information(self.parent, title, message)
            return Result.ok(True)
        except Exception as e:
            error = UIError(message=f"Error showing message dialog: {e}", inner_error=e)
            self.logger.error(str(error))
            return Result.fail(error)

    def show_confirmation(self, title: str, message: str) -> Result[bool]:
        """Show a confirmation dialog and return the user's choice."""
        self.logger.debug(f"Showing confirmation dialog: {title}")
        try:
            reply = QMessageBox.question(
                self.parent, title, message,
                QMessageBox.Yes | QMessageBox.No,
                QMessageBox.No
            )
            return Result.ok(reply == QMessageBox.Yes)
        except Exception as e:
            error = UIError(message=f"Error showing confirmation dialog: {e}", inner_error=e)
            self.logger.error(str(error))
            return Result.fail(error)

    def select_file(self, title: str, filter_pattern: str, save: bool = False) -> Result[str]:
        """Show a file selection dialog."""
        self.logger.debug(f"Showing file selection dialog: {title}")
        try:
            if save:
                file_path, _ = QFileDialog.getSaveFileName(self.parent, title, "", filter_pattern)
            else:
                file_path, _ = QFileDialog.getOpenFileName(self.parent, title, "", filter_pattern)
            return Result.ok(file_path)
        except Exception as e:
            error = UIError(message=f"Error showing file selection dialog: {e}", inner_error=e)
            self.logger.error(str(error))
            return Result.fail(error)

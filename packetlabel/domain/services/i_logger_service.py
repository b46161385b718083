#packetlabel/domain/services/i_logger_service.py
"""
Logger service interface for application-wide logging.

Every service receives an ILoggerService in its constructor. Keyword
arguments are context (region ids, offsets) appended to the message.
"""
from abc import ABC, abstractmethod


class ILoggerService(ABC):
    """
    Interface for logging services.
    """

    @abstractmethod
    def debug(self, message: str, **kwargs) -> None:
        """Log a debug message with optional context."""
        pass

    @abstractmethod
    def info(self, message: str, **kwargs) -> None:
        """Log an info message with optional context."""
        pass

    @abstractmethod
    def warning(self, message: str, **kwargs) -> None:
        """Log a warning message with optional context."""
        pass

    @abstractmethod
    def error(self, message: str, **kwargs) -> None:
        """Log an error message with optional context."""
        pass

    @abstractmethod
    def critical(self, message: str, **kwargs) -> None:
        """Log a critical message with optional context."""
        pass

    @abstractmethod
    def set_level(self, level: int) -> None:
        """
        Set the minimum log level to display.

        Args:
            level: Minimum log level (e.g., logging.INFO, logging.DEBUG)
        """
        pass

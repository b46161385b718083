# packetlabel/domain/common/result.py

"""
Result pattern implementation for error handling.

Services return a Result instead of raising for expected conditions such as an
invalid drag selection or a saved region that fails validation.
"""
from typing import TypeVar, Generic, Optional, Union

from packetlabel.domain.common.errors import DomainError, ErrorCategory

T = TypeVar('T')


class Result(Generic[T]):
    """
    Result type for representing success or failure of an operation.

    A successful Result may legitimately carry None, e.g. when a labeling
    request was ignored because no control could accept it.
    """

    def __init__(self, value: Optional[T], error: Optional[Union[str, DomainError]]):
        self._value = value

        if isinstance(error, str):
            self._error = DomainError(message=error, category=ErrorCategory.UNKNOWN)
        else:
            self._error = error

    @classmethod
    def ok(cls, value: T = None) -> 'Result[T]':
        """Create a successful result with a value."""
        return cls(value, None)

    @classmethod
    def fail(cls, error: Union[str, DomainError]) -> 'Result[T]':
        """Create a failed result with an error message or DomainError."""
        return cls(None, error)

    @property
    def is_success(self) -> bool:
        return self._error is None

    @property
    def is_failure(self) -> bool:
        return not self.is_success

    @property
    def value(self) -> T:
        """
        Get the success value.

        Raises:
            ValueError: If the result is a failure
        """
        if self.is_failure:
            raise ValueError(f"Cannot access value of a failed result: {self._error}")
        return self._value

    @property
    def error(self) -> DomainError:
        """
        Get the error.

        Raises:
            ValueError: If the result is a success
        """
        if self.is_success:
            raise ValueError("Cannot access error of a successful result")
        return self._error

    @classmethod
    def from_operation(cls, operation_func, logger, error_type, error_message, **kwargs):
        """
        Create a Result from an operation that might fail.

        Args:
            operation_func: The function to execute
            logger: Logger to use for errors
            error_type: The domain error type to create on failure
            error_message: Error message prefix
            **kwargs: Context information for error details

        Returns:
            A Result object containing the operation result or error
        """
        try:
            result = operation_func()
            if isinstance(result, Result):
                return result
            return cls.ok(result)
        except Exception as e:
            error = error_type(
                message=f"{error_message}: {e}",
                details=kwargs,
                inner_error=e
            )
            logger.error(str(error))
            return cls.fail(error)

    def __repr__(self) -> str:
        if self.is_success:
            return f"Result.ok({self._value!r})"
        return f"Result.fail({self._error})"

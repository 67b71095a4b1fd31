# -*- coding: utf-8 -*-
"""
Base Controller
===============
Common result type, signals and error handling for the controllers.

Controllers are the boundary towards a UI: service exceptions are turned
into failed OperationResults and operation_error signals here, so that
errors cross that boundary as values.
"""

from dataclasses import dataclass
from typing import Callable, Generic, List, Optional, TypeVar

from PyQt5.QtCore import QObject, pyqtSignal

from services.exceptions import (
    ConnectivityError, DelegateResolutionError, DuplicateError,
    RemoteOperationError, ValidationError,
)
from utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar('T')

DOMAIN_ERRORS = (
    ValidationError,
    DuplicateError,
    ConnectivityError,
    RemoteOperationError,
    DelegateResolutionError,
)


@dataclass
class OperationResult(Generic[T]):
    """Result of a controller operation."""
    success: bool
    data: Optional[T] = None
    message: str = ""
    message_ar: str = ""
    errors: List[str] = None
    field: Optional[str] = None

    def __post_init__(self):
        if self.errors is None:
            self.errors = []

    @classmethod
    def ok(cls, data: T = None, message: str = "", message_ar: str = "") -> 'OperationResult[T]':
        """Create a successful result."""
        return cls(success=True, data=data, message=message, message_ar=message_ar)

    @classmethod
    def fail(cls, message: str, message_ar: str = "", errors: List[str] = None,
             field: str = None, data: T = None) -> 'OperationResult[T]':
        """Create a failed result."""
        return cls(success=False, data=data, message=message, message_ar=message_ar or message,
                   errors=errors or [], field=field)

    @classmethod
    def from_error(cls, error: Exception) -> 'OperationResult[T]':
        message = getattr(error, "message", None) or str(error)
        errors = getattr(error, "errors", None) or [message]
        return cls.fail(message, message, errors=list(errors), field=getattr(error, "field", None))


class BaseController(QObject):
    """
    Base for the controllers.

    Signals:
        operation_started(str): operation name
        operation_completed(str, bool): operation name, success
        operation_error(str, str): operation name, error message
        data_changed(): something the UI displays has changed
        loading_changed(bool)
    """

    operation_started = pyqtSignal(str)
    operation_completed = pyqtSignal(str, bool)
    operation_error = pyqtSignal(str, str)
    data_changed = pyqtSignal()
    loading_changed = pyqtSignal(bool)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._is_loading = False
        self._last_error = ""

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def last_error(self) -> str:
        return self._last_error

    def _set_loading(self, loading: bool):
        self._is_loading = loading
        self.loading_changed.emit(loading)

    def _set_error(self, error: str):
        self._last_error = error
        if error:
            logger.error(f"{self.__class__.__name__}: {error}")

    def _log_operation(self, operation: str, **kwargs):
        logger.info(f"{self.__class__.__name__}.{operation}: {kwargs}")

    def _emit_started(self, operation: str):
        self.operation_started.emit(operation)
        self._set_loading(True)

    def _emit_completed(self, operation: str, success: bool):
        self.operation_completed.emit(operation, success)
        self._set_loading(False)
        if success:
            self.data_changed.emit()

    def _emit_error(self, operation: str, error: str):
        self._set_error(error)
        self.operation_error.emit(operation, error)
        self._set_loading(False)

    def execute_with_error_handling(self, operation: str, func: Callable, *args,
                                    **kwargs) -> OperationResult:
        """
        Run func and wrap its outcome.

        Domain errors become failed results with their user-facing
        message; anything else is logged with its traceback and surfaced
        with the raw message.
        """
        try:
            self._emit_started(operation)
            result = func(*args, **kwargs)
        except DOMAIN_ERRORS as e:
            failure = OperationResult.from_error(e)
            self._emit_error(operation, failure.message)
            return failure
        except Exception as e:
            logger.exception(f"Unexpected error in {operation}")
            self._emit_error(operation, str(e))
            return OperationResult.fail(message=str(e))

        self._emit_completed(operation, True)
        return OperationResult.ok(data=result)

# -*- coding: utf-8 -*-
"""Custom exceptions for the application."""

from typing import List, Optional, Tuple


class ValidationError(Exception):
    """User-correctable input problem; no state was changed."""

    def __init__(self, message: str, field: str = None,
                 errors: list = None, context: str = None,
                 member_index: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.errors = errors or [message]
        self.context = context
        self.member_index = member_index

    def __str__(self):
        return self.message


class DuplicateError(Exception):
    """Uniqueness violation (national ID or family number); no state was changed."""

    def __init__(self, message: str, nid: str = None,
                 family_number: str = None, context: str = None):
        super().__init__(message)
        self.message = message
        self.nid = nid
        self.family_number = family_number
        self.context = context

    def __str__(self):
        return self.message


class ConnectivityError(Exception):
    """A remote-only operation was attempted while offline."""

    def __init__(self, message: str, context: str = None):
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self):
        return self.message


NoConnectivity = ConnectivityError


class RemoteOperationError(Exception):
    """A remote call failed after local validation passed."""

    def __init__(self, message: str, status_code: int = None,
                 response_data: dict = None, original_error: Exception = None,
                 context: str = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_data = response_data or {}
        self.original_error = original_error
        self.context = context

    def __str__(self):
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message


class ApiException(RemoteOperationError):
    """The backend answered with an HTTP error status."""


class NetworkException(RemoteOperationError):
    """The backend could not be reached (connection error or timeout)."""

    def __init__(self, message: str, original_error: Exception = None,
                 context: str = None):
        super().__init__(message, original_error=original_error, context=context)


class DelegateResolutionError(Exception):
    """
    Bulk import aborted: some delegate names could not be matched.

    issues holds every (family_number, raw_delegate_text) pair.
    """

    def __init__(self, message: str, issues: List[Tuple[str, str]]):
        super().__init__(message)
        self.message = message
        self.issues = list(issues)

    def __str__(self):
        return self.message


class ReportExpressionError(Exception):
    """A report expression is not a valid expression tree."""

    def __init__(self, message: str, node=None):
        super().__init__(message)
        self.message = message
        self.node = node

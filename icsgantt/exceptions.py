"""Exceptions for loading, editing and exporting calendar timelines."""

from typing import Optional


class IcsGanttError(Exception):
    """Base exception for icsgantt errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class FetchError(IcsGanttError):
    """Exception raised when the ICS resource cannot be retrieved.

    ``status_code`` carries the transport status when the server answered,
    and is None for failures below HTTP (DNS, refused connection, timeout).
    """


class ParseError(IcsGanttError):
    """Exception raised when ICS content cannot be parsed into a calendar."""


class EmptyInputError(IcsGanttError):
    """Exception raised when an export is attempted with no tasks."""


class LoadInProgressError(IcsGanttError):
    """Exception raised when a load is started while another one is running."""

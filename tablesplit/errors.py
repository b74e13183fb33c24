"""
Error types raised at the boundaries of tablesplit.

Detection and merge never raise for structurally valid input; only the
collaborators that touch bytes or the network do.
"""


class TableSplitError(Exception):
    """Base class for all tablesplit errors."""


class DecodeError(TableSplitError):
    """The uploaded bytes could not be parsed as a workbook."""

    def __init__(self, message: str, file_name: str = ""):
        super().__init__(message)
        self.file_name = file_name


class EncodeError(TableSplitError):
    """A workbook could not be generated from the supplied tables."""


class ReferenceDataError(TableSplitError):
    """The remote developer/project list was unreachable or empty."""

    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code

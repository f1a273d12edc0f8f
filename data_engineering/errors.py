"""
Error kinds raised by the loading, reshaping and correlation stages.

All inherit from HealthDataError so a caller can catch the family and
still tell the kinds apart.
"""

from typing import Iterable, List, Optional, Sequence, Tuple


class HealthDataError(Exception):
    """Base class for pipeline errors."""


class SourceUnavailable(HealthDataError):
    """Raised when the dataset cannot be fetched or read."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Source unavailable: {source} ({reason})")


class MalformedRecord(HealthDataError):
    """A data row whose field count does not match the header."""

    def __init__(self, line_number: int, expected: int, found: int, raw: Optional[Sequence[str]] = None):
        self.line_number = line_number
        self.expected = expected
        self.found = found
        self.raw = list(raw) if raw is not None else None
        super().__init__(
            f"Malformed record on line {line_number}: expected {expected} fields, found {found}"
        )


class MissingColumns(HealthDataError):
    """Raised when the header lacks columns the pipeline requires."""

    def __init__(self, missing: Iterable[str]):
        self.missing = sorted(missing)
        super().__init__(f"Missing required columns: {self.missing}")


class InsufficientData(HealthDataError):
    """Raised when a correlation cannot be computed from the given matrix."""

    def __init__(self, message: str, columns: Optional[Iterable[str]] = None):
        self.columns: List[str] = list(columns) if columns is not None else []
        super().__init__(message)


class DuplicateKey(HealthDataError):
    """Raised by pivot_wide under the 'raise' policy."""

    def __init__(self, pairs: Iterable[Tuple[str, str]]):
        self.pairs = list(pairs)
        preview = self.pairs[:5]
        more = f" (+{len(self.pairs) - 5} more)" if len(self.pairs) > 5 else ""
        super().__init__(f"Duplicate (row, column) keys: {preview}{more}")

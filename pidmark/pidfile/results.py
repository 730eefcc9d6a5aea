"""Result type for PID file operations.

Every OS call made by the store is funnelled through one primitive that
returns an ``OpResult``. Operations that only need a yes/no answer look at
``ok``; operations that must report failures call ``unwrap()``, which
raises the classified ``PidFileError``.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from pidmark.pidfile.exceptions import ErrorKind, PidFileError

T = TypeVar("T")


@dataclass
class OpResult(Generic[T]):
    """Outcome of a single OS-level operation.

    Attributes:
        value: Value produced by the operation on success
        error: Classified error on failure
    """

    value: Optional[T] = None
    error: Optional[PidFileError] = None

    @property
    def ok(self) -> bool:
        """Check if the operation succeeded."""
        return self.error is None

    @property
    def failed(self) -> bool:
        """Check if the operation failed."""
        return self.error is not None

    @property
    def kind(self) -> Optional[ErrorKind]:
        """Get the error kind, or None on success."""
        return self.error.kind if self.error else None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "OpResult[T]":
        """Create a successful result."""
        return cls(value=value)

    @classmethod
    def failure(cls, error: PidFileError) -> "OpResult[T]":
        """Create a failed result."""
        return cls(error=error)

    def unwrap(self) -> T:
        """Return the value, raising the stored error on failure."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def value_or(self, default: T) -> T:
        """Return the value, or ``default`` on failure."""
        if self.error is not None:
            return default
        return self.value  # type: ignore[return-value]

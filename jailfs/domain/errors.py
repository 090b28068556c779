"""Exception types raised or carried by jail operations."""

from typing import Optional


class JailError(Exception):
    """Base class for every error produced by jailfs."""


class JailConstructionError(JailError):
    """Raised when the configured root cannot serve as a jail."""


class OperationError(JailError):
    """An OS-level failure of one operation on one virtual path.

    The message names the virtual path only; the physical location is never
    part of it.
    """

    def __init__(
        self,
        operation: str,
        virtual_path: str,
        errno: Optional[int] = None,
        strerror: Optional[str] = None,
    ) -> None:
        self.operation = operation
        self.virtual_path = virtual_path
        self.errno = errno
        self.strerror = strerror or "unknown error"
        super().__init__(f"failed to {operation} {virtual_path}: {self.strerror}")

    @classmethod
    def from_exception(
        cls, operation: str, virtual_path: str, error: BaseException
    ) -> "OperationError":
        """Wrap an OS (or value) error, keeping it as ``__cause__``."""
        errno = getattr(error, "errno", None)
        strerror = getattr(error, "strerror", None) or str(error)
        wrapped = cls(operation, virtual_path, errno, strerror)
        wrapped.__cause__ = error
        return wrapped

    def relabel(self, operation: str, virtual_path: str) -> "OperationError":
        """Return a copy attributed to another operation and path."""
        wrapped = OperationError(operation, virtual_path, self.errno, self.strerror)
        wrapped.__cause__ = self.__cause__ or self
        return wrapped

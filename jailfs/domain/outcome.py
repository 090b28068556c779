"""Three-way operation outcomes: Found, Absent, Failed."""

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar, Union

from jailfs.domain.errors import OperationError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Found(Generic[T]):
    """The operation succeeded and produced ``value``."""

    value: T

    def unwrap(self) -> T:
        """Return the carried value."""
        return self.value


@dataclass(frozen=True, slots=True)
class Absent:
    """The target does not exist, or lies outside the jail."""

    def unwrap(self) -> None:
        """Return None; there is no value."""
        return None


@dataclass(frozen=True, slots=True)
class Failed:
    """The operation hit an OS-level failure described by ``error``."""

    error: OperationError

    def unwrap(self) -> NoReturn:
        """Raise the carried OperationError."""
        raise self.error


ABSENT = Absent()

Outcome = Union[Found[T], Absent, Failed]

"""
Result Type Implementation.

A small Ok/Err pair used where a step must report a problem without raising,
most notably while materializing path descriptors: one malformed entry has to
be skipped and recorded, never allowed to abort the whole merge.
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A resolved entry; ``value`` is the node id it resolved to."""
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    """A rejected entry; ``error`` describes why it was skipped."""
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self):
        raise ValueError(f"Called unwrap on Err: {self.error}")


Result = Union[Ok[T], Err[E]]

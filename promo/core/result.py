"""Result type for explicit error handling.

Every operation that can fail for a reason the operator should see (a git
command, a config file, a malformed version) returns ``Ok(value)`` or
``Err(error)`` instead of raising. Only the CLI layer turns an ``Err`` into a
process exit code.

Usage:
    match repo.merge("feature/login"):
        case Ok(MergeOutcome.MERGED):
            console.success("merged")
        case Ok(MergeOutcome.CONFLICT):
            console.error("merge conflict")
        case Err(error):
            console.error(error.message)
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """A successful result.

    Attributes:
        value: The success value.
    """

    value: T

    def unwrap(self) -> T:
        """Return the contained value."""
        return self.value

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """A failed result.

    Attributes:
        error: The error value, usually a frozen dataclass with a message.
    """

    error: E

    def unwrap(self) -> None:
        """Raise, since there is no value.

        Raises:
            ValueError: Always, carrying the error.
        """
        raise ValueError(f"called unwrap on Err: {self.error}")

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]


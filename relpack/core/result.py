"""Ok/Err results for the packaging pipeline.

Stages return a Result instead of raising, so the archiver can stop at the
first failure and tag it with the stage that produced it:

    built = make_tar(release, runtime=runtime, builder=builder, console=console)
    if isinstance(built, Err):
        return Err(ArchiveError("make_tar", built.error))

or, when both branches matter:

    match update_tar(release, runtime=runtime, codec=codec, console=console):
        case Ok(path):
            ...
        case Err(error):
            ...
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Never, TypeGuard


@dataclass(frozen=True, slots=True)
class Ok[T]:
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or[D](self, default: D) -> T:
        return self.value

    def unwrap_err(self) -> Never:
        raise ValueError(f"unwrap_err() called on Ok({self.value!r})")

    def map[U](self, f: Callable[[T], U]) -> Ok[U]:
        return Ok(f(self.value))

    def map_err[F](self, f: Callable[[Never], F]) -> Ok[T]:
        return self

    def flat_map[U, E](self, f: Callable[[T], Result[U, E]]) -> Result[U, E]:
        """Chain a stage that itself returns a Result."""
        return f(self.value)

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> Never:
        raise ValueError(f"unwrap() called on Err({self.error!r})")

    def unwrap_or[D](self, default: D) -> D:
        return default

    def unwrap_err(self) -> E:
        return self.error

    def map[U](self, f: Callable[[Never], U]) -> Err[E]:
        return self

    def map_err[F](self, f: Callable[[E], F]) -> Err[F]:
        """Wrap the error, e.g. to tag it with the failing stage."""
        return Err(f(self.error))

    def flat_map[U](self, f: Callable[[Never], Result[U, E]]) -> Err[E]:
        return self

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]


def is_ok[T, E](result: Result[T, E]) -> TypeGuard[Ok[T]]:
    return isinstance(result, Ok)


def is_err[T, E](result: Result[T, E]) -> TypeGuard[Err[E]]:
    return isinstance(result, Err)

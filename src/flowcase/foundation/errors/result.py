"""Result/Either monad for task outcomes.

Every completion callback in flowcase is normalised into a Result:
    - Ok(value) when the task reported no error
    - Err(Failure(error, value)) when it did, keeping the partial value

Performance notes:
- Uses __slots__ for minimal memory footprint
- Direct attribute access (no method calls) in hot paths
- sequence() bails out on the first Err
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Iterator

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")
F = TypeVar("F")

# Sentinel for faster Ok/Err construction
_OK = True
_ERR = False


class Result(Generic[T, E]):
    """Discriminated union representing success (Ok) or failure (Err).

    Examples:
        >>> Ok(42).map(lambda x: x * 2).unwrap()
        84
        >>> Err("fail").map(lambda x: x * 2).unwrap_err()
        'fail'
        >>> Ok(5).flat_map(lambda x: Ok(x * 2) if x > 0 else Err("neg")).unwrap()
        10
    """

    __slots__ = ("_value", "_is_ok")
    __match_args__ = ("_value",)

    def __init__(self, value: T | E, is_ok: bool) -> None:
        self._value = value
        self._is_ok = is_ok

    # ─── Type Checking ───────────────────────────────────────────────

    def is_ok(self) -> bool:
        """Check if Result is Ok variant."""
        return self._is_ok

    def is_err(self) -> bool:
        """Check if Result is Err variant."""
        return not self._is_ok

    # ─── Value Extraction ────────────────────────────────────────────

    def unwrap(self) -> T:
        """Extract Ok value, raise RuntimeError on Err."""
        if self._is_ok:
            return self._value  # type: ignore[return-value]
        raise RuntimeError(f"Called unwrap() on Err value: {self._value}")

    def unwrap_err(self) -> E:
        """Extract Err value, raise RuntimeError on Ok."""
        if not self._is_ok:
            return self._value  # type: ignore[return-value]
        raise RuntimeError(f"Called unwrap_err() on Ok value: {self._value}")

    def unwrap_or(self, default: T) -> T:
        return self._value if self._is_ok else default  # type: ignore[return-value]

    def ok(self) -> T | None:
        """Some(T) if Ok, None if Err."""
        return self._value if self._is_ok else None  # type: ignore[return-value]

    def err(self) -> E | None:
        """Some(E) if Err, None if Ok."""
        return None if self._is_ok else self._value  # type: ignore[return-value]

    # ─── Functor / Monad ─────────────────────────────────────────────

    def map(self, f: Callable[[T], U]) -> Result[U, E]:
        return Result(f(self._value), _OK) if self._is_ok else self  # type: ignore[arg-type, return-value]

    def map_err(self, f: Callable[[E], F]) -> Result[T, F]:
        return self if self._is_ok else Result(f(self._value), _ERR)  # type: ignore[arg-type, return-value]

    def flat_map(self, f: Callable[[T], Result[U, E]]) -> Result[U, E]:
        """Monadic bind (>>=) - chain operations that can fail."""
        return f(self._value) if self._is_ok else self  # type: ignore[arg-type, return-value]

    def and_then(self, f: Callable[[T], Result[U, E]]) -> Result[U, E]:
        """Alias for flat_map."""
        return self.flat_map(f)

    def match(self, *, ok: Callable[[T], U], err: Callable[[E], U]) -> U:
        """Exhaustive case analysis over both variants."""
        return ok(self._value) if self._is_ok else err(self._value)  # type: ignore[arg-type]

    # ─── Dunder Methods ──────────────────────────────────────────────

    def __bool__(self) -> bool:
        return self._is_ok

    def __repr__(self) -> str:
        return f"{'Ok' if self._is_ok else 'Err'}({self._value!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Result) and self._is_ok == other._is_ok and self._value == other._value

    def __hash__(self) -> int:
        return hash((self._is_ok, self._value))

    def __iter__(self) -> Iterator[T]:
        if self._is_ok:
            yield self._value  # type: ignore[misc]


def Ok(value: T) -> Result[T, E]:  # noqa: N802
    """Construct Ok variant (success)."""
    return Result(value, _OK)


def Err(error: E) -> Result[T, E]:  # noqa: N802
    """Construct Err variant (failure)."""
    return Result(error, _ERR)


# ═════════════════════════════════════════════════════════════════════════════
# Task Outcomes
# ═════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True, frozen=True)
class Failure:
    """A reported task failure together with the value passed alongside it.

    The error is kept exactly as the task reported it (strings, exceptions,
    any non-None object). ``value`` is the second callback argument, which
    may be a partial result or None.
    """

    error: object
    value: object = None


Outcome = Result[object, Failure]


def completion(error: object = None, value: object = None) -> Outcome:
    """Normalise ``callback(error, value)`` arguments into a Result.

    Only ``None`` counts as "no error"; falsy errors such as ``0`` or ``""``
    are failures.

    Example:
        >>> completion(None, 3)
        Ok(3)
        >>> completion("boom", [])
        Err(Failure(error='boom', value=[]))
    """
    return Result(value, _OK) if error is None else Result(Failure(error, value), _ERR)


def to_callback_args(result: Outcome) -> tuple[object, object]:
    """Inverse of completion(): the ``(error, value)`` pair for a callback."""
    if result._is_ok:
        return None, result._value
    failure: Failure = result._value  # type: ignore[assignment]
    return failure.error, failure.value


# ═════════════════════════════════════════════════════════════════════════════
# Collection Operations
# ═════════════════════════════════════════════════════════════════════════════


def sequence(results: list[Result[T, E]]) -> Result[list[T], E]:
    """Convert list of Results to Result of list. Fails fast on first Err.

    Example:
        >>> sequence([Ok(1), Ok(2), Ok(3)]).unwrap()
        [1, 2, 3]
        >>> sequence([Ok(1), Err("fail"), Ok(3)]).unwrap_err()
        'fail'
    """
    values: list[T] = []
    append = values.append
    for r in results:
        if not r._is_ok:
            return r  # type: ignore[return-value]
        append(r._value)  # type: ignore[arg-type]
    return Result(values, _OK)

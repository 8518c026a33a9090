"""Checks for values annotated as never ``None`` that might still be ``None``.

While a codebase is partway through adopting strict optional typing, a value
annotated ``int`` can still arrive as ``None``: an unmigrated caller passed
it, a ``typing.cast`` lied, or a deserializer skipped validation. These
checks catch that early.

Use them instead of ad-hoc ``if x is None: raise ...`` blocks so the checks
are easy to find (see ``absence_guards.inventory``) and remove once every
caller is typed. Don't put them on every expression that might be ``None``;
only check eagerly where failing early helps, e.g. before a long computation
or in the middle of updating an object's state.

Example:
    >>> def slice_first(elements: list[str], start: int, end: int) -> str:
    ...     first = check_not_absent(elements[0], declared=str)
    ...     return first[
    ...         check_argument_not_absent(start, "start", declared=int):
    ...         check_argument_not_absent(end, "end", len(first), declared=int)
    ...     ]
"""

from typing import Any, Optional, TypeVar

from .errors import AbsenceViolationError

T = TypeVar("T")


def check_not_absent(value: T, fallback: Optional[T] = None, *, declared: Any = object) -> T:
    """Check that a non-optional expression is not ``None``.

    Args:
        value: Value annotated as non-optional
        fallback: Returned instead of ``value`` when ``value`` is ``None``.
            A ``None`` fallback is not a substitute.
        declared: The annotated type of ``value``, used only in the error
            message since Python does not keep it at runtime

    Returns:
        ``value`` unchanged if it is not ``None``, otherwise ``fallback``

    Raises:
        AbsenceViolationError: If both ``value`` and ``fallback`` are ``None``
    """
    if value is None:
        if fallback is None:
            raise AbsenceViolationError.expression(declared)
        return fallback
    return value


def check_argument_not_absent(
    value: T,
    name: str,
    fallback: Optional[T] = None,
    *,
    declared: Any = object,
) -> T:
    """Check that a non-optional parameter is not ``None``.

    Same as ``check_not_absent`` but names the parameter in the error. If
    there is no relevant name, use ``check_not_absent``.

    A fallback is useful when a parameter that used to be optional becomes
    required, and ``None`` was never a deliberate part of its contract.

    Raises:
        AbsenceViolationError: If both ``value`` and ``fallback`` are ``None``
        ValueError: If ``name`` is not a non-empty string
    """
    if not isinstance(name, str) or not name:
        raise ValueError(f"Parameter name must be a non-empty string, got {name!r}")
    if value is None:
        if fallback is None:
            raise AbsenceViolationError.argument(name, declared)
        return fallback
    return value


__all__ = ["check_not_absent", "check_argument_not_absent"]

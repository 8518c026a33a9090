"""Strict runtime cast.

``typing.cast`` does nothing at runtime, and hand-written ``isinstance``
checks tend to let ``None`` through on the assumption that it was handled
elsewhere. ``strict_cast`` checks the value's type and refuses ``None``
unless the target type explicitly allows it.

Example:
    >>> class WidgetIterator:
    ...     def __init__(self, widgets):
    ...         self._widgets = iter(widgets)
    ...         self._current: Optional[Widget] = None
    ...     def move_next(self) -> bool:
    ...         self._current = next(self._widgets, None)
    ...         return self._current is not None
    ...     @property
    ...     def current(self) -> Widget:
    ...         return strict_cast(self._current, Widget)

Here ``_current`` is optional only inside the iterator; reading ``current``
before ``move_next`` fails loudly instead of handing out ``None``.

If the target is a type variable, prefer a plain cast: callers may intend it
to include ``None``, and an unbound ``TypeVar`` permits absence here anyway.
"""

from typing import Optional, Type, TypeVar

from .errors import AbsenceViolationError
from .types import is_instance_of, permits_absence, type_name

T = TypeVar("T")


def strict_cast(value: object, target: Type[T]) -> T:
    """Cast ``value`` to ``target``, rejecting ``None`` unless allowed.

    Args:
        value: Any value, possibly ``None``
        target: Type to cast to; see ``absence_guards.types`` for the
            supported forms

    Returns:
        ``value`` unchanged

    Raises:
        TypeError: If ``value`` is present but not an instance of ``target``.
            This is the ordinary cast failure, never an AbsenceViolationError.
        AbsenceViolationError: If ``value`` is ``None`` and ``target`` does
            not permit ``None``
    """
    if value is None:
        if permits_absence(target):
            return None
        raise AbsenceViolationError.cast(target)
    if not is_instance_of(value, target):
        raise TypeError(
            f"{type_name(type(value))} is not a subtype of {type_name(target)} in type cast"
        )
    return value


def strict_cast_optional(value: object, target: Type[T]) -> Optional[T]:
    """Cast ``value`` to ``Optional[target]``; ``None`` passes through."""
    return strict_cast(value, Optional[target])


__all__ = ["strict_cast", "strict_cast_optional"]

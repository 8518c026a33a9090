"""Tests for strict_cast."""

import sys
import typing
from collections.abc import Sequence
from typing import Any, Optional, TypeVar, Union

import pytest
from absence_guards import (
    AbsenceViolationError,
    strict_cast,
    strict_cast_optional,
)


class Widget:
    pass


T = TypeVar("T")
W = TypeVar("W", bound=Widget)


def test_cast_present_value():
    """Test compatible values come back unchanged."""
    assert strict_cast(1, int) == 1
    widget = Widget()
    assert strict_cast(widget, Widget) is widget


def test_cast_absent_to_non_optional():
    """Test None is rejected for a type that does not permit it."""
    with pytest.raises(AbsenceViolationError, match="An absent value was cast to int") as exc_info:
        strict_cast(None, int)

    assert exc_info.value.kind == "cast"
    assert exc_info.value.type_name == "int"


def test_cast_absent_to_optional():
    """Test None passes when the target permits it."""
    assert strict_cast(None, Optional[int]) is None
    assert strict_cast(None, int | None) is None
    assert strict_cast(None, Union[int, str, None]) is None
    assert strict_cast(None, type(None)) is None
    assert strict_cast(None, Any) is None
    assert strict_cast(None, object) is None


def test_cast_incompatible_type():
    """Test a genuine type mismatch raises a plain TypeError."""
    with pytest.raises(TypeError, match="str is not a subtype of int") as exc_info:
        strict_cast("1", int)

    assert not isinstance(exc_info.value, AbsenceViolationError)


def test_cast_incompatible_type_to_optional():
    """Test the mismatch check still applies to optional targets."""
    with pytest.raises(TypeError, match="str is not a subtype of"):
        strict_cast("1", Optional[int])


def test_cast_present_to_optional():
    """Test present values pass through optional targets."""
    assert strict_cast(1, Optional[int]) == 1
    assert strict_cast("a", int | str) == "a"


def test_cast_generic_alias():
    """Test parameterised generics are checked by origin."""
    values = [1, 2]
    assert strict_cast(values, list[int]) is values
    assert strict_cast((1, 2), Sequence[int]) == (1, 2)

    with pytest.raises(TypeError):
        strict_cast({1, 2}, list[int])

    with pytest.raises(AbsenceViolationError, match="list\\[int\\]"):
        strict_cast(None, list[int])


def test_cast_type_variables():
    """Test type variable targets."""
    # Unbound type variable behaves like object
    assert strict_cast(None, T) is None
    assert strict_cast("x", T) == "x"

    # Bound type variable follows its bound
    widget = Widget()
    assert strict_cast(widget, W) is widget
    with pytest.raises(AbsenceViolationError, match="cast to W"):
        strict_cast(None, W)


def test_generic_helper():
    """Test a generic wrapper that forwards its type argument."""

    def cast(value, tp):
        return strict_cast(value, tp)

    assert cast(1, int) == 1
    with pytest.raises(AbsenceViolationError):
        cast(None, int)
    assert cast(None, Optional[int]) is None


def test_strict_cast_optional():
    """Test the optional convenience wrapper."""
    assert strict_cast_optional(None, int) is None
    assert strict_cast_optional(1, int) == 1

    with pytest.raises(TypeError):
        strict_cast_optional("1", int)


def test_iterator_current():
    """Test strict_cast guarding an internally optional attribute."""

    class WidgetIterator:
        def __init__(self, widgets):
            self._widgets = iter(widgets)
            self._current = None

        def move_next(self):
            self._current = next(self._widgets, None)
            return self._current is not None

        @property
        def current(self):
            return strict_cast(self._current, Widget)

    widget = Widget()
    it = WidgetIterator([widget])

    with pytest.raises(AbsenceViolationError, match="cast to Widget"):
        it.current

    assert it.move_next()
    assert it.current is widget
    assert not it.move_next()

    with pytest.raises(AbsenceViolationError):
        it.current


@pytest.mark.skipif(sys.version_info < (3, 12), reason="type aliases need Python 3.12+")
def test_cast_type_alias():
    """Test casting through a `type X = ...` alias."""
    MaybeInt = typing.TypeAliasType("MaybeInt", int | None)
    Count = typing.TypeAliasType("Count", int)

    assert strict_cast(None, MaybeInt) is None
    assert strict_cast(1, MaybeInt) == 1
    with pytest.raises(AbsenceViolationError, match="cast to Count"):
        strict_cast(None, Count)


def test_cast_optional_forward_ref():
    """Test an optional forward reference target."""
    assert strict_cast(None, Optional["Widget"]) is None

    with pytest.raises(TypeError, match="Cannot evaluate forward reference 'Widget'") as exc_info:
        strict_cast(Widget(), Optional["Widget"])

    assert not isinstance(exc_info.value, AbsenceViolationError)


def test_cast_int_to_float():
    """Test int is accepted for a float target."""
    assert strict_cast(1, float) == 1
    assert strict_cast(1, Optional[float]) == 1

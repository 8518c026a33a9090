"""Runtime type predicates used by the guards.

Python erases most of what an annotation says by the time code runs, so the
guards work from the type objects callers pass in explicitly. Three questions
get answered here:

- how a type should be named in an error message (``type_name``)
- whether ``None`` is an acceptable value of a type (``permits_absence``)
- whether a present value belongs to a type (``is_instance_of``)

Supported type forms are plain classes, ``None``/``NoneType``, ``Any``,
``Optional``/``Union``/``X | Y``, ``Literal``, ``Annotated``, ``NewType``,
``TypeVar``, ``type`` aliases (Python 3.12+) and parameterised generics such as ``list[int]``. Generics are
checked by their origin class only; element types are not inspected.
"""

import types
import typing
from typing import Annotated, Any, ForwardRef, Literal, NewType, TypeVar, Union, get_args, get_origin

NoneType = type(None)

_UNION_ORIGINS = (Union, types.UnionType)

# `type X = ...` aliases, Python 3.12+
_TypeAliasType = getattr(typing, "TypeAliasType", None)

# int is acceptable where float or complex is expected
_NUMERIC_PROMOTIONS = {
    float: (int, float),
    complex: (int, float, complex),
}


def _is_forward_ref(tp: Any) -> bool:
    return isinstance(tp, (str, ForwardRef))


def _forward_ref_error(tp: Any) -> TypeError:
    name = tp.__forward_arg__ if isinstance(tp, ForwardRef) else tp
    return TypeError(f"Cannot evaluate forward reference {name!r}")


def _is_type_alias(tp: Any) -> bool:
    return _TypeAliasType is not None and isinstance(tp, _TypeAliasType)


def type_name(tp: Any) -> str:
    """Render a type for use in error messages.

    Examples:
        >>> type_name(int)
        'int'
        >>> type_name(list[str])
        'list[str]'
        >>> type_name(int | None)
        'int | None'
    """
    if tp is None or tp is NoneType:
        return "None"
    if isinstance(tp, str):
        # Unevaluated forward reference
        return tp
    if isinstance(tp, ForwardRef):
        return tp.__forward_arg__
    if isinstance(tp, (TypeVar, NewType)) or _is_type_alias(tp):
        return tp.__name__
    if get_origin(tp) is None and isinstance(tp, type):
        return tp.__qualname__
    return repr(tp).replace("typing.", "")


def permits_absence(tp: Any) -> bool:
    """Check whether ``None`` is a legitimate value of ``tp``.

    True for ``None``, ``NoneType``, ``Any``, ``object``, optional types and
    unions with an absence-permitting member, literals containing ``None``,
    and annotated types, new types or ``type`` aliases wrapping one of these.
    A ``TypeVar`` permits absence when it is unbound and unconstrained (its
    implicit bound is ``object``), when its bound permits absence, or when
    any of its constraints does.

    A union such as ``Optional["Widget"]`` permits absence through its
    ``None`` member even though ``"Widget"`` cannot be evaluated.

    Raises:
        TypeError: If the answer depends on a forward reference
    """
    if tp is None or tp is NoneType or tp is Any or tp is object:
        return True
    if _is_forward_ref(tp):
        raise _forward_ref_error(tp)
    if isinstance(tp, TypeVar):
        if tp.__constraints__:
            return any(permits_absence(c) for c in tp.__constraints__)
        if tp.__bound__ is not None:
            return permits_absence(tp.__bound__)
        return True
    if isinstance(tp, NewType):
        return permits_absence(tp.__supertype__)
    if _is_type_alias(tp):
        return permits_absence(tp.__value__)

    origin = get_origin(tp)
    if origin is Annotated:
        return permits_absence(get_args(tp)[0])
    if origin in _UNION_ORIGINS:
        args = get_args(tp)
        resolved = [arg for arg in args if not _is_forward_ref(arg)]
        if any(permits_absence(arg) for arg in resolved):
            return True
        for arg in args:
            if _is_forward_ref(arg):
                raise _forward_ref_error(arg)
        return False
    if origin is Literal:
        return any(arg is None for arg in get_args(tp))
    if _is_type_alias(origin):
        # Subscripted generic alias, e.g. `MaybeList[int]`
        return permits_absence(origin)
    return False


def is_instance_of(value: Any, tp: Any) -> bool:
    """Runtime membership test for ``value`` against a type form.

    This is the ordinary cast check. It makes no special allowance for
    ``None``: ``None`` belongs to ``tp`` only if ``tp`` says so. Plain
    classes use ``isinstance``, except that ``int`` is accepted where
    ``float`` is expected and ``int``/``float`` where ``complex`` is, as
    type checkers allow.

    Raises:
        TypeError: If ``tp`` is not a supported type form, if a forward
            reference would have to be evaluated, or if ``isinstance``
            itself rejects it (e.g. a protocol that is not
            ``runtime_checkable``)
    """
    if tp is Any or tp is object:
        return True
    if tp is None or tp is NoneType:
        return value is None
    if _is_forward_ref(tp):
        raise _forward_ref_error(tp)
    if isinstance(tp, TypeVar):
        if tp.__constraints__:
            return any(is_instance_of(value, c) for c in tp.__constraints__)
        if tp.__bound__ is not None:
            return is_instance_of(value, tp.__bound__)
        return True
    if isinstance(tp, NewType):
        return is_instance_of(value, tp.__supertype__)
    if _is_type_alias(tp):
        return is_instance_of(value, tp.__value__)

    origin = get_origin(tp)
    if origin is Annotated:
        return is_instance_of(value, get_args(tp)[0])
    if origin in _UNION_ORIGINS:
        args = get_args(tp)
        if any(is_instance_of(value, arg) for arg in args if not _is_forward_ref(arg)):
            return True
        for arg in args:
            if _is_forward_ref(arg):
                raise _forward_ref_error(arg)
        return False
    if origin is Literal:
        # Literal[1] must not accept True, so compare types as well as values
        return any(
            type(value) is type(arg) and value == arg
            for arg in get_args(tp)
        )
    if origin is not None:
        return is_instance_of(value, origin)
    if isinstance(tp, type):
        return isinstance(value, _NUMERIC_PROMOTIONS.get(tp, tp))
    raise TypeError(f"Unsupported cast target: {tp!r}")


__all__ = [
    "NoneType",
    "type_name",
    "permits_absence",
    "is_instance_of",
]

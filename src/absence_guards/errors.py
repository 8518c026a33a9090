"""Guard exceptions."""

from typing import Any, Optional

from .types import type_name as render_type


class AbsenceViolationError(TypeError):
    """Raised when a value that must not be ``None`` turns out to be ``None``.

    There are three forms, one per raise site:

    - ``expression``: a checked expression was ``None``
    - ``argument``: a named parameter was ``None``
    - ``cast``: ``None`` was cast to a type that does not permit it

    Use the classmethod constructors rather than building messages by hand so
    the wording stays stable.
    """

    def __init__(self, message: str, *, kind: str, type_name: str, name: Optional[str] = None):
        super().__init__(message)
        self._message = message
        self._kind = kind
        self._type_name = type_name
        self._name = name

    @property
    def message(self) -> str:
        return self._message

    @property
    def kind(self) -> str:
        return self._kind

    @property
    def type_name(self) -> str:
        return self._type_name

    @property
    def name(self) -> Optional[str]:
        """Parameter name, set for the ``argument`` form only."""
        return self._name

    @classmethod
    def expression(cls, declared: Any) -> "AbsenceViolationError":
        """Error raised by ``check_not_absent``."""
        tn = render_type(declared)
        return cls(
            f"A non-absent-typed expression of type {tn} was absent due to a soundness gap",
            kind="expression",
            type_name=tn,
        )

    @classmethod
    def argument(cls, name: str, declared: Any) -> "AbsenceViolationError":
        """Error raised by ``check_argument_not_absent``."""
        tn = render_type(declared)
        return cls(
            f"The '{name}' parameter of type {tn} was absent due to a soundness gap",
            kind="argument",
            type_name=tn,
            name=name,
        )

    @classmethod
    def cast(cls, target: Any) -> "AbsenceViolationError":
        """Error raised by ``strict_cast``."""
        tn = render_type(target)
        return cls(
            f"An absent value was cast to {tn}",
            kind="cast",
            type_name=tn,
        )

    def __reduce__(self):
        # BaseException rebuilds from self.args alone, which drops the keywords
        return (
            _rebuild,
            (type(self), self._message, self._kind, self._type_name, self._name),
            self.__dict__.copy(),
        )

    def describe(self) -> str:
        return f"{type(self).__name__}: {self._message}"

    def __str__(self) -> str:
        return self._message


def _rebuild(cls, message, kind, type_name, name):
    return cls(message, kind=kind, type_name=type_name, name=name)


class InventoryFormatError(ValueError):
    """Raised when a guard inventory document is malformed."""
    pass


__all__ = ["AbsenceViolationError", "InventoryFormatError"]

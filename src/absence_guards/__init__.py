"""Absence guards - runtime checks for None leaking into non-optional types."""

from .version import GUARDS_VERSION
from .errors import AbsenceViolationError, InventoryFormatError
from .types import type_name, permits_absence, is_instance_of
from .guards import check_not_absent, check_argument_not_absent
from .cast import strict_cast, strict_cast_optional
from .inventory import (
    GUARD_FUNCTIONS,
    GuardCallSite,
    GuardInventory,
    discover_guard_calls,
)

__version__ = GUARDS_VERSION

__all__ = [
    # Version
    "GUARDS_VERSION",
    # Checks
    "check_not_absent",
    "check_argument_not_absent",
    # Casts
    "strict_cast",
    "strict_cast_optional",
    # Errors
    "AbsenceViolationError",
    "InventoryFormatError",
    # Type predicates
    "type_name",
    "permits_absence",
    "is_instance_of",
    # Call-site inventory
    "GUARD_FUNCTIONS",
    "GuardCallSite",
    "GuardInventory",
    "discover_guard_calls",
]

"""Inventory of guard call sites.

The guards are meant to be temporary: once every caller is typed, each
``check_not_absent`` and ``strict_cast`` becomes dead weight and should be
removed. This module finds them.

Discovery uses AST parsing, so scanned files are never imported or executed.
An inventory can be saved to YAML and compared over time to track how much
migration work is left.
"""

import ast
import tokenize
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import yaml
from pydantic import BaseModel as PydanticBaseModel, Field, ValidationError, field_validator

from .errors import InventoryFormatError

PACKAGE_NAME = "absence_guards"

GUARD_FUNCTIONS = (
    "check_not_absent",
    "check_argument_not_absent",
    "strict_cast",
    "strict_cast_optional",
)

# Submodules that define guard functions
_GUARD_MODULES = ("guards", "cast")

# Guard -> (positional index, keyword) of the argument worth recording
_NAME_ARG = {"check_argument_not_absent": (1, "name")}
_TARGET_ARG = {"strict_cast": (1, "target"), "strict_cast_optional": (1, "target")}


class GuardCallSite(PydanticBaseModel):
    """A single call to one of the guards.

    Attributes:
        path: File containing the call
        line: 1-based line of the call
        column: 0-based column of the call
        function: Which guard is called
        parameter: Literal parameter name passed to ``check_argument_not_absent``
        target: Source text of the ``strict_cast`` target type
    """
    path: Path
    line: int = Field(ge=1)
    column: int = Field(ge=0)
    function: str
    parameter: Optional[str] = None
    target: Optional[str] = None

    @field_validator('function')
    def validate_function(cls, v):
        if v not in GUARD_FUNCTIONS:
            raise ValueError(f"function must be one of {GUARD_FUNCTIONS}")
        return v

    @property
    def location(self) -> str:
        return f"{self.path}:{self.line}:{self.column}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for YAML serialization."""
        data = {
            "path": str(self.path),
            "line": self.line,
            "column": self.column,
            "function": self.function,
        }
        if self.parameter is not None:
            data["parameter"] = self.parameter
        if self.target is not None:
            data["target"] = self.target
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GuardCallSite":
        """Create from dictionary (YAML deserialization)."""
        return cls(
            path=Path(data["path"]),
            line=data["line"],
            column=data["column"],
            function=data["function"],
            parameter=data.get("parameter"),
            target=data.get("target"),
        )


def _dotted_name(node: ast.AST) -> Optional[str]:
    """Return ``a.b.c`` for a chain of attribute accesses on a name."""
    parts = []
    current = node
    while isinstance(current, ast.Attribute):
        parts.append(current.attr)
        current = current.value
    if not isinstance(current, ast.Name):
        return None
    parts.append(current.id)
    return '.'.join(reversed(parts))


def _is_guard_module(module: Optional[str]) -> bool:
    return module is not None and (module == PACKAGE_NAME or module.startswith(PACKAGE_NAME + "."))


def _collect_imports(tree: ast.AST) -> Tuple[Dict[str, str], set]:
    """Find local names bound to guard functions and to guard modules.

    Returns:
        (function_aliases, module_aliases) where function_aliases maps a local
        name to the guard it refers to, and module_aliases holds dotted names
        that refer to the package or one of its guard submodules
    """
    function_aliases: Dict[str, str] = {}
    module_aliases = set()

    for node in ast.walk(tree):
        if isinstance(node, ast.ImportFrom) and node.level == 0 and _is_guard_module(node.module):
            for alias in node.names:
                if alias.name == "*":
                    function_aliases.update({name: name for name in GUARD_FUNCTIONS})
                elif alias.name in GUARD_FUNCTIONS:
                    function_aliases[alias.asname or alias.name] = alias.name
                elif node.module == PACKAGE_NAME and alias.name in _GUARD_MODULES:
                    module_aliases.add(alias.asname or alias.name)
        elif isinstance(node, ast.Import):
            for alias in node.names:
                if not _is_guard_module(alias.name):
                    continue
                if alias.asname:
                    module_aliases.add(alias.asname)
                else:
                    # `import absence_guards.cast` binds both names
                    module_aliases.add(alias.name)
                    module_aliases.add(PACKAGE_NAME)

    return function_aliases, module_aliases


def _call_argument(call: ast.Call, position: int, keyword: str) -> Optional[ast.AST]:
    if len(call.args) > position:
        return call.args[position]
    for kw in call.keywords:
        if kw.arg == keyword:
            return kw.value
    return None


def discover_guard_calls(file_path: Path) -> List[GuardCallSite]:
    """Find guard calls in a Python file.

    Calls are recognised when the guard is imported from ``absence_guards``
    (optionally renamed) and called by name, or called as an attribute of
    an imported ``absence_guards`` module. Unrelated functions that happen
    to share a guard's name are ignored.

    Args:
        file_path: Path to Python file to analyze

    Returns:
        Call sites sorted by line and column

    Raises:
        SyntaxError: If the file is not valid Python

    Example:
        >>> discover_guard_calls(Path("models.py"))
        [GuardCallSite(path=PosixPath('models.py'), line=12, column=11,
                       function='strict_cast', parameter=None, target='Widget')]
    """
    file_path = Path(file_path)
    with tokenize.open(file_path) as f:
        tree = ast.parse(f.read(), filename=str(file_path))

    function_aliases, module_aliases = _collect_imports(tree)

    sites = []
    for node in ast.walk(tree):
        if not isinstance(node, ast.Call):
            continue

        function = None
        if isinstance(node.func, ast.Name):
            function = function_aliases.get(node.func.id)
        elif isinstance(node.func, ast.Attribute) and node.func.attr in GUARD_FUNCTIONS:
            if _dotted_name(node.func.value) in module_aliases:
                function = node.func.attr
        if function is None:
            continue

        parameter = None
        if function in _NAME_ARG:
            arg = _call_argument(node, *_NAME_ARG[function])
            if isinstance(arg, ast.Constant) and isinstance(arg.value, str):
                parameter = arg.value

        target = None
        if function in _TARGET_ARG:
            arg = _call_argument(node, *_TARGET_ARG[function])
            if arg is not None:
                target = ast.unparse(arg)

        sites.append(GuardCallSite(
            path=file_path,
            line=node.lineno,
            column=node.col_offset,
            function=function,
            parameter=parameter,
            target=target,
        ))

    return sorted(sites, key=lambda s: (s.line, s.column))


class GuardInventory(PydanticBaseModel):
    """Guard call sites found across a set of files.

    Attributes:
        version: Inventory format version
        sites: Discovered call sites, ordered by file then position
        skipped: Files that could not be parsed
    """
    version: str = "1.0"
    sites: List[GuardCallSite] = Field(default_factory=list)
    skipped: List[Path] = Field(default_factory=list)

    @classmethod
    def scan(cls, paths: Iterable[Union[str, Path]]) -> "GuardInventory":
        """Build an inventory from files and directories.

        Directories are searched recursively for ``*.py`` files. Files that
        fail to parse are recorded in ``skipped`` rather than aborting the
        scan.

        Raises:
            FileNotFoundError: If a path does not exist
        """
        files = []
        for p in paths:
            p = Path(p)
            if not p.exists():
                raise FileNotFoundError(f"No such file or directory: {p}")
            if p.is_dir():
                files.extend(sorted(p.rglob("*.py")))
            else:
                files.append(p)

        inventory = cls()
        for file_path in files:
            try:
                inventory.sites.extend(discover_guard_calls(file_path))
            except (SyntaxError, ValueError, UnicodeDecodeError):
                inventory.skipped.append(file_path)

        inventory.sites.sort(key=lambda s: (str(s.path), s.line, s.column))
        return inventory

    def count_by_function(self) -> Dict[str, int]:
        """Number of call sites per guard, including guards with none."""
        counts = {name: 0 for name in GUARD_FUNCTIONS}
        for site in self.sites:
            counts[site.function] += 1
        return counts

    def remaining(self, path: Optional[Union[str, Path]] = None) -> List[GuardCallSite]:
        """Call sites still present, optionally limited to one file."""
        if path is None:
            return list(self.sites)
        path = Path(path)
        return [site for site in self.sites if site.path == path]

    def save(self, path: Path) -> None:
        """Save inventory to YAML file.

        Args:
            path: Path to YAML file to write
        """
        with open(path, 'w') as f:
            yaml.safe_dump(self.to_dict(), f, sort_keys=False)

    @classmethod
    def load(cls, path: Path) -> "GuardInventory":
        """Load inventory from YAML file.

        Raises:
            InventoryFormatError: If the document is not a valid inventory
        """
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for YAML serialization."""
        return {
            "version": self.version,
            "sites": [site.to_dict() for site in self.sites],
            "skipped": [str(p) for p in self.skipped],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GuardInventory":
        """Create from dictionary (YAML deserialization)."""
        if not isinstance(data, dict):
            raise InventoryFormatError(
                f"Inventory must be a mapping, got {type(data).__name__}"
            )
        try:
            return cls(
                version=str(data.get("version", "1.0")),
                sites=[GuardCallSite.from_dict(s) for s in data.get("sites") or []],
                skipped=[Path(p) for p in data.get("skipped") or []],
            )
        except (KeyError, TypeError, ValidationError) as e:
            raise InventoryFormatError(f"Invalid inventory: {e}") from e


__all__ = [
    "GUARD_FUNCTIONS",
    "GuardCallSite",
    "GuardInventory",
    "discover_guard_calls",
]

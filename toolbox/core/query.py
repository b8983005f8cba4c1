"""
Safe templating for parameterized catalog queries.

Caller input only ever reaches a statement as a bound ``?`` argument. The SQL
text itself is compiled once, when the tool is defined, from literal SQL and a
closed set of fragments:

* :class:`Placeholder` binds a value once.
* :class:`OptionalEqualsFilter` renders ``(COALESCE(?, '') = '' OR col = ?)``:
  an empty value matches every row, anything else requires an exact match.
* :class:`SortCase` renders a ``CASE WHEN ? = 'key' THEN col ... ELSE default
  END`` expression over a fixed enumeration of sort keys. Keys outside the
  enumeration fall through to the default ordering without an error.

:class:`QueryTemplate` records which parameter feeds each ``?`` in textual
order, including the doubled bindings the filter and sort fragments need.
"""

import re
import string
from dataclasses import dataclass
from typing import Any, List, Mapping, Sequence, Tuple, Union

from .exceptions import MissingRequiredParameterError

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_$]*(\.[A-Za-z_][A-Za-z0-9_$]*)?$")
_SORT_KEY = re.compile(r"^[A-Za-z0-9_]+$")


def _check_identifier(value: str, what: str) -> None:
    if not _IDENTIFIER.match(value):
        raise ValueError(f"{what} {value!r} is not a plain SQL identifier")


@dataclass(frozen=True)
class Placeholder:
    """A single bound value."""
    parameter: str

    def sql(self) -> str:
        return "?"

    def bindings(self) -> Tuple[str, ...]:
        return (self.parameter,)


@dataclass(frozen=True)
class OptionalEqualsFilter:
    """Equality filter that is skipped when the bound value is empty or null."""
    column: str
    parameter: str

    def __post_init__(self) -> None:
        _check_identifier(self.column, "filter column")

    def sql(self) -> str:
        return f"(COALESCE(?, '') = '' OR {self.column} = ?)"

    def bindings(self) -> Tuple[str, ...]:
        return (self.parameter, self.parameter)


@dataclass(frozen=True)
class SortCase:
    """
    Caller-selected sort expression over a closed set of keys.

    ``branches`` maps each permitted key to the column it sorts by, in the
    order the branches are tested.
    """
    parameter: str
    branches: Union[Mapping[str, str], Sequence[Tuple[str, str]]]
    default: str

    def __post_init__(self) -> None:
        items = self.branches.items() if isinstance(self.branches, Mapping) else self.branches
        branches = tuple((key, column) for key, column in items)
        if not branches:
            raise ValueError("sort expression needs at least one branch")
        for key, column in branches:
            if not _SORT_KEY.match(key):
                raise ValueError(f"sort key {key!r} must be alphanumeric")
            _check_identifier(column, "sort column")
        _check_identifier(self.default, "default sort column")
        object.__setattr__(self, "branches", branches)

    def keys(self) -> List[str]:
        return [key for key, _ in self.branches]

    def sql(self) -> str:
        whens = "".join(f"\n    WHEN ? = '{key}' THEN {column}" for key, column in self.branches)
        return f"CASE{whens}\n    ELSE {self.default}\n  END"

    def bindings(self) -> Tuple[str, ...]:
        return (self.parameter,) * len(self.branches)

    def effective_column(self, key: Any) -> str:
        """Column the database will sort by for ``key``."""
        for branch_key, column in self.branches:
            if key == branch_key:
                return column
        return self.default


Fragment = Union[Placeholder, OptionalEqualsFilter, SortCase]


class QueryTemplate:
    """A compiled statement plus the parameter feeding each positional ``?``."""

    __slots__ = ("statement", "bindings")

    def __init__(self, statement: str, bindings: Sequence[str]):
        bindings = tuple(bindings)
        if statement.count("?") != len(bindings):
            raise ValueError(
                f"statement has {statement.count('?')} placeholders but {len(bindings)} bindings"
            )
        self.statement = statement
        self.bindings = bindings

    @classmethod
    def build(cls, template: str, **fragments: Fragment) -> "QueryTemplate":
        """
        Compile ``template``, replacing each ``{slot}`` with its fragment.

        Literal braces in the SQL must be doubled, as with ``str.format``.
        """
        parts: List[str] = []
        bindings: List[str] = []
        for literal, field, _, _ in string.Formatter().parse(template):
            parts.append(literal)
            if field is None:
                continue
            try:
                fragment = fragments[field]
            except KeyError:
                raise ValueError(f"no fragment supplied for slot {field!r}")
            parts.append(fragment.sql())
            bindings.extend(fragment.bindings())
        return cls("".join(parts), bindings)

    def bind(self, values: Mapping[str, Any]) -> List[Any]:
        """Positional arguments for the statement, in placeholder order."""
        args = []
        for name in self.bindings:
            if name not in values:
                raise MissingRequiredParameterError(name)
            args.append(values[name])
        return args

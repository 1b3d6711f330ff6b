"""
Request payload checks.

A handler declares an ordered list of `Rule`s; `enforce()` runs them in order
and raises the error of the first rule whose predicate fails. Predicates are
pure and never touch the database.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence

from .errors import ServiceError


def is_string_provided(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def to_number(value: Any) -> float | None:
    """
    Return `value` as a finite float, or None when it is not numeric.

    Accepts ints/floats (not bools) and non-blank numeric strings.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str) and value.strip():
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def is_number_provided(value: Any) -> bool:
    return to_number(value) is not None


@dataclass(frozen=True)
class Rule:
    predicate: Callable[[Mapping[str, Any]], bool]
    error: type[ServiceError]
    message: str | None = None


def enforce(payload: Mapping[str, Any], rules: Sequence[Rule]) -> None:
    for rule in rules:
        if not rule.predicate(payload):
            raise rule.error(rule.message)

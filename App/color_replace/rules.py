"""Copy-on-write editing of rule sets.

A rule set is a tuple of ``ReplacementRule``. None of these helpers mutate
their input, so a snapshot handed to the pipeline never changes under it.
"""

from dataclasses import replace
from typing import Iterable, Tuple

from models import (
    DEFAULT_SOURCE_COLOR,
    DEFAULT_TARGET_COLOR,
    DEFAULT_TOLERANCE,
    ReplacementRule,
)

from .codec import is_valid_color

RuleSet = Tuple[ReplacementRule, ...]


def default_rule() -> ReplacementRule:
    return ReplacementRule(DEFAULT_SOURCE_COLOR, DEFAULT_TARGET_COLOR, DEFAULT_TOLERANCE)


def add_rule(
    rules: Iterable[ReplacementRule], rule: ReplacementRule | None = None
) -> RuleSet:
    """Append a rule (the default white-to-black rule if none given)."""
    return (*rules, rule or default_rule())


def remove_rule(rules: Iterable[ReplacementRule], index: int) -> RuleSet:
    rules = tuple(rules)
    if not -len(rules) <= index < len(rules):
        raise IndexError(f"No rule at index {index}")
    index %= len(rules)
    return rules[:index] + rules[index + 1 :]


def update_rule(rules: Iterable[ReplacementRule], index: int, **changes) -> RuleSet:
    """Replace fields of one rule, e.g. ``update_rule(rules, 0, tolerance=30)``."""
    rules = list(rules)
    rules[index] = replace(rules[index], **changes)
    return tuple(rules)


def move_rule(rules: Iterable[ReplacementRule], index: int, new_index: int) -> RuleSet:
    """Change a rule's position, and with it its priority."""
    rules = list(rules)
    rule = rules.pop(index)
    rules.insert(new_index, rule)
    return tuple(rules)


def parse_rule(text: str) -> ReplacementRule:
    """Parse ``SOURCE:TARGET[:TOLERANCE]``, e.g. ``#FFFFFF:transparent:20``.

    Raises:
        ValueError: If a color does not decode or the tolerance is not 0-100
    """
    parts = [part.strip() for part in text.split(":")]
    if len(parts) not in (2, 3):
        raise ValueError(f"Expected SOURCE:TARGET[:TOLERANCE], got {text!r}")

    source, target = parts[0], parts[1]
    for color in (source, target):
        if not is_valid_color(color):
            raise ValueError(f"Invalid color {color!r} in rule {text!r}")

    tolerance = DEFAULT_TOLERANCE
    if len(parts) == 3:
        try:
            tolerance = int(parts[2])
        except ValueError:
            raise ValueError(f"Tolerance must be an integer, got {parts[2]!r}") from None
        if not 0 <= tolerance <= 100:
            raise ValueError(f"Tolerance must be between 0 and 100, got {tolerance}")

    return ReplacementRule(source, target, tolerance)

"""Rule matching: decide which replacement, if any, applies to a pixel."""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from models import ReplacementRule

from .codec import decode_color
from .distance import color_distance
from .errors import ColorDecodeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledRule:
    """A rule with both colors decoded to RGBA samples."""

    source: "tuple[int, int, int, int]"
    target: "tuple[int, int, int, int]"
    threshold: float  # tolerance / 100

    @property
    def writes_alpha(self) -> bool:
        """Whether firing this rule overwrites alpha.

        AIDEV-NOTE: Alpha changes only when transparency is toggled. An
        opaque-to-opaque swap keeps the pixel's own (possibly partial)
        alpha.
        """
        return self.target[3] == 0 or self.source[3] == 0


def compile_rule(rule: ReplacementRule) -> Optional[CompiledRule]:
    """Decode a rule's colors, or return None if either fails to decode."""
    try:
        source = decode_color(rule.source)
        target = decode_color(rule.target)
    except ColorDecodeError as e:
        logger.debug("Rule %s -> %s does not apply: %s", rule.source, rule.target, e)
        return None
    return CompiledRule(source=source, target=target, threshold=rule.tolerance / 100)


def compile_rules(rules: Iterable[ReplacementRule]) -> "list[CompiledRule]":
    """Decode a rule set, dropping rules that cannot apply.

    Order is preserved since the first firing rule wins.
    """
    compiled = []
    for rule in rules:
        decoded = compile_rule(rule)
        if decoded is None:
            logger.warning("Skipping rule %s -> %s: invalid color", rule.source, rule.target)
            continue
        compiled.append(decoded)
    return compiled


def apply_rule(
    pixel: "tuple[int, int, int, int]", rule: CompiledRule
) -> "tuple[int, int, int, int]":
    """Replacement sample for a pixel that ``rule`` fired on."""
    r, g, b = rule.target[:3]
    alpha = rule.target[3] if rule.writes_alpha else int(pixel[3])
    return (r, g, b, alpha)


def match_pixel(
    pixel: "tuple[int, int, int, int]",
    rules: "Iterable[ReplacementRule | CompiledRule]",
) -> "tuple[int, int, int, int] | None":
    """Find the replacement for one pixel.

    Args:
        pixel: RGBA sample
        rules: Rules in evaluation order, raw or already compiled

    Returns:
        The replacement RGBA sample from the first rule whose source is
        within tolerance, or None if no rule fires
    """
    for rule in rules:
        if not isinstance(rule, CompiledRule):
            rule = compile_rule(rule)
            if rule is None:
                continue

        if color_distance(pixel, rule.source) <= rule.threshold:
            return apply_rule(pixel, rule)

    return None

"""
Window classifier: decides whether a snapshot is a real, user-facing window.

Evaluation order (only the tiers are order-sensitive):
1. Disqualifiers: any match -> False
2. Allow list: any match -> True (stacking level is not checked)
3. Default path, on the normal window level only:
   a. Vetoes: any match -> False
   b. Overrides: any match -> True
4. Otherwise -> False

Classification is pure: no I/O, no hidden state, and missing snapshot fields
never raise. They fail the rules that need them, biasing towards "not a
window" when data is incomplete.
"""

import logging
from typing import Iterable, Optional

from ..constants import NORMAL_WINDOW_LEVEL
from ..models.attributes import WindowAttributes
from ..models.rule import ClassificationRule, ClassificationVerdict, RuleTier
from ..rules import DEFAULT_RULES

logger = logging.getLogger(__name__)


class WindowClassifier:
    """Evaluates a static, ordered classification table.

    Example:
        >>> classifier = WindowClassifier()
        >>> attrs = WindowAttributes(
        ...     window_id=42, size=Size(width=800, height=600), level=0,
        ...     subrole="AXStandardWindow", role="AXWindow", owner_app_id="com.example.anyapp",
        ... )
        >>> classifier.is_actual_window(attrs)
        True
    """

    def __init__(
        self,
        rules: Iterable[ClassificationRule] = DEFAULT_RULES,
        normal_level: int = NORMAL_WINDOW_LEVEL,
    ):
        """Initialize classifier.

        Args:
            rules: Classification rules; order within a tier is kept
            normal_level: Stacking level of regular application windows

        Raises:
            ValueError: If two rules share a name
        """
        self.rules: tuple[ClassificationRule, ...] = tuple(rules)
        self.normal_level = normal_level

        seen = set()
        for rule in self.rules:
            if rule.name in seen:
                raise ValueError(f"Duplicate classification rule: {rule.name}")
            seen.add(rule.name)

        self._by_tier: dict[RuleTier, tuple[ClassificationRule, ...]] = {
            tier: tuple(rule for rule in self.rules if rule.tier == tier)
            for tier in RuleTier
        }

    def with_rules(self, extra: Iterable[ClassificationRule]) -> "WindowClassifier":
        """Return a new classifier with extra rules appended to their tiers."""
        return WindowClassifier(self.rules + tuple(extra), normal_level=self.normal_level)

    def rule(self, name: str) -> Optional[ClassificationRule]:
        return next((rule for rule in self.rules if rule.name == name), None)

    def is_actual_window(self, attrs: WindowAttributes) -> bool:
        return self.classify(attrs).is_window

    def classify(self, attrs: WindowAttributes) -> ClassificationVerdict:
        """Classify a snapshot and report which rule decided."""
        rule = self._first_match(RuleTier.DISQUALIFIER, attrs)
        if rule:
            return self._verdict(attrs, False, rule)

        rule = self._first_match(RuleTier.ALLOW, attrs)
        if rule:
            return self._verdict(attrs, True, rule)

        # Filters out top-level pop-overs and floating windows
        if attrs.level != self.normal_level:
            return self._verdict(attrs, False, reason=f"level {attrs.level} is not the normal window level")

        rule = self._first_match(RuleTier.VETO, attrs)
        if rule:
            return self._verdict(attrs, False, rule)

        rule = self._first_match(RuleTier.OVERRIDE, attrs)
        if rule:
            return self._verdict(attrs, True, rule)

        return self._verdict(attrs, False, reason="no rule accepted the window")

    def _first_match(self, tier: RuleTier, attrs: WindowAttributes) -> Optional[ClassificationRule]:
        for rule in self._by_tier[tier]:
            if rule.matches(attrs):
                return rule
        return None

    def _verdict(
        self,
        attrs: WindowAttributes,
        is_window: bool,
        rule: Optional[ClassificationRule] = None,
        reason: str = "",
    ) -> ClassificationVerdict:
        if rule is not None:
            reason = rule.symptom
        verdict = ClassificationVerdict(
            is_window=is_window,
            tier=rule.tier if rule else None,
            rule=rule.name if rule else None,
            reason=reason,
        )
        logger.debug(
            f"Window {attrs.window_id} ({attrs.owner_app_id}): "
            f"{'window' if is_window else 'not a window'} via {verdict.rule or reason}"
        )
        return verdict


_default_classifier = WindowClassifier()


def is_actual_window(attrs: WindowAttributes) -> bool:
    """Classify with the default rule table."""
    return _default_classifier.is_actual_window(attrs)


def classify_window(attrs: WindowAttributes) -> ClassificationVerdict:
    """Classify with the default rule table, reporting the deciding rule."""
    return _default_classifier.classify(attrs)


def default_classifier() -> WindowClassifier:
    return _default_classifier

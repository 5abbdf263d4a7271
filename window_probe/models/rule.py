"""Classification rule models for the window classifier."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Pattern

from pydantic import BaseModel, ConfigDict

from .attributes import WindowAttributes


class RuleTier(str, Enum):
    """Priority tier of a classification rule.

    Tiers are evaluated in declaration order:
    - DISQUALIFIER: any match -> not a window, before anything else
    - ALLOW: any match -> window, bypassing the stacking level check
    - VETO: any match -> not a window on the default path
    - OVERRIDE: any match -> window on the default path (normal level only)
    """

    DISQUALIFIER = "disqualifier"
    ALLOW = "allow"
    VETO = "veto"
    OVERRIDE = "override"


@dataclass(frozen=True)
class AppMatcher:
    """Matches the owning application identifier.

    Exactly one of exact, prefix or pattern must be set. An unknown
    application identifier never matches.

    Examples:
        >>> AppMatcher(exact="com.colliderli.iina").matches("com.colliderli.iina")
        True
        >>> AppMatcher(prefix="org.mozilla.firefox").matches("org.mozilla.firefoxdeveloperedition")
        True
        >>> AppMatcher(pattern=r"^com\\.jetbrains\\.").matches(None)
        False
    """

    exact: Optional[str] = None
    prefix: Optional[str] = None
    pattern: Optional[str] = None
    _compiled: Optional[Pattern[str]] = field(default=None, init=False, repr=False, compare=False)

    def __post_init__(self):
        """Validate matcher configuration."""
        given = [v for v in (self.exact, self.prefix, self.pattern) if v is not None]
        if len(given) != 1:
            raise ValueError("AppMatcher needs exactly one of exact, prefix or pattern")

        if self.pattern is not None:
            try:
                object.__setattr__(self, "_compiled", re.compile(self.pattern))
            except re.error as e:
                raise ValueError(f"Invalid app id pattern '{self.pattern}': {e}") from e

    def matches(self, app_id: Optional[str]) -> bool:
        if app_id is None:
            return False
        if self.exact is not None:
            return app_id == self.exact
        if self.prefix is not None:
            return app_id.startswith(self.prefix)
        return self._compiled.match(app_id) is not None

    def describe(self) -> str:
        if self.exact is not None:
            return self.exact
        if self.prefix is not None:
            return f"{self.prefix}*"
        return f"/{self.pattern}/"


@dataclass(frozen=True)
class ClassificationRule:
    """Named predicate over a window snapshot.

    Attributes:
        name: Unique rule name
        tier: Priority tier
        condition: Pure predicate over the snapshot
        symptom: Observed behaviour the rule corrects
        app: Restricts the rule to one application; the condition is only
            consulted when the owning application matches
    """

    name: str
    tier: RuleTier
    condition: Callable[[WindowAttributes], bool]
    symptom: str
    app: Optional[AppMatcher] = None

    def __post_init__(self):
        if not self.name:
            raise ValueError("Classification rule needs a name")

    def matches(self, attrs: WindowAttributes) -> bool:
        """Check if this rule applies to the snapshot."""
        if self.app is not None and not self.app.matches(attrs.owner_app_id):
            return False
        return bool(self.condition(attrs))

    def to_json(self) -> dict:
        return {
            "name": self.name,
            "tier": self.tier.value,
            "app": self.app.describe() if self.app else None,
            "symptom": self.symptom,
        }


class ClassificationVerdict(BaseModel):
    """Outcome of classifying one snapshot.

    tier and rule name the deciding rule; both are None when the snapshot
    reached the end of the table without any rule deciding.
    """

    model_config = ConfigDict(frozen=True)

    is_window: bool
    tier: Optional[RuleTier] = None
    rule: Optional[str] = None
    reason: str = ""

    def __bool__(self) -> bool:
        return self.is_window

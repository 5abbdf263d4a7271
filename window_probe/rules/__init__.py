"""Static classification rule table."""

from .app_quirks import ALLOW_LIST, DEFAULT_RULES, DISQUALIFIERS, OVERRIDES, VETOES

__all__ = ["ALLOW_LIST", "DEFAULT_RULES", "DISQUALIFIERS", "OVERRIDES", "VETOES"]

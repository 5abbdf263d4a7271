"""
Window classification table.

The role/subrole/level vocabulary of the accessibility API is a coarse
classification that applications violate in idiosyncratic ways. Rather than
one structural heuristic, the classifier walks this static table of narrow,
named rules. Every per-application rule carries an AppMatcher so it can only
ever change the verdict for its own application.

Background on the vocabulary:
- Some non-windows have title None (OS elements) or subrole None, "AXUnknown"
  (e.g. Bartender) or "AXSystemDialog" (e.g. IntelliJ tooltips)
- Minimized windows and windows of hidden apps have subrole "AXDialog"
- Activity Monitor's main window is briefly "AXDialog" at launch before
  becoming "AXStandardWindow"
"""

from ..constants import (
    MIN_WINDOW_DIMENSION,
    Classification,
    Role,
    STANDARD_SUBROLES,
    Subrole,
)
from ..models.attributes import WindowAttributes
from ..models.rule import AppMatcher, ClassificationRule, RuleTier


def _always(attrs: WindowAttributes) -> bool:
    return True


def _role_is_window(attrs: WindowAttributes) -> bool:
    return attrs.role == Role.WINDOW


def _title_not_empty(attrs: WindowAttributes) -> bool:
    # An absent title is permissive here; only an explicit "" disqualifies
    return attrs.title != ""


def _too_small(attrs: WindowAttributes) -> bool:
    size = attrs.size
    return size is not None and (size.width <= MIN_WINDOW_DIMENSION or size.height <= MIN_WINDOW_DIMENSION)


def _jetbrains_untitled(attrs: WindowAttributes) -> bool:
    return attrs.subrole != Subrole.STANDARD_WINDOW and not attrs.title


def _steam_window(attrs: WindowAttributes) -> bool:
    return _title_not_empty(attrs) and attrs.role is not None


def _android_emulator(attrs: WindowAttributes) -> bool:
    return attrs.has_classification(Classification.ANDROID_EMULATOR) and _title_not_empty(attrs)


DISQUALIFIERS = (
    ClassificationRule(
        name="window-id-sentinel",
        tier=RuleTier.DISQUALIFIER,
        condition=lambda attrs: not attrs.window_id,
        symptom="Windows of apps started hidden at login report window id 0; unknown ids are treated the same",
    ),
    ClassificationRule(
        name="size-unknown",
        tier=RuleTier.DISQUALIFIER,
        condition=lambda attrs: attrs.size is None,
        symptom="Elements without a size are placeholders, not windows",
    ),
    ClassificationRule(
        name="too-small",
        tier=RuleTier.DISQUALIFIER,
        condition=_too_small,
        symptom="Elements of 100px or less in either dimension are system artifacts",
    ),
)

ALLOW_LIST = (
    ClassificationRule(
        name="apple-books",
        tier=RuleTier.ALLOW,
        app=AppMatcher(exact="com.apple.iBooksX"),
        condition=_always,
        symptom="Books animates window creation; new windows start as AXUnknown and off the normal level",
    ),
    ClassificationRule(
        name="apple-keynote",
        tier=RuleTier.ALLOW,
        app=AppMatcher(exact="com.apple.iWork.Keynote"),
        condition=_always,
        symptom="Presentation mode covers the screen with an AXUnknown window instead of real fullscreen",
    ),
    ClassificationRule(
        name="iina",
        tier=RuleTier.ALLOW,
        app=AppMatcher(exact="com.colliderli.iina"),
        condition=_always,
        symptom="Videos can float (level 2) and animations make windows transiently look like non-windows",
    ),
)

VETOES = (
    ClassificationRule(
        name="jetbrains-untitled",
        tier=RuleTier.VETO,
        app=AppMatcher(pattern=r"^com\.(jetbrains\.|google\.android\.studio)"),
        condition=_jetbrains_untitled,
        symptom="JetBrains IDEs create titleless non-windows that pass every structural check",
    ),
    ClassificationRule(
        name="steam-empty-title",
        tier=RuleTier.VETO,
        app=AppMatcher(exact="com.valvesoftware.steam"),
        condition=lambda attrs: attrs.title == "",
        symptom="Steam dropdown menus are reported as windows with an empty title",
    ),
)

OVERRIDES = (
    ClassificationRule(
        name="standard-subrole",
        tier=RuleTier.OVERRIDE,
        condition=lambda attrs: attrs.subrole in STANDARD_SUBROLES,
        symptom="Regular windows and dialogs",
    ),
    ClassificationRule(
        name="openboard",
        tier=RuleTier.OVERRIDE,
        app=AppMatcher(exact="org.oe-f.OpenBoard"),
        condition=_always,
        symptom="Ported app that does not use standard windows",
    ),
    ClassificationRule(
        name="adobe-audition",
        tier=RuleTier.OVERRIDE,
        app=AppMatcher(exact="com.adobe.Audition"),
        condition=lambda attrs: attrs.subrole == Subrole.FLOATING_WINDOW,
        symptom="Main windows report the AXFloatingWindow subrole",
    ),
    ClassificationRule(
        name="steam",
        tier=RuleTier.OVERRIDE,
        app=AppMatcher(exact="com.valvesoftware.steam"),
        condition=_steam_window,
        symptom="All Steam windows are AXUnknown; menus briefly report no role when switching between them",
    ),
    ClassificationRule(
        name="world-of-warcraft",
        tier=RuleTier.OVERRIDE,
        app=AppMatcher(exact="com.blizzard.worldofwarcraft"),
        condition=_role_is_window,
        symptom="Game window has a nonstandard subrole",
    ),
    ClassificationRule(
        name="battle-net-bootstrapper",
        tier=RuleTier.OVERRIDE,
        app=AppMatcher(exact="net.battle.bootstrapper"),
        condition=_role_is_window,
        symptom="Bootstrapper windows are AXUnknown",
    ),
    ClassificationRule(
        name="firefox-fullscreen-video",
        tier=RuleTier.OVERRIDE,
        app=AppMatcher(prefix="org.mozilla.firefox"),
        condition=_role_is_window,
        symptom="Video fullscreened from a non-fullscreen window is AXUnknown",
    ),
    ClassificationRule(
        name="vlc-fullscreen-video",
        tier=RuleTier.OVERRIDE,
        app=AppMatcher(prefix="org.videolan.vlc"),
        condition=_role_is_window,
        symptom="Fullscreen video is AXUnknown",
    ),
    ClassificationRule(
        name="android-emulator",
        tier=RuleTier.OVERRIDE,
        condition=_android_emulator,
        symptom="Emulator windows are nonstandard; its small vertical toolbar has an empty title and is excluded",
    ),
    ClassificationRule(
        name="san-guo-sha",
        tier=RuleTier.OVERRIDE,
        app=AppMatcher(exact="SanGuoShaAirWD"),
        condition=_always,
        symptom="Game window has a nonstandard subrole",
    ),
    ClassificationRule(
        name="dvdfab",
        tier=RuleTier.OVERRIDE,
        app=AppMatcher(exact="com.goland.dvdfab.macos"),
        condition=_always,
        symptom="Main window has a nonstandard subrole",
    ),
    ClassificationRule(
        name="dr-betotte",
        tier=RuleTier.OVERRIDE,
        app=AppMatcher(exact="com.ssworks.drbetotte"),
        condition=_always,
        symptom="Game window has a nonstandard subrole",
    ),
)

DEFAULT_RULES: tuple[ClassificationRule, ...] = DISQUALIFIERS + ALLOW_LIST + VETOES + OVERRIDES

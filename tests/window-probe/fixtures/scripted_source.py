"""Scripted attribute source for testing attribute queries and retries."""

import threading
from typing import Any, Optional

from window_probe.models.attributes import AttributeResult


class ScriptedAttributeSource:
    """Attribute source answering from per-attribute scripts.

    Each script is a sequence of answers consumed one per call; the last
    answer repeats forever. An answer is an AttributeResult, a plain value
    (wrapped as ok) or a callable producing either. Attributes without a
    script are unsupported.

    Example:
        >>> source = ScriptedAttributeSource()
        >>> source.script("AXTitle", AttributeResult.transient(), "Library")
        >>> source.get_attribute("w1", "AXTitle").status
        <AttributeStatus.TRANSIENT_FAILURE: 'transient_failure'>
        >>> source.get_attribute("w1", "AXTitle").value
        'Library'
    """

    def __init__(self, attributes: Optional[dict[str, Any]] = None):
        self._lock = threading.Lock()
        self._scripts: dict[tuple[Any, str], list] = {}
        self.calls: list[tuple[Any, str]] = []
        for name, value in (attributes or {}).items():
            self.script(name, value)

    def script(self, name: str, *answers: Any, handle: Any = None) -> None:
        """Script answers for an attribute (optionally for one handle only)."""
        if not answers:
            raise ValueError("script() needs at least one answer")
        with self._lock:
            self._scripts[(handle, name)] = list(answers)

    def call_count(self, name: str) -> int:
        with self._lock:
            return sum(1 for _, called in self.calls if called == name)

    def get_attribute(self, handle: Any, name: str) -> Any:
        with self._lock:
            self.calls.append((handle, name))
            script = self._scripts.get((handle, name)) or self._scripts.get((None, name))
            if script is None:
                return AttributeResult.unsupported()
            answer = script.pop(0) if len(script) > 1 else script[0]

        if callable(answer):
            answer = answer()
        if isinstance(answer, AttributeResult):
            return answer
        return AttributeResult.ok(answer)

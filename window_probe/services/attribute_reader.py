"""
Named attribute queries on top of an attribute source.

The attribute source answers every call with an AttributeResult. A busy source
answers with a transient failure, which AttributeReader turns into a
TransientFailureError so that the query can be retried by RetryScheduler.
Unsupported attributes resolve to None.
"""

import logging
from typing import Any, Optional, Protocol, Type, TypeVar, runtime_checkable

from pydantic import ValidationError

from ..constants import Attribute
from ..errors import MalformedRequestError
from ..models.attributes import AttributeResult, Point, Size

logger = logging.getLogger(__name__)

T = TypeVar("T")


@runtime_checkable
class AttributeSource(Protocol):
    """External system queried for element attributes.

    Calls may be slow or stall; implementations report a busy system with
    AttributeResult.transient() rather than blocking forever.
    """

    def get_attribute(self, handle: Any, name: str) -> AttributeResult:
        ...


class AttributeReader:
    """Typed named queries for one element handle.

    Example:
        >>> reader = AttributeReader(source, handle)
        >>> reader.subrole()
        'AXStandardWindow'
    """

    def __init__(self, source: AttributeSource, handle: Any):
        """Initialize reader.

        Args:
            source: Attribute source to query
            handle: Opaque element reference passed through to the source
        """
        self.source = source
        self.handle = handle

    def attribute(self, name: str, expected: Optional[Type[T]] = None) -> Optional[T]:
        """Query one attribute.

        Args:
            name: Attribute name
            expected: Expected value type; values of another type resolve to None

        Returns:
            The value, or None if unsupported or of the wrong type

        Raises:
            TransientFailureError: If the source is busy
            MalformedRequestError: If the attribute name is invalid
        """
        if not isinstance(name, str) or not name:
            raise MalformedRequestError(
                f"Attribute name must be a non-empty string, got {name!r}"
            )

        result = self.source.get_attribute(self.handle, name)
        if not isinstance(result, AttributeResult):
            raise MalformedRequestError(
                f"Attribute source returned {type(result).__name__} for {name}, expected AttributeResult",
                context={"attribute": name},
            )

        value = result.unwrap(name)
        if value is None or expected is None:
            return value

        # bool is an int subclass; never let a flag pass as a number
        if isinstance(value, expected) and not (isinstance(value, bool) and expected is not bool):
            return value

        logger.debug(f"Ignoring {name}: expected {expected.__name__}, got {type(value).__name__}")
        return None

    def window_id(self) -> Optional[int]:
        value = self.attribute(Attribute.WINDOW_ID, int)
        if value is not None and value < 0:
            logger.debug(f"Ignoring {Attribute.WINDOW_ID}: negative window id {value}")
            return None
        return value

    def pid(self) -> Optional[int]:
        return self.attribute(Attribute.PID, int)

    def level(self) -> Optional[int]:
        return self.attribute(Attribute.LEVEL, int)

    def position(self) -> Optional[Point]:
        return self._geometry(Attribute.POSITION, Point, ("x", "y"))

    def size(self) -> Optional[Size]:
        return self._geometry(Attribute.SIZE, Size, ("width", "height"))

    def title(self) -> Optional[str]:
        return self.attribute(Attribute.TITLE, str)

    def role(self) -> Optional[str]:
        return self.attribute(Attribute.ROLE, str)

    def subrole(self) -> Optional[str]:
        return self.attribute(Attribute.SUBROLE, str)

    def parent(self) -> Optional[Any]:
        return self.attribute(Attribute.PARENT)

    def children(self) -> Optional[list]:
        return self.attribute(Attribute.CHILDREN, list)

    def windows(self) -> Optional[list]:
        return self.attribute(Attribute.WINDOWS, list)

    def focused_window(self) -> Optional[Any]:
        return self.attribute(Attribute.FOCUSED_WINDOW)

    def close_button(self) -> Optional[Any]:
        return self.attribute(Attribute.CLOSE_BUTTON)

    def is_minimized(self) -> bool:
        """Unknown counts as not minimized."""
        return self.attribute(Attribute.MINIMIZED, bool) is True

    def is_fullscreen(self) -> bool:
        """Unknown counts as not fullscreen."""
        return self.attribute(Attribute.FULLSCREEN, bool) is True

    def app_is_running(self) -> Optional[bool]:
        return self.attribute(Attribute.IS_APPLICATION_RUNNING, bool)

    def _geometry(self, name: str, model: Type[T], keys: tuple[str, str]) -> Optional[T]:
        """Accept a model instance, a 2-tuple or a dict for geometry values."""
        value = self.attribute(name)
        if value is None or isinstance(value, model):
            return value

        if isinstance(value, (tuple, list)) and len(value) == 2:
            value = dict(zip(keys, value))

        if isinstance(value, dict):
            try:
                return model(**value)
            except (ValidationError, TypeError) as e:
                logger.debug(f"Ignoring {name}: {e}")
                return None

        logger.debug(f"Ignoring {name}: unexpected value type {type(value).__name__}")
        return None

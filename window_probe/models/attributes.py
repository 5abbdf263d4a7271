"""
Attribute query results and window attribute snapshots.

All models use Pydantic v2 and are frozen: a snapshot is never mutated in
place, re-querying a window produces a new snapshot.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..errors import TransientFailureError, UnsupportedAttributeError


class AttributeStatus(str, Enum):
    """Outcome of a single call into the attribute source"""
    OK = "ok"
    TRANSIENT_FAILURE = "transient_failure"
    UNSUPPORTED = "unsupported"


class AttributeResult(BaseModel):
    """Value and status returned by the attribute source.

    Example:
        >>> AttributeResult.ok("AXWindow").unwrap()
        'AXWindow'
        >>> AttributeResult.unsupported().unwrap() is None
        True
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    status: AttributeStatus
    value: Any = None

    @model_validator(mode='after')
    def value_only_when_ok(self) -> 'AttributeResult':
        """A failed call never carries a value"""
        if self.status != AttributeStatus.OK and self.value is not None:
            raise ValueError(f"{self.status.value} result cannot carry a value")
        return self

    @classmethod
    def ok(cls, value: Any = None) -> 'AttributeResult':
        return cls(status=AttributeStatus.OK, value=value)

    @classmethod
    def transient(cls) -> 'AttributeResult':
        return cls(status=AttributeStatus.TRANSIENT_FAILURE)

    @classmethod
    def unsupported(cls) -> 'AttributeResult':
        return cls(status=AttributeStatus.UNSUPPORTED)

    @property
    def is_ok(self) -> bool:
        return self.status == AttributeStatus.OK

    def unwrap(self, name: str = "attribute") -> Any:
        """Return the value, treating an unsupported attribute as absent.

        Raises:
            TransientFailureError: If the attribute source was busy
        """
        if self.status == AttributeStatus.TRANSIENT_FAILURE:
            raise TransientFailureError(
                f"Attribute source did not answer for {name}",
                context={"attribute": name},
            )
        if self.status == AttributeStatus.UNSUPPORTED:
            return None
        return self.value

    def require(self, name: str = "attribute") -> Any:
        """Like unwrap(), but an unsupported attribute is an error.

        Raises:
            TransientFailureError: If the attribute source was busy
            UnsupportedAttributeError: If the attribute is not supported
        """
        if self.status == AttributeStatus.UNSUPPORTED:
            raise UnsupportedAttributeError(
                f"{name} is not supported by this element",
                context={"attribute": name},
            )
        return self.unwrap(name)


# ============================================================================
# Geometry
# ============================================================================

class Point(BaseModel):
    """Window position in screen coordinates"""
    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class Size(BaseModel):
    """Window size"""
    model_config = ConfigDict(frozen=True)

    width: float = Field(ge=0)
    height: float = Field(ge=0)


# ============================================================================
# Window snapshot
# ============================================================================

class WindowAttributes(BaseModel):
    """Point-in-time snapshot of a window's queried attributes.

    Every field except owner_classifications is optional because each one is
    queried independently and any query can fail or time out. None always
    means "unknown", never "false". title distinguishes None (absent) from
    "" (present but empty).

    window_id == 0 is the sentinel the window server uses for elements that
    are not real windows.
    """

    model_config = ConfigDict(frozen=True)

    window_id: Optional[int] = Field(None, ge=0)
    size: Optional[Size] = None
    level: Optional[int] = None
    title: Optional[str] = None
    subrole: Optional[str] = None
    role: Optional[str] = None
    owner_app_id: Optional[str] = None
    owner_is_running: Optional[bool] = None
    owner_classifications: frozenset[str] = Field(default_factory=frozenset)

    @field_validator('size', mode='before')
    @classmethod
    def size_from_pair(cls, v: Any) -> Any:
        """Accept (width, height) pairs"""
        if isinstance(v, (tuple, list)) and len(v) == 2:
            return {"width": v[0], "height": v[1]}
        return v

    def has_classification(self, classification: str) -> bool:
        """Check if the owning application carries a registry classification"""
        return classification in self.owner_classifications

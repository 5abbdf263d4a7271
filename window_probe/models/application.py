"""Running application models used by the application registry."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RunningState(str, Enum):
    """Lifecycle state of an application process"""
    LAUNCHING = "launching"
    RUNNING = "running"
    TERMINATED = "terminated"
    UNKNOWN = "unknown"


class RunningApplication(BaseModel):
    """A running application process as seen by the application registry.

    Attributes:
        pid: Process ID
        bundle_id: Stable application identifier (None for unbundled processes)
        name: Display name
        executable_path: Path of the process executable
        state: Lifecycle state
        classifications: Registry classifications (e.g. "android-emulator")
    """

    model_config = ConfigDict(frozen=True)

    pid: int = Field(..., gt=0)
    bundle_id: Optional[str] = None
    name: str = ""
    executable_path: Optional[str] = None
    state: RunningState = RunningState.RUNNING
    classifications: frozenset[str] = Field(default_factory=frozenset)

    @field_validator('bundle_id')
    @classmethod
    def bundle_id_not_blank(cls, v: Optional[str]) -> Optional[str]:
        """Treat a blank identifier as missing"""
        if v is not None and not v.strip():
            return None
        return v

    @property
    def is_running(self) -> bool:
        return self.state in (RunningState.LAUNCHING, RunningState.RUNNING)

"""
Record data models for the Folder Priority skill.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Record id used when the payload does not carry one
PLACEHOLDER_RECORD_ID = "1"


class PayloadShape(str, Enum):
    """Which inbound payload shape a batch was normalized from."""
    ENVELOPE = "envelope"
    BARE_OBJECT = "bare_object"


@dataclass
class Record:
    """One document in a batch."""
    record_id: str
    data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class NormalizedBatch:
    """Canonical batch produced from any accepted payload shape."""
    shape: PayloadShape
    records: List[Record] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.records)


class SkillRequestRecord(BaseModel):
    """One entry of the skill ``values`` array."""
    model_config = ConfigDict(populate_by_name=True)

    record_id: Optional[str] = Field(None, alias="recordId", description="Record ID")
    data: Optional[Dict[str, Any]] = Field(None, description="Record fields")

    @field_validator("record_id", mode="before")
    @classmethod
    def _stringify_record_id(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class SkillRequest(BaseModel):
    """Skill request envelope."""
    values: List[SkillRequestRecord] = Field(default_factory=list)


class SkillResponseRecord(BaseModel):
    """One entry of the skill response ``values`` array."""
    model_config = ConfigDict(populate_by_name=True)

    record_id: str = Field(..., alias="recordId")
    data: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_record(cls, record: Record) -> "SkillResponseRecord":
        return cls(record_id=record.record_id, data=record.data)


class SkillResponse(BaseModel):
    """Skill response envelope."""
    values: List[SkillResponseRecord] = Field(default_factory=list)

    @classmethod
    def from_records(cls, records: List[Record]) -> "SkillResponse":
        return cls(values=[SkillResponseRecord.from_record(record) for record in records])

"""
Rule data models for the Folder Priority skill.
"""

from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from shared.config import BaseConfig


# Priority given to rules whose value cannot be parsed, and to records when
# no default is configured.
UNRANKED_PRIORITY = 9999

# Priority returned by segment decoding when the path carries no usable code.
SEGMENT_SENTINEL_PRIORITY = 999


class ResolutionStrategy(str, Enum):
    """How a path is turned into a priority."""
    SUBSTRING = "substring"
    SEGMENT = "segment"
    AUTO = "auto"


class OutputMode(str, Enum):
    """How the computed priority is attached to an outgoing record."""
    MERGE = "merge"
    REPLACE = "replace"


@dataclass(frozen=True)
class RuleSet:
    """Folder rules plus the default priority, fixed for one batch."""
    rules: Dict[str, int] = field(default_factory=dict)
    default_priority: int = UNRANKED_PRIORITY

    @cached_property
    def ordered_rules(self) -> Tuple[Tuple[str, int], ...]:
        """Rules ordered longest key first; equal lengths keep insertion order."""
        return tuple(sorted(self.rules.items(), key=lambda item: len(item[0]), reverse=True))

    def __len__(self) -> int:
        return len(self.rules)


@dataclass(frozen=True)
class PriorityConfig:
    """Configuration for one invocation, captured before any record is processed."""
    rules: Optional[str] = None
    default_priority: Optional[str] = None
    strategy: ResolutionStrategy = ResolutionStrategy.SUBSTRING
    anchor: Optional[str] = None
    segment_prefix: Optional[str] = None
    segment_sentinel: Optional[str] = None
    output_key: str = "priority"
    output_mode: OutputMode = OutputMode.MERGE

    @classmethod
    def from_settings(cls, settings: BaseConfig) -> "PriorityConfig":
        """Build from service settings, falling back to defaults for unknown enum values."""
        try:
            strategy = ResolutionStrategy(settings.folder_priority_strategy.strip().lower())
        except ValueError:
            strategy = ResolutionStrategy.SUBSTRING

        try:
            output_mode = OutputMode(settings.folder_priority_output_mode.strip().lower())
        except ValueError:
            output_mode = OutputMode.MERGE

        return cls(
            rules=settings.folder_priority_rules,
            default_priority=settings.default_folder_priority,
            strategy=strategy,
            anchor=settings.folder_priority_anchor,
            segment_prefix=settings.folder_priority_segment_prefix,
            segment_sentinel=settings.folder_priority_segment_sentinel,
            output_key=settings.folder_priority_output_key.strip() or "priority",
            output_mode=output_mode,
        )


class RuleView(BaseModel):
    """A single rule as exposed by the diagnostics endpoint."""
    key: str = Field(..., description="Lower-cased folder substring")
    priority: int = Field(..., description="Priority assigned on match")


class RuleSetResponse(BaseModel):
    """Response model for the active rule set."""
    rules: List[RuleView] = Field(default_factory=list, description="Rules, longest key first")
    default_priority: int = Field(..., description="Priority used when no rule matches")
    strategy: ResolutionStrategy
    anchor: Optional[str] = None
    output_key: str
    output_mode: OutputMode

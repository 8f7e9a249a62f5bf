"""
Priority resolution engine for the Folder Priority skill.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from urllib.parse import unquote, urlsplit

from shared.logging import get_logger

from .loader import parse_int
from .models import (
    PriorityConfig, ResolutionStrategy, RuleSet, SEGMENT_SENTINEL_PRIORITY
)

SEGMENT_PREFIX_LENGTH = 4


class PriorityResolver(ABC):
    """Base class for resolvers; ``match`` has no opinion when it returns None."""

    default_priority: int

    @abstractmethod
    def match(self, path: Optional[str]) -> Optional[int]:
        """Return a priority for the path, or None to defer to the default."""

    def resolve(self, path: Optional[str]) -> int:
        """Resolve a path to a priority, never raising."""
        priority = self.match(path)
        if priority is None:
            return self.default_priority
        return priority


class SubstringResolver(PriorityResolver):
    """Longest rule key contained in the path wins."""

    def __init__(self, rule_set: RuleSet):
        self.rule_set = rule_set
        self.default_priority = rule_set.default_priority
        self.logger = get_logger("folder_priority.substring_resolver")

    def match(self, path: Optional[str]) -> Optional[int]:
        if path is None or not path.strip():
            return None

        haystack = path.lower()
        for key, priority in self.rule_set.ordered_rules:
            if key in haystack:
                self.logger.debug("Folder rule matched", key=key, priority=priority)
                return priority

        return None


class SegmentResolver(PriorityResolver):
    """
    Decode the priority from the folder that follows an anchor folder.

    For ``/docs/4142_Guides/41421_Subfolder/file.pdf`` with anchor
    ``4142_Guides`` and prefix ``4142`` the following segment is
    ``41421_Subfolder``; its character after the prefix is ``1`` so the
    priority is ``2``.
    """

    def __init__(
        self,
        anchor: Optional[str],
        prefix: Optional[str] = None,
        sentinel: int = SEGMENT_SENTINEL_PRIORITY,
    ):
        self.anchor = (anchor or "").strip()
        if prefix is None or not prefix.strip():
            prefix = self.anchor[:SEGMENT_PREFIX_LENGTH]
        self.prefix = prefix.strip()
        self.default_priority = sentinel
        self.logger = get_logger("folder_priority.segment_resolver")

    def segments(self, path: str) -> List[str]:
        """Percent-decoded, non-empty path segments of a URI or plain path."""
        parts = urlsplit(path.strip())
        return [unquote(segment) for segment in parts.path.split("/") if segment]

    def match(self, path: Optional[str]) -> Optional[int]:
        if not self.anchor or path is None or not path.strip():
            return None

        try:
            segments = self.segments(path)
        except ValueError as e:
            self.logger.debug("Path is not a valid URI", path=path, error=str(e))
            return None

        anchor = self.anchor.lower()
        for index, segment in enumerate(segments):
            if segment.lower() == anchor:
                if index + 1 >= len(segments):
                    self.logger.debug("Anchor folder has no following segment", path=path)
                    return None
                return self._decode(segments[index + 1])

        return None

    def _decode(self, segment: str) -> Optional[int]:
        prefix_length = len(self.prefix)
        if len(segment) <= prefix_length or not segment.lower().startswith(self.prefix.lower()):
            return None

        code = segment[prefix_length]
        if not ("0" <= code <= "9"):
            return None
        return int(code) + 1


class FallbackResolver(PriorityResolver):
    """Ask the primary resolver first, then the secondary one."""

    def __init__(self, primary: PriorityResolver, secondary: PriorityResolver):
        self.primary = primary
        self.secondary = secondary
        self.default_priority = secondary.default_priority

    def match(self, path: Optional[str]) -> Optional[int]:
        priority = self.primary.match(path)
        if priority is not None:
            return priority
        return self.secondary.match(path)


def build_resolver(config: PriorityConfig, rule_set: RuleSet) -> PriorityResolver:
    """Create the resolver selected by the invocation's configuration."""
    if config.strategy == ResolutionStrategy.SUBSTRING:
        return SubstringResolver(rule_set)

    sentinel = parse_int(config.segment_sentinel)
    segment = SegmentResolver(
        anchor=config.anchor,
        prefix=config.segment_prefix,
        sentinel=SEGMENT_SENTINEL_PRIORITY if sentinel is None else sentinel,
    )
    if config.strategy == ResolutionStrategy.SEGMENT:
        return segment

    return FallbackResolver(segment, SubstringResolver(rule_set))

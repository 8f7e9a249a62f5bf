"""
Rule loading for the Folder Priority skill.

Rules arrive as a single string, e.g. ``"41420_:1;41421_:2;Manuals:5"``:
entries are separated by ``;`` and each entry is ``key:priority``. Parsing
never raises; problems are logged and degrade to the unranked priority.
"""

import re
from typing import Dict, Optional

from shared.logging import get_logger

from .models import PriorityConfig, RuleSet, UNRANKED_PRIORITY

logger = get_logger("folder_priority.rule_loader")

ENTRY_SEPARATOR = ";"
KEY_SEPARATOR = ":"

_INTEGER_RE = re.compile(r"^[+-]?\d+$")


def parse_int(raw: Optional[str]) -> Optional[int]:
    """Parse a plain base-10 integer, returning None when it is not one."""
    if raw is None:
        return None
    value = raw.strip()
    if not _INTEGER_RE.match(value):
        return None
    return int(value)


def parse_rules(raw: Optional[str]) -> Dict[str, int]:
    """
    Parse a rule string into a mapping of lower-cased key to priority.

    - Empty entries are dropped.
    - Entries are split on the first ``:`` only; key and value are trimmed.
    - An entry without ``:`` or with a non-integer value keeps its key with
      ``UNRANKED_PRIORITY``.
    - Duplicate keys (after lower-casing): the last occurrence wins.
    """
    if raw is None or not raw.strip():
        logger.warning("Folder priority rules not configured")
        return {}

    rules: Dict[str, int] = {}
    for entry in raw.split(ENTRY_SEPARATOR):
        if not entry.strip():
            continue

        key, sep, value = entry.partition(KEY_SEPARATOR)
        key = key.strip().lower()
        if not key:
            logger.warning("Skipping folder priority rule without key", entry=entry)
            continue

        priority = parse_int(value) if sep else None
        if priority is None:
            logger.warning(
                "Folder priority rule has no integer priority",
                key=key,
                value=value.strip() if sep else None,
                fallback=UNRANKED_PRIORITY,
            )
            priority = UNRANKED_PRIORITY

        if key in rules:
            logger.warning(
                "Duplicate folder priority rule overrides earlier entry",
                key=key,
                previous=rules[key],
                priority=priority,
            )
        rules[key] = priority

    return rules


def parse_default_priority(raw: Optional[str]) -> int:
    """Parse the default priority; missing or invalid values give ``UNRANKED_PRIORITY``."""
    value = parse_int(raw)
    if value is None:
        if raw is not None and raw.strip():
            logger.warning("Invalid default folder priority", value=raw, fallback=UNRANKED_PRIORITY)
        return UNRANKED_PRIORITY
    return value


def load_rule_set(config: PriorityConfig) -> RuleSet:
    """Build the rule set for one invocation."""
    rule_set = RuleSet(
        rules=parse_rules(config.rules),
        default_priority=parse_default_priority(config.default_priority),
    )
    logger.debug(
        "Folder priority rules loaded",
        rule_count=len(rule_set),
        default_priority=rule_set.default_priority,
    )
    return rule_set

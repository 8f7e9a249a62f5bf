"""
Per-batch priority assignment for the Folder Priority skill.
"""

from dataclasses import dataclass
from typing import Optional

from shared.logging import get_logger

from .records.extractor import PathExtractor
from .records.models import NormalizedBatch, Record
from .rules.engine import PriorityResolver
from .rules.models import OutputMode, RuleSet


@dataclass
class ProcessingSummary:
    """Outcome counts for one batch."""
    matched: int = 0
    defaulted: int = 0
    no_path: int = 0

    @property
    def total(self) -> int:
        return self.matched + self.defaulted + self.no_path


class BatchProcessor:
    """Attach a priority to every record of a batch, in input order."""

    def __init__(
        self,
        rule_set: RuleSet,
        resolver: PriorityResolver,
        extractor: Optional[PathExtractor] = None,
        output_key: str = "priority",
        output_mode: OutputMode = OutputMode.MERGE,
    ):
        self.rule_set = rule_set
        self.resolver = resolver
        self.extractor = extractor or PathExtractor()
        self.output_key = output_key
        self.output_mode = output_mode
        self.logger = get_logger("folder_priority.processor")

    def process(self, batch: NormalizedBatch) -> ProcessingSummary:
        """Assign priorities in place and return outcome counts."""
        summary = ProcessingSummary()

        for record in batch.records:
            path = self.extractor.extract(record.data)
            if path is None or not path.strip():
                self.logger.info(
                    "No path field found in record, using default priority",
                    record_id=record.record_id,
                    default_priority=self.rule_set.default_priority,
                )
                self._attach(record, self.rule_set.default_priority)
                summary.no_path += 1
                continue

            priority = self.resolver.match(path)
            if priority is None:
                priority = self.resolver.default_priority
                summary.defaulted += 1
            else:
                summary.matched += 1

            self._attach(record, priority)
            self.logger.info(
                "Record path resolved",
                record_id=record.record_id,
                path=path,
                priority=priority,
            )

        return summary

    def _attach(self, record: Record, priority: int) -> None:
        if self.output_mode == OutputMode.REPLACE:
            record.data = {self.output_key: priority}
        else:
            record.data[self.output_key] = priority

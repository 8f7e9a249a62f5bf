"""
Folder Priority skill service.

Custom skill for a search indexing pipeline: every record in a batch gets a
priority derived from the folders in its storage path.
"""

from typing import Callable, Optional

from fastapi import Request
from fastapi.responses import PlainTextResponse

from shared.base_service import BaseService
from shared.config import get_config
from shared.errors import PayloadParseError

from .processing import BatchProcessor
from .records.extractor import PathExtractor
from .records.models import SkillResponse
from .records.normalizer import normalize
from .rules.engine import build_resolver
from .rules.loader import load_rule_set
from .rules.models import PriorityConfig, RuleSetResponse, RuleView

SERVICE_NAME = "folder_priority"
SERVICE_PORT = 8020


class FolderPriorityService(BaseService):
    """Folder priority skill implementation."""

    def __init__(self, config_provider: Optional[Callable[[], PriorityConfig]] = None):
        super().__init__(SERVICE_NAME, SERVICE_PORT)

        # Configuration is read again for every request so rule changes
        # apply without a restart.
        self.config_provider = config_provider or self._config_from_environment
        self.extractor = PathExtractor()

        self._setup_folder_priority_routes()

    def _config_from_environment(self) -> PriorityConfig:
        return PriorityConfig.from_settings(get_config(SERVICE_NAME, SERVICE_PORT))

    def _setup_folder_priority_routes(self):
        """Set up folder priority routes."""

        @self.app.exception_handler(PayloadParseError)
        async def payload_parse_error_handler(request: Request, exc: PayloadParseError):
            """Reject bodies that cannot be normalized into a batch."""
            self.logger.warning(
                "Request body was not JSON or could not be parsed into a record",
                code=exc.code,
                details=exc.details
            )
            self.metrics.increment_counter("skill_payload_rejections_total")
            self.metrics.record_error(exc.code)
            return PlainTextResponse(exc.message, status_code=400)

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": SERVICE_NAME,
                "message": "Search skills - Folder Priority Service",
                "version": "1.0.0",
                "capabilities": ["substring_rules", "segment_decoding", "single_object_payloads"]
            }

        @self.app.post("/api/folder-priority")
        async def extract_folder_priority(request: Request):
            """Assign a folder priority to every record of a skill batch."""
            body = await request.body()
            self.logger.debug("Request body", body=body.decode("utf-8", errors="replace"))

            batch = normalize(body)

            config = self.config_provider()
            rule_set = load_rule_set(config)
            processor = BatchProcessor(
                rule_set=rule_set,
                resolver=build_resolver(config, rule_set),
                extractor=self.extractor,
                output_key=config.output_key,
                output_mode=config.output_mode,
            )

            with self.metrics.time_operation("skill_batch_duration_seconds"):
                summary = processor.process(batch)

            self.metrics.increment_counter("skill_batches_total", shape=batch.shape.value)
            self.metrics.increment_counter("skill_records_total", summary.matched, outcome="matched")
            self.metrics.increment_counter("skill_records_total", summary.defaulted, outcome="defaulted")
            self.metrics.increment_counter("skill_records_total", summary.no_path, outcome="no_path")
            self.metrics.record_business_event("folder_priority_batch")

            self.logger.info(
                "Folder priority batch completed",
                shape=batch.shape.value,
                records=summary.total,
                matched=summary.matched,
                defaulted=summary.defaulted,
                no_path=summary.no_path,
                strategy=config.strategy.value,
            )

            return SkillResponse.from_records(batch.records).model_dump(by_alias=True)

        @self.app.get("/api/folder-priority/rules", response_model=RuleSetResponse)
        async def get_rules():
            """Show the rule set the next batch would be resolved with."""
            config = self.config_provider()
            rule_set = load_rule_set(config)
            return RuleSetResponse(
                rules=[RuleView(key=key, priority=priority) for key, priority in rule_set.ordered_rules],
                default_priority=rule_set.default_priority,
                strategy=config.strategy,
                anchor=config.anchor,
                output_key=config.output_key,
                output_mode=config.output_mode,
            )


def create_app(config_provider: Optional[Callable[[], PriorityConfig]] = None):
    """Create folder priority service application."""
    service = FolderPriorityService(config_provider)
    return service.app


if __name__ == "__main__":
    service = FolderPriorityService()
    service.run()

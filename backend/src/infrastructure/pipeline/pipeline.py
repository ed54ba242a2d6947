"""Pipeline driver - runs an ordered list of stages for each envelope.

Stages are plain objects implementing ProcessorPort. The driver calls them
in order and stops at the first stage that returns a failure Result or
raises StageError. Annotations written to ``envelope.values`` by one stage
are visible to every following stage.
"""

import logging
from typing import Iterable, List

from domain.pipeline.errors import (
    PipelineInitializationError,
    StageError,
)
from domain.pipeline.models import Envelope, Result, SelectTask
from domain.pipeline.ports import ProcessorPort
from observability.metrics import messages_processed_total

logger = logging.getLogger(__name__)


class Pipeline:
    """Ordered chain of processors.

    Example:
        pipeline = Pipeline([HeadersParserProcessor(), GuidFilterProcessor(store)])
        pipeline.initialize()
        result = pipeline.process(envelope, SelectTask.SAVE_MAIL)
    """

    def __init__(self, stages: Iterable[ProcessorPort]):
        self._stages: List[ProcessorPort] = list(stages)
        self._initialized = False

    @property
    def stages(self) -> List[ProcessorPort]:
        return list(self._stages)

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        """Initialize every stage in order.

        Raises:
            PipelineInitializationError: If any stage fails to initialize.
                The pipeline stays inactive.
        """
        for stage in self._stages:
            try:
                stage.initialize()
            except StageError as e:
                logger.error(f"Stage {stage.name} failed to initialize: {e}")
                raise PipelineInitializationError(
                    f"Stage {stage.name} failed to initialize: {e}"
                ) from e
            logger.info(f"Initialized stage {stage.name}")

        self._initialized = True

    def process(self, envelope: Envelope, task: SelectTask) -> Result:
        """Run the envelope through all stages.

        Args:
            envelope: Envelope to process
            task: Task to run

        Returns:
            Result of the last stage run, or the first failure
        """
        result = Result.accepted(envelope.queued_id)

        for stage in self._stages:
            try:
                result = stage.process(envelope, task)
            except StageError as e:
                logger.error(f"Stage {stage.name} failed: {e}", extra={"stage": stage.name})
                messages_processed_total.labels(task=task.value, status="error").inc()
                return Result.temporary_failure(f"Processing failed in {stage.name}")

            if not result.ok:
                logger.warning(
                    f"Stage {stage.name} stopped the pipeline: {result.reply()}",
                    extra={"stage": stage.name},
                )
                messages_processed_total.labels(task=task.value, status="error").inc()
                return result

        messages_processed_total.labels(task=task.value, status="success").inc()
        return result

    def shutdown(self) -> None:
        """Shut down every stage, logging failures."""
        for stage in self._stages:
            try:
                stage.shutdown()
            except Exception as e:
                logger.error(f"Stage {stage.name} failed to shut down: {e}", exc_info=True)
        self._initialized = False

    def __len__(self) -> int:
        return len(self._stages)

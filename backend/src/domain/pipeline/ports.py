"""ProcessorPort interface (Hexagonal Architecture)"""

from abc import ABC, abstractmethod

from .models import Envelope, Result, SelectTask


class ProcessorPort(ABC):
    """Port interface for pipeline stages.

    Stages are invoked in order by the pipeline driver. A stage that wants
    the next stage to run returns an ok Result; returning a 4xx/5xx Result
    or raising StageError stops the run.
    """

    name: str = "processor"

    def initialize(self) -> None:
        """Prepare the stage before the pipeline accepts mail.

        Raises:
            StageInitializationError: If the stage cannot be activated
        """
        return None

    @abstractmethod
    def process(self, envelope: Envelope, task: SelectTask) -> Result:
        """Process one envelope for the given task.

        Args:
            envelope: Envelope being delivered (``values`` may be mutated)
            task: Task the pipeline is executed for

        Returns:
            Result of this stage

        Raises:
            StageError: If the stage failed and the run must stop
        """
        pass

    def shutdown(self) -> None:
        """Release resources owned by the stage."""
        return None

"""Pipeline exceptions."""


class StageError(Exception):
    """A stage failed to process an envelope.

    The pipeline converts it into a temporary failure result.
    """

    def __init__(self, message: str, stage_name: str = ""):
        super().__init__(message)
        self.stage_name = stage_name


class StageInitializationError(StageError):
    """A stage could not be activated (bad configuration, store unreachable)."""
    pass


class PipelineInitializationError(Exception):
    """The pipeline refused to activate because a stage failed to initialize."""
    pass

"""Pipeline domain: envelope model, stage contract and errors."""

from .errors import StageError, StageInitializationError, PipelineInitializationError
from .models import Envelope, Result, SelectTask, IGNORE_KEY, MESSAGE_ID_KEY
from .ports import ProcessorPort

__all__ = [
    "StageError",
    "StageInitializationError",
    "PipelineInitializationError",
    "Envelope",
    "Result",
    "SelectTask",
    "IGNORE_KEY",
    "MESSAGE_ID_KEY",
    "ProcessorPort",
]

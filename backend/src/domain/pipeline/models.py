"""Pipeline domain models - envelope, task selector and stage results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

# Annotation key read by the mail store stage; True means "do not persist".
IGNORE_KEY = "ignore"
MESSAGE_ID_KEY = "message_id"


class SelectTask(str, Enum):
    """Task a pipeline run is executed for.

    SAVE_MAIL: Message data was received and should be persisted
    VALIDATE_RCPT: A recipient is being validated during the SMTP dialogue
    """
    SAVE_MAIL = "SAVE_MAIL"
    VALIDATE_RCPT = "VALIDATE_RCPT"


@dataclass
class Envelope:
    """One inbound message travelling through the pipeline.

    ``values`` is the only field stages are expected to mutate. It carries
    annotations (e.g. the suppression flag) from one stage to the next.
    """

    data: str
    subject: str = ""
    mail_from: str = ""
    rcpt_tos: List[str] = field(default_factory=list)
    remote_ip: str = ""
    helo: str = ""
    queued_id: str = ""
    values: Dict[str, Any] = field(default_factory=dict)

    @property
    def ignored(self) -> bool:
        """True if a stage annotated the envelope as suppressed."""
        return bool(self.values.get(IGNORE_KEY))

    def suppress(self) -> None:
        """Annotate the envelope so downstream storage skips it."""
        self.values[IGNORE_KEY] = True

    def __str__(self) -> str:
        return self.data


@dataclass(frozen=True)
class Result:
    """Outcome of a stage or of a whole pipeline run.

    Codes follow SMTP reply semantics: below 400 the message continues,
    4xx is a temporary failure and 5xx a permanent one.
    """

    code: int = 250
    message: str = "OK"

    @property
    def ok(self) -> bool:
        return self.code < 400

    def reply(self) -> str:
        """Format as an SMTP reply line."""
        return f"{self.code} {self.message}"

    @classmethod
    def accepted(cls, queued_id: Optional[str] = None) -> "Result":
        if queued_id:
            return cls(250, f"OK: queued as {queued_id}")
        return cls(250, "OK")

    @classmethod
    def temporary_failure(cls, message: str = "Temporary error") -> "Result":
        return cls(451, message)

    @classmethod
    def rejected(cls, message: str = "Rejected") -> "Result":
        return cls(550, message)

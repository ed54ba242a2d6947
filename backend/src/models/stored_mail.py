"""StoredMail model - Messages accepted by the pipeline.

One row per message that passed the pipeline without being suppressed.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text

from .base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StoredMail(Base):
    """
    StoredMail model - Raw message plus envelope metadata.

    The raw message is kept as received; ``delivery_header`` is the
    header block as split by the GUID filter tooling, handy for inspection
    without re-parsing.
    """
    __tablename__ = "mail"

    id = Column(Integer, primary_key=True, autoincrement=True)

    queued_id = Column(String(64), nullable=False, index=True)
    message_id = Column(Text, nullable=True)

    mail_from = Column(Text, nullable=True)
    rcpt_to = Column(Text, nullable=True)
    subject = Column(Text, nullable=True)
    remote_ip = Column(String(64), nullable=True)
    helo = Column(Text, nullable=True)

    delivery_header = Column(Text, nullable=True)
    data = Column(Text, nullable=False)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    def __repr__(self):
        return (
            f"<StoredMail(id={self.id}, queued_id={self.queued_id}, "
            f"from={self.mail_from}, subject={self.subject})>"
        )

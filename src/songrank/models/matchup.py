import uuid
from datetime import UTC, datetime

from sqlmodel import Field, SQLModel


class MatchupRecord(SQLModel, table=True):
    """A persisted pairwise vote, used to replay a session."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    session_id: str = Field(index=True)
    sequence_index: int = Field(index=True)
    winner_id: str
    loser_id: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

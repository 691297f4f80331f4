from sqlmodel import SQLModel, Field
from datetime import datetime


class LocalSlot(SQLModel, table=True):
    """One persisted key of client-local state (guest cart, rate cache)."""
    key: str = Field(primary_key=True)
    value: str
    updated_at: datetime = Field(default_factory=datetime.utcnow)

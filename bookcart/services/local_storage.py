from datetime import datetime
from typing import Dict, Optional, Protocol

from sqlmodel import Session

from bookcart.database import build_engine
from bookcart.models.local_slot import LocalSlot


class KeyValueStore(Protocol):
    """Client-local persistent slots holding one JSON blob per key."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class MemoryStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class SqlKeyValueStore:
    """Slots kept in a ``localslot`` table, so they survive restarts."""

    def __init__(self, url: Optional[str] = None, engine=None):
        if engine is None:
            from bookcart.config import settings
            engine = build_engine(url or settings.local_store_url)
        self.engine = engine
        LocalSlot.__table__.create(self.engine, checkfirst=True)

    def get(self, key: str) -> Optional[str]:
        with Session(self.engine) as session:
            slot = session.get(LocalSlot, key)
            return slot.value if slot else None

    def set(self, key: str, value: str) -> None:
        with Session(self.engine) as session:
            slot = session.get(LocalSlot, key)
            if slot:
                slot.value = value
                slot.updated_at = datetime.utcnow()
            else:
                slot = LocalSlot(key=key, value=value)
            session.add(slot)
            session.commit()

    def remove(self, key: str) -> None:
        with Session(self.engine) as session:
            slot = session.get(LocalSlot, key)
            if slot:
                session.delete(slot)
                session.commit()

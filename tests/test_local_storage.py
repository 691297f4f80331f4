from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from bookcart.services.local_storage import MemoryStore, SqlKeyValueStore


def test_memory_store():
    store = MemoryStore()
    store.set("k", "v")
    assert store.get("k") == "v"
    store.remove("k")
    store.remove("k")
    assert store.get("k") is None


def test_sql_store_overwrites_and_removes():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    store = SqlKeyValueStore(engine=engine)

    store.set("guestCart", "[]")
    store.set("guestCart", '[{"id": 1}]')
    assert store.get("guestCart") == '[{"id": 1}]'

    store.remove("guestCart")
    store.remove("guestCart")
    assert store.get("guestCart") is None


def test_sql_store_survives_reopen(tmp_path):
    url = f"sqlite:///{tmp_path / 'local.db'}"
    SqlKeyValueStore(url=url).set("exchange_rates_cache", "{}")
    assert SqlKeyValueStore(url=url).get("exchange_rates_cache") == "{}"

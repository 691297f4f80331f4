from sqlmodel import SQLModel, create_engine, Session
from bookcart.config import settings


def build_engine(url: str, **kwargs):
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        kwargs.setdefault("pool_pre_ping", True)   # checks dead connections
        kwargs.setdefault("pool_recycle", 1800)    # refresh every 30 min
    return create_engine(url, echo=False, **kwargs)


engine = build_engine(settings.database_url)


def create_db_and_tables(bind=None):
    from bookcart.models import book, cart, shipping_rate
    SQLModel.metadata.create_all(bind or engine)


def get_session():
    with Session(engine) as session:
        yield session

from __future__ import annotations

from typing import Iterator

from sqlalchemy import Engine, create_engine, event, make_url
from sqlalchemy.orm import Session, sessionmaker, DeclarativeBase, declared_attr

from .config import settings

# 스케줄러/CLI/API가 같은 SQLite 파일에 동시에 쓰는 경우 잠금 대기 시간(ms)
SQLITE_BUSY_TIMEOUT_MS = 5000


class Base(DeclarativeBase):
    @declared_attr.directive
    def __tablename__(cls) -> str:  # type: ignore[override]
        return cls.__name__.lower()


def is_sqlite_url(url: str) -> bool:
    return url.startswith("sqlite")


def is_memory_sqlite(url: str) -> bool:
    return make_url(url).database in (None, "", ":memory:")


def install_sqlite_pragmas(target: Engine, *, wal: bool = True) -> None:
    """Run the per-connection SQLite pragmas on every new DBAPI connection.

    Foreign keys are off by default in SQLite, so ``ON DELETE SET NULL`` on
    ``transaction.source_recurring_id`` only works with this listener in place.
    """

    @event.listens_for(target, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute(f"PRAGMA busy_timeout={SQLITE_BUSY_TIMEOUT_MS}")
        if wal:
            cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()


def build_engine(url: str) -> Engine:
    if not is_sqlite_url(url):
        return create_engine(url, pool_pre_ping=True)
    eng = create_engine(url, connect_args={"check_same_thread": False})
    # 메모리 DB에는 WAL 모드가 적용되지 않음
    install_sqlite_pragmas(eng, wal=not is_memory_sqlite(url))
    return eng


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

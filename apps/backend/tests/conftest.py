from __future__ import annotations

import os
import tempfile
from typing import Generator, Any

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.database import Base, get_db, install_sqlite_pragmas
from app.main import app
from app import models
from app.seed import seed_defaults


@pytest.fixture(scope="session")
def test_db_url() -> Generator[str, Any, Any]:
    # 사용자 환경을 건드리지 않도록 임시 파일 SQLite 사용
    fd, path = tempfile.mkstemp(prefix="ft_test_", suffix=".sqlite3")
    os.close(fd)
    url = f"sqlite:///{path}"
    yield url
    try:
        os.remove(path)
    except OSError:
        pass


@pytest.fixture(scope="session")
def engine(test_db_url: str):
    eng = create_engine(test_db_url, connect_args={"check_same_thread": False})

    install_sqlite_pragmas(eng)
    Base.metadata.create_all(eng)
    return eng


@pytest.fixture(scope="session")
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture(scope="function")
def db_session(engine, session_factory) -> Generator[Any, Any, Any]:
    session = session_factory()
    # 매 테스트마다 깨끗한 상태: demo user + 공용 기본 카테고리
    seed_defaults(session)
    session.commit()

    try:
        yield session
    finally:
        session.close()
        with engine.begin() as conn:
            for tbl in reversed(Base.metadata.sorted_tables):
                conn.execute(tbl.delete())


@pytest.fixture()
def demo_user(db_session) -> models.User:
    return db_session.query(models.User).filter_by(email="demo@example.com").one()


@pytest.fixture()
def other_user(db_session) -> models.User:
    user = models.User(email="other@example.com", display_name="Other", is_active=True)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture(autouse=True)
def override_dependency(db_session):
    # FastAPI DI override
    def _get_db_override():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = _get_db_override
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
def client(db_session):
    from fastapi.testclient import TestClient
    with TestClient(app) as c:
        yield c


def shared_category(db_session, name: str) -> models.Category:
    return (
        db_session.query(models.Category)
        .filter(models.Category.user_id.is_(None), models.Category.name == name)
        .one()
    )


@pytest.fixture()
def salary_category(db_session) -> models.Category:
    return shared_category(db_session, "Salary")


@pytest.fixture()
def housing_category(db_session) -> models.Category:
    return shared_category(db_session, "Housing")


@pytest.fixture()
def food_category(db_session) -> models.Category:
    return shared_category(db_session, "Food & Dining")

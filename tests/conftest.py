# tests/conftest.py
"""
- 설정 로드 전에 DB를 메모리 SQLite로 바꿔 둔다 (StaticPool로 단일 커넥션 공유)
- 테스트마다 테이블을 새로 만들고 끝나면 지운다
"""

import os

os.environ["DB_URL_OVERRIDE"] = "sqlite:///:memory:"
os.environ.setdefault("ENV", "test")

import pytest
from fastapi.testclient import TestClient

from database.db import Base, SessionLocal, engine, init_db


@pytest.fixture(autouse=True)
def _tables():
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    from main import app

    return TestClient(app)

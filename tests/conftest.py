"""
Pytest 공통 fixture: 테스트마다 독립된 SQLite DB, 세션, 사용자, 가짜 검색 게이트웨이
"""
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from app.core.database import SessionLocal, create_tables, dispose_engine, init_engine
from app.core.signals import ActionSignals
from app.main import app
from app.models.image import Image
from app.models.user import User
from app.services.media_search import get_search_gateway

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


class FakeSearchGateway:
    def __init__(self, public_ids=None):
        self.public_ids = list(public_ids or [])
        self.expressions = []
        self.follow_cursor_calls = []

    def search(self, expression, follow_cursor=True):
        self.expressions.append(expression)
        self.follow_cursor_calls.append(follow_cursor)
        return list(self.public_ids)


class FakeResponse:
    def __init__(self, status_code=200, data=None, text=""):
        self.status_code = status_code
        self._data = data or {}
        self.text = text

    def json(self):
        return self._data


class FakeSession:
    """requests.post 대체: 호출 기록 + 미리 준비된 응답 순서대로 반환"""

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def engine(tmp_path):
    dispose_engine()
    engine = init_engine(f"sqlite:///{tmp_path / 'test.db'}")
    create_tables()
    yield engine
    dispose_engine()


@pytest.fixture
def db(engine):
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def signals():
    return ActionSignals()


@pytest.fixture
def gateway():
    return FakeSearchGateway()


@pytest.fixture
def owner(db):
    user = User(clerk_id="user_owner", first_name="Ada", last_name="Lovelace", email="ada@example.com")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def other_user(db):
    user = User(clerk_id="user_other", first_name="Alan", last_name="Turing", email="alan@example.com")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def image_payload(**overrides):
    payload = {
        "title": "Sunset",
        "transformation_type": "restore",
        "public_id": "imaginify/sunset",
        "secure_url": "https://res.cloudinary.com/demo/image/upload/imaginify/sunset.png",
        "width": 1024,
        "height": 768,
        "config": {"restore": True},
        "color": None,
        "prompt": None,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_image(db):
    """updated_at을 직접 지정해서 정렬 순서를 고정"""

    def _make_image(author, index=0, **overrides):
        fields = image_payload(
            **{
                "title": f"Image {index}",
                "public_id": f"imaginify/image-{index}",
                **overrides,
            }
        )
        image = Image(
            **fields,
            author_id=author.id,
            updated_at=BASE_TIME + timedelta(minutes=index),
        )
        db.add(image)
        db.commit()
        db.refresh(image)
        return image

    return _make_image


@pytest.fixture
def client(engine, gateway):
    app.dependency_overrides[get_search_gateway] = lambda: gateway
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

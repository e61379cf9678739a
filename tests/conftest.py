import pytest
from fastapi.testclient import TestClient

from app.directory import InMemoryDirectory
from app.models import Household, Member


@pytest.fixture
def members():
    return [
        Member(id="alice", name="Alice", email="alice@example.com"),
        Member(id="bob", name="Bob", email="bob@example.com"),
        Member(id="carol", name="Carol", email="carol@example.com"),
    ]


@pytest.fixture
def directory(members):
    return InMemoryDirectory(members)


@pytest.fixture
def household():
    return Household(id="home", name="Home", member_ids=["alice", "bob", "carol"])


@pytest.fixture
def client():
    from app.main import app
    from app.ratelimit import limiter

    limiter.enabled = False
    with TestClient(app) as c:
        yield c
    limiter.enabled = True

import random

import pytest
from fastapi.testclient import TestClient

from fixture_engine.main import app


def make_teams(n: int) -> list[str]:
    """T1..Tn"""
    return [f"T{i}" for i in range(1, n + 1)]


@pytest.fixture(name="client")
def client_fixture():
    """Stateless app: no overrides needed, one client per test"""
    with TestClient(app) as client:
        yield client


@pytest.fixture(name="rng")
def rng_fixture():
    """Seeded generator so shuffles and coin tosses repeat"""
    return random.Random(1234)

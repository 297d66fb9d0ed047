"""Shared fixtures: an in-memory Mongo database and a TestClient bound to it."""

import os

# Cheap hashes for tests; must be set before accounts is imported.
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ.pop("DATABASE_URL", None)

import mongomock
import pytest
from fastapi.testclient import TestClient

from database import ensure_indexes, get_db
from main import app


@pytest.fixture
def mongo_db():
    database = mongomock.MongoClient()["fare_compare_test"]
    ensure_indexes(database)
    return database


@pytest.fixture
def client(mongo_db):
    app.dependency_overrides[get_db] = lambda: mongo_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def pickup():
    return {"name": "MG Road, Bengaluru", "coordinates": {"lat": 12.9756, "lng": 77.6050}}


@pytest.fixture
def dropoff():
    return {"name": "Kempegowda International Airport", "coordinates": {"lat": 13.1986, "lng": 77.7066}}

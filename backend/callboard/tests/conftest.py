import copy
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from callboard.core import database
from callboard.core.database import Base
from callboard.core.deps import get_ringcentral_client
from callboard.main import app
from callboard.models import MissedCall, SmsMessage
from callboard.services.ringcentral_client import (
    CALL_AGGREGATION_PATH,
    CALL_TIMELINE_PATH,
    EXTENSIONS_PATH,
    SMS_AGGREGATION_PATH,
    RingCentralClient,
)

SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

CALL_RECORDS = [
    {
        "key": "201",
        "info": {"extensionNumber": "101", "name": "Alice Smith"},
        "counters": {
            "allCalls": {"valueType": "Values", "values": 12},
            "callsByResponse": {"values": {"answered": 9, "notAnswered": 3}},
            "callsByResult": {"values": {"completed": 9, "missed": 3}},
        },
        "timers": {"allCallsDuration": {"values": 1830.4}},
    },
    {
        "key": "202",
        "info": {"extensionNumber": "102", "name": "Bob Jones"},
        "counters": {
            "allCalls": {"valueType": "Values", "values": 5},
            "callsByResponse": {"values": {"answered": 5, "notAnswered": 0}},
            "callsByResult": {"values": {"completed": 5, "missed": 0}},
        },
        "timers": {"allCallsDuration": {"values": 600}},
    },
    {
        "key": "203",
        "info": {"extensionNumber": "103", "name": "Carol White"},
        "counters": {"allCalls": {"valueType": "Values", "values": 0}},
        "timers": {},
    },
]

SMS_RECORDS = [
    {
        "key": "201",
        "counters": {
            "allMessages": {"values": 7},
            "messagesByDirection": {"values": {"inbound": 4, "outbound": 3}},
        },
    },
    {
        "key": "999",
        "counters": {
            "allMessages": {"values": 2},
            "messagesByDirection": {"values": {"inbound": 2, "outbound": 0}},
        },
    },
]

TIMELINE_RECORDS = [
    {
        "key": "company",
        "points": [
            {"time": "2025-05-01T00:00:00Z", "counters": {"allCalls": {"values": 4}}},
            {"time": "2025-05-03T00:00:00Z", "counters": {"allCalls": {"values": 13}}},
        ],
    }
]

EXTENSIONS = [
    {"id": 201, "contact": {"firstName": "Alice", "lastName": "Smith"}},
    {"id": 205, "contact": {}},
]

MESSAGES = {
    "201": [
        {"id": 1, "direction": "Inbound"},
        {"id": 2, "direction": "Outbound"},
        {"id": 3, "direction": "Inbound"},
    ],
    "205": [],
}


class FakeHttpResponse:
    def __init__(self, payload):
        self._payload = payload

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return copy.deepcopy(self._payload)


class FakeApiResponse:
    def __init__(self, payload):
        self._response = FakeHttpResponse(payload)

    def response(self):
        return self._response


class FakePlatform:
    """Stands in for the RingCentral SDK platform object."""

    def __init__(self):
        self.responses = {
            CALL_AGGREGATION_PATH: {"data": {"records": CALL_RECORDS}},
            SMS_AGGREGATION_PATH: {"data": {"records": SMS_RECORDS}},
            CALL_TIMELINE_PATH: {"data": {"records": TIMELINE_RECORDS}},
            EXTENSIONS_PATH: {"records": EXTENSIONS, "navigation": {}},
        }
        for extension_id, messages in MESSAGES.items():
            path = f"/restapi/v1.0/account/~/extension/{extension_id}/message-store"
            self.responses[path] = {"records": messages, "navigation": {}}
        self.requests = []
        self.login_calls = 0
        self.login_error = None
        self.request_error = None
        self._logged_in = False

    def logged_in(self):
        return self._logged_in

    def login(self, jwt=None):
        self.login_calls += 1
        if self.login_error:
            raise self.login_error
        self._logged_in = True

    def _respond(self, method, path, body, query_params):
        self.requests.append(
            {"method": method, "path": path, "body": body, "query_params": query_params}
        )
        if self.request_error:
            raise self.request_error
        payload = self.responses.get(path, {})
        if callable(payload):
            payload = payload(query_params)
        return FakeApiResponse(payload)

    def get(self, path, query_params=None):
        return self._respond("GET", path, None, query_params)

    def post(self, path, body=None, query_params=None):
        return self._respond("POST", path, body, query_params)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def setup_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean_tables():
    yield
    db = TestingSessionLocal()
    try:
        db.query(MissedCall).delete()
        db.query(SmsMessage).delete()
        db.commit()
    finally:
        db.close()


@pytest.fixture()
def platform():
    return FakePlatform()


@pytest.fixture()
def ringcentral(platform):
    return RingCentralClient(platform, "test-jwt", time_zone="UTC")


@pytest.fixture()
def db_session():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(ringcentral):
    app.dependency_overrides[database.get_db] = override_get_db
    app.dependency_overrides[get_ringcentral_client] = lambda: ringcentral
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

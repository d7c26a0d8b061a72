import itertools
import uuid
from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from marcheurs.config import settings
from marcheurs.core.mailer import EmailDeliveryError, get_mailer
from marcheurs.database.supabase_client import get_admin_supabase, get_service_supabase, get_supabase
from marcheurs.main import app
from marcheurs.modules.auth.service import clear_auth_cache
from marcheurs.modules.notifications.service import clear_sent_events

PUBLIC_URL_BASE = "https://project.supabase.co/storage/v1/object/public"
_clock = itertools.count()


class FakeResult:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    """Just enough of the postgrest builder for the services under test."""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.action = "select"
        self.payload = None
        self.filters = []
        self.ordering = None
        self.window = None
        self.want_count = False

    def select(self, columns="*", count=None):
        self.action = "select"
        self.want_count = count == "exact"
        return self

    def insert(self, payload):
        self.action, self.payload = "insert", payload
        return self

    def update(self, payload):
        self.action, self.payload = "update", payload
        return self

    def delete(self):
        self.action = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def order(self, column, desc=False):
        self.ordering = (column, desc)
        return self

    def limit(self, size):
        self.window = (0, size)
        return self

    def range(self, start, end):
        self.window = (start, end - start + 1)
        return self

    def _matching(self):
        return [row for row in self.db.tables.setdefault(self.table, []) if all(f(row) for f in self.filters)]

    def execute(self):
        if (self.table, self.action) in self.db.failures:
            raise Exception(f"{self.action} on {self.table} failed")
        self.db.calls.append((self.table, self.action))
        rows = self.db.tables.setdefault(self.table, [])

        if self.action == "insert":
            payloads = self.payload if isinstance(self.payload, list) else [self.payload]
            created = [self.db.add(self.table, **dict(p)) for p in payloads]
            return FakeResult([dict(r) for r in created])

        matching = self._matching()
        if self.action == "update":
            for row in matching:
                row.update(self.payload)
            return FakeResult([dict(r) for r in matching])
        if self.action == "delete":
            self.db.tables[self.table] = [r for r in rows if r not in matching]
            return FakeResult([dict(r) for r in matching])

        if self.ordering:
            column, desc = self.ordering
            present = [r for r in matching if r.get(column) is not None]
            missing = [r for r in matching if r.get(column) is None]
            matching = sorted(present, key=lambda r: str(r[column]), reverse=desc) + missing
        count = len(matching)
        if self.window:
            start, size = self.window
            matching = matching[start:start + size]
        return FakeResult([dict(r) for r in matching], count if self.want_count else None)


class FakeBucket:
    def __init__(self, storage, name):
        self.storage = storage
        self.name = name

    def upload(self, path, content, file_options=None):
        if self.name in self.storage.failing_uploads:
            raise Exception("upload refused")
        self.storage.objects[(self.name, path)] = content
        return SimpleNamespace(path=path)

    def remove(self, paths):
        if self.name in self.storage.failing_removals:
            raise Exception("remove refused")
        for path in paths:
            self.storage.objects.pop((self.name, path), None)
        return []

    def get_public_url(self, path):
        return f"{PUBLIC_URL_BASE}/{self.name}/{path}?"


class FakeStorage:
    def __init__(self):
        self.objects = {}
        self.buckets = {"photos", "tracks"}
        self.failing_uploads = set()
        self.failing_removals = set()

    def from_(self, name):
        return FakeBucket(self, name)

    def get_bucket(self, name):
        if name not in self.buckets:
            raise Exception("Bucket not found")
        return SimpleNamespace(name=name)

    def create_bucket(self, name, options=None):
        self.buckets.add(name)
        return {"name": name}


class FakeAuth:
    def __init__(self):
        self.users = {}
        self.otp_requests = []

    def get_user(self, jwt=None):
        if jwt not in self.users:
            raise Exception("invalid JWT")
        return SimpleNamespace(user=self.users[jwt])

    def sign_in_with_otp(self, credentials):
        self.otp_requests.append(credentials)

    def sign_out(self):
        return None


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.failures = set()
        self.calls = []
        self.storage = FakeStorage()
        self.auth = FakeAuth()

    def table(self, name):
        return FakeQuery(self, name)

    def add(self, table, **row):
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", (datetime(2024, 1, 1) + timedelta(seconds=next(_clock))).isoformat())
        self.tables.setdefault(table, []).append(row)
        return row

    def rows(self, table):
        return self.tables.get(table, [])

    def fail(self, table, action):
        self.failures.add((table, action))


class FakeMailer:
    sender_email = "club@example.org"

    def __init__(self):
        self.sent = []
        self.error = None
        self.accepted_before_error = 0

    def send(self, to, subject, html, bcc=None):
        if self.error and len(self.sent) >= self.accepted_before_error:
            raise self.error
        self.sent.append({"to": list(to), "subject": subject, "html": html, "bcc": list(bcc or [])})
        return {"messageId": f"<{len(self.sent)}@brevo>"}

    def refuse(self, after=0):
        self.accepted_before_error = after
        self.error = EmailDeliveryError("Brevo Error", status_code=401, body={"message": "Key not found"})


@pytest.fixture(autouse=True)
def _reset_caches(monkeypatch):
    clear_auth_cache()
    clear_sent_events()
    monkeypatch.setattr(settings, "admin_email", "bureau@example.org")
    monkeypatch.setattr(settings, "site_url", "https://marcheurs.example.org/")
    monkeypatch.setattr(settings, "supabase_url", "https://project.supabase.co")
    monkeypatch.setattr(settings, "webhook_secret", None)
    yield


@pytest.fixture
def db():
    return FakeSupabase()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def client(db, mailer):
    app.dependency_overrides[get_supabase] = lambda: db
    app.dependency_overrides[get_service_supabase] = lambda: db
    app.dependency_overrides[get_admin_supabase] = lambda: db
    app.dependency_overrides[get_mailer] = lambda: mailer
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def login(db):
    """Create a profile plus a session token and return the auth headers."""
    def _login(role="walker", approved=True, completed=True, profile=True, **fields):
        user_id = str(uuid.uuid4())
        email = fields.pop("email", f"{user_id[:8]}@example.org")
        token = f"token-{user_id}"
        db.auth.users[token] = SimpleNamespace(id=user_id, email=email, user_metadata={}, app_metadata={})
        if profile:
            db.add("profiles", id=user_id, email=email, role=role, approved=approved,
                   is_profile_completed=completed, **fields)
        return {"Authorization": f"Bearer {token}"}
    return _login

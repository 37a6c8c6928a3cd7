"""Shared test fixtures."""

import asyncio
import copy
import uuid
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

from src.config.settings import Settings
from src.db.client import get_db
from src.db.models import APPEND_FILE_FN, APPEND_PROMPT_FN, PROJECTS, UNIQUE_VIOLATION, USERS
from src.llm.client import LLMClient, LLMError, get_llm_client
from src.main import create_app

TEST_PASSWORD = "SecureTestPass123"


def _unique_violation(column: str) -> APIError:
    return APIError({
        "code": UNIQUE_VIOLATION,
        "message": f"duplicate key value violates unique constraint on {column}",
        "details": None,
        "hint": None,
    })


class FakeQuery:
    """The subset of the PostgREST query builder the repositories use."""

    def __init__(self, rows: list[dict], unique: tuple[str, ...] = ()):
        self._rows = rows
        self._unique = unique
        self._op = "select"
        self._payload: dict | None = None
        self._filters: list[tuple[str, object]] = []
        self._order: tuple[str, bool] | None = None

    def select(self, *columns, count=None):
        self._op = "select"
        return self

    def insert(self, row: dict):
        self._op, self._payload = "insert", row
        return self

    def update(self, data: dict):
        self._op, self._payload = "update", data
        return self

    def delete(self):
        self._op = "delete"
        return self

    def eq(self, column: str, value):
        self._filters.append((column, value))
        return self

    def order(self, column: str, desc: bool = False):
        self._order = (column, desc)
        return self

    def _matches(self, row: dict) -> bool:
        return all(str(row.get(col)) == str(val) for col, val in self._filters)

    def _check_unique(self, values: dict, skip: list[dict]) -> None:
        for column in self._unique:
            if column not in values:
                continue
            for row in self._rows:
                if row not in skip and row.get(column) == values[column]:
                    raise _unique_violation(column)

    def execute(self):
        if self._op == "insert":
            self._check_unique(self._payload, skip=[])
            now = datetime.now(timezone.utc).isoformat()
            row = {"id": str(uuid.uuid4()), "created_at": now, "updated_at": now, **copy.deepcopy(self._payload)}
            self._rows.append(row)
            return SimpleNamespace(data=[copy.deepcopy(row)], count=1)

        matched = [row for row in self._rows if self._matches(row)]
        if self._op == "update":
            self._check_unique(self._payload, skip=matched)
            for row in matched:
                row.update(copy.deepcopy(self._payload))
        elif self._op == "delete":
            for row in matched:
                self._rows.remove(row)
        elif self._order:
            column, desc = self._order
            matched = sorted(matched, key=lambda r: r.get(column) or "", reverse=desc)

        data = [copy.deepcopy(row) for row in matched]
        return SimpleNamespace(data=data, count=len(data))


class FakeRpc:
    """The append functions from the migration, applied in one step."""

    COLUMNS = {APPEND_PROMPT_FN: "prompts", APPEND_FILE_FN: "files"}

    def __init__(self, rows: list[dict], function: str, params: dict):
        self._rows = rows
        self._column = self.COLUMNS[function]
        self._params = params

    def execute(self):
        data = []
        for row in self._rows:
            if str(row["id"]) == str(self._params["p_project_id"]) and str(row["owner_id"]) == str(self._params["p_owner_id"]):
                row[self._column] = [*row.get(self._column, []), copy.deepcopy(self._params["p_entry"])]
                row["updated_at"] = datetime.now(timezone.utc).isoformat()
                data.append(copy.deepcopy(row))
        return SimpleNamespace(data=data, count=len(data))


class FakeSupabase:
    UNIQUE = {USERS: ("email",)}

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self.tables.setdefault(name, []), unique=self.UNIQUE.get(name, ()))

    def rpc(self, function: str, params: dict) -> FakeRpc:
        return FakeRpc(self.tables.setdefault(PROJECTS, []), function, params)


class FakeLLM(LLMClient):
    """Records every call; replies with `reply` or raises `error`."""

    def __init__(self):
        self.reply = "hello"
        self.usage = {"prompt_tokens": 12, "completion_tokens": 3, "total_tokens": 15}
        self.error: str | None = None
        self.upload_delay = 0.0
        self.calls: list[dict] = []
        self.uploads: list[tuple[str, bytes]] = []
        self._upload_count = 0

    async def generate(self, messages, model, temperature, max_tokens):
        self.calls.append({
            "messages": copy.deepcopy(messages),
            "model": model,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        if self.error:
            raise LLMError(self.error)
        return {"content": self.reply, "finish_reason": "stop", "usage": dict(self.usage)}

    async def upload_file(self, filename, content):
        if self.error:
            raise LLMError(self.error)
        self._upload_count += 1
        file_id = f"file_{self._upload_count}"
        if self.upload_delay:
            await asyncio.sleep(self.upload_delay)
        self.uploads.append((filename, content))
        return {"id": file_id, "filename": filename}


def make_settings(**overrides) -> Settings:
    values = {
        "SUPABASE_URL": "http://localhost:54321",
        "SUPABASE_KEY": "test-service-key",
        "JWT_SECRET": "test-secret-that-is-long-enough-for-hs256",
        "GROQ_API_KEY": "test-groq-key",
        "RATE_LIMIT_MAX_REQUESTS": 10_000,
        **overrides,
    }
    return Settings(_env_file=None, **values)


def build_app(db: FakeSupabase, llm: FakeLLM, **overrides):
    app = create_app(make_settings(**overrides))
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_llm_client] = lambda: llm
    return app


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def fake_db():
    return FakeSupabase()


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def app(fake_db, fake_llm):
    return build_app(fake_db, fake_llm)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def register(client):
    """Register a fresh user and return (auth_header, response data)."""

    def _register(email: str | None = None, password: str = TEST_PASSWORD, name: str = "Test User"):
        email = email or f"test_{uuid.uuid4().hex[:8]}@example.com"
        resp = client.post("/api/auth/register", json={"email": email, "password": password, "name": name})
        assert resp.status_code == 201, resp.text
        data = resp.json()["data"]
        return {"Authorization": f"Bearer {data['token']}"}, data

    return _register


@pytest.fixture
def auth_header(register):
    header, _ = register()
    return header


@pytest.fixture
def project(client, auth_header):
    resp = client.post("/api/projects", json={"name": "P"}, headers=auth_header)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]

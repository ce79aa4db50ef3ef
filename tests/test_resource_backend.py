"""Backend adapter tests: HTTP resource API and Supabase tables."""

from __future__ import annotations

import json
from types import SimpleNamespace

import httpx
import pytest
from postgrest import APIError

from app.schemas.categories import Category
from app.schemas.entries import parse_entry
from app.services.resource_backend import HttpEntryBackend, SupabaseEntryBackend
from app.utils.errors import SyncError

BASE_URL = "https://resources.example.org"


def _backend(handler) -> HttpEntryBackend:
    client = httpx.Client(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    return HttpEntryBackend(client)


def _water():
    return parse_entry(
        Category.WATER,
        {"date": "2026-02-03", "clientName": "Ana Ruiz", "amount": 64.2,
         "accountNumber": "BR-449", "provider": "City of Baker"},
    )


def test_fetch_unwraps_success_envelope() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.path == "/api/resources/water"
        return httpx.Response(200, json={"success": True, "data": [{"id": "w1"}]})

    assert _backend(handler).fetch(Category.WATER) == [{"id": "w1"}]


def test_fetch_accepts_bare_list_and_null_data() -> None:
    assert _backend(lambda request: httpx.Response(200, json=[])).fetch(Category.RENT) == []
    null_data = _backend(lambda request: httpx.Response(200, json={"success": True, "data": None}))
    assert null_data.fetch(Category.RENT) == []


def test_submit_posts_camel_case_payload() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json={"success": True, "data": {**seen["body"], "id": "w9"}})

    ack = _backend(handler).submit(Category.WATER, _water())

    assert ack["id"] == "w9"
    assert seen["body"]["accountNumber"] == "BR-449"
    assert seen["body"]["clientName"] == "Ana Ruiz"
    assert "id" not in seen["body"]


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"error": "boom"}),
        httpx.Response(200, json={"success": False, "error": "sheet locked"}),
        httpx.Response(200, content=b"<html>"),
        httpx.Response(200, json={"unexpected": "shape"}),
    ],
)
def test_fetch_failures_become_sync_errors(response: httpx.Response) -> None:
    with pytest.raises(SyncError) as exc_info:
        _backend(lambda request: response).fetch(Category.WATER)
    assert exc_info.value.retryable


def test_transport_error_becomes_sync_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(SyncError):
        _backend(handler).submit(Category.WATER, _water())


def test_submit_requires_an_object_ack() -> None:
    backend = _backend(lambda request: httpx.Response(200, json={"success": True, "data": []}))
    with pytest.raises(SyncError):
        backend.submit(Category.WATER, _water())


class _Query:
    def __init__(self, table: "_Table", op: str, payload=None) -> None:
        self.table = table
        self.op = op
        self.payload = payload
        self.ordered_by = None

    def order(self, column: str, desc: bool = False) -> "_Query":
        self.ordered_by = (column, desc)
        return self

    def execute(self):
        if self.table.error is not None:
            raise self.table.error
        self.table.calls.append(self)
        if self.op == "select":
            return SimpleNamespace(data=list(self.table.rows))
        return SimpleNamespace(data=self.table.insert_result(self.payload))


class _Table:
    def __init__(self, name: str) -> None:
        self.name = name
        self.rows: list[dict] = []
        self.calls: list[_Query] = []
        self.error: Exception | None = None
        self.acknowledge = True

    def select(self, columns: str) -> _Query:
        return _Query(self, "select")

    def insert(self, payload: dict) -> _Query:
        return _Query(self, "insert", payload)

    def insert_result(self, payload: dict) -> list[dict]:
        if not self.acknowledge:
            return []
        row = {**payload, "id": f"{self.name}-{len(self.rows) + 1}"}
        self.rows.append(row)
        return [row]


class _FakeSupabase:
    def __init__(self) -> None:
        self.tables: dict[str, _Table] = {}

    def table(self, name: str) -> _Table:
        return self.tables.setdefault(name, _Table(name))


def test_supabase_backend_uses_one_table_per_category() -> None:
    client = _FakeSupabase()
    backend = SupabaseEntryBackend(client)

    ack = backend.submit(Category.WATER, _water())
    rows = backend.fetch(Category.WATER)

    table = client.tables["resource_water"]
    assert ack["id"] == "resource_water-1"
    assert ack["account_number"] == "BR-449"
    assert rows == [ack]
    assert table.calls[-1].ordered_by == ("created_at", False)


def test_supabase_unacknowledged_insert_raises() -> None:
    client = _FakeSupabase()
    client.table("resource_rent").acknowledge = False

    with pytest.raises(SyncError):
        SupabaseEntryBackend(client).submit(
            Category.RENT,
            parse_entry(
                Category.RENT,
                {"date": "2026-02-03", "clientName": "Ana Ruiz", "amount": 700,
                 "landlord": "Oak Grove"},
            ),
        )


def test_supabase_api_error_becomes_sync_error() -> None:
    client = _FakeSupabase()
    client.table("resource_water").error = APIError({"message": "permission denied"})

    with pytest.raises(SyncError) as exc_info:
        SupabaseEntryBackend(client).fetch(Category.WATER)

    assert "permission denied" in exc_info.value.message

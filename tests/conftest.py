"""
Pytest configuration for Baserow Bindings.

Provides fixtures for:
- Field and table builders
- A small two-database workspace served by an in-memory Baserow
  (httpx.MockTransport, no network)
- Settings pointing at that instance
- Loading generated binding modules from disk
"""

from __future__ import annotations

import importlib
import importlib.util
import itertools
import json
import os
import re
import sys
import uuid
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from baserow_bindings.codegen.emitter import emit_table
from baserow_bindings.codegen.organizer import ModuleOrganizer
from baserow_bindings.config import Settings, get_settings
from baserow_bindings.domain.models import DatabaseConfig, Table, TableField

BASE_URL = "https://baserow.test/"
TOKEN = "test-token"

SHOP = DatabaseConfig(name="Shop", id=1)
CRM = DatabaseConfig(name="CRM", id=2)

_TABLE_FIELDS = re.compile(r"^/api/database/fields/table/(\d+)/$")
_ROWS = re.compile(r"^/api/database/rows/table/(\d+)/(?:(\d+)/)?$")
_FILTER = re.compile(r"^filter__(field_\d+)__equal$")


class FakeBaserow:
    """
    In-memory Baserow answering the schema and row endpoints.

    Rows are stored in wire form (`field_<id>` keys). Field fetches of tables
    listed in `failing_tables` answer HTTP 500.
    """

    def __init__(self, token: str = TOKEN) -> None:
        self.token = token
        self.tables: List[Dict[str, Any]] = []
        self.fields: Dict[int, List[Dict[str, Any]]] = {}
        self.rows: Dict[int, List[Dict[str, Any]]] = {}
        self.failing_tables: set = set()
        self.fail_table_list = False
        self.requests: List[httpx.Request] = []
        self._row_ids = itertools.count(1)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def add_table(
        self, table_id: int, name: str, database_id: int, fields: List[TableField], order: int = 0
    ) -> None:
        self.tables.append(
            {"id": table_id, "name": name, "order": order, "database_id": database_id}
        )
        self.fields[table_id] = [field.model_dump(mode="json") for field in fields]
        self.rows.setdefault(table_id, [])

    def add_row(self, table_id: int, **values: Any) -> Dict[str, Any]:
        row = {"id": next(self._row_ids), "order": "1.00000000000000000000", **values}
        self.rows.setdefault(table_id, []).append(row)
        return row

    def requests_with(self, method: str) -> List[httpx.Request]:
        return [request for request in self.requests if request.method == method]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.headers.get("Authorization") != f"Token {self.token}":
            return httpx.Response(401, json={"error": "ERROR_INVALID_TOKEN"})

        path = request.url.path
        if path == "/api/database/tables/all-tables/":
            if self.fail_table_list:
                return httpx.Response(503, json={"error": "ERROR_UNAVAILABLE"})
            return httpx.Response(200, json=self.tables)

        match = _TABLE_FIELDS.match(path)
        if match:
            table_id = int(match.group(1))
            if table_id in self.failing_tables:
                return httpx.Response(500, json={"error": "ERROR_SERVER"})
            if table_id not in self.fields:
                return httpx.Response(404, json={"error": "ERROR_TABLE_DOES_NOT_EXIST"})
            return httpx.Response(200, json=self.fields[table_id])

        match = _ROWS.match(path)
        if match:
            table_id = int(match.group(1))
            row_id = match.group(2)
            if request.method == "GET" and row_id is None:
                return self._list_rows(request, table_id)
            if request.method == "POST" and row_id is None:
                return httpx.Response(200, json=self.add_row(table_id, **json.loads(request.content)))
            if request.method == "PATCH" and row_id is not None:
                return self._update_row(request, table_id, int(row_id))

        return httpx.Response(404, json={"error": "ERROR_NOT_FOUND"})

    def _list_rows(self, request: httpx.Request, table_id: int) -> httpx.Response:
        rows = self.rows.get(table_id, [])
        for key, value in request.url.params.items():
            match = _FILTER.match(key)
            if match:
                tag = match.group(1)
                rows = [row for row in rows if row.get(tag) is not None and str(row[tag]) == value]
        size = int(request.url.params.get("size", 100))
        page = int(request.url.params.get("page", 1))
        next_url: Optional[str] = None
        if page * size < len(rows):
            next_url = str(request.url.copy_merge_params({"page": page + 1}))
        return httpx.Response(
            200,
            json={
                "count": len(rows),
                "next": next_url,
                "previous": None,
                "results": rows[(page - 1) * size : page * size],
            },
        )

    def _update_row(self, request: httpx.Request, table_id: int, row_id: int) -> httpx.Response:
        for row in self.rows.get(table_id, []):
            if row["id"] == row_id:
                row.update(json.loads(request.content))
                return httpx.Response(200, json=row)
        return httpx.Response(404, json={"error": "ERROR_ROW_DOES_NOT_EXIST"})


def _field(
    field_id: int,
    name: str,
    type_: str = "text",
    *,
    primary: bool = False,
    table_id: Optional[int] = None,
    **options: Any,
) -> TableField:
    return TableField(
        id=field_id, name=name, type=type_, primary=primary, table_id=table_id, **options
    )


def _table(
    table_id: int,
    name: str,
    fields: Optional[List[TableField]],
    database_id: int = SHOP.id,
    order: int = 0,
) -> Table:
    return Table(id=table_id, name=name, order=order, database_id=database_id, fields=fields)


def _orders_fields() -> List[TableField]:
    return [
        _field(1001, "Order Id", "number", primary=True, table_id=101,
               number_decimal_places=0, number_negative=False),
        _field(1002, "Customer", table_id=101),
        _field(1003, "Status", "single_select", table_id=101, select_options=[
            {"id": 1, "value": "Open", "color": "blue"},
            {"id": 2, "value": "Shipped", "color": "green"},
        ]),
        _field(1004, "Total", "number", table_id=101, number_decimal_places=2),
        _field(1005, "Paid", "boolean", table_id=101),
        _field(1006, "Tags", "multiple_select", table_id=101, select_options=[
            {"id": 3, "value": "Gift", "color": "red"},
            {"id": 4, "value": "Express", "color": "yellow"},
        ]),
        _field(1007, "Items", "link_row", table_id=101),
        _field(1008, "Created", "created_on", table_id=101, read_only=True),
    ]


def _customers_fields() -> List[TableField]:
    return [
        _field(1011, "Name", primary=True, table_id=102),
        _field(1012, "Email", "email", table_id=102),
    ]


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch):
    """
    Keep BASEROW_* variables of the calling shell out of the tests.
    """
    for key in list(os.environ):
        if key.startswith("BASEROW_"):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_field() -> Callable[..., TableField]:
    return _field


@pytest.fixture
def make_table() -> Callable[..., Table]:
    return _table


@pytest.fixture
def orders_table() -> Table:
    return _table(101, "Orders", _orders_fields())


@pytest.fixture
def customers_table() -> Table:
    return _table(102, "Customers", _customers_fields(), order=1)


@pytest.fixture
def fake_baserow() -> FakeBaserow:
    """
    Workspace with two configured databases and one that is not configured.

    Shop (1): Orders (101), Customers (102), Broken (103, no primary field)
    CRM (2): Contacts (201)
    Archive (3): Secret (301)
    """
    fake = FakeBaserow()
    fake.add_table(101, "Orders", SHOP.id, _orders_fields(), order=0)
    fake.add_table(102, "Customers", SHOP.id, _customers_fields(), order=1)
    fake.add_table(103, "Broken", SHOP.id, [_field(1021, "Name", table_id=103)], order=2)
    fake.add_table(201, "Contacts", CRM.id, [_field(2001, "Full Name", primary=True, table_id=201)])
    fake.add_table(301, "Secret", 3, [_field(3001, "Code", primary=True, table_id=301)])
    return fake


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """
    Settings for the fake instance; the target directory is a unique package name.
    """
    return Settings(
        token=TOKEN,
        base_url=BASE_URL,
        target_directory=tmp_path / f"bindings_{uuid.uuid4().hex[:8]}",
        databases=[SHOP, CRM],
        log_level="DEBUG",
    )


@pytest.fixture
def load_source(tmp_path: Path):
    """
    Import generated source from a file under a unique module name.
    """
    loaded: List[str] = []

    def _load(source: str):
        name = f"generated_{uuid.uuid4().hex[:8]}"
        path = tmp_path / f"{name}.py"
        path.write_text(source, encoding="utf-8")
        spec = importlib.util.spec_from_file_location(name, path)
        module = importlib.util.module_from_spec(spec)
        sys.modules[name] = module
        spec.loader.exec_module(module)
        loaded.append(name)
        return module

    yield _load
    for name in loaded:
        sys.modules.pop(name, None)


@pytest.fixture
def import_package(monkeypatch: pytest.MonkeyPatch):
    """
    Import a generated package directory as a top-level package.
    """
    imported: List[str] = []

    def _import(package_dir: Path):
        monkeypatch.syspath_prepend(str(package_dir.parent))
        importlib.invalidate_caches()
        imported.append(package_dir.name)
        return importlib.import_module(package_dir.name)

    yield _import
    for prefix in imported:
        for name in [n for n in sys.modules if n == prefix or n.startswith(f"{prefix}.")]:
            sys.modules.pop(name, None)


@pytest.fixture
def shop_module(orders_table: Table, customers_table: Table, load_source):
    """
    Generated Shop module (Orders and Customers), imported.
    """
    organizer = ModuleOrganizer([SHOP])
    organizer.add(emit_table(orders_table))
    organizer.add(emit_table(customers_table))
    return load_source(organizer.render_unit(SHOP.id))

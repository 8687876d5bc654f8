import os
import uuid

import pytest

from sqlcommands import IntegerField, Model, SqlClient, StringField
from sqlcommands.adapters import ConnectionConfig
from sqlcommands.adapters.postgres import PostgresAdapter


def _require_postgres_client():
    try:
        import psycopg  # noqa: F401
    except ImportError:
        pytest.skip("psycopg driver not installed")
    dsn = os.getenv("SQLCOMMANDS_POSTGRES_DSN")
    if not dsn:
        pytest.skip("SQLCOMMANDS_POSTGRES_DSN not set; skipping Postgres integration test")
    try:
        return SqlClient(PostgresAdapter(), connection_config=ConnectionConfig.from_dsn(dsn))
    except Exception as exc:  # pragma: no cover - environment dependent
        pytest.skip(f"Cannot connect to Postgres for integration test: {exc}")


def test_postgres_roundtrip_and_upsert():
    client = _require_postgres_client()

    class Item(Model):
        class Meta:
            table = f"sqlcommands_pg_{uuid.uuid4().hex[:8]}"

        id = IntegerField(primary_key=True)
        name = StringField()

    try:
        client.create_table(Item)
        assert client.insert(Item(id=1, name="pg-ok"))
        client.upsert(Item(id=1, name="pg-updated"))
        assert client.select_first(Item(id=1)) == Item(id=1, name="pg-updated")
        assert client.delete(Item(id=1)) == 1
    finally:
        client.drop_table(Item)
        client.close()

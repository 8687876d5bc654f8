import pytest

from sqlcommands.adapters import (
    AdapterConfigurationError,
    AdapterConnectionError,
    AdapterExecutionError,
    ConnectionConfig,
    MySQLAdapter,
    OracleAdapter,
    PostgresAdapter,
    SQLServerAdapter,
)
from sqlcommands.adapters import mysql as mysql_module
from sqlcommands.adapters import oracle as oracle_module
from sqlcommands.adapters import postgres as postgres_module
from sqlcommands.adapters import sqlserver as sqlserver_module
from sqlcommands.dialects import MYSQL, ORACLE, POSTGRES, SQLSERVER


class FakeCursor:
    def __init__(self, log):
        self.log = log
        self.rowcount = 1
        self.description = None

    def execute(self, sql, params=None):
        self.log.append((sql, params))

    def close(self):
        pass


class FakeConnection:
    def __init__(self):
        self.log = []
        self.autocommit = False
        self.commits = 0
        self.rollbacks = 0
        self.closed = False

    def cursor(self):
        return FakeCursor(self.log)

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        self.closed = True


class FakeDriver:
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []
        self.connection = FakeConnection()

    def connect(self, *args, **kwargs):
        self.calls.append((args, kwargs))
        if self.fail:
            raise OSError("unreachable")
        return self.connection

    def makedsn(self, host, port, service_name=None):
        return f"{host}:{port}/{service_name}"


@pytest.mark.parametrize(
    ("module", "adapter_cls", "dsn"),
    [
        (postgres_module, PostgresAdapter, "postgresql://u:p@h/db"),
        (mysql_module, MySQLAdapter, "mysql://u:p@h/db"),
        (sqlserver_module, SQLServerAdapter, "mssql://u:p@h/db"),
        (oracle_module, OracleAdapter, "oracle://u:p@h/db"),
    ],
)
def test_missing_driver_raises_configuration_error(monkeypatch, module, adapter_cls, dsn):
    monkeypatch.setattr(module, "_load_driver", lambda: None)
    with pytest.raises(AdapterConfigurationError):
        adapter_cls().connect(ConnectionConfig.from_dsn(dsn))


def test_connect_failure_wrapped(monkeypatch):
    monkeypatch.setattr(postgres_module, "_load_driver", lambda: FakeDriver(fail=True))
    with pytest.raises(AdapterConnectionError):
        PostgresAdapter().connect(ConnectionConfig.from_dsn("postgresql://u:p@h/db"))


def test_adapters_expose_their_dialect():
    assert PostgresAdapter.dialect is POSTGRES
    assert MySQLAdapter.dialect is MYSQL
    assert SQLServerAdapter.dialect is SQLSERVER
    assert OracleAdapter.dialect is ORACLE


def test_postgres_passes_options_and_strips_query(monkeypatch):
    driver = FakeDriver()
    monkeypatch.setattr(postgres_module, "_load_driver", lambda: driver)
    adapter = PostgresAdapter()
    adapter.connect(ConnectionConfig.from_dsn("postgresql://u:p@h/db?timeout=4&autocommit=1"))
    args, kwargs = driver.calls[0]
    assert args == ("postgresql://u:p@h/db",)
    assert kwargs == {"connect_timeout": 4}
    assert driver.connection.autocommit is True


def test_pyformat_execute_validates_and_binds_mapping(monkeypatch):
    driver = FakeDriver()
    monkeypatch.setattr(mysql_module, "_load_driver", lambda: driver)
    driver.connection.autocommit = lambda flag: None
    adapter = MySQLAdapter()
    adapter.connect(ConnectionConfig.from_dsn("mysql://u:p@h:3307/db"))
    assert driver.calls[0][1]["port"] == 3307

    adapter.execute("SELECT * FROM t WHERE a = %(a)s", {"a": 1})
    assert driver.connection.log[-1] == ("SELECT * FROM t WHERE a = %(a)s", {"a": 1})
    with pytest.raises(AdapterExecutionError):
        adapter.execute("SELECT * FROM t WHERE a = %(a)s", {})


def test_begin_statement_only_in_autocommit(monkeypatch):
    driver = FakeDriver()
    monkeypatch.setattr(sqlserver_module, "_load_driver", lambda: driver)
    adapter = SQLServerAdapter()
    adapter.connect(ConnectionConfig.from_dsn("mssql://u:p@h/db"))
    adapter.begin()
    assert driver.connection.log == []

    adapter.connect(ConnectionConfig.from_dsn("mssql://u:p@h/db?autocommit=true"))
    adapter.begin()
    assert driver.connection.log == [("BEGIN TRANSACTION", None)]
    assert driver.calls[-1][1]["autocommit"] is True


def test_oracle_strips_terminator_and_toggles_autocommit(monkeypatch):
    driver = FakeDriver()
    monkeypatch.setattr(oracle_module, "_load_driver", lambda: driver)
    adapter = OracleAdapter()
    adapter.connect(ConnectionConfig.from_dsn("oracle://u:p@h:1521/XEPDB1?autocommit=true"))
    assert driver.calls[0][1]["dsn"] == "h:1521/XEPDB1"

    adapter.begin()
    assert driver.connection.autocommit is False
    adapter.execute('SELECT :id FROM dual;', {"id": 1})
    assert driver.connection.log[-1] == ("SELECT :id FROM dual", {"id": 1})
    adapter.rollback()
    assert driver.connection.autocommit is True
    assert driver.connection.rollbacks == 1


def test_pyformat_execute_always_passes_mapping(monkeypatch):
    driver = FakeDriver()
    monkeypatch.setattr(postgres_module, "_load_driver", lambda: driver)
    adapter = PostgresAdapter()
    adapter.connect(ConnectionConfig.from_dsn("postgresql://u:p@h/db"))
    adapter.execute("SELECT * FROM t WHERE name LIKE 'A%%'")
    assert driver.connection.log[-1] == ("SELECT * FROM t WHERE name LIKE 'A%%'", {})


def test_execute_closes_cursor_when_driver_fails(monkeypatch):
    class BrokenCursor(FakeCursor):
        closed = False

        def execute(self, sql, params=None):
            raise RuntimeError("syntax error")

        def close(self):
            BrokenCursor.closed = True

    driver = FakeDriver()
    driver.connection.cursor = lambda: BrokenCursor(driver.connection.log)
    monkeypatch.setattr(postgres_module, "_load_driver", lambda: driver)
    adapter = PostgresAdapter()
    adapter.connect(ConnectionConfig.from_dsn("postgresql://u:p@h/db"))
    with pytest.raises(RuntimeError):
        adapter.execute("SELEC 1")
    assert BrokenCursor.closed

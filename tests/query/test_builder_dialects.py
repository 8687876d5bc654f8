import pytest

from sqlcommands.commands import SqlFilter
from sqlcommands.core import IntegerField, Model, StringField
from sqlcommands.dialects import DIALECTS, MYSQL, ORACLE, POSTGRES, SQLITE, SQLSERVER, DropTableMode
from sqlcommands.errors import InvalidArgumentError, UnsupportedOperationError
from sqlcommands.query import CommandBuilder


class Person(Model):
    class Meta:
        table = "People"

    id = IntegerField(primary_key=True, auto_increment=True, name="Id")
    name = StringField(name="Name")
    age = IntegerField(name="Age")


class Parity(Model):
    class Meta:
        table = "People"
        order_by = "Age % 2"

    id = IntegerField(primary_key=True, name="Id")
    odd = IntegerField(name="Odd", expression="Age % 2")


@pytest.mark.parametrize(
    ("dialect", "expected"),
    [
        (
            SQLITE,
            'CREATE TABLE "People" ("Id" INTEGER PRIMARY KEY AUTOINCREMENT, "Name" TEXT, "Age" INTEGER);',
        ),
        (
            MYSQL,
            "CREATE TABLE `People` (`Id` BIGINT PRIMARY KEY AUTO_INCREMENT, "
            "`Name` VARCHAR(255), `Age` BIGINT);",
        ),
        (
            POSTGRES,
            'CREATE TABLE "People" ("Id" BIGINT PRIMARY KEY GENERATED BY DEFAULT AS IDENTITY, '
            '"Name" TEXT, "Age" BIGINT);',
        ),
        (
            SQLSERVER,
            "CREATE TABLE [People] ([Id] BIGINT PRIMARY KEY IDENTITY, [Name] NVARCHAR(MAX), [Age] BIGINT);",
        ),
        (
            ORACLE,
            'CREATE TABLE "People" ("Id" NUMBER(19) GENERATED BY DEFAULT AS IDENTITY PRIMARY KEY, '
            '"Name" NVARCHAR2(2000), "Age" NUMBER(19));',
        ),
    ],
    ids=lambda value: getattr(value, "name", ""),
)
def test_create_table_per_dialect(dialect, expected):
    assert CommandBuilder(dialect).create_table(Person).text == expected


def test_pyformat_insert_and_update():
    builder = CommandBuilder("mysql")
    assert builder.insert(Person(name="Ada", age=36)).text == (
        "INSERT INTO `People` (`Name`, `Age`) VALUES (%(name)s, %(age)s);"
    )
    assert builder.update(Person(id=2, age=37)).text == (
        "UPDATE `People` SET `Age` = %(age)s WHERE `Id` = %(id)s;"
    )


def test_postgres_select_with_filter_and_pagination():
    builder = CommandBuilder("postgres")
    command = builder.select(
        Person, filter=SqlFilter('"Age" > %(min_age)s', {"min_age": 18}), offset=5, max_results=10
    )
    assert command.text == (
        'SELECT "Id", "Name", "Age" FROM "People" WHERE ("Age" > %(min_age)s) LIMIT 10 OFFSET 5;'
    )
    assert command.as_mapping() == {"min_age": 18}


def test_sqlserver_select_first_orders_before_fetch():
    assert CommandBuilder("sqlserver").select_first(Person).text == (
        "SELECT [Id], [Name], [Age] FROM [People] ORDER BY (SELECT NULL) "
        "OFFSET 0 ROWS FETCH NEXT 1 ROWS ONLY;"
    )


def test_oracle_select_uses_named_placeholders():
    command = CommandBuilder("oracle").select(Person(id=3), offset=2, max_results=1)
    assert command.text == (
        'SELECT "Id", "Name", "Age" FROM "People" WHERE "Id" = :id '
        "OFFSET 2 ROWS FETCH NEXT 1 ROWS ONLY;"
    )


def test_mysql_unlimited_offset():
    assert CommandBuilder("mysql").select(Person, offset=3).text == (
        "SELECT `Id`, `Name`, `Age` FROM `People` LIMIT 18446744073709551615 OFFSET 3;"
    )


@pytest.mark.parametrize("dialect", [SQLITE, MYSQL, POSTGRES, ORACLE], ids=lambda d: d.name)
def test_safe_drop_is_unsupported(dialect):
    with pytest.raises(UnsupportedOperationError):
        CommandBuilder(dialect).drop_table("People", mode=DropTableMode.SAFE)


def test_sqlserver_safe_drop():
    assert CommandBuilder("sqlserver").drop_table("People", False, DropTableMode.SAFE).text == (
        "IF NOT EXISTS (SELECT 1 FROM [People]) DROP TABLE [People];"
    )


@pytest.mark.parametrize(
    ("dialect", "expected"),
    [
        (MYSQL, "DROP TABLE IF EXISTS `dbo`.`People`;"),
        (POSTGRES, 'DROP TABLE IF EXISTS "dbo"."People";'),
        (SQLSERVER, "DROP TABLE IF EXISTS [dbo].[People];"),
    ],
    ids=lambda value: getattr(value, "name", ""),
)
def test_drop_schema_qualified_table(dialect, expected):
    assert CommandBuilder(dialect).drop_table("dbo.People").text == expected


@pytest.mark.parametrize("dialect", DIALECTS, ids=lambda d: d.name)
def test_unpaged_select_has_no_row_limit(dialect):
    command = CommandBuilder(dialect).select(Person, offset=0, max_results=-1)
    assert command.text.endswith(f"FROM {dialect.format_table('People')};")


@pytest.mark.parametrize("dialect", DIALECTS, ids=lambda d: d.name)
def test_invalid_pagination_is_rejected(dialect):
    builder = CommandBuilder(dialect)
    with pytest.raises(InvalidArgumentError):
        builder.select(Person, offset=-1)
    with pytest.raises(InvalidArgumentError):
        builder.select(Person, offset=-1, max_results=10)
    with pytest.raises(InvalidArgumentError):
        builder.select(Person, max_results=-2)


@pytest.mark.parametrize("dialect", [MYSQL, POSTGRES, SQLSERVER], ids=lambda d: d.name)
def test_pyformat_dialects_double_literal_percent(dialect):
    quote = dialect.quote_identifier
    command = CommandBuilder(dialect).select(Parity(odd=1), filter=SqlFilter("Name LIKE 'A%'"))
    assert command.text == (
        f"SELECT {quote('Id')}, Age %% 2 AS {quote('Odd')} FROM {quote('People')} "
        "WHERE (Age %% 2) = %(odd)s AND (Name LIKE 'A%%') ORDER BY Age %% 2;"
    )
    assert command.as_mapping() == {"odd": 1}


@pytest.mark.parametrize("dialect", [SQLITE, ORACLE], ids=lambda d: d.name)
def test_named_dialects_keep_literal_percent(dialect):
    command = CommandBuilder(dialect).select(Parity(odd=1), filter=SqlFilter("Name LIKE 'A%'"))
    assert command.text == (
        'SELECT "Id", Age % 2 AS "Odd" FROM "People" '
        "WHERE (Age % 2) = :odd AND (Name LIKE 'A%') ORDER BY Age % 2;"
    )

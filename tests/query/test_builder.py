import logging

import pytest

from sqlcommands.commands import SqlFilter, SqlParameter
from sqlcommands.core import (
    BooleanField,
    Field,
    FloatField,
    IgnoreRule,
    IntegerField,
    Model,
    StringField,
)
from sqlcommands.dialects import DropTableMode
from sqlcommands.errors import (
    EmptyConditionError,
    InvalidArgumentError,
    MissingPrimaryKeyError,
    NoEligibleColumnsError,
    UnmappableTypeError,
    UnsupportedOperationError,
)
from sqlcommands.query import CommandBuilder


class T(Model):
    Id = IntegerField(primary_key=True, auto_increment=True)
    Name = StringField()


class Person(Model):
    class Meta:
        table = "People"

    id = IntegerField(primary_key=True, auto_increment=True, name="Id")
    name = StringField(name="Name")
    age = IntegerField(name="Age")


class Note(Model):
    id = IntegerField(primary_key=True)
    body = StringField(ignore=IgnoreRule.NONE)
    draft = BooleanField(ignore=IgnoreRule.INSERT_ALWAYS)


class Log(Model):
    message = StringField()


class Totals(Model):
    class Meta:
        table = "Orders"
        group_by = '"Customer"'
        having = 'SUM("Amount") > 100'
        order_by = '"Customer"'

    customer = StringField(name="Customer")
    total = FloatField(name="Total", expression='SUM("Amount")')


@pytest.fixture
def builder():
    return CommandBuilder("sqlite")


# ---------------------------------------------------------------------- #
# CREATE / DROP
# ---------------------------------------------------------------------- #
def test_create_table_example(builder):
    command = builder.create_table(T)
    assert command.text == 'CREATE TABLE "T" ("Id" INTEGER PRIMARY KEY AUTOINCREMENT, "Name" TEXT);'
    assert command.parameters == ()


def test_create_table_uses_column_names_and_skips_computed(builder):
    assert builder.create_table(Person).text == (
        'CREATE TABLE "People" ("Id" INTEGER PRIMARY KEY AUTOINCREMENT, "Name" TEXT, "Age" INTEGER);'
    )
    assert builder.create_table(Totals).text == 'CREATE TABLE "Orders" ("Customer" TEXT);'


def test_create_table_composite_key_uses_table_constraint(builder):
    class Link(Model):
        left = IntegerField(primary_key=True)
        right = IntegerField(primary_key=True)

    assert builder.create_table(Link).text == (
        'CREATE TABLE "Link" ("left" INTEGER, "right" INTEGER, PRIMARY KEY ("left", "right"));'
    )


def test_create_table_db_type_override(builder):
    class Document(Model):
        id = IntegerField(primary_key=True)
        body = Field(dict, db_type="JSON")

    assert builder.create_table(Document).text == (
        'CREATE TABLE "Document" ("id" INTEGER PRIMARY KEY, "body" JSON);'
    )


def test_create_table_unmappable_type(builder):
    class Document(Model):
        body = Field(dict)

    with pytest.raises(UnmappableTypeError) as excinfo:
        builder.create_table(Document)
    assert excinfo.value.column == "body"
    assert excinfo.value.dialect == "sqlite"


def test_drop_table_variants(builder, caplog):
    caplog.set_level(logging.WARNING, logger="sqlcommands.query.builder")
    assert builder.drop_table("People").text == 'DROP TABLE IF EXISTS "People";'
    assert builder.drop_table(Person, ignore_if_missing=False).text == 'DROP TABLE "People";'
    assert any("DROP TABLE generated for People" in record.message for record in caplog.records)


def test_drop_table_rejects_unsupported_mode(builder):
    with pytest.raises(UnsupportedOperationError):
        builder.drop_table("People", mode=DropTableMode.SAFE)


def test_drop_table_rejects_empty_name(builder):
    with pytest.raises(InvalidArgumentError):
        builder.drop_table("  ")


# ---------------------------------------------------------------------- #
# INSERT
# ---------------------------------------------------------------------- #
def test_insert_skips_absent_auto_increment_key(builder):
    command = builder.insert(Person(name="Ada", age=36))
    assert command.text == 'INSERT INTO "People" ("Name", "Age") VALUES (:name, :age);'
    assert command.parameters == (SqlParameter("name", "Ada"), SqlParameter("age", 36))
    assert command.as_mapping() == {"name": "Ada", "age": 36}


def test_insert_writes_null_when_rules_keep_absent_column(builder):
    command = builder.insert(Note(id=1, draft=True))
    assert command.text == 'INSERT INTO "Note" ("id", "body") VALUES (:id, NULL);'
    assert command.parameters == (SqlParameter("id", 1),)


def test_insert_without_eligible_columns(builder):
    with pytest.raises(NoEligibleColumnsError):
        builder.insert(Log())


def test_insert_requires_instance(builder):
    with pytest.raises(TypeError):
        builder.insert(Person)


# ---------------------------------------------------------------------- #
# UPDATE
# ---------------------------------------------------------------------- #
def test_update_by_primary_key(builder):
    command = builder.update(Person(id=1, name="Ada"))
    assert command.text == 'UPDATE "People" SET "Name" = :name WHERE "Id" = :id;'
    assert command.parameters == (SqlParameter("name", "Ada"), SqlParameter("id", 1))


def test_update_ands_filter(builder):
    command = builder.update(
        Person(id=1, name="Ada"), SqlFilter('"Age" > :min_age', {"min_age": 18})
    )
    assert command.text == (
        'UPDATE "People" SET "Name" = :name WHERE "Id" = :id AND ("Age" > :min_age);'
    )
    assert command.as_mapping() == {"name": "Ada", "id": 1, "min_age": 18}


def test_update_without_primary_key_needs_filter(builder):
    with pytest.raises(MissingPrimaryKeyError):
        builder.update(Log(message="x"))
    command = builder.update(Log(message="x"), SqlFilter("rowid > 3"))
    assert command.text == 'UPDATE "Log" SET "message" = :message WHERE (rowid > 3);'


def test_update_refuses_absent_key_without_filter(builder):
    with pytest.raises(MissingPrimaryKeyError):
        builder.update(Person(name="Ada"))


def test_update_without_set_columns(builder):
    with pytest.raises(NoEligibleColumnsError) as excinfo:
        builder.update(Person(id=1))
    assert excinfo.value.clause == "SET"


# ---------------------------------------------------------------------- #
# DELETE
# ---------------------------------------------------------------------- #
def test_delete_by_primary_key(builder):
    command = builder.delete(Person(id=7, name="Ada"))
    assert command.text == 'DELETE FROM "People" WHERE "Id" = :id;'
    assert command.as_mapping() == {"id": 7}


def test_delete_by_all_present_columns(builder):
    command = builder.delete(Person(name="Ada", age=36), primary_key_only=False)
    assert command.text == 'DELETE FROM "People" WHERE "Name" = :name AND "Age" = :age;'


def test_delete_with_filter_only(builder):
    command = builder.delete(filter=SqlFilter('"Age" < :age', {"age": 18}), model=Person)
    assert command.text == 'DELETE FROM "People" WHERE ("Age" < :age);'


def test_delete_never_emits_unconditional_statement(builder):
    with pytest.raises(EmptyConditionError):
        builder.delete(model=Person)
    with pytest.raises(EmptyConditionError):
        builder.delete(Person(name="Ada"))
    with pytest.raises(EmptyConditionError):
        builder.delete(model=Person, filter=SqlFilter("   "))


def test_delete_requires_model_or_data(builder):
    with pytest.raises(InvalidArgumentError):
        builder.delete()


# ---------------------------------------------------------------------- #
# SELECT
# ---------------------------------------------------------------------- #
def test_select_all_columns(builder):
    command = builder.select(Person)
    assert command.text == 'SELECT "Id", "Name", "Age" FROM "People";'
    assert command.parameters == ()


def test_select_with_template_distinct_and_pagination(builder):
    command = builder.select(Person(name="Ada"), distinct=True, offset=10, max_results=5)
    assert command.text == (
        'SELECT DISTINCT "Id", "Name", "Age" FROM "People" WHERE "Name" = :name LIMIT 5 OFFSET 10;'
    )
    assert command.as_mapping() == {"name": "Ada"}


def test_select_computed_columns_and_grouping(builder):
    assert builder.select(Totals).text == (
        'SELECT "Customer", SUM("Amount") AS "Total" FROM "Orders" '
        'GROUP BY "Customer" HAVING SUM("Amount") > 100 ORDER BY "Customer";'
    )
    assert builder.select(Totals(customer="Acme")).text == (
        'SELECT "Customer", SUM("Amount") AS "Total" FROM "Orders" WHERE "Customer" = :customer '
        'GROUP BY "Customer" HAVING SUM("Amount") > 100 ORDER BY "Customer";'
    )


def test_select_skips_select_ignored_columns(builder):
    class Account(Model):
        id = IntegerField(primary_key=True)
        secret = StringField(ignore=IgnoreRule.SELECT_ALWAYS)

    command = builder.select(Account(secret="x"))
    assert command.text == 'SELECT "id" FROM "Account";'


def test_select_first_limits_to_one_row(builder):
    assert builder.select_first(Person).text == 'SELECT "Id", "Name", "Age" FROM "People" LIMIT 1;'


def test_select_validates_pagination_first(builder):
    with pytest.raises(InvalidArgumentError):
        builder.select(Person, offset=-1)
    with pytest.raises(InvalidArgumentError):
        builder.select(Person, max_results=-5)


def test_filter_reusing_parameter_name(builder):
    same = builder.select(Person(name="Ada"), filter=SqlFilter('"Name" = :name', {"name": "Ada"}))
    assert same.parameters == (SqlParameter("name", "Ada"),)
    with pytest.raises(InvalidArgumentError):
        builder.select(Person(name="Ada"), filter=SqlFilter('"Name" <> :name', {"name": "Bob"}))


def test_builder_logs_built_commands(builder, caplog):
    caplog.set_level(logging.DEBUG, logger="sqlcommands.query.builder")
    builder.select(Person)
    assert any("Built SELECT for Person" in record.message for record in caplog.records)

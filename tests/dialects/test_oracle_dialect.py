from datetime import time

from sqlcommands.core import IntegerField, Model
from sqlcommands.dialects import ORACLE
from sqlcommands.metadata import describe_model


class Row(Model):
    id = IntegerField(primary_key=True)


def test_oracle_named_placeholders():
    assert ORACLE.placeholder("id") == ":id"
    assert ORACLE.quote_identifier("Id") == '"Id"'


def test_oracle_offset_fetch():
    table = describe_model(Row)
    assert ORACLE.pagination_clause(table, 0, -1) == ""
    assert ORACLE.pagination_clause(table, 0, 1) == " FETCH NEXT 1 ROWS ONLY"
    assert ORACLE.pagination_clause(table, 4, 2) == " OFFSET 4 ROWS FETCH NEXT 2 ROWS ONLY"


def test_oracle_has_no_time_of_day_type():
    assert ORACLE.column_type(time) is None
    assert ORACLE.column_type(bool) == "NUMBER(1)"

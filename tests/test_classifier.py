"""
Tests for ChildClassifier — label, display value and branch decision per child
"""

import enum
import functools
import inspect
import json
import sqlite3
from datetime import date, datetime, time, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest

from dumpwalk.core.classifier import (
    ChildClassifier, Classification, format_datetime, format_parameter, classify,
)
from dumpwalk.errors import RenderFault

from tests.factories import Customer


class Color(enum.Enum):
    RED = 1


class Priority(enum.IntEnum):
    HIGH = 1


class Adder:
    def __call__(self, a, b):
        return a + b

    def add(self, x: int, y: int = 1):
        return x + y


def sample(a, b: int, c: str = "x", d=3, *args, flag=None, on=True, **kw):
    pass


def fake_class(name, module):
    """Class whose dotted name looks like it lives in another library."""
    return type(name, (), {"__module__": module})


class TestCollections:
    """Collections always branch and report their size."""

    def test_list(self, classifier):
        value = [1, 2]
        assert classifier.classify(value) == Classification("array (2)", value, True)

    def test_mapping(self, classifier):
        label, display, branch = classifier.classify({"a": 1})
        assert (label, branch) == ("array (1)", True)

    def test_empty(self, classifier):
        assert classifier.classify(()).type_label == "array (0)"


class TestScalars:
    """Scalars, None and text are leaves labelled with their type."""

    @pytest.mark.parametrize("value,label", [
        (5, "(integer)"),
        ("s", "(string)"),
        (None, "(NULL)"),
        (True, "(boolean)"),
        (2.5, "(float)"),
        (Decimal("1.2"), "(Decimal)"),
        (3j, "(complex)"),
    ])
    def test_label(self, classifier, value, label):
        assert classifier.classify(value) == Classification(label, value, False)


class TestDates:
    """Datetimes display in the reference zone as a single quoted line."""

    def test_utc_to_pacific_standard(self, classifier):
        value = datetime(2024, 1, 15, 12, 30, tzinfo=timezone.utc)
        assert classifier.classify(value) == Classification(
            "object datetime", "2024-01-15 4:30:00 am PST", False
        )

    def test_daylight_saving(self, classifier):
        value = datetime(2024, 7, 4, 20, 5, 9, tzinfo=timezone.utc)
        assert classifier.classify(value).display_value == "2024-07-04 1:05:09 pm PDT"

    def test_other_zone_is_converted(self, classifier):
        value = datetime(2024, 1, 15, 9, 0, tzinfo=ZoneInfo("Europe/Paris"))
        assert classifier.classify(value).display_value == "2024-01-15 12:00:00 am PST"

    def test_naive_taken_as_utc(self, classifier):
        value = datetime(2024, 1, 15, 20, 0)
        assert classifier.classify(value).display_value == "2024-01-15 12:00:00 pm PST"

    def test_original_not_modified(self, classifier):
        value = datetime(2024, 1, 15, 12, 30, tzinfo=timezone.utc)
        classifier.classify(value)
        assert value.tzinfo is timezone.utc
        assert value == datetime(2024, 1, 15, 12, 30, tzinfo=timezone.utc)

    def test_custom_reference_zone(self):
        classifier = ChildClassifier(reference_zone="Asia/Tokyo")
        value = datetime(2024, 1, 15, 12, 30, tzinfo=timezone.utc)
        assert classifier.classify(value).display_value == "2024-01-15 9:30:00 pm JST"

    def test_format_datetime_directly(self):
        value = datetime(2024, 3, 1, 0, 0, 5, tzinfo=timezone.utc)
        assert format_datetime(value, timezone.utc) == "2024-03-01 12:00:05 am UTC"

    def test_date_and_time(self, classifier):
        assert classifier.classify(date(2024, 1, 15)) == Classification("object date", "2024-01-15", False)
        assert classifier.classify(time(9, 5)) == Classification("object time", "09:05:00", False)


class TestDatabaseHandles:
    """Database handles are opaque single-line objects."""

    def test_sqlite_connection(self, classifier):
        conn = sqlite3.connect(":memory:")
        try:
            assert classifier.classify(conn) == Classification("object Connection", conn, False)
        finally:
            conn.close()

    def test_sqlite_cursor_and_row(self, classifier):
        conn = sqlite3.connect(":memory:")
        conn.row_factory = sqlite3.Row
        try:
            cursor = conn.execute("select 1 as x")
            row = cursor.fetchone()
            assert classifier.classify(cursor).type_label == "object Cursor"
            assert classifier.classify(row) == Classification("object Row", row, False)
        finally:
            conn.close()

    def test_cursor_subclass_keeps_family_label(self, classifier):
        class TracingCursor(sqlite3.Cursor):
            pass

        conn = sqlite3.connect(":memory:")
        try:
            cursor = conn.cursor(TracingCursor)
            assert classifier.classify(cursor).type_label == "object Cursor"
        finally:
            conn.close()

    def test_engine_matched_by_dotted_name(self, classifier):
        Engine = fake_class("Engine", "sqlalchemy.engine.base")
        engine = Engine()
        assert classifier.classify(engine) == Classification("Engine (database handle)", engine, False)

    def test_statement_matched_through_base_class(self, classifier):
        Executable = fake_class("Executable", "sqlalchemy.sql.base")
        Select = type("Select", (Executable,), {"__module__": "sqlalchemy.sql.selectable"})
        assert classifier.classify(Select()).type_label == "Select (prepared statement)"


class TestCallables:
    """Callables render their parameter list."""

    def test_lambda_without_params(self, classifier):
        fn = lambda: None  # noqa: E731
        assert classifier.classify(fn) == Classification("closure ()", fn, False)

    def test_full_parameter_list(self, classifier):
        assert classifier.classify(sample).type_label == (
            'closure ($a, int $b, str $c? = "x", $d? = 3, *$args?, '
            '$flag? = NULL, $on? = boolean, **$kw?)'
        )

    def test_bound_method_hides_self(self, classifier):
        assert classifier.classify(Adder().add).type_label == "closure (int $x, int $y? = 1)"

    def test_partial(self, classifier):
        fn = functools.partial(sample, 1, 2)
        assert classifier.classify(fn).type_label.startswith('closure (str $c? = "x"')

    def test_builtin(self, classifier):
        assert classifier.classify(len).type_label == "closure ($obj)"

    def test_signature_unavailable(self, classifier, monkeypatch):
        def no_signature(value):
            raise ValueError("no signature found")

        monkeypatch.setattr(inspect, "signature", no_signature)
        assert classifier.classify(sample).type_label == "closure (?)"

    def test_callable_instance_branches(self, classifier):
        adder = Adder()
        assert classifier.classify(adder) == Classification("object Adder", adder, True)

    def test_format_parameter_string_annotation(self):
        param = inspect.Parameter("items", inspect.Parameter.POSITIONAL_OR_KEYWORD, annotation="List[str]")
        assert format_parameter(param) == "List[str] $items"


class TestOtherObjects:
    """Generic objects branch; classes, modules and enums do not."""

    def test_plain_object_branches(self, classifier):
        customer = Customer("Ada")
        assert classifier.classify(customer) == Classification("object Customer", customer, True)

    def test_enum_member(self, classifier):
        assert classifier.classify(Color.RED) == Classification("object Color", "RED", False)

    def test_int_enum_member(self, classifier):
        assert classifier.classify(Priority.HIGH) == Classification("object Priority", "HIGH", False)

    def test_class(self, classifier):
        assert classifier.classify(Customer) == Classification("class Customer", Customer, False)

    def test_module(self, classifier):
        assert classifier.classify(json) == Classification("module json", json, False)


class TestRegistration:
    """Hosts extend the classifier with their own strategies."""

    def test_registered_type_takes_precedence(self, classifier):
        classifier.register(Customer, lambda c: Classification("object Customer", c.name, False))
        assert classifier.classify(Customer("Ada")) == Classification("object Customer", "Ada", False)

    def test_later_registration_wins(self, classifier):
        classifier.register(Customer, lambda c: Classification("first", c, False))
        classifier.register(Customer, lambda c: Classification("second", c, False))
        assert classifier.classify(Customer("x")).type_label == "second"

    def test_dotted_marker(self, classifier):
        marker = f"{Customer.__module__}.{Customer.__qualname__}"
        classifier.register(marker, lambda c: Classification("customer", c.name, False))
        assert classifier.classify(Customer("Ada")).display_value == "Ada"

    def test_scalar_type_can_be_registered(self, classifier):
        classifier.register(Decimal, lambda d: Classification("(money)", f"{d:.2f}", False))
        assert classifier.classify(Decimal("3")) == Classification("(money)", "3.00", False)

    def test_collections_cannot_be_overridden(self, classifier):
        classifier.register(list, lambda v: Classification("nope", v, False))
        assert classifier.classify([1]).type_label == "array (1)"

    def test_invalid_marker(self, classifier):
        with pytest.raises(TypeError):
            classifier.register(42, lambda v: None)

    def test_strategy_failure_becomes_render_fault(self, classifier):
        def explode(value):
            raise KeyError("missing")

        classifier.register(Customer, explode)
        with pytest.raises(RenderFault, match="cannot classify Customer"):
            classifier.classify(Customer("x"))

    def test_registrations_are_per_instance(self, classifier):
        classifier.register(Customer, lambda c: Classification("local", c, False))
        assert ChildClassifier().classify(Customer("x")).type_label == "object Customer"


class TestIdempotence:
    """Classifying the same value twice gives the same answer."""

    @pytest.mark.parametrize("value", [
        (1, 2),
        "text",
        42,
        datetime(2024, 1, 15, 12, 30, tzinfo=timezone.utc),
        frozenset({1}),
    ])
    def test_same_result(self, classifier, value):
        assert classifier.classify(value) == classifier.classify(value)

    def test_module_level_classify(self):
        assert classify(7) == Classification("(integer)", 7, False)

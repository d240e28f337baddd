import functools
import unittest

import pytest

from litelocator import (
    ClassDefinition,
    ComplexDefinition,
    ConstructorArityMismatch,
    Container,
    DefinitionError,
    FactoryDefinition,
    InstanceSpec,
    LiteralDefinition,
    Parameter,
    ServiceReference,
    UnresolvableArgumentReference,
    make_definition,
)


class Connection:
    def __init__(self, dsn, timeout=5):
        self.dsn = dsn
        self.timeout = timeout


def build_connection():
    return Connection("sqlite://")


class TestMakeDefinition(unittest.TestCase):
    def test_string_and_class_become_class_definitions(self):
        assert make_definition("collections:OrderedDict") == ClassDefinition("collections:OrderedDict")
        assert make_definition(Connection, shared=True) == ClassDefinition(Connection, shared=True)

    def test_routines_and_partials_become_factories(self):
        assert isinstance(make_definition(build_connection), FactoryDefinition)
        assert isinstance(make_definition(Connection("x").__init__), FactoryDefinition)
        assert isinstance(make_definition(functools.partial(Connection, "x")), FactoryDefinition)

    def test_other_objects_become_literals(self):
        conn = Connection("x")
        assert make_definition(conn) == LiteralDefinition(conn)
        assert make_definition([1, 2]) == LiteralDefinition([1, 2])

    def test_complex_mapping_is_parsed(self):
        definition = make_definition(
            {
                "className": "app.db:Connection",
                "arguments": [
                    {"type": "parameter", "value": "sqlite://"},
                    {"type": "service", "name": "settings"},
                    {"type": "instance", "className": "app.db:Pool", "arguments": [{"type": "parameter", "value": 3}]},
                ],
                "calls": [{"method": "connect"}],
                "properties": [{"name": "timeout", "value": {"type": "parameter", "value": 10}}],
            }
        )

        assert isinstance(definition, ComplexDefinition)
        assert definition.class_name == "app.db:Connection"
        assert definition.arguments == [
            Parameter("sqlite://"),
            ServiceReference("settings"),
            InstanceSpec("app.db:Pool", [Parameter(3)]),
        ]
        assert definition.calls[0].method == "connect"
        assert definition.calls[0].arguments == []
        assert definition.properties[0].name == "timeout"
        assert definition.properties[0].value == Parameter(10)
        assert definition.shared is False

    def test_snake_case_class_name_key_is_accepted(self):
        definition = make_definition({"class_name": Connection})
        assert isinstance(definition, ComplexDefinition)
        assert definition.class_name is Connection

    def test_shared_key_marks_complex_mapping_shared(self):
        assert make_definition({"className": Connection, "shared": True}).shared is True

    def test_unknown_argument_type_raises(self):
        with pytest.raises(DefinitionError):
            make_definition({"className": Connection, "arguments": [{"type": "constant", "value": 1}]})

    def test_argument_missing_key_raises(self):
        with pytest.raises(DefinitionError) as ctx:
            make_definition({"className": Connection, "arguments": [{"type": "service"}]})
        assert "'name'" in str(ctx.value)

    def test_instance_argument_missing_class_name_raises(self):
        with pytest.raises(DefinitionError):
            make_definition({"className": Connection, "arguments": [{"type": "instance"}]})

    def test_argument_must_be_a_mapping(self):
        with pytest.raises(DefinitionError):
            make_definition({"className": Connection, "arguments": ["sqlite://"]})

    def test_arguments_must_be_a_list(self):
        with pytest.raises(DefinitionError):
            make_definition({"className": Connection, "arguments": "sqlite://"})

    def test_call_without_method_raises(self):
        with pytest.raises(DefinitionError):
            make_definition({"className": Connection, "calls": [{"arguments": []}]})

    def test_property_without_value_raises(self):
        with pytest.raises(DefinitionError):
            make_definition({"className": Connection, "properties": [{"name": "timeout"}]})

    def test_definition_error_is_a_value_error(self):
        assert issubclass(DefinitionError, ValueError)


class TestComplexDefinitionParameters(unittest.TestCase):
    definition: ComplexDefinition

    def setUp(self):
        self.definition = ComplexDefinition(Connection, [Parameter("sqlite://")])

    def test_get_parameter(self):
        assert self.definition.get_parameter(0) == Parameter("sqlite://")

    def test_get_parameter_out_of_range(self):
        with pytest.raises(DefinitionError):
            self.definition.get_parameter(3)

    def test_get_parameter_rejects_negative_positions(self):
        with pytest.raises(DefinitionError):
            self.definition.get_parameter(-1)

    def test_set_parameter_replaces_and_appends(self):
        self.definition.set_parameter(0, Parameter("mysql://"))
        self.definition.set_parameter(1, {"type": "parameter", "value": 30})

        assert self.definition.arguments == [Parameter("mysql://"), Parameter(30)]

    def test_set_parameter_past_the_end_raises(self):
        with pytest.raises(DefinitionError):
            self.definition.set_parameter(5, Parameter(1))


class TestResolutionFailures(unittest.TestCase):
    cont: Container

    def setUp(self):
        self.cont = Container()

    def test_too_many_constructor_arguments(self):
        self.cont.set(
            "db",
            {"className": Connection, "arguments": [{"type": "parameter", "value": v} for v in ("a", 1, "extra")]},
        )

        with pytest.raises(ConstructorArityMismatch) as ctx:
            self.cont.get("db")
        assert "Connection" in str(ctx.value)

    def test_missing_constructor_argument(self):
        self.cont.set("db", Connection)

        with pytest.raises(ConstructorArityMismatch):
            self.cont.get("db")

    def test_arity_mismatch_is_a_type_error(self):
        self.cont.set("db", Connection)

        with pytest.raises(TypeError):
            self.cont.get("db", "sqlite://", bogus=True)

    def test_failed_implicit_class_resolution_registers_nothing(self):
        with pytest.raises(ConstructorArityMismatch):
            self.cont.get("fractions.Fraction", 1, 2, 3)

        assert not self.cont.has("fractions.Fraction")

    def test_successful_implicit_class_resolution_registers_the_class(self):
        self.cont.get("fractions.Fraction", 1, 2)

        assert self.cont.get_service("fractions.Fraction") == ClassDefinition("fractions.Fraction")

    def test_reference_to_unknown_service(self):
        self.cont.set("repo", {"className": Connection, "arguments": [{"type": "service", "name": "settings"}]})

        with pytest.raises(UnresolvableArgumentReference) as ctx:
            self.cont.get("repo")
        assert ctx.value.name == "settings"

    def test_reference_does_not_fall_back_to_class_names(self):
        self.cont.set("repo", {"className": Connection, "arguments": [{"type": "service", "name": "dict"}]})

        with pytest.raises(UnresolvableArgumentReference):
            self.cont.get("repo")

    def test_failed_shared_resolution_caches_nothing(self):
        calls = []

        def flaky():
            calls.append(1)
            if len(calls) == 1:
                msg = "not yet"
                raise ConnectionError(msg)
            return Connection("sqlite://")

        self.cont.set_shared("db", flaky)

        with pytest.raises(ConnectionError):
            self.cont.get("db")

        db = self.cont.get("db")
        assert self.cont.get("db") is db
        assert len(calls) == 2

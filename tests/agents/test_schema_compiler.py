"""
Tests for the non-evaluating schema compiler.

Covers:
- Rejection of non-JSON and code-like schema sources
- Rejection of unsupported keywords, types and non-object roots
- Strict leaf validation and required/optional/additional property rules
- Mismatch diagnostics naming the offending path
"""

import pytest

from playground.agents.structured.errors import SchemaCompilationError, SchemaMismatchError
from playground.agents.structured.prompts import (
    DEFAULT_IMAGE_SCHEMA,
    DEFAULT_TEXT_SCHEMA,
    default_schema_source,
)
from playground.agents.structured.schema_compiler import compile_schema, validate_against


def _obj(**properties):
    return '{"type": "object", "properties": {%s}}' % ", ".join(
        f'"{name}": {schema}' for name, schema in properties.items()
    )


class TestCompileSchemaFailures:
    """Schema sources that must not compile."""

    def test_invalid_json_is_reported_with_cause(self):
        with pytest.raises(SchemaCompilationError) as exc_info:
            compile_schema('{"type": "object",')

        assert exc_info.value.message.startswith("Schema parsing error:")
        assert exc_info.value.code == "schema_error"

    def test_code_is_never_evaluated(self):
        """A zod-style or Python expression is just invalid JSON."""
        with pytest.raises(SchemaCompilationError):
            compile_schema("__import__('os').system('echo pwned')")

        with pytest.raises(SchemaCompilationError):
            compile_schema("z.object({ name: z.string() })")

    def test_root_must_be_object(self):
        with pytest.raises(SchemaCompilationError) as exc_info:
            compile_schema('{"type": "array", "items": {"type": "string"}}')

        assert "root schema must be an object" in exc_info.value.message

    def test_unknown_type_rejected(self):
        with pytest.raises(SchemaCompilationError) as exc_info:
            compile_schema(_obj(when='{"type": "date"}'))

        assert "unsupported type 'date'" in exc_info.value.message
        assert "$.when" in exc_info.value.message

    def test_unknown_keyword_rejected(self):
        with pytest.raises(SchemaCompilationError) as exc_info:
            compile_schema(_obj(code='{"type": "string", "pattern": "^[A-Z]+$"}'))

        assert "unsupported keyword 'pattern'" in exc_info.value.message

    def test_missing_type_rejected(self):
        with pytest.raises(SchemaCompilationError) as exc_info:
            compile_schema(_obj(name='{"description": "no type"}'))

        assert "missing 'type'" in exc_info.value.message

    def test_required_must_reference_declared_property(self):
        source = '{"type": "object", "properties": {"a": {"type": "string"}}, "required": ["b"]}'

        with pytest.raises(SchemaCompilationError) as exc_info:
            compile_schema(source)

        assert "'b' is not declared" in exc_info.value.message

    def test_non_standard_number_constants_rejected(self):
        with pytest.raises(SchemaCompilationError) as exc_info:
            compile_schema(_obj(score='{"type": "number", "minimum": NaN}'))

        assert "NaN is not valid JSON" in exc_info.value.message

    def test_array_without_items_rejected(self):
        with pytest.raises(SchemaCompilationError):
            compile_schema(_obj(tags='{"type": "array"}'))

    def test_enum_must_be_strings(self):
        with pytest.raises(SchemaCompilationError):
            compile_schema(_obj(level='{"type": "string", "enum": [1, 2]}'))

    def test_excessive_nesting_rejected(self):
        inner = '{"type": "string"}'
        for _ in range(40):
            inner = '{"type": "object", "properties": {"x": %s}}' % inner

        with pytest.raises(SchemaCompilationError) as exc_info:
            compile_schema(inner)

        assert "deeper than" in exc_info.value.message


class TestCompiledValidation:
    """Behavior of compiled validators."""

    def test_conforming_value_returned_unchanged(self):
        model = compile_schema(_obj(name='{"type": "string"}', count='{"type": "integer"}'))
        value = {"name": "cat", "count": 3}

        result = validate_against(model, value)

        assert result is value
        assert result == {"name": "cat", "count": 3}

    def test_properties_are_required_by_default(self):
        model = compile_schema(_obj(name='{"type": "string"}', count='{"type": "integer"}'))

        with pytest.raises(SchemaMismatchError) as exc_info:
            validate_against(model, {"name": "cat"})

        assert exc_info.value.message.startswith("AI response validation failed:")
        assert "$.count" in exc_info.value.message
        assert exc_info.value.code == "response_mismatch"

    def test_explicit_required_allows_omitting_optional(self):
        source = (
            '{"type": "object", "properties": {"a": {"type": "string"}, '
            '"b": {"type": "string"}}, "required": ["a"]}'
        )
        model = compile_schema(source)

        assert validate_against(model, {"a": "x"}) == {"a": "x"}

        with pytest.raises(SchemaMismatchError):
            validate_against(model, {"a": "x", "b": None})

    def test_leaf_types_are_strict(self):
        model = compile_schema(
            _obj(n='{"type": "number"}', i='{"type": "integer"}', b='{"type": "boolean"}')
        )

        with pytest.raises(SchemaMismatchError):
            validate_against(model, {"n": "1.5", "i": 1, "b": True})
        with pytest.raises(SchemaMismatchError):
            validate_against(model, {"n": 1.5, "i": True, "b": True})
        with pytest.raises(SchemaMismatchError):
            validate_against(model, {"n": 1.5, "i": 1, "b": "true"})

    def test_additional_properties_rejected_unless_allowed(self):
        strict_model = compile_schema(_obj(a='{"type": "string"}'))
        open_model = compile_schema(
            '{"type": "object", "properties": {"a": {"type": "string"}}, "additionalProperties": true}'
        )

        with pytest.raises(SchemaMismatchError) as exc_info:
            validate_against(strict_model, {"a": "x", "extra": 1})
        assert "$.extra" in exc_info.value.message

        assert validate_against(open_model, {"a": "x", "extra": 1}) == {"a": "x", "extra": 1}

    def test_nullable_union(self):
        model = compile_schema(_obj(reason='{"type": ["string", "null"]}'))

        assert validate_against(model, {"reason": None}) == {"reason": None}
        assert validate_against(model, {"reason": "blurry"}) == {"reason": "blurry"}
        with pytest.raises(SchemaMismatchError):
            validate_against(model, {"reason": 3})

    def test_enum_and_bounds(self):
        model = compile_schema(
            _obj(
                mood='{"type": "string", "enum": ["happy", "sad"]}',
                count='{"type": "integer", "minimum": 0, "maximum": 10}',
                tags='{"type": "array", "items": {"type": "string"}, "maxItems": 2}',
            )
        )

        assert validate_against(model, {"mood": "sad", "count": 10, "tags": []})
        with pytest.raises(SchemaMismatchError):
            validate_against(model, {"mood": "angry", "count": 1, "tags": []})
        with pytest.raises(SchemaMismatchError):
            validate_against(model, {"mood": "sad", "count": -1, "tags": []})
        with pytest.raises(SchemaMismatchError):
            validate_against(model, {"mood": "sad", "count": 1, "tags": ["a", "b", "c"]})

    def test_nested_array_error_path(self):
        model = compile_schema(
            _obj(animals='{"type": "array", "items": {"type": "object", "properties": '
                         '{"name": {"type": "string"}, "count": {"type": "integer"}}}}')
        )

        with pytest.raises(SchemaMismatchError) as exc_info:
            validate_against(model, {"animals": [{"name": "cat", "count": 1}, {"name": "dog"}]})

        assert "$.animals[1].count" in exc_info.value.message

    def test_empty_properties_rejects_unknown_keys(self):
        model = compile_schema('{"type": "object", "properties": {}}')

        assert validate_against(model, {}) == {}
        with pytest.raises(SchemaMismatchError):
            validate_against(model, {"anything": 1})

    def test_bare_object_allows_any_keys(self):
        model = compile_schema(_obj(meta='{"type": "object"}'))

        value = {"meta": {"anything": 1}}
        assert validate_against(model, value) == value

    def test_number_rejects_nan_and_infinity(self):
        model = compile_schema(_obj(score='{"type": "number"}'))

        assert validate_against(model, {"score": 2}) == {"score": 2}
        with pytest.raises(SchemaMismatchError):
            validate_against(model, {"score": float("inf")})
        with pytest.raises(SchemaMismatchError):
            validate_against(model, {"score": float("nan")})

    def test_keys_that_are_not_identifiers(self):
        model = compile_schema(
            _obj(**{"first name": '{"type": "string"}', "model_config": '{"type": "integer"}'})
        )

        value = {"first name": "Ada", "model_config": 1}
        assert validate_against(model, value) == value

    def test_non_object_reply_is_a_mismatch(self):
        model = compile_schema(_obj(a='{"type": "string"}'))

        with pytest.raises(SchemaMismatchError):
            validate_against(model, ["a"])

    def test_default_schemas_compile(self):
        image_model = compile_schema(default_schema_source(DEFAULT_IMAGE_SCHEMA))
        text_model = compile_schema(default_schema_source(DEFAULT_TEXT_SCHEMA))

        validate_against(image_model, {
            "isTaskRefused": False,
            "refusalReason": None,
            "animals": [{"name": "cat", "count": 2}],
            "fruits": [],
        })
        validate_against(text_model, {
            "isTaskRefused": False,
            "refusalReason": None,
            "sentiment": "neutral",
            "topics": ["weather"],
            "entities": [{"name": "San Francisco", "type": "location"}],
        })

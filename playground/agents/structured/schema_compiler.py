"""
Schema Compiler

Turns user-supplied schema-source into an executable validator without ever
evaluating it as code. The source must be JSON text describing a restricted
JSON-Schema subset; it is parsed with ``json.loads`` and walked node by node
into a dynamically built pydantic model (``pydantic.create_model``).

Supported subset:
- type: object | array | string | number | integer | boolean | null,
  or a list of those (e.g. ["string", "null"] for a nullable string)
- object: properties, required (defaults to every property),
  additionalProperties (bool; defaults to false when properties are given)
- array: items, minItems, maxItems
- string: enum (strings only), minLength, maxLength
- number / integer: minimum, maximum
- annotations accepted anywhere and ignored: description, title, examples, $schema

Leaf types are strict: "1" is not a number, true is not an integer.
The root schema must be an object.
"""

import json
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, create_model

from playground.agents.structured.errors import SchemaCompilationError, SchemaMismatchError

MAX_SCHEMA_DEPTH = 32

SUPPORTED_TYPES = ("object", "array", "string", "number", "integer", "boolean", "null")

ANNOTATION_KEYWORDS = {"type", "description", "title", "examples", "$schema"}

TYPE_KEYWORDS = {
    "object": {"properties", "required", "additionalProperties"},
    "array": {"items", "minItems", "maxItems"},
    "string": {"enum", "minLength", "maxLength"},
    "number": {"minimum", "maximum"},
    "integer": {"minimum", "maximum"},
    "boolean": set(),
    "null": set(),
}


class _SchemaSyntaxError(Exception):
    """Internal signal carrying the path of the offending schema node."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{message} at {path}")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def load_strict_json(text: str) -> Any:
    """
    Parse JSON text, refusing the NaN / Infinity / -Infinity extensions
    that ``json.loads`` otherwise accepts.

    Raises:
        ValueError: including json.JSONDecodeError, for anything that is
            not standard JSON.
    """
    return json.loads(text, parse_constant=_reject_constant)


def compile_schema(schema_source: str) -> Type[BaseModel]:
    """
    Compile schema-source into a pydantic model class.

    The returned class is ephemeral: callers build it per invocation and
    drop it afterwards.

    Raises:
        SchemaCompilationError: source is not JSON, uses an unsupported
            keyword or type, nests too deeply, or its root is not an object.
    """
    try:
        document = load_strict_json(schema_source)
    except ValueError as e:
        raise SchemaCompilationError(f"Schema parsing error: {e}") from e
    except RecursionError as e:
        raise SchemaCompilationError("Schema parsing error: document nests too deeply") from e

    try:
        if not isinstance(document, dict) or _declared_types(document, "$") != ["object"]:
            raise _SchemaSyntaxError("$", "root schema must be an object type")
        model = _compile_node(document, "$", 0)
    except _SchemaSyntaxError as e:
        raise SchemaCompilationError(f"Schema parsing error: {e}") from e

    return model


def validate_against(model: Type[BaseModel], value: Any) -> Any:
    """
    Check a parsed reply against a compiled schema.

    Returns the value untouched; the model only gates it.

    Raises:
        SchemaMismatchError: with one line per violation.
    """
    try:
        model.model_validate(value)
    except ValidationError as e:
        errors = e.errors(include_url=False)
        raise SchemaMismatchError(
            f"AI response validation failed: {format_validation_errors(errors)}",
            errors=errors,
        ) from e
    return value


def format_validation_errors(errors: List[Dict[str, Any]]) -> str:
    """Render pydantic error dicts as 'path: message; path: message'."""
    parts = []
    for error in errors:
        path = "$"
        for part in error.get("loc", ()):
            path += f"[{part}]" if isinstance(part, int) else f".{part}"
        parts.append(f"{path}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts)


def _declared_types(node: Dict[str, Any], path: str) -> List[str]:
    if "type" not in node:
        raise _SchemaSyntaxError(path, "missing 'type'")

    declared = node["type"]
    types = declared if isinstance(declared, list) else [declared]
    if not types:
        raise _SchemaSyntaxError(path, "'type' list must not be empty")

    for name in types:
        if name not in SUPPORTED_TYPES:
            raise _SchemaSyntaxError(path, f"unsupported type {name!r}")
    if len(set(types)) != len(types):
        raise _SchemaSyntaxError(path, "duplicate entries in 'type'")
    return types


def _compile_node(node: Any, path: str, depth: int) -> Any:
    if depth > MAX_SCHEMA_DEPTH:
        raise _SchemaSyntaxError(path, f"schema nests deeper than {MAX_SCHEMA_DEPTH} levels")
    if not isinstance(node, dict):
        raise _SchemaSyntaxError(path, "schema node must be a JSON object")

    types = _declared_types(node, path)

    allowed = set(ANNOTATION_KEYWORDS)
    for name in types:
        allowed |= TYPE_KEYWORDS[name]
    unknown = sorted(set(node) - allowed)
    if unknown:
        raise _SchemaSyntaxError(path, f"unsupported keyword {unknown[0]!r}")

    members = [_compile_type(name, node, path, depth) for name in types]
    if len(members) == 1:
        return members[0]
    return Union[tuple(members)]


def _compile_type(name: str, node: Dict[str, Any], path: str, depth: int) -> Any:
    if name == "object":
        return _compile_object(node, path, depth)
    if name == "array":
        return _compile_array(node, path, depth)
    if name == "string":
        return _compile_string(node, path)
    if name in ("number", "integer"):
        minimum = _number_keyword(node, "minimum", path)
        maximum = _number_keyword(node, "maximum", path)
        integer = Annotated[int, Field(strict=True, ge=minimum, le=maximum)]
        if name == "integer":
            return integer
        # JSON numbers include integers; bools and NaN/Infinity stay rejected
        real = Annotated[float, Field(strict=True, allow_inf_nan=False, ge=minimum, le=maximum)]
        return Union[integer, real]
    if name == "boolean":
        return Annotated[bool, Field(strict=True)]
    return type(None)


def _compile_object(node: Dict[str, Any], path: str, depth: int) -> Type[BaseModel]:
    properties = node.get("properties", {})
    if not isinstance(properties, dict):
        raise _SchemaSyntaxError(path, "'properties' must be an object")

    required = node.get("required", list(properties))
    if not isinstance(required, list) or not all(isinstance(r, str) for r in required):
        raise _SchemaSyntaxError(path, "'required' must be a list of strings")
    for key in required:
        if key not in properties:
            raise _SchemaSyntaxError(path, f"required property {key!r} is not declared")

    additional = node.get("additionalProperties", "properties" not in node)
    if not isinstance(additional, bool):
        raise _SchemaSyntaxError(path, "'additionalProperties' must be true or false")

    # JSON keys need not be valid identifiers, so fields are positional
    # and matched through their alias.
    fields: Dict[str, Tuple[Any, Any]] = {}
    for index, (key, child) in enumerate(properties.items()):
        child_type = _compile_node(child, f"{path}.{key}", depth + 1)
        if key in required:
            fields[f"field_{index}"] = (child_type, Field(..., alias=key))
        else:
            fields[f"field_{index}"] = (child_type, Field(default=None, alias=key))

    return create_model(
        f"Schema{depth}",
        __config__=ConfigDict(extra="allow" if additional else "forbid"),
        **fields,
    )


def _compile_array(node: Dict[str, Any], path: str, depth: int) -> Any:
    if "items" not in node:
        raise _SchemaSyntaxError(path, "array schema needs 'items'")
    item_type = _compile_node(node["items"], f"{path}[]", depth + 1)
    min_items = _count_keyword(node, "minItems", path)
    max_items = _count_keyword(node, "maxItems", path)
    return Annotated[List[item_type], Field(min_length=min_items, max_length=max_items)]


def _compile_string(node: Dict[str, Any], path: str) -> Any:
    min_length = _count_keyword(node, "minLength", path)
    max_length = _count_keyword(node, "maxLength", path)

    if "enum" in node:
        values = node["enum"]
        if not isinstance(values, list) or not values or not all(isinstance(v, str) for v in values):
            raise _SchemaSyntaxError(path, "'enum' must be a non-empty list of strings")
        return Literal[tuple(values)]

    return Annotated[str, Field(strict=True, min_length=min_length, max_length=max_length)]


def _count_keyword(node: Dict[str, Any], keyword: str, path: str) -> Optional[int]:
    value = node.get(keyword)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise _SchemaSyntaxError(path, f"{keyword!r} must be a non-negative integer")
    return value


def _number_keyword(node: Dict[str, Any], keyword: str, path: str) -> Optional[float]:
    value = node.get(keyword)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _SchemaSyntaxError(path, f"{keyword!r} must be a number")
    return value

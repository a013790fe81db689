"""
Conversion of MongoDB `$jsonSchema` documents into standard JSON Schema.

MongoDB's dialect of JSON Schema adds the `bsonType` keyword, which accepts
every BSON type name. Standard validators only understand `type`, so every
`bsonType` occurrence is replaced by the construct that captures the same
intent against the Extended JSON form of a document.
"""
import copy
import json
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

BSON_TYPE_KEYWORD = "bsonType"

# BSON type names with a 1:1 JSON Schema equivalent
BSON_TYPE_ALIASES: Mapping[str, str] = MappingProxyType({
    "bool": "boolean",
    "double": "number",
    "decimal": "number",
})

# Simplified representation first, Extended JSON wire representation second.
# timestamp and regex only have a wire representation.
COMPOSITE_BSON_TYPES: Mapping[str, List[Dict[str, Any]]] = MappingProxyType({
    "objectId": [
        {"type": "string"},
        {
            "type": "object",
            "additionalProperties": False,
            "required": ["$oid"],
            "properties": {
                "$oid": {"type": "string"},
            },
        },
    ],
    "date": [
        {"type": "string", "format": "datetime"},
        {
            "type": "object",
            "additionalProperties": False,
            "required": ["$date"],
            "properties": {
                "$date": {
                    "type": "object",
                    "additionalProperties": False,
                    "required": ["$numberLong"],
                    "properties": {
                        "$numberLong": {"type": ["string", "number"]},
                    },
                },
            },
        },
    ],
    "long": [
        {"type": "number"},
        {
            "type": "object",
            "additionalProperties": False,
            "required": ["$numberLong"],
            "properties": {
                "$numberLong": {"type": ["string", "number"]},
            },
        },
    ],
    "timestamp": [
        {
            "type": "object",
            "additionalProperties": False,
            "required": ["$timestamp"],
            "properties": {
                "$timestamp": {
                    "type": "object",
                    "additionalProperties": False,
                    "required": ["t", "i"],
                    "properties": {
                        "t": {"type": "number"},
                        "i": {"type": "number"},
                    },
                },
            },
        },
    ],
    "regex": [
        {
            "type": "object",
            "additionalProperties": False,
            "required": ["$regex", "$options"],
            "properties": {
                "$regex": {"type": "string"},
                "$options": {"type": "string"},
            },
        },
    ],
})


class SchemaEncodingError(RuntimeError):
    """Raised when a rewritten schema cannot be encoded back to JSON.

    This signals a defect in the rewriter output or in the values handed to
    it, not a problem with the document being validated.
    """


def expand_bson_type(bson_type: str) -> Optional[List[Dict[str, Any]]]:
    """Returns a fresh copy of the alternatives for a composite BSON type, or None."""
    alternatives = COMPOSITE_BSON_TYPES.get(bson_type)
    if alternatives is None:
        return None
    return copy.deepcopy(alternatives)


def _alias(bson_type: str) -> str:
    return BSON_TYPE_ALIASES.get(bson_type, bson_type)


def _convert_type_list(type_names: List[Any]) -> Dict[str, Any]:
    simple_types: List[str] = []
    complex_types: List[Dict[str, Any]] = []

    for type_name in type_names:
        if not isinstance(type_name, str):
            continue
        alternatives = expand_bson_type(type_name)
        if alternatives is not None:
            # Flattened into the surrounding oneOf, never nested
            complex_types.extend(alternatives)
            continue
        simple_types.append(_alias(type_name))

    if complex_types:
        return {"oneOf": complex_types + [{"type": simple_type} for simple_type in simple_types]}
    return {"type": simple_types}


def _convert_type_tag(bson_type: Any) -> Dict[str, Any]:
    """Returns the keywords replacing a single `bsonType` value."""
    if isinstance(bson_type, list):
        return _convert_type_list(bson_type)

    if not isinstance(bson_type, str):
        return {}

    alternatives = expand_bson_type(bson_type)
    if alternatives is not None:
        return {"oneOf": alternatives}
    return {"type": _alias(bson_type)}


def bson_schema_to_json_schema(bson_schema: Any) -> Any:
    """
    Converts a MongoDB `$jsonSchema` node into a standard JSON Schema node.

    Every `bsonType` keyword is replaced by `type` or `oneOf`; every other
    keyword is copied, with object values converted recursively. Values held
    in lists (for instance `anyOf` or tuple `items`) are copied as they are
    and not descended into. The input is never modified.
    """
    if not isinstance(bson_schema, Mapping):
        return copy.deepcopy(bson_schema)

    json_schema: Dict[str, Any] = {}
    for key, value in bson_schema.items():
        if key == BSON_TYPE_KEYWORD:
            json_schema.update(_convert_type_tag(value))
        elif isinstance(value, Mapping):
            json_schema[key] = bson_schema_to_json_schema(value)
        else:
            json_schema[key] = copy.deepcopy(value)
    return json_schema


def bson_schema_to_json_schema_text(bson_schema_text: str) -> str:
    """Text variant of `bson_schema_to_json_schema`, returning compact JSON."""
    json_schema = bson_schema_to_json_schema(json.loads(bson_schema_text))
    try:
        return json.dumps(json_schema, separators=(",", ":"), allow_nan=False)
    except (TypeError, ValueError) as e:
        raise SchemaEncodingError(f"Unable to encode converted schema: {e}") from e

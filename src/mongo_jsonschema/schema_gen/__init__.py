"""
Schema conversion for mongo-jsonschema.

Rewrites MongoDB `$jsonSchema` documents (with `bsonType`) into standard
JSON Schema documents that validate MongoDB Extended JSON.
"""

from .bson_converter import (
    BSON_TYPE_ALIASES,
    COMPOSITE_BSON_TYPES,
    SchemaEncodingError,
    bson_schema_to_json_schema,
    bson_schema_to_json_schema_text,
    expand_bson_type,
)

__all__ = [
    "BSON_TYPE_ALIASES",
    "COMPOSITE_BSON_TYPES",
    "SchemaEncodingError",
    "bson_schema_to_json_schema",
    "bson_schema_to_json_schema_text",
    "expand_bson_type",
]

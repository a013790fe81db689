"""mongo-jsonschema - validate MongoDB documents with standard JSON Schema.

Converts the `$jsonSchema` validators of MongoDB collections (which use the
`bsonType` keyword) into standard JSON Schema and validates documents,
encoded as canonical Extended JSON, against them.
"""

__version__ = "0.1.0"

from .config import Config
from .schema_gen import bson_schema_to_json_schema
from .validation import SchemaValidator

__all__ = ["Config", "SchemaValidator", "bson_schema_to_json_schema"]

"""
Document validation against MongoDB collection schemas.
"""

from .exceptions import (
    DocumentSerializationError,
    DocumentValidationError,
    MongoJSONSchemaError,
    NoSchemaAvailableError,
    SchemaFetchError,
    is_no_schema_available,
)
from .serialization import to_canonical_extended_json
from .validator import SchemaValidator

__all__ = [
    "DocumentSerializationError",
    "DocumentValidationError",
    "MongoJSONSchemaError",
    "NoSchemaAvailableError",
    "SchemaFetchError",
    "SchemaValidator",
    "is_no_schema_available",
    "to_canonical_extended_json",
]

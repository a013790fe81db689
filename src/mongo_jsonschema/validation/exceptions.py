"""
Exceptions raised while fetching schemas and validating documents.
"""
from typing import List, Optional

from ..models import Violation


class MongoJSONSchemaError(Exception):
    """Base class for all mongo-jsonschema errors."""
    pass


class NoSchemaAvailableError(MongoJSONSchemaError):
    """Raised when a collection exists but carries no `$jsonSchema` validator.

    Callers usually treat this as "nothing to validate against" rather than
    as a failure.
    """
    def __init__(self, collection: str):
        super().__init__(f"schema is not available for collection {collection!r}")
        self.collection = collection


class SchemaFetchError(MongoJSONSchemaError):
    """Raised when a collection's schema could not be located or read."""
    def __init__(self, message: str, collection: Optional[str] = None):
        super().__init__(message)
        self.collection = collection


class DocumentSerializationError(MongoJSONSchemaError):
    """Raised when a document cannot be converted to Extended JSON."""
    pass


class DocumentValidationError(MongoJSONSchemaError):
    """Raised when a document does not satisfy its collection's schema.

    Carries every violation reported, in reporting order.
    """
    def __init__(self, violations: List[Violation], collection: Optional[str] = None):
        super().__init__("; ".join(violation.describe() for violation in violations))
        self.violations = list(violations)
        self.collection = collection


def is_no_schema_available(error: BaseException) -> bool:
    """Tells whether an error means the collection simply has no schema."""
    return isinstance(error, NoSchemaAvailableError)

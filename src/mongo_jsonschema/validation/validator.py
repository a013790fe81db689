"""
Validation of documents against the `$jsonSchema` of a MongoDB collection.

The pipeline fetches the collection schema, converts it to standard JSON
Schema, encodes the document as canonical Extended JSON and runs a
`jsonschema` validator over the result.
"""
import json
import logging
from typing import Any, Callable, Dict, List, Optional, Type

import structlog
from jsonschema import (
    Draft4Validator,
    Draft6Validator,
    Draft7Validator,
    Draft201909Validator,
    Draft202012Validator,
    FormatChecker,
)
from jsonschema.protocols import Validator as JSONSchemaValidator

from ..config import Config
from ..models import Violation
from ..schema_gen import bson_schema_to_json_schema
from .exceptions import DocumentSerializationError, DocumentValidationError
from .serialization import to_canonical_extended_json

# Stdlib-backed: silent until logging is configured
logger = structlog.wrap_logger(logging.getLogger(__name__))

# Fetches the $jsonSchema text of a collection
SchemaFetcher = Callable[[str], str]
# Encodes a document as Extended JSON text
DocumentSerializer = Callable[[Any], str]

VALIDATOR_CLASSES: Dict[str, Type[JSONSchemaValidator]] = {
    "draft4": Draft4Validator,
    "draft6": Draft6Validator,
    "draft7": Draft7Validator,
    "draft2019-09": Draft201909Validator,
    "draft2020-12": Draft202012Validator,
}


class SchemaValidator:
    """Validates documents against the schema their collection carries."""

    def __init__(
        self,
        fetch_schema: SchemaFetcher,
        serialize_document: DocumentSerializer = to_canonical_extended_json,
        app_config: Optional[Config] = None,
    ):
        self.fetch_schema = fetch_schema
        self.serialize_document = serialize_document
        self.app_config = app_config or Config()
        self.validator_class = VALIDATOR_CLASSES[self.app_config.validation.draft]
        self.logger = logger.bind(service="SchemaValidator", draft=self.app_config.validation.draft)

    def _build_validator(self, json_schema: Dict[str, Any]) -> JSONSchemaValidator:
        # Raises jsonschema.exceptions.SchemaError when the converted schema is invalid
        self.validator_class.check_schema(json_schema)
        format_checker = FormatChecker() if self.app_config.validation.check_formats else None
        return self.validator_class(json_schema, format_checker=format_checker)

    def _serialize(self, document: Any) -> Any:
        try:
            return json.loads(self.serialize_document(document))
        except DocumentSerializationError:
            raise
        except Exception as e:
            raise DocumentSerializationError(f"Unable to serialize document: {e}") from e

    def collect_violations(self, collection: str, document: Any) -> List[Violation]:
        """
        Runs the validation pipeline and returns every violation found.

        NoSchemaAvailableError and SchemaFetchError from the fetcher propagate
        unchanged, as does a DocumentSerializationError.
        """
        log = self.logger.bind(collection=collection)

        schema_text = self.fetch_schema(collection)
        instance = self._serialize(document)
        json_schema = bson_schema_to_json_schema(json.loads(schema_text))

        validator = self._build_validator(json_schema)
        violations = [
            Violation(path=error.json_path, message=error.message, validator=str(error.validator))
            for error in validator.iter_errors(instance)
        ]
        log.debug("Document validated.", violation_count=len(violations))
        return violations

    def validate(self, collection: str, document: Any) -> None:
        """Raises DocumentValidationError with every violation if the document is invalid."""
        violations = self.collect_violations(collection, document)
        if violations:
            raise DocumentValidationError(violations, collection=collection)

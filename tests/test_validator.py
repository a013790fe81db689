"""
Tests for SchemaValidator, the fetch/convert/validate pipeline.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

import pytest
import structlog
from bson import ObjectId
from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError

from mongo_jsonschema.config import Config, ValidationConfig
from mongo_jsonschema.models import Violation
from mongo_jsonschema.schema_gen import bson_schema_to_json_schema
from mongo_jsonschema.validation import (
    DocumentSerializationError,
    DocumentValidationError,
    NoSchemaAvailableError,
    SchemaFetchError,
    SchemaValidator,
    is_no_schema_available,
    to_canonical_extended_json,
)

USERS_SCHEMA = {
    "bsonType": "object",
    "required": ["_id", "firstName", "lastName", "createdAt", "updatedAt"],
    "additionalProperties": False,
    "properties": {
        "_id": {"bsonType": "objectId"},
        "firstName": {"bsonType": "string"},
        "lastName": {"bsonType": "string"},
        "createdAt": {"bsonType": "date"},
        "updatedAt": {"bsonType": ["date", "null"]},
    },
}


class FakeFetcher:
    """Serves schemas from a dict and records the collections asked for."""

    def __init__(self, schemas: Dict[str, Any]):
        self.schemas = schemas
        self.calls: List[str] = []

    def __call__(self, collection: str) -> str:
        self.calls.append(collection)
        if collection not in self.schemas:
            raise SchemaFetchError(f"collection not found: {collection!r}", collection=collection)
        schema = self.schemas[collection]
        if schema is None:
            raise NoSchemaAvailableError(collection)
        return json.dumps(schema)


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher({"users": USERS_SCHEMA, "logs": None})


@pytest.fixture
def validator(fetcher: FakeFetcher) -> SchemaValidator:
    return SchemaValidator(fetcher)


@pytest.fixture
def user_document() -> Dict[str, Any]:
    return {
        "_id": ObjectId(),
        "firstName": "John",
        "lastName": "Connor",
        "createdAt": datetime.now(timezone.utc),
        "updatedAt": None,
    }


def test_valid_document_passes(validator: SchemaValidator, fetcher: FakeFetcher, user_document: Dict[str, Any]) -> None:
    assert validator.validate("users", user_document) is None
    assert fetcher.calls == ["users"]


def test_valid_document_with_dates_everywhere(validator: SchemaValidator, user_document: Dict[str, Any]) -> None:
    user_document["updatedAt"] = datetime(2020, 1, 1, tzinfo=timezone.utc)
    assert validator.collect_violations("users", user_document) == []


def test_missing_required_field_is_reported(validator: SchemaValidator, user_document: Dict[str, Any]) -> None:
    del user_document["firstName"]

    with pytest.raises(DocumentValidationError) as exc_info:
        validator.validate("users", user_document)

    error = exc_info.value
    assert error.collection == "users"
    assert len(error.violations) == 1
    assert error.violations[0].validator == "required"
    assert "firstName" in error.violations[0].message
    assert "firstName" in str(error)


def test_wrong_type_is_reported_with_path(validator: SchemaValidator, user_document: Dict[str, Any]) -> None:
    user_document["firstName"] = None

    violations = validator.collect_violations("users", user_document)

    assert violations == [
        Violation(path="$.firstName", message="None is not of type 'string'", validator="type")
    ]


def test_all_violations_are_aggregated(validator: SchemaValidator, user_document: Dict[str, Any]) -> None:
    user_document["firstName"] = 42
    user_document["nickname"] = "T-800"
    del user_document["lastName"]

    with pytest.raises(DocumentValidationError) as exc_info:
        validator.validate("users", user_document)

    keywords = sorted(violation.validator for violation in exc_info.value.violations)
    assert keywords == ["additionalProperties", "required", "type"]
    assert str(exc_info.value).count("; ") == 2


def test_violations_keep_jsonschema_order(validator: SchemaValidator, user_document: Dict[str, Any]) -> None:
    user_document["firstName"] = 42
    user_document["lastName"] = 7
    del user_document["updatedAt"]

    violations = validator.collect_violations("users", user_document)

    instance = json.loads(to_canonical_extended_json(user_document))
    expected = Draft7Validator(bson_schema_to_json_schema(USERS_SCHEMA)).iter_errors(instance)
    assert [violation.path for violation in violations] == [error.json_path for error in expected]
    # Both type violations are reported, none merged
    type_paths = [violation.path for violation in violations if violation.validator == "type"]
    assert sorted(type_paths) == ["$.firstName", "$.lastName"]


@pytest.fixture
def unconfigured_logging():
    root = logging.getLogger()
    saved_level, saved_handlers = root.level, root.handlers[:]
    root.setLevel(logging.WARNING)
    root.handlers = []
    structlog.reset_defaults()
    yield
    root.setLevel(saved_level)
    root.handlers = saved_handlers


def test_validation_writes_nothing_without_logging_setup(
    unconfigured_logging, fetcher: FakeFetcher, user_document: Dict[str, Any], capsys
) -> None:
    validator = SchemaValidator(fetcher)
    validator.validate("users", user_document)
    user_document["firstName"] = 42
    assert len(validator.collect_violations("users", user_document)) == 1

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""


def test_plain_string_id_matches_simplified_form(validator: SchemaValidator, user_document: Dict[str, Any]) -> None:
    user_document["_id"] = str(ObjectId())
    assert validator.collect_violations("users", user_document) == []


def test_no_schema_available_is_distinguishable(validator: SchemaValidator) -> None:
    with pytest.raises(NoSchemaAvailableError) as exc_info:
        validator.validate("logs", {"message": "hello"})

    assert is_no_schema_available(exc_info.value)
    assert exc_info.value.collection == "logs"


def test_fetch_errors_propagate(validator: SchemaValidator) -> None:
    with pytest.raises(SchemaFetchError) as exc_info:
        validator.validate("missing", {})

    assert not is_no_schema_available(exc_info.value)
    assert "collection not found" in str(exc_info.value)


def test_serialization_errors_are_wrapped(fetcher: FakeFetcher) -> None:
    def broken_serializer(document: Any) -> str:
        raise ValueError("cannot encode")

    validator = SchemaValidator(fetcher, serialize_document=broken_serializer)

    with pytest.raises(DocumentSerializationError) as exc_info:
        validator.validate("users", {})
    assert isinstance(exc_info.value.__cause__, ValueError)


def test_unserializable_document_raises(validator: SchemaValidator) -> None:
    with pytest.raises(DocumentSerializationError):
        validator.validate("users", {"_id": object()})


def test_invalid_converted_schema_raises_schema_error(fetcher: FakeFetcher) -> None:
    fetcher.schemas["counters"] = {"bsonType": "object", "properties": {"n": {"type": 5}}}
    validator = SchemaValidator(fetcher)

    with pytest.raises(SchemaError):
        validator.validate("counters", {"n": 1})


@pytest.mark.parametrize("draft", ["draft4", "draft6", "draft7", "draft2019-09", "draft2020-12"])
def test_every_supported_draft_validates(fetcher: FakeFetcher, user_document: Dict[str, Any], draft: str) -> None:
    validator = SchemaValidator(fetcher, app_config=Config(validation=ValidationConfig(draft=draft)))
    assert validator.collect_violations("users", user_document) == []


def test_custom_serializer_is_used(fetcher: FakeFetcher) -> None:
    fetcher.schemas["events"] = {"bsonType": "object", "required": ["kind"]}
    validator = SchemaValidator(fetcher, serialize_document=lambda document: '{"kind": "created"}')

    assert validator.collect_violations("events", object()) == []

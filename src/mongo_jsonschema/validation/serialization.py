"""Serialization of BSON documents to canonical MongoDB Extended JSON."""
from typing import Any

from bson import json_util
from bson.errors import BSONError
from bson.json_util import CANONICAL_JSON_OPTIONS

from .exceptions import DocumentSerializationError


def to_canonical_extended_json(document: Any) -> str:
    """
    Encodes a document as canonical Extended JSON.

    Dates become `{"$date": {"$numberLong": ...}}`, ObjectIds `{"$oid": ...}`
    and so on, matching the wire shapes the converted schemas expect.
    """
    try:
        return json_util.dumps(document, json_options=CANONICAL_JSON_OPTIONS)
    except (TypeError, ValueError, BSONError) as e:
        raise DocumentSerializationError(f"Unable to serialize document: {e}") from e

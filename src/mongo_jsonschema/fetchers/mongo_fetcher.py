"""
Fetches collection `$jsonSchema` validators from MongoDB collection specifications.
"""
import logging
from typing import Any, Callable, Iterable, Mapping, Optional

import structlog
from bson import json_util
from bson.json_util import RELAXED_JSON_OPTIONS
from pymongo.database import Database
from pymongo.errors import PyMongoError

from ..validation.exceptions import NoSchemaAvailableError, SchemaFetchError

# Stdlib-backed: silent until logging is configured
logger = structlog.wrap_logger(logging.getLogger(__name__))

# Returns collection specifications as yielded by Database.list_collections()
SpecificationSource = Callable[[], Iterable[Mapping[str, Any]]]


class MongoSchemaFetcher:
    """
    Looks up a collection by name among the database's collection
    specifications and returns its `$jsonSchema` as relaxed Extended JSON.

    Instances are callables, usable wherever a schema fetcher is expected.
    """

    def __init__(self, list_collection_specs: SpecificationSource):
        self.list_collection_specs = list_collection_specs
        self.logger = logger.bind(service="MongoSchemaFetcher")

    @classmethod
    def from_database(cls, database: Database) -> "MongoSchemaFetcher":
        return cls(lambda: database.list_collections())

    def _find_specification(self, collection: str) -> Optional[Mapping[str, Any]]:
        try:
            for specification in self.list_collection_specs():
                if specification.get("name") == collection:
                    return specification
        except PyMongoError as e:
            raise SchemaFetchError(f"unable to list collections: {e}", collection=collection) from e
        return None

    def __call__(self, collection: str) -> str:
        specification = self._find_specification(collection)
        if specification is None:
            raise SchemaFetchError(f"collection not found: {collection!r}", collection=collection)

        validator = (specification.get("options") or {}).get("validator")
        if not isinstance(validator, Mapping):
            raise NoSchemaAvailableError(collection)

        json_schema = validator.get("$jsonSchema")
        if not isinstance(json_schema, Mapping):
            # Query-operator validators carry no $jsonSchema
            raise NoSchemaAvailableError(collection)

        self.logger.debug("Fetched collection schema.", collection=collection)
        return json_util.dumps(json_schema, json_options=RELAXED_JSON_OPTIONS)

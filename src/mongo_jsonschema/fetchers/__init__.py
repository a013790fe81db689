"""
Schema fetchers backed by a MongoDB deployment.
"""

from .mongo_fetcher import MongoSchemaFetcher

__all__ = [
    "MongoSchemaFetcher",
]

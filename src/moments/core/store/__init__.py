from moments.config import Config
from moments.core.store.base import (
    Condition,
    ConditionOperator,
    DocumentStore,
    Record,
    RecordPage,
    RecordQuery,
)
from moments.core.store.memory import InMemoryDocumentStore
from moments.core.store.mongo import MongoDocumentStore


def create_document_store(config: Config) -> DocumentStore:
    """MongoDB when a database URL is configured, the in-process store otherwise."""
    if config.database_url:
        return MongoDocumentStore(config.database_url)
    return InMemoryDocumentStore()


__all__ = [
    "Condition",
    "ConditionOperator",
    "DocumentStore",
    "InMemoryDocumentStore",
    "MongoDocumentStore",
    "Record",
    "RecordPage",
    "RecordQuery",
    "create_document_store",
]

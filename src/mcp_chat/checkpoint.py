from __future__ import annotations

import logging

from langgraph.checkpoint.base import BaseCheckpointSaver
from langgraph.checkpoint.memory import InMemorySaver
from langgraph.checkpoint.mongodb import MongoDBSaver
from pymongo import MongoClient

from .config import Settings
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


def create_checkpointer(settings: Settings) -> tuple[BaseCheckpointSaver, MongoClient | None]:
    """Build a checkpointer based on configuration.

    Returns the saver together with the Mongo client backing it (``None`` for
    the in-memory backend) so the owner can close the connection on teardown.
    """

    backend = settings.checkpointer_backend
    if backend == "memory":
        logger.info("[CHECKPOINT] Using in-memory conversation store")
        return InMemorySaver(), None

    if not settings.mongodb_uri:
        raise ConfigurationError("MONGODB_URI must be set when CHECKPOINTER_BACKEND=mongodb")

    client: MongoClient = MongoClient(settings.mongodb_uri)
    saver = MongoDBSaver(client, db_name=settings.mongodb_db_name)
    logger.info("[CHECKPOINT] Using MongoDB conversation store (db=%s)", settings.mongodb_db_name)
    return saver, client

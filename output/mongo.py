"""MongoDB export for scraped events and speakers."""

import logging
from typing import Any, Optional

from pymongo import MongoClient

from config import MONGODB_DATABASE
from models import Event, Speaker

logger = logging.getLogger(__name__)

EVENTS_COLLECTION = "events"
SPEAKERS_COLLECTION = "speakers"


class MongoStore:
    """Bulk insert/delete over a MongoDB database."""

    def __init__(self, uri: str, database: Optional[str] = None):
        self.client = MongoClient(uri)
        self.db = self.client.get_default_database(default=database or MONGODB_DATABASE)

    def insert_many(self, collection: str, records: list[dict]) -> list[dict]:
        """Insert records and return them with their assigned `_id`."""
        if not records:
            return []
        result = self.db[collection].insert_many(records)
        for record, inserted_id in zip(records, result.inserted_ids):
            record["_id"] = inserted_id
        return records

    def delete_all(self, collection: str) -> int:
        result = self.db[collection].delete_many({})
        return result.deleted_count

    def close(self) -> None:
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


def wipe(store) -> None:
    """Remove everything from a previous run (each run is a full refresh)."""
    speakers = store.delete_all(SPEAKERS_COLLECTION)
    events = store.delete_all(EVENTS_COLLECTION)
    logger.info(f"Wiped existing data: {events} events, {speakers} speakers")


def resolve_sessions(speaker: Speaker, session_refs: dict[str, Any]) -> list[Any]:
    """Map a speaker's session ids to stored event ids, dropping unknown ones."""
    resolved = []
    for session_id in speaker.sessions:
        ref = session_refs.get(session_id)
        if ref is None:
            logger.debug(f"Dropping unknown session {session_id} from speaker {speaker.name}")
            continue
        resolved.append(ref)
    return resolved


def persist_crawl(store, events: list[Event], speakers: list[Speaker]) -> tuple[int, int]:
    """
    Insert events, then speakers referencing them by stored id.

    Events go first because speaker documents point at the `_id` values the
    store assigns to events.

    Args:
        store: Anything with insert_many(collection, records)
        events: Crawled events, inserted in order
        speakers: Canonical speakers

    Returns:
        (events inserted, speakers inserted)
    """
    inserted_events = store.insert_many(EVENTS_COLLECTION, [e.to_document() for e in events])
    logger.info(f"{len(inserted_events)} events inserted")

    session_refs = {doc["sessionId"]: doc["_id"] for doc in inserted_events}

    speaker_docs = [s.to_document(resolve_sessions(s, session_refs)) for s in speakers]
    inserted_speakers = store.insert_many(SPEAKERS_COLLECTION, speaker_docs)
    logger.info(f"{len(inserted_speakers)} speakers inserted")

    return len(inserted_events), len(inserted_speakers)

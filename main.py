#!/usr/bin/env python3
"""
Grenadine Schedule Scraper

Scrapes every session of a Grenadine event schedule together with its
speakers, merges repeated speaker listings into one record per person, and
stores both in MongoDB (a full refresh on every run).

Configuration is read from the environment or a .env file:
    BASE_URL=https://sites.grenadine.co/sites/<site>/en/<event>
    MONGODB_URI=mongodb://localhost:27017/schedule

Usage:
    python main.py
"""

import json
import logging
import sys

from pymongo.errors import PyMongoError

import config
from models import Event, Speaker
from output.mongo import MongoStore, persist_crawl, wipe
from scrapers.crawler import ScheduleCrawler
from scrapers.fetcher import PageFetcher

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
)
logger = logging.getLogger(__name__)


def print_events_table(events: list[Event]) -> None:
    """Print events in a formatted table."""
    print("\n" + "=" * 80)
    print(f"{'Session':<10} {'Title':<40} {'Start':<17} {'Speakers':>8}")
    print("=" * 80)

    for event in events:
        title = (event.title or "")[:39]
        start = event.start_time.strftime("%Y-%m-%d %H:%M") if event.start_time else "unresolved"
        print(f"{event.session_id:<10} {title:<40} {start:<17} {len(event.speakers):>8}")

    print("=" * 80)
    print(f"Total: {len(events)} events\n")


def print_speakers_table(speakers: list[Speaker]) -> None:
    """Print speakers in a formatted table."""
    print("\n" + "=" * 80)
    print(f"{'Name':<30} {'ID':<10} {'Bio':<5} {'Sessions':>8}")
    print("=" * 80)

    for speaker in speakers:
        name = (speaker.name or "")[:29]
        bio = "yes" if speaker.biography else "no"
        print(f"{name:<30} {speaker.id or '-':<10} {bio:<5} {len(speaker.sessions):>8}")

    print("=" * 80)
    print(f"Total: {len(speakers)} speakers\n")


def dump_results(events: list[Event], speakers: list[Speaker]) -> None:
    """Log the full crawl results as JSON (DEBUG level)."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug("Events: " + json.dumps([e.to_document() for e in events], indent=2, default=str))
    logger.debug("Unique speakers: " + json.dumps([s.to_document() for s in speakers], indent=2, default=str))


def main():
    if config.VERBOSE:
        logging.getLogger().setLevel(logging.DEBUG)

    if not config.validate_scraper_config():
        logger.error("BASE_URL not set. Set it in .env to the schedule site's base URL.")
        sys.exit(1)

    if not config.validate_mongo_config():
        logger.error("MONGODB_URI not set. Set it in .env to enable storage.")
        sys.exit(1)

    # Step 1: Connect and do a full refresh
    try:
        store = MongoStore(config.MONGODB_URI)
    except PyMongoError as e:
        logger.error(f"Cannot connect to MongoDB: {e}")
        sys.exit(1)

    with store:
        try:
            wipe(store)
        except PyMongoError as e:
            logger.error(f"Error wiping database: {e}")
            sys.exit(1)

        # Step 2: Crawl
        logger.info(f"Step 2: Scraping schedule from {config.BASE_URL}...")
        crawler = ScheduleCrawler(
            PageFetcher(headless=config.HEADLESS),
            config.BASE_URL,
            events_to_process=config.EVENTS_TO_PROCESS,
            speaker_delay_ms=config.DELAY_BETWEEN_SPEAKERS,
            event_delay_ms=config.DELAY_BETWEEN_EVENTS,
        )
        result = crawler.crawl()

        if not result.events:
            logger.error("No sessions found. The schedule page may not be supported.")
            sys.exit(1)

        unresolved = sum(1 for e in result.events if not e.resolved)
        if unresolved:
            logger.warning(f"{unresolved} sessions kept their raw schedule text")

        print_events_table(result.events)
        print_speakers_table(result.speakers)
        dump_results(result.events, result.speakers)

        # Step 3: Store
        logger.info("Step 3: Saving to MongoDB...")
        try:
            persist_crawl(store, result.events, result.speakers)
        except PyMongoError as e:
            logger.error(f"Failed to save results: {e}")
            sys.exit(1)

    logger.info("Done!")


if __name__ == "__main__":
    main()

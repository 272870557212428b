"""Three-phase crawl of a Grenadine schedule: calendar, sessions, speakers."""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from enrichment.datetimes import NormalizationError, normalize_schedule
from enrichment.reconciler import SpeakerReconciler
from models import Event, SessionDetails, Speaker, SpeakerProfile, SpeakerRole
from scrapers import grenadine
from scrapers.fetcher import FetchError, PageFetcher

logger = logging.getLogger(__name__)


@dataclass
class CrawlResult:
    events: list[Event] = field(default_factory=list)
    speakers: list[Speaker] = field(default_factory=list)


class ScheduleCrawler:
    """
    Crawls a schedule one request at a time.

    Events are processed in calendar order and speakers in page order. A
    session page that fails to load leaves its event with the raw calendar
    text; nothing is retried.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        base_url: str,
        reconciler: Optional[SpeakerReconciler] = None,
        events_to_process: int = 0,
        speaker_delay_ms: int = 0,
        event_delay_ms: int = 0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.fetcher = fetcher
        self.base_url = base_url.rstrip("/")
        self.reconciler = reconciler or SpeakerReconciler(self.fetch_speaker_profile)
        self.events_to_process = events_to_process
        self.speaker_delay = speaker_delay_ms / 1000
        self.event_delay = event_delay_ms / 1000
        self._sleep = sleep

    # -------------------------------------------------------------------------
    # Page fetches
    # -------------------------------------------------------------------------

    def fetch_calendar(self) -> list[Event]:
        return self.fetcher.fetch(
            grenadine.calendar_url(self.base_url),
            grenadine.extract_calendar_events,
            timeout_ms=grenadine.CALENDAR_TIMEOUT_MS,
        )

    def fetch_session_details(self, session_id: str) -> SessionDetails:
        return self.fetcher.fetch(
            grenadine.session_url(self.base_url, session_id),
            grenadine.extract_session_details,
            wait_for=grenadine.SESSION_SPEAKERS_SELECTOR,
            timeout_ms=grenadine.SESSION_TIMEOUT_MS,
        )

    def fetch_speaker_profile(self, profile_url: str) -> SpeakerProfile:
        return self.fetcher.fetch(
            profile_url,
            grenadine.extract_speaker_profile,
            timeout_ms=grenadine.PROFILE_TIMEOUT_MS,
        )

    # -------------------------------------------------------------------------
    # Crawl
    # -------------------------------------------------------------------------

    def crawl(self) -> CrawlResult:
        """Run all three phases and return events plus canonical speakers."""
        logger.info("Phase 1: Scraping calendar...")
        try:
            events = self.fetch_calendar()
        except FetchError as e:
            logger.error(f"Error scraping calendar events: {e}")
            return CrawlResult()

        if self.events_to_process > 0 and len(events) > self.events_to_process:
            logger.info(f"Limiting crawl to first {self.events_to_process} of {len(events)} events")
            events = events[:self.events_to_process]

        logger.info("Phase 2: Scraping sessions and speakers...")
        for i, event in enumerate(events):
            if i > 0:
                self._sleep(self.event_delay)

            logger.info(f"Processing event {i + 1}/{len(events)}: {event.session_id}")
            try:
                self.process_event(event)
            except Exception as e:
                # Whatever was resolved before the error stays on the event
                logger.error(f"Failed to process session details: {event.session_id} ({e})")

        speakers = self.reconciler.speakers
        resolved = sum(1 for e in events if e.resolved)
        logger.info(
            f"Crawl complete: {resolved}/{len(events)} sessions resolved, "
            f"{len(speakers)} unique speakers"
        )
        return CrawlResult(events=events, speakers=speakers)

    def process_event(self, event: Event) -> bool:
        """
        Resolve one event from its session page and merge its speakers.

        Returns:
            False if the session page could not be loaded
        """
        try:
            details = self.fetch_session_details(event.session_id)
        except FetchError as e:
            logger.error(f"Failed to process session details: {event.session_id} ({e.reason})")
            return False

        event.session_date_text = details.date_text
        try:
            times = normalize_schedule(details.date_text, event.session_time)
        except NormalizationError as e:
            logger.warning(f"Keeping raw schedule text for {event.session_id}: {e}")
        else:
            event.date = times.date
            event.start_time = times.start_time
            event.end_time = times.end_time
            event.session_time = None
            event.session_date_text = None

        event.speakers = [SpeakerRole(id=s.id, role=s.role) for s in details.speakers]

        logger.info(f"Processing {len(details.speakers)} speakers for event {event.session_id}")
        for j, observation in enumerate(details.speakers):
            if j > 0:
                self._sleep(self.speaker_delay)
            self.reconciler.observe(observation, event.session_id)

        return True

"""Page extraction for Grenadine event schedule sites."""

import logging
import re
from typing import Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from models import Event, SessionDetails, SocialLinks, SpeakerObservation, SpeakerProfile

logger = logging.getLogger(__name__)

# Selectors and wait budgets per page type
CALENDAR_TIMEOUT_MS = 30000

SESSION_SPEAKERS_SELECTOR = ".d-flex.flex-wrap.justify-content-center.my-5"
SESSION_TIMEOUT_MS = 5000

PROFILE_TIMEOUT_MS = 30000

SOCIAL_NETWORKS = ["facebook", "twitter", "instagram", "website"]

SPEAKER_ID_PATTERN = re.compile(r"/people/(\d+)")
SESSION_ID_PATTERN = re.compile(r"/schedule/([^/?#]+)")


def calendar_url(base_url: str) -> str:
    return f"{base_url}/schedule?date=all"


def session_url(base_url: str, session_id: str) -> str:
    return f"{base_url}/schedule/{session_id}/"


def extract_speaker_id(url: Optional[str]) -> Optional[str]:
    """Get the speaker id from a profile URL like '.../people/123'."""
    if not url:
        return None
    match = SPEAKER_ID_PATTERN.search(url)
    return match.group(1) if match else None


def extract_session_id(url: Optional[str]) -> Optional[str]:
    """Get the session id from a link like '.../schedule/456/title'."""
    if not url:
        return None
    match = SESSION_ID_PATTERN.search(url)
    return match.group(1) if match else None


def _text(element, selector: str) -> Optional[str]:
    """Stripped text of the first match, or None."""
    found = element.select_one(selector)
    if not found:
        return None
    text = found.get_text(" ", strip=True)
    return text or None


def _absolute_url(page_url: str, link: str) -> Optional[str]:
    """Resolve a link against its page; malformed links resolve to None."""
    try:
        return urljoin(page_url, link.strip())
    except ValueError as e:
        logger.warning(f"Ignoring malformed link {link!r}: {e}")
        return None


def _href(element, selector: str, page_url: str) -> Optional[str]:
    found = element.select_one(selector)
    if not found or not found.get("href"):
        return None
    return _absolute_url(page_url, found["href"])


def extract_calendar_events(soup: BeautifulSoup, page_url: str) -> list[Event]:
    """
    Extract one raw Event per session from the schedule overview.

    Session markers can repeat on the page (e.g. a session shown in several
    tracks); the first occurrence of each session id wins.
    """
    events: dict[str, Event] = {}

    for marker in soup.select("[data-session-id]"):
        session_id = (marker.get("data-session-id") or "").strip()
        if not session_id or session_id in events:
            continue

        events[session_id] = Event(
            session_id=session_id,
            title=_text(marker, ".card-title"),
            description=_text(marker, ".card-description-text"),
            session_time=_text(marker, ".time-muted"),
            location=_text(marker, ".text-small a"),
        )

    logger.info(f"Scraped {len(events)} calendar events")
    return list(events.values())


def _extract_session_speaker(card, page_url: str) -> SpeakerObservation:
    profile_url = _href(card, "a", page_url)
    img = card.select_one("img")
    photo_url = _absolute_url(page_url, img["src"]) if img and img.get("src") else None

    speaker_id = extract_speaker_id(profile_url)
    if speaker_id is None:
        logger.debug(f"No speaker id in profile URL: {profile_url}")

    return SpeakerObservation(
        id=speaker_id,
        name=_text(card, "p.text-dark.text-small.mb-0"),
        photo_url=photo_url,
        role=_text(card, ".badge"),
        profile_url=profile_url,
    )


def extract_session_details(soup: BeautifulSoup, page_url: str) -> SessionDetails:
    """Extract the session date and the speakers listed on a session page."""
    # Header reads like "2:00 PM - 3:00 PM, Friday 4 Oct 2024 (1 hour)"
    date_text = None
    header = _text(soup, ".time-muted")
    if header and "," in header:
        date_text = header.split(",", 1)[1].strip() or None

    speakers = [
        _extract_session_speaker(card, page_url)
        for card in soup.select(f"{SESSION_SPEAKERS_SELECTOR} > div")
    ]

    return SessionDetails(date_text=date_text, speakers=speakers)


def extract_speaker_profile(soup: BeautifulSoup, page_url: str) -> SpeakerProfile:
    """Extract biography, social links and other sessions from a speaker page."""
    bio_elem = soup.select_one(".person-published-bio")
    biography = bio_elem.get_text("\n", strip=True) if bio_elem else ""

    links = {
        network: _href(soup, f".social-media-container a.{network}:not(.admin)", page_url)
        for network in SOCIAL_NETWORKS
    }

    sessions = []
    for link in soup.select(".timeline-item .card-title"):
        session_id = extract_session_id(link.get("href"))
        if session_id and session_id not in sessions:
            sessions.append(session_id)

    logger.debug(f"Profile {page_url}: bio {len(biography)} chars, {len(sessions)} sessions")

    return SpeakerProfile(
        biography=biography,
        social_links=SocialLinks(**links),
        sessions=sessions,
    )

"""Shared test fixtures and configuration."""

import pytest
from bson import ObjectId
from pymongo.errors import OperationFailure

from scrapers.fetcher import FetchError, PageFetcher

BASE_URL = "https://sites.grenadine.co/sites/demo/en/conf"

CALENDAR_HTML = """
<div class="schedule">
  <div class="card" data-session-id="101">
    <a class="card-title" href="/sites/demo/en/conf/schedule/101/opening">Opening Keynote</a>
    <div class="card-description-text">Welcome to the conference.</div>
    <span class="time-muted">9:00 AM - 10:00 AM | 1 hour</span>
    <div class="text-small"><a href="#">Main Hall</a></div>
  </div>
  <div class="card" data-session-id="102">
    <a class="card-title" href="/sites/demo/en/conf/schedule/102/panel">Panel: Open Data</a>
    <div class="card-description-text">Who owns public data?</div>
    <span class="time-muted">2:00 PM - 3:00 PM | 1 hour</span>
    <div class="text-small"><a href="#">Room B</a></div>
  </div>
  <div class="card" data-session-id="101">
    <a class="card-title" href="/sites/demo/en/conf/schedule/101/opening">Opening Keynote (Track 2)</a>
    <span class="time-muted">9:00 AM - 10:00 AM | 1 hour</span>
  </div>
  <div class="card" data-session-id="103">
    <a class="card-title" href="/sites/demo/en/conf/schedule/103/closing">Closing Remarks</a>
    <span class="time-muted">4:00 PM - 4:30 PM | 30 minutes</span>
    <div class="text-small"><a href="#">Main Hall</a></div>
  </div>
</div>
"""


def speaker_card(name: str, role: str, person_id: str = None) -> str:
    link = f'<a href="/sites/demo/en/conf/people/{person_id}">' if person_id else "<div>"
    close = "</a>" if person_id else "</div>"
    return (
        f"<div>{link}<img src=\"https://cdn.example.com/{name.split()[0].lower()}.jpg\">{close}"
        f'<p class="text-dark text-small mb-0">{name}</p>'
        f'<span class="badge">{role}</span></div>'
    )


# Unbalanced bracket in the host; urljoin rejects it as an invalid IPv6 URL
MALFORMED_HREF = "http://[broken/people/13"

MALFORMED_SPEAKER_CARD = (
    f'<div><a href="{MALFORMED_HREF}"><img src="http://[broken/photo.jpg"></a>'
    '<p class="text-dark text-small mb-0">Broken Link</p>'
    '<span class="badge">Panelist</span></div>'
)


def session_html(header: str, *cards: str) -> str:
    return (
        f'<p class="time-muted">{header}</p>'
        '<div class="d-flex flex-wrap justify-content-center my-5">'
        + "".join(cards)
        + "</div>"
    )


def profile_html(bio: str, socials: dict, session_ids: list[str]) -> str:
    links = "".join(f'<a class="{cls}" href="{href}">x</a>' for cls, href in socials.items())
    timeline = "".join(
        f'<div class="timeline-item"><a class="card-title" '
        f'href="{BASE_URL}/schedule/{sid}/talk">Talk</a></div>'
        for sid in session_ids
    )
    bio_html = f'<div class="person-published-bio"><p>{bio}</p></div>' if bio else ""
    return f'{bio_html}<div class="social-media-container">{links}</div>{timeline}'


def demo_site() -> dict[str, str]:
    """Pages of a small three-session schedule, keyed by URL."""
    return {
        f"{BASE_URL}/schedule?date=all": CALENDAR_HTML,
        f"{BASE_URL}/schedule/101/": session_html(
            "9:00 AM - 10:00 AM, Friday 4 Oct 2024 (1 hour)",
            speaker_card("Ada Lovelace", "Keynote", "11"),
        ),
        f"{BASE_URL}/schedule/102/": session_html(
            "2:00 PM - 3:00 PM, Friday 4 Oct 2024 (1 hour)",
            speaker_card("Ada Lovelace", "Moderator", "11"),
            speaker_card("Grace Hopper", "Panelist", "12"),
            speaker_card("Guest Panelist", "Panelist"),
        ),
        f"{BASE_URL}/schedule/103/": session_html(
            "4:00 PM - 4:30 PM, Saturday 5 Oct 2024 (30 minutes)",
            speaker_card("Grace Hopper", "Speaker", "12"),
        ),
        f"{BASE_URL}/people/11": profile_html(
            "Mathematician and writer.",
            {
                "twitter": "https://twitter.com/ada",
                "twitter admin": "https://twitter.com/site-admin",
                "website": "https://ada.example.com",
            },
            ["101", "102", "999"],
        ),
        f"{BASE_URL}/people/12": profile_html(
            "Computer scientist.",
            {"facebook": "https://facebook.com/grace"},
            ["102", "103"],
        ),
    }


class FakeFetcher(PageFetcher):
    """PageFetcher that serves canned HTML instead of launching a browser."""

    def __init__(self, pages: dict[str, str]):
        super().__init__(headless=True)
        self.pages = dict(pages)
        self.failing: set[str] = set()
        self.requests: list[str] = []

    def _load_html(self, url, wait_for, timeout_ms):
        self.requests.append(url)
        if url in self.failing or url not in self.pages:
            raise FetchError(url, f"Timeout {timeout_ms}ms exceeded")
        return self.pages[url], url


class FakeStore:
    """In-memory stand-in for MongoStore."""

    def __init__(self):
        self.collections: dict[str, list[dict]] = {}
        self.fail_on: set[str] = set()
        self.calls: list[str] = []

    def insert_many(self, collection, records):
        self.calls.append(collection)
        if collection in self.fail_on:
            raise OperationFailure(f"insert into {collection} rejected")
        for record in records:
            record["_id"] = ObjectId()
        self.collections.setdefault(collection, []).extend(records)
        return records

    def delete_all(self, collection):
        removed = len(self.collections.get(collection, []))
        self.collections[collection] = []
        return removed


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher(demo_site())


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def sleeps() -> list[float]:
    """Records pacing delays instead of sleeping."""
    return []

"""Data models for schedule scraping."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass
class SpeakerRole:
    """A speaker's appearance on one session (role belongs to the session)."""
    id: Optional[str]
    role: Optional[str] = None

    def to_document(self) -> dict:
        return {"id": self.id, "role": self.role}


@dataclass
class Event:
    """Represents one scheduled session.

    Created from the calendar listing with raw text only. Once its detail page
    is read, the resolved timestamps and speaker roles are filled in.
    """
    session_id: str
    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None

    # Raw text from the listing/detail pages
    session_time: Optional[str] = None
    session_date_text: Optional[str] = None

    # Resolved from the detail page
    date: Optional[datetime] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    speakers: list[SpeakerRole] = field(default_factory=list)

    @property
    def resolved(self) -> bool:
        return self.start_time is not None

    def to_document(self) -> dict[str, Any]:
        """Build the stored document; unresolved events keep their raw text."""
        doc = {
            "sessionId": self.session_id,
            "sessionTitle": self.title,
            "sessionDescription": self.description,
            "sessionLocation": self.location,
            "sessionDate": self.date,
            "sessionStartTime": self.start_time,
            "sessionEndTime": self.end_time,
            "speakers": [s.to_document() for s in self.speakers],
        }
        if not self.resolved:
            doc["sessionTime"] = self.session_time
            if self.session_date_text is not None:
                doc["sessionDateText"] = self.session_date_text
        return doc


@dataclass
class SocialLinks:
    facebook: Optional[str] = None
    twitter: Optional[str] = None
    instagram: Optional[str] = None
    website: Optional[str] = None

    def to_document(self) -> dict:
        return {
            "facebook": self.facebook,
            "twitter": self.twitter,
            "instagram": self.instagram,
            "website": self.website,
        }


@dataclass
class SpeakerObservation:
    """A partial speaker record as listed on a session detail page."""
    id: Optional[str]
    name: Optional[str] = None
    photo_url: Optional[str] = None
    role: Optional[str] = None
    profile_url: Optional[str] = None


@dataclass
class SessionDetails:
    """Fields read from a session detail page."""
    date_text: Optional[str]
    speakers: list[SpeakerObservation] = field(default_factory=list)


@dataclass
class SpeakerProfile:
    """Fields read from a speaker profile page."""
    biography: str = ""
    social_links: SocialLinks = field(default_factory=SocialLinks)
    sessions: list[str] = field(default_factory=list)


@dataclass
class ScheduleTimes:
    date: datetime
    start_time: datetime
    end_time: datetime


@dataclass
class Speaker:
    """Canonical speaker record, merged across every observation in a crawl."""
    id: Optional[str]
    name: Optional[str] = None
    photo_url: Optional[str] = None
    profile_url: Optional[str] = None
    biography: str = ""
    social_links: SocialLinks = field(default_factory=SocialLinks)

    # Session ids in first-seen order; dict keys keep it a set
    _sessions: dict[str, None] = field(default_factory=dict, repr=False)

    @property
    def sessions(self) -> list[str]:
        return list(self._sessions)

    def add_sessions(self, *session_ids: str) -> list[str]:
        """Add session ids not already present. Returns the ones added."""
        added = []
        for session_id in session_ids:
            if session_id and session_id not in self._sessions:
                self._sessions[session_id] = None
                added.append(session_id)
        return added

    def to_document(self, session_refs: Optional[list[Any]] = None) -> dict[str, Any]:
        """Build the stored document.

        Args:
            session_refs: Stored event identifiers replacing the natural
                session ids. Defaults to the session ids themselves.
        """
        return {
            "id": self.id,
            "name": self.name,
            "photoUrl": self.photo_url,
            "profileUrl": self.profile_url,
            "biography": self.biography,
            "socialLinks": self.social_links.to_document(),
            "sessions": self.sessions if session_refs is None else list(session_refs),
        }

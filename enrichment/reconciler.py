"""Merge repeated, partial speaker observations into canonical records."""

import logging
from typing import Callable, Optional

from models import Speaker, SpeakerObservation, SpeakerProfile
from scrapers.fetcher import FetchError

logger = logging.getLogger(__name__)


class SpeakerReconciler:
    """
    Holds the deduplicated speaker set for one crawl.

    Speakers are keyed by their site id. An observation without an id can
    never be matched, so it always becomes a record of its own.

    Profile pages are fetched through fetch_profile only while a speaker's
    biography is empty; a failed fetch leaves it empty, so a later observation
    of the same speaker tries again.
    """

    def __init__(self, fetch_profile: Callable[[str], SpeakerProfile]):
        self.fetch_profile = fetch_profile
        self._speakers: list[Speaker] = []
        self._by_id: dict[str, Speaker] = {}

    def __len__(self) -> int:
        return len(self._speakers)

    @property
    def speakers(self) -> list[Speaker]:
        """Canonical speakers in first-seen order."""
        return list(self._speakers)

    def get(self, speaker_id: str) -> Optional[Speaker]:
        return self._by_id.get(speaker_id)

    def observe(self, observation: SpeakerObservation, session_id: str) -> Speaker:
        """
        Merge one speaker observation from a session into the canonical set.

        Args:
            observation: Speaker as listed on the session page
            session_id: Session the speaker was listed on

        Returns:
            The canonical record the observation was merged into
        """
        logger.info(f"Processing speaker: {observation.name} URL: {observation.profile_url}")

        existing = self._by_id.get(observation.id) if observation.id else None

        if existing is None:
            speaker = Speaker(
                id=observation.id,
                name=observation.name,
                photo_url=observation.photo_url,
                profile_url=observation.profile_url,
            )
            speaker.add_sessions(session_id)

            if observation.profile_url:
                self._enrich(speaker, observation.profile_url)
            else:
                logger.warning(f"No URL provided for new speaker: {observation.name}")

            self._speakers.append(speaker)
            if speaker.id:
                self._by_id[speaker.id] = speaker
            return speaker

        logger.debug(f"Speaker already exists: {existing.name}")

        # Fill gaps only, never overwrite what is known
        existing.name = existing.name or observation.name
        existing.photo_url = existing.photo_url or observation.photo_url
        existing.profile_url = existing.profile_url or observation.profile_url

        if existing.add_sessions(session_id):
            logger.info(f"Added session {session_id} to speaker {existing.name}")

        if not existing.biography and observation.profile_url:
            logger.info(f"Updating existing speaker: {existing.name}")
            self._enrich(existing, observation.profile_url)

        return existing

    def _enrich(self, speaker: Speaker, profile_url: str) -> None:
        """Copy profile page details onto a speaker; on failure it stays as is."""
        try:
            profile = self.fetch_profile(profile_url)
        except FetchError as e:
            logger.warning(f"Failed to fetch details for speaker {speaker.name}: {e.reason}")
            return
        except Exception as e:
            logger.error(f"Error reading profile of speaker {speaker.name} ({profile_url}): {e}")
            return

        speaker.biography = profile.biography
        speaker.social_links = profile.social_links
        added = speaker.add_sessions(*profile.sessions)

        logger.info(
            f"Speaker details fetched for {speaker.name}: "
            f"bio {len(profile.biography)} chars, {len(added)} new sessions"
        )

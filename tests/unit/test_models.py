"""Tests for event and speaker documents."""

from datetime import datetime

from models import Event, SocialLinks, Speaker, SpeakerRole


class TestEventDocument:
    def test_resolved_event_drops_raw_text(self):
        event = Event(
            session_id="101",
            title="Opening Keynote",
            location="Main Hall",
            date=datetime(2024, 10, 4),
            start_time=datetime(2024, 10, 4, 9, 0),
            end_time=datetime(2024, 10, 4, 10, 0),
            speakers=[SpeakerRole(id="11", role="Keynote")],
        )

        doc = event.to_document()

        assert doc["sessionId"] == "101"
        assert doc["sessionLocation"] == "Main Hall"
        assert doc["sessionStartTime"] == datetime(2024, 10, 4, 9, 0)
        assert doc["speakers"] == [{"id": "11", "role": "Keynote"}]
        assert "sessionTime" not in doc
        assert "sessionDateText" not in doc

    def test_unresolved_event_keeps_raw_text(self):
        event = Event(session_id="102", session_time="2:00 PM - 3:00 PM | 1 hour")

        doc = event.to_document()

        assert not event.resolved
        assert doc["sessionTime"] == "2:00 PM - 3:00 PM | 1 hour"
        assert doc["sessionDate"] is None
        assert doc["speakers"] == []
        assert "sessionDateText" not in doc


class TestSpeaker:
    def test_sessions_have_no_duplicates(self):
        speaker = Speaker(id="11")
        assert speaker.add_sessions("101", "102", "101") == ["101", "102"]
        assert speaker.add_sessions("102", "", "103") == ["103"]
        assert speaker.sessions == ["101", "102", "103"]

    def test_document(self):
        speaker = Speaker(
            id="11",
            name="Ada Lovelace",
            biography="Mathematician.",
            social_links=SocialLinks(twitter="https://twitter.com/ada"),
        )
        speaker.add_sessions("101")

        doc = speaker.to_document(["oid-1"])

        assert doc["sessions"] == ["oid-1"]
        assert doc["socialLinks"] == {
            "facebook": None,
            "twitter": "https://twitter.com/ada",
            "instagram": None,
            "website": None,
        }
        assert speaker.to_document()["sessions"] == ["101"]

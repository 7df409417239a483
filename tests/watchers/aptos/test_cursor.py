"""Tests for the event cursor."""

from guardian.watchers.aptos.cursor import EventCursor


class TestEventCursor:

    def test_starts_bootstrapping(self):
        cursor = EventCursor()
        assert cursor.bootstrapping
        assert cursor.query_params() == {"limit": 1}

    def test_advance_past_sequence(self):
        cursor = EventCursor()
        cursor.advance(5)
        assert not cursor.bootstrapping
        assert cursor.next_sequence == 6
        assert cursor.query_params() == {"start": 6}

    def test_advance_from_sequence_zero(self):
        cursor = EventCursor()
        cursor.advance(0)
        assert cursor.next_sequence == 1
        assert not cursor.bootstrapping

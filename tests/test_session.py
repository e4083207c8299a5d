"""
Tests for session headers and relative timestamps.
"""

import pytest
from qdebug.session import SessionTracker

from conftest import WALLCLOCK


@pytest.fixture
def tracker(clock):
    return SessionTracker(window=2.0, clock=clock, wallclock=lambda: WALLCLOCK)


class TestHeaders:
    """Test when headers are emitted."""

    def test_first_call_has_header(self, tracker):
        assert tracker.header("main", "/src/a.py", 10) == "[14:00:36 a.py:10 main]"

    def test_same_site_within_window(self, tracker, clock):
        tracker.header("main", "/src/a.py", 10)
        clock.advance(0.5)
        assert tracker.header("main", "/src/a.py", 11) == ""

    def test_window_elapsed(self, tracker, clock):
        tracker.header("main", "/src/a.py", 10)
        clock.advance(2.0)
        assert tracker.header("main", "/src/a.py", 10) != ""

    def test_function_changed(self, tracker, clock):
        tracker.header("main", "/src/a.py", 10)
        clock.advance(0.1)
        assert tracker.header("helper", "/src/a.py", 20) == "[14:00:36 a.py:20 helper]"

    def test_file_changed(self, tracker, clock):
        tracker.header("main", "/src/a.py", 10)
        clock.advance(0.1)
        assert tracker.header("main", "/src/b.py", 10) == "[14:00:36 b.py:10 main]"

    def test_deadline_retriggers(self, tracker, clock):
        """Steady calls 1.5s apart stay in one session."""
        tracker.header("main", "/src/a.py", 10)
        for _ in range(3):
            clock.advance(1.5)
            assert tracker.header("main", "/src/a.py", 10) == ""

    def test_last_site_updated(self, tracker):
        tracker.header("main", "/src/a.py", 10)
        assert tracker.last_function == "main"
        assert tracker.last_file == "/src/a.py"


class TestTimestamps:
    """Test elapsed time display."""

    def test_starts_at_zero(self, tracker):
        tracker.header("main", "/src/a.py", 10)
        assert tracker.timestamp() == "0.000s"

    def test_counts_within_session(self, tracker, clock):
        tracker.header("main", "/src/a.py", 10)
        clock.advance(0.25)
        first = tracker.elapsed()
        clock.advance(1.5)
        tracker.header("main", "/src/a.py", 10)
        assert tracker.elapsed() > first
        assert tracker.timestamp() == "1.750s"

    def test_resets_on_new_session(self, tracker, clock):
        tracker.header("main", "/src/a.py", 10)
        clock.advance(5)
        tracker.header("main", "/src/a.py", 10)
        assert tracker.timestamp() == "0.000s"

    def test_resets_on_new_function(self, tracker, clock):
        tracker.header("main", "/src/a.py", 10)
        clock.advance(1)
        tracker.header("other", "/src/a.py", 10)
        assert tracker.timestamp() == "0.000s"

    def test_no_header_yet(self, tracker, clock):
        """Without a header the clock starts on first use."""
        assert tracker.timestamp() == "0.000s"
        clock.advance(0.5)
        assert tracker.timestamp() == "0.500s"

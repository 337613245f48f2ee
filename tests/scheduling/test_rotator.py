"""Tests for destination rotation."""

import pytest

from autosend_app.scheduling.rotator import DestinationRotator


class TestCursor:
    """Cursor over enabled destinations."""

    def test_current_with_nothing_enabled(self, make_settings, clock):
        rotator = DestinationRotator(make_settings(destinations=[]), clock)
        assert rotator.current() == ""
        assert rotator.advance() == ""
        assert rotator.position() == 0

    def test_advance_wraps(self, make_settings, clock):
        rotator = DestinationRotator(make_settings(destinations=["a", "b", "c"]), clock)
        assert [rotator.advance() for _ in range(4)] == ["b", "c", "a", "b"]
        assert rotator.position() == 2

    def test_enabled_list_is_rebuilt_from_settings(self, make_settings, clock):
        settings = make_settings(destinations=["a", "b", "c"])
        rotator = DestinationRotator(settings, clock)
        rotator.advance()
        rotator.advance()
        assert rotator.current() == "c"

        settings.set_destination_enabled(3, False)
        assert rotator.enabled_list() == ["a", "b"]
        # Cursor 2 taken modulo the new enabled count
        assert rotator.current() == "a"

    def test_reset_cursor(self, make_settings, clock):
        rotator = DestinationRotator(make_settings(destinations=["a", "b"]), clock)
        rotator.advance()
        rotator.reset_cursor()
        assert rotator.current() == "a"


class TestRotationTimer:
    """Independent rotation timer."""

    @pytest.mark.parametrize("destinations", [[], ["only"], ["a", {"id": "b", "enabled": False}]])
    def test_no_rotation_with_fewer_than_two_enabled(self, make_settings, clock, rng, destinations):
        rotator = DestinationRotator(make_settings(destinations=destinations), clock, rng=rng)
        before = rotator.current()

        assert rotator.schedule_rotation() is None
        assert not rotator.is_scheduled
        assert clock.pending() == []

        assert rotator.rotate() == before
        clock.advance(3600)
        assert rotator.current() == before

    def test_delay_drawn_within_minute_bounds(self, make_settings, clock, rng):
        rotator = DestinationRotator(make_settings(rotation=(10, 20)), clock, rng=rng)
        for _ in range(200):
            delay = rotator.schedule_rotation()
            assert 600 <= delay <= 1200
            assert rotator.remaining_seconds() == pytest.approx(delay)

    def test_rotates_when_timer_fires_and_rearms(self, make_settings, clock, rng):
        rotated = []
        rotator = DestinationRotator(
            make_settings(destinations=["a", "b"], rotation=(1, 1)),
            clock, rng=rng, on_rotated=rotated.append,
        )
        rotator.schedule_rotation()

        clock.advance(60)
        assert rotated == ["b"]
        assert rotator.is_scheduled

        clock.advance(60)
        assert rotated == ["b", "a"]

    def test_strict_alternation_over_many_rotations(self, make_settings, clock, rng):
        rotator = DestinationRotator(
            make_settings(destinations=["a", "b"], rotation=(1, 2)), clock, rng=rng
        )
        rotator.schedule_rotation()

        seen = [rotator.current()]
        while len(seen) <= 1000:
            clock.advance(rotator.remaining_seconds())
            seen.append(rotator.current())

        assert all(first != second for first, second in zip(seen, seen[1:]))
        assert set(seen) == {"a", "b"}

    def test_countdown_ticks_down(self, make_settings, clock, rng):
        rotator = DestinationRotator(make_settings(rotation=(1, 1)), clock, rng=rng)
        rotator.schedule_rotation()
        assert rotator.countdown_seconds == 60

        clock.advance(5)
        assert rotator.countdown_seconds == 55

    def test_cancel_rotation(self, make_settings, clock, rng):
        rotator = DestinationRotator(make_settings(), clock, rng=rng)
        rotator.schedule_rotation()
        rotator.cancel_rotation()

        assert rotator.remaining_seconds() is None
        assert clock.pending() == []

"""Unit tests for the slot-indexed settings store."""

import pytest

from autosend_app.config.settings import DestinationSlot, SchedulerSettings
from autosend_app.errors import ConfigurationError


class TestDestinationSlots:
    """Destination slot bookkeeping."""

    def test_slots_cover_full_range(self) -> None:
        settings = SchedulerSettings(destinations=["111"])
        slots = settings.destination_slots()
        assert list(slots) == list(range(1, 11))
        assert slots[1] == DestinationSlot("111", True)
        assert slots[2].is_empty

    def test_enabled_destinations_filters_and_keeps_slot_order(self) -> None:
        settings = SchedulerSettings(destinations=[
            "111",
            {"id": "222", "enabled": False},
            "",
            {"id": " 333 "},
        ])
        assert settings.enabled_destinations() == ["111", "333"]

    def test_set_destination_keeps_enabled_flag(self) -> None:
        settings = SchedulerSettings()
        settings.set_destination_enabled(4, False)
        entry = settings.set_destination(4, "444")
        assert entry == DestinationSlot("444", False)
        assert settings.enabled_destinations() == []

    def test_toggle_destination(self) -> None:
        settings = SchedulerSettings(destinations=["111"])
        assert settings.toggle_destination(1).enabled is False
        assert settings.toggle_destination(1).enabled is True

    def test_toggle_empty_slot_is_refused(self) -> None:
        settings = SchedulerSettings()
        with pytest.raises(ConfigurationError, match="not configured"):
            settings.toggle_destination(3)

    def test_clear_destination(self) -> None:
        settings = SchedulerSettings(destinations=["111", "222"])
        settings.clear_destination(1)
        assert settings.enabled_destinations() == ["222"]
        assert list(settings.configured_destinations()) == [2]

    @pytest.mark.parametrize("slot", [0, 11, -1])
    def test_slot_out_of_range(self, slot) -> None:
        settings = SchedulerSettings()
        with pytest.raises(ConfigurationError):
            settings.set_destination(slot, "111")

    def test_too_many_initial_destinations(self) -> None:
        with pytest.raises(ConfigurationError):
            SchedulerSettings(destinations=[str(i) for i in range(11)])


class TestMessages:
    """Message slot handling."""

    def test_default_messages(self) -> None:
        assert SchedulerSettings().active_messages() == ["Hi", "Hello", "Yo"]

    def test_blank_messages_are_skipped(self) -> None:
        settings = SchedulerSettings(messages=["one", "", "   ", None, "two"])
        assert settings.active_messages() == ["one", "two"]
        assert settings.messages()[3] == "   "

    def test_set_message(self) -> None:
        settings = SchedulerSettings(messages=[])
        settings.set_message(5, "five")
        assert settings.active_messages() == ["five"]

    def test_set_messages_limit(self) -> None:
        settings = SchedulerSettings()
        with pytest.raises(ConfigurationError):
            settings.set_messages(["x"] * 11)


class TestBoundsAndFlags:
    """Timing bounds and detection flag mutators."""

    def test_set_interval_bounds(self) -> None:
        settings = SchedulerSettings()
        settings.set_interval_bounds(5, 8)
        assert (settings.interval.min_seconds, settings.interval.max_seconds) == (5, 8)

    def test_set_interval_bounds_rejects_inverted_range(self) -> None:
        settings = SchedulerSettings()
        with pytest.raises(ConfigurationError):
            settings.set_interval_bounds(10, 5)
        assert settings.interval.min_seconds == 20

    def test_set_rotation_bounds(self) -> None:
        settings = SchedulerSettings()
        settings.set_rotation_bounds(1, 2)
        assert settings.rotation.max_minutes == 2

        with pytest.raises(ConfigurationError):
            settings.set_rotation_bounds(0, 2)

    def test_set_detection_enabled(self) -> None:
        settings = SchedulerSettings()
        settings.set_detection_enabled(False)
        assert settings.detection_enabled is False


class TestSerialization:
    """to_dict / from_dict."""

    def test_round_trip_preserves_slots(self) -> None:
        settings = SchedulerSettings(
            destinations=["111", {"id": "222", "enabled": False}],
            messages=["a", "", "b"],
        )
        restored = SchedulerSettings.from_dict(settings.to_dict())
        assert restored.destination_slots() == settings.destination_slots()
        assert restored.active_messages() == ["a", "b"]

    def test_from_dict_rejects_invalid_values(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            SchedulerSettings.from_dict({"interval": {"min_seconds": 9, "max_seconds": 3}})
        assert exc_info.value.field == "min_seconds"
        assert exc_info.value.context["errors"]

    def test_from_dict_rejects_unknown_keys(self) -> None:
        with pytest.raises(ConfigurationError, match="jitter"):
            SchedulerSettings.from_dict({"interval": {"jitter": 3}})

"""Tests for the send-event command flow."""

import json

import pytest

from sendevent.assembly.builder import ManualEventOptions
from sendevent.command import MANUAL_SOURCE, DispatchResult, execute
from sendevent.config import Settings
from sendevent.errors import ConfigurationError, EventFileError, EventValidationError
from sendevent.protocol.models import Level


def write_event(path, **fields):
    path.write_text(json.dumps(fields), encoding="utf-8")
    return path


class TestDispatchResult:
    """Test cases for result reporting."""

    def test_manual(self):
        """Test the line printed for a manual event."""
        result = DispatchResult(source=MANUAL_SOURCE, event_id="abc")
        assert result.describe() == "Event dispatched: abc"

    def test_file(self):
        """Test the line printed for a replayed file."""
        result = DispatchResult(source="/tmp/e.json", event_id="abc")
        assert result.describe() == "Event from file /tmp/e.json dispatched: abc"


class TestManualMode:
    """Test cases for manual assembly."""

    def test_single_dispatch(self, settings, transport, builder, capsys):
        """Test that one event is assembled and sent."""
        options = ManualEventOptions(level="info", messages=["hello"], tags=["a:1", "a:2"])
        results = execute(None, options, settings, transport, builder)

        assert len(transport.events) == 1
        event = transport.events[0]
        assert event.level == Level.INFO
        assert event.tags == {"a": "2"}
        assert results == [DispatchResult(source=MANUAL_SOURCE, event_id=event.event_id.hex)]
        assert capsys.readouterr().out == f"Event dispatched: {event.event_id.hex}\n"

    def test_dsn_passed_to_transport(self, settings, transport, builder):
        """Test that the configured DSN reaches the transport."""
        execute(None, ManualEventOptions(), settings, transport, builder)

        _, dsn = transport.sent[0]
        assert dsn.public_key == "abc123"
        assert dsn.project_id == "42"

    def test_validation_error_before_dispatch(self, settings, transport, builder):
        """Test that bad input prevents any send."""
        with pytest.raises(EventValidationError):
            execute(None, ManualEventOptions(tags=["novalue"]), settings, transport, builder)
        assert transport.sent == []

    def test_bad_timestamp_before_dispatch(self, settings, transport, builder):
        """Test that a bad timestamp prevents any send."""
        with pytest.raises(EventValidationError):
            execute(None, ManualEventOptions(timestamp="soon"), settings, transport, builder)
        assert transport.sent == []

    def test_missing_logfile_before_dispatch(self, settings, transport, builder, tmp_path):
        """Test that an unreadable logfile prevents any send."""
        options = ManualEventOptions(logfile=str(tmp_path / "missing.log"))
        with pytest.raises(EventFileError):
            execute(None, options, settings, transport, builder)
        assert transport.sent == []


class TestConfiguration:
    """Test cases for DSN checks."""

    def test_missing_dsn(self, transport, builder):
        """Test that a missing DSN is fatal."""
        settings = Settings(_env_file=None, dsn=None)
        with pytest.raises(ConfigurationError):
            execute(None, ManualEventOptions(), settings, transport, builder)
        assert transport.sent == []

    def test_dsn_checked_before_input(self, transport, builder):
        """Test that configuration errors win over input errors."""
        settings = Settings(_env_file=None, dsn="not a dsn")
        with pytest.raises(ConfigurationError):
            execute(None, ManualEventOptions(tags=["novalue"]), settings, transport, builder)


class TestReplayMode:
    """Test cases for file replay."""

    def test_replays_files_in_order(self, settings, transport, tmp_path, capsys):
        """Test one dispatch per file, in listing order."""
        write_event(tmp_path / "1.json", level="info")
        write_event(tmp_path / "2.json", level="warning")
        write_event(tmp_path / "3.json", level="fatal")

        results = execute(str(tmp_path / "*.json"), ManualEventOptions(), settings, transport)

        assert [e.level for e in transport.events] == [Level.INFO, Level.WARNING, Level.FATAL]
        assert [r.source for r in results] == [
            str(tmp_path / "1.json"),
            str(tmp_path / "2.json"),
            str(tmp_path / "3.json"),
        ]
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 3
        assert lines[0].startswith(f"Event from file {tmp_path / '1.json'} dispatched: ")

    def test_events_sent_unchanged(self, settings, transport, tmp_path):
        """Test that replayed events are not enriched."""
        write_event(
            tmp_path / "e.json",
            event_id="fc6d8c0c43fc4630ad850ee518f1b9d0",
            platform="javascript",
        )
        execute(str(tmp_path / "e.json"), ManualEventOptions(), settings, transport)

        event = transport.events[0]
        assert event.event_id.hex == "fc6d8c0c43fc4630ad850ee518f1b9d0"
        assert event.platform == "javascript"
        assert event.sdk is None
        assert "environ" not in event.extra
        assert event.user is None

    def test_options_ignored(self, settings, transport, tmp_path):
        """Test that manual options do not affect replayed events."""
        write_event(tmp_path / "e.json", level="info")
        options = ManualEventOptions(level="fatal", tags=["novalue"])
        execute(str(tmp_path / "e.json"), options, settings, transport)

        assert transport.events[0].level == Level.INFO

    def test_decode_failure_aborts(self, settings, transport, tmp_path):
        """Test that a bad second file stops before the third."""
        write_event(tmp_path / "1.json", level="info")
        (tmp_path / "2.json").write_text("{broken", encoding="utf-8")
        write_event(tmp_path / "3.json", level="fatal")

        with pytest.raises(EventValidationError):
            execute(str(tmp_path / "*.json"), ManualEventOptions(), settings, transport)

        assert len(transport.events) == 1
        assert transport.events[0].level == Level.INFO

    def test_no_matches(self, settings, transport, tmp_path, capsys):
        """Test that an empty match is not an error."""
        results = execute(str(tmp_path / "*.json"), ManualEventOptions(), settings, transport)

        assert results == []
        assert transport.sent == []
        assert capsys.readouterr().out == ""

    def test_missing_dsn_with_path(self, transport, tmp_path):
        """Test that the DSN is required even in replay mode."""
        write_event(tmp_path / "e.json")
        settings = Settings(_env_file=None, dsn=None)
        with pytest.raises(ConfigurationError):
            execute(str(tmp_path / "e.json"), ManualEventOptions(), settings, transport)

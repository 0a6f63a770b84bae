"""Tests for the dogseries CLI."""

import json
from unittest.mock import patch

import pytest

from dogseries.cli import load_snapshot, main
from dogseries.config import SAMPLE_CONFIG
from dogseries.exceptions import DeliveryError


@pytest.fixture
def snapshot_file(tmp_path):
    """Write a small snapshot JSON file and return its path."""
    path = tmp_path / "snapshot.json"
    path.write_text(
        json.dumps(
            {
                "num_stats": 2,
                "flush_interval": 10,
                "counters": {"hits": {"env:prod": {"value": 5, "per_second": 0.5, "flush": 10}}},
                "gauges": {"temp": {"": {"value": 21.5, "flush": 10}}},
            }
        )
    )
    return path


class TestLoadSnapshot:
    """Tests for load_snapshot."""

    def test_loads_valid_file(self, snapshot_file):
        """Test that a valid file parses into a MetricMap."""
        metrics = load_snapshot(str(snapshot_file))

        assert metrics.num_stats == 2
        assert metrics.gauges["temp"][""].value == 21.5

    def test_missing_file(self, tmp_path):
        """Test that a missing file is reported as ValueError."""
        with pytest.raises(ValueError, match="Unable to read snapshot"):
            load_snapshot(str(tmp_path / "missing.json"))

    def test_invalid_content(self, tmp_path):
        """Test that invalid JSON is reported as ValueError."""
        path = tmp_path / "bad.json"
        path.write_text('{"num_stats": "many"}')

        with pytest.raises(ValueError, match="Invalid snapshot"):
            load_snapshot(str(path))

    def test_empty_metric_name(self, tmp_path):
        """Test that a blank metric name is reported as ValueError."""
        path = tmp_path / "blank.json"
        path.write_text(json.dumps({"num_stats": 1, "gauges": {"": {"": {"value": 1}}}}))

        with pytest.raises(ValueError, match="metric names must not be empty"):
            load_snapshot(str(path))


class TestMain:
    """Tests for the CLI entry point."""

    def test_sample_config(self, capsys):
        """Test that sample-config prints the sample block."""
        main(["sample-config"])

        assert SAMPLE_CONFIG in capsys.readouterr().out

    def test_send_uses_flags(self, snapshot_file):
        """Test that send builds the config from flags and sends once."""
        with patch("dogseries.cli.DatadogClient") as client_cls:
            main(["send", str(snapshot_file), "--api-key", "flag-key", "--timeout", "1", "--hostname", "host-a"])

        config = client_cls.call_args.args[0]
        assert config.api_key == "flag-key"
        assert config.timeout == 1.0
        assert client_cls.call_args.kwargs["hostname"] == "host-a"
        client_cls.return_value.send_metrics.assert_called_once()

    def test_send_without_api_key_exits(self, snapshot_file, capsys):
        """Test that a missing API key exits with status 1."""
        with pytest.raises(SystemExit) as exc_info:
            main(["send", str(snapshot_file)])

        assert exc_info.value.code == 1
        assert "api_key is a required field" in capsys.readouterr().err

    def test_send_delivery_failure_exits(self, snapshot_file, monkeypatch, capsys):
        """Test that a delivery failure exits with status 1."""
        monkeypatch.setenv("DATADOG_API_KEY", "env-key")

        with patch("dogseries.cli.DatadogClient") as client_cls:
            client_cls.return_value.send_metrics.side_effect = DeliveryError("[datadog] received bad status code, 503")
            with pytest.raises(SystemExit) as exc_info:
                main(["send", str(snapshot_file)])

        assert exc_info.value.code == 1
        assert "received bad status code, 503" in capsys.readouterr().err

    def test_send_empty_snapshot_is_noop(self, tmp_path, monkeypatch):
        """Test that an empty snapshot succeeds without sending."""
        monkeypatch.setenv("DATADOG_API_KEY", "env-key")
        path = tmp_path / "empty.json"
        path.write_text("{}")

        with patch("dogseries.cli.DatadogClient") as client_cls:
            main(["send", str(path), "--hostname", "host-a"])

        client_cls.return_value.send_metrics.assert_not_called()

    def test_send_missing_file_exits(self, tmp_path):
        """Test that an unreadable snapshot exits with status 1."""
        with pytest.raises(SystemExit) as exc_info:
            main(["send", str(tmp_path / "missing.json")])

        assert exc_info.value.code == 1

    def test_send_empty_metric_name_exits(self, tmp_path, capsys):
        """Test that a snapshot with a blank metric name exits with status 1."""
        path = tmp_path / "blank.json"
        path.write_text(json.dumps({"num_stats": 1, "counters": {"": {"": {"value": 1}}}}))

        with patch("dogseries.cli.DatadogClient") as client_cls:
            with pytest.raises(SystemExit) as exc_info:
                main(["send", str(path), "--api-key", "abc", "--hostname", "host-a"])

        assert exc_info.value.code == 1
        assert "metric names must not be empty" in capsys.readouterr().err
        client_cls.return_value.send_metrics.assert_not_called()

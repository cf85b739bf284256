"""
CLI and Formatter Tests
=======================
"""

import json

from traffic_census.main import main
from traffic_census.models import BucketRanking, LightCount, RankedReport
from traffic_census.observability import format_text


def _write_config(tmp_path, workers=2):
    path = tmp_path / "config.yaml"
    path.write_text(f"pipeline:\n  workers: {workers}\n  backend: thread\n")
    return str(path)


class TestFormatter:
    """Tests for console rendering."""

    def test_hourly_layout(self):
        """Verify the hour-only text layout."""
        report = RankedReport(
            top_n=3,
            groups=[
                BucketRanking(
                    hour=8,
                    entries=[LightCount(light_id="L1", count=7), LightCount(light_id="L2", count=3)],
                )
            ],
        )
        assert format_text(report) == (
            "Top Congested Traffic Lights Per Hour:\n"
            "Hour 08:00\n"
            "  L1: 7 cars\n"
            "  L2: 3 cars"
        )

    def test_daily_layout(self):
        """Verify each day gets a heading with hours indented."""
        report = RankedReport(
            top_n=3,
            groups=[
                BucketRanking(day="2024-03-01", hour=8, entries=[LightCount(light_id="L1", count=1)]),
                BucketRanking(day="2024-03-01", hour=9, entries=[LightCount(light_id="L2", count=2)]),
                BucketRanking(day="2024-03-02", hour=8, entries=[LightCount(light_id="L3", count=3)]),
            ],
        )
        lines = format_text(report).splitlines()
        assert lines[1] == "Day 2024-03-01"
        assert lines[2] == "  Hour 08:00"
        assert lines[3] == "    L1: 1 cars"
        assert lines.count("Day 2024-03-01") == 1
        assert "Day 2024-03-02" in lines


class TestMain:
    """Tests for the command line entry point."""

    def test_missing_argument_prints_usage(self, capsys):
        """Verify no input file prints usage and exits 0."""
        assert main([]) == 0
        assert "usage:" in capsys.readouterr().out

    def test_text_report(self, clean_env, tmp_path, traffic_file, capsys):
        """Verify a run prints the ranked report."""
        code = main(["--config", _write_config(tmp_path), str(traffic_file)])
        out = capsys.readouterr().out
        assert code == 0
        assert "Hour 08:00" in out
        assert "  L1: 7 cars" in out

    def test_json_report(self, clean_env, tmp_path, traffic_file, capsys):
        """Verify JSON output carries report and summary."""
        code = main(["--config", _write_config(tmp_path), "--format", "json", str(traffic_file)])
        payload = json.loads(capsys.readouterr().out)
        assert code == 0
        assert payload["summary"]["records_total"] == 3
        assert payload["report"]["groups"][0]["entries"][0] == {"light_id": "L1", "count": 7}

    def test_unreadable_input_exits_nonzero(self, clean_env, tmp_path, capsys):
        """Verify a missing input file exits with status 1."""
        code = main(["--config", _write_config(tmp_path), str(tmp_path / "missing.log")])
        assert code == 1
        assert "error:" in capsys.readouterr().err

    def test_zero_workers_exits_nonzero(self, clean_env, tmp_path, traffic_file, capsys):
        """Verify zero workers is a fatal configuration error."""
        code = main(["--config", _write_config(tmp_path), "--workers", "0", str(traffic_file)])
        assert code == 1
        assert "worker" in capsys.readouterr().err

    def test_invalid_top_n_exits_nonzero(self, clean_env, tmp_path, traffic_file):
        """Verify invalid CLI overrides are rejected."""
        assert main(["--config", _write_config(tmp_path), "--top-n", "0", str(traffic_file)]) == 1

    def test_worker_failure_exits_nonzero(self, clean_env, tmp_path, capsys):
        """Verify an undecodable log aborts the run with status 1."""
        log = tmp_path / "traffic.log"
        log.write_bytes(b"08:15 L1 5\n08:20 L\xff 5\n")
        code = main(["--config", _write_config(tmp_path), str(log)])
        captured = capsys.readouterr()
        assert code == 1
        assert "run aborted" in captured.err
        assert "Hour" not in captured.out

    def test_unreadable_config_exits_nonzero(self, clean_env, tmp_path, traffic_file, capsys):
        """Verify a config path that cannot be read is reported, not raised."""
        code = main(["--config", str(tmp_path), str(traffic_file)])
        assert code == 1
        assert "error:" in capsys.readouterr().err

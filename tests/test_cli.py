"""Tests for the pos-analytics command line."""

import pytest

from pos_analytics import cli
from pos_analytics.report import ReportInputs


@pytest.fixture
def fake_fetch(monkeypatch: pytest.MonkeyPatch, raw_transaction):
    """Replace the network fetch with canned inputs and record its arguments."""
    calls = []

    def fetch(client, period, store_id=None, now=None):
        calls.append({"base_url": client.config.base_url, "period": period, "store_id": store_id})
        return ReportInputs(
            transactions=[raw_transaction("t1", now.isoformat(), 25)],
            failures=["goals"],
        )

    monkeypatch.setattr(cli, "fetch_report_inputs", fetch)
    return calls


def test_writes_report(fake_fetch, tmp_path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.setenv("POS_API_BASE", "http://pos.test/api/v1")
    out = tmp_path / "report.csv"

    code = cli.main(["--period", "this_month", "--store-id", "s1", "-o", str(out)])

    assert code == 0
    assert out.exists()
    assert fake_fetch == [
        {"base_url": "http://pos.test/api/v1", "period": "this_month", "store_id": "s1"}
    ]
    text = out.read_text(encoding="utf-8-sig")
    assert "Failed Fetches,goals" in text
    captured = capsys.readouterr().out
    assert "Successfully wrote report" in captured
    assert "failed fetches: goals" in captured


def test_explicit_range(fake_fetch, tmp_path) -> None:
    code = cli.main(
        [
            "--base-url",
            "http://other.test/api/v1",
            "--start",
            "2025-01-01",
            "--end",
            "2025-01-15",
            "-o",
            str(tmp_path / "r.csv"),
        ]
    )

    assert code == 0
    assert fake_fetch[0]["period"] == ("2025-01-01", "2025-01-15")
    assert fake_fetch[0]["base_url"] == "http://other.test/api/v1"


def test_start_without_end(fake_fetch, tmp_path, capsys) -> None:
    code = cli.main(["--base-url", "http://x", "--start", "2025-01-01", "-o", str(tmp_path / "r.csv")])

    assert code == 2
    assert fake_fetch == []
    assert "--start and --end" in capsys.readouterr().err


def test_missing_base_url(fake_fetch, tmp_path, monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.delenv("POS_API_BASE", raising=False)

    code = cli.main(["-o", str(tmp_path / "r.csv")])

    assert code == 2
    assert "POS_API_BASE" in capsys.readouterr().err


def test_reversed_range(fake_fetch, tmp_path, capsys) -> None:
    code = cli.main(
        ["--base-url", "http://x", "--start", "2025-02-01", "--end", "2025-01-01", "-o", str(tmp_path / "r.csv")]
    )

    assert code == 2
    assert "ERROR" in capsys.readouterr().err


def test_output_is_required(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--period", "7d"])
    assert excinfo.value.code == 2

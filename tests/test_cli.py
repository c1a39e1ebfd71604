"""Tests for the command line interface."""

import json
from datetime import datetime
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from fingrowth.adapters.json_store import JsonFileStore
from fingrowth.cli import main
from fingrowth.config import Config, GcalAccount
from fingrowth.core.calendar import Event


@pytest.fixture
def config(tmp_path):
    return Config(data_file=str(tmp_path / "fingrowth.json"), export_dir=str(tmp_path / "exports"))


@pytest.fixture
def run(config):
    runner = CliRunner()

    def _run(*args):
        with patch("fingrowth.cli.load_config", return_value=config):
            return runner.invoke(main, list(args))

    return _run


def stored(config):
    return JsonFileStore(config.data_file)


class TestClientCommands:
    def test_add_and_list(self, run):
        result = run("client", "add", "  Acme Corp ", "--email", "contact@acme.com")
        assert result.exit_code == 0
        assert "✓ Client 'Acme Corp' added" in result.output

        result = run("client", "list")
        assert "• Acme Corp  (contact@acme.com)" in result.output

    def test_add_blank_name_fails(self, run):
        result = run("client", "add", "   ")
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_list_empty(self, run):
        assert "No clients yet." in run("client", "list").output

    def test_list_json(self, run):
        run("client", "add", "Acme Corp")
        data = json.loads(run("client", "list", "--json").output)
        assert data[0]["name"] == "Acme Corp"
        assert data[0]["activities"] == 0

    def test_delete_detaches_activities(self, run, config):
        run("client", "add", "Acme Corp")
        run("activity", "add", "-c", "acme corp", "-s", "2025-01-15", "-h", "2", "-r", "100")

        result = run("client", "delete", "Acme Corp", "--yes")

        assert result.exit_code == 0
        store = stored(config)
        assert store.list_clients() == []
        assert store.list_activities()[0].client is None

    def test_unknown_client(self, run):
        result = run("client", "show", "Nobody")
        assert result.exit_code == 1
        assert "No client named 'Nobody'" in result.output


class TestActivityCommands:
    def test_add_computes_total(self, run, config):
        result = run("activity", "add", "-t", "workshop", "-s", "2025-01-15 10:00", "-h", "3", "-r", "80")

        assert result.exit_code == 0
        assert "€240.00" in result.output
        activity = stored(config).list_activities()[0]
        assert activity.total_amount == 240
        assert activity.end_date == activity.start_date

    def test_add_negative_hours_fails(self, run, config):
        result = run("activity", "add", "-s", "2025-01-15", "-h", "-1", "-r", "80")
        assert result.exit_code == 1
        assert stored(config).list_activities() == []

    def test_edit_invoice_delete(self, run, config):
        run("activity", "add", "-s", "2025-01-15", "-h", "1", "-r", "100")
        activity_id = stored(config).list_activities()[0].id[:8]

        result = run("activity", "edit", activity_id, "-h", "2")
        assert "€200.00" in result.output

        run("activity", "invoice", activity_id)
        assert stored(config).list_activities()[0].is_invoiced

        run("activity", "delete", activity_id, "--yes")
        assert stored(config).list_activities() == []

    def test_unknown_activity(self, run):
        result = run("activity", "invoice", "deadbeef")
        assert result.exit_code == 1

    def test_list_json(self, run):
        run("activity", "add", "-s", "2025-01-15", "-h", "1.5", "-r", "100", "-n", "Intro")
        data = json.loads(run("activity", "list", "--json").output)
        assert data[0]["total_amount"] == 150
        assert data[0]["notes"] == "Intro"
        assert data[0]["type"] == "Coaching"


class TestReportCommands:
    @pytest.fixture(autouse=True)
    def activities(self, run):
        run("activity", "add", "-s", "2025-01-10", "-h", "2", "-r", "100", "--invoiced")
        run("activity", "add", "-t", "workshop", "-s", "2025-01-20", "-h", "1", "-r", "80")
        run("activity", "add", "-s", "2025-02-03", "-h", "4", "-r", "50")

    def test_month_report(self, run):
        result = run("report", "-d", "2025-01-15")

        assert result.exit_code == 0
        assert "Raport: Ianuarie 2025" in result.output
        assert "€280.00" in result.output

    def test_report_json_with_filter(self, run):
        data = json.loads(run("report", "-d", "2025-01-15", "--invoice", "not-invoiced", "--json").output)

        assert data["count"] == 1
        assert data["total_amount"] == 80
        assert data["breakdown"] == [{"type": "Workshop", "total": 80.0, "count": 1}]

    def test_offset_steps_month(self, run):
        data = json.loads(run("report", "-d", "2025-01-15", "-o", "1", "--json").output)
        assert data["label"] == "Februarie 2025"
        assert data["count"] == 1

    def test_custom_requires_bounds(self, run):
        result = run("report", "-p", "custom", "--from", "2025-01-01")
        assert result.exit_code == 2

    def test_custom_range(self, run):
        data = json.loads(run("report", "-p", "custom", "--from", "2025-01-15", "--to", "2025-02-28", "--json").output)
        assert data["count"] == 2

    def test_empty_period(self, run):
        result = run("report", "-d", "2024-06-01")
        assert "Nicio activitate în această perioadă." in result.output

    def test_export_csv(self, run, tmp_path):
        result = run("export", "csv", "-d", "2025-01-15")

        assert result.exit_code == 0
        path = tmp_path / "exports" / "Raport_Ianuarie_2025.csv"
        assert path.exists()

    def test_export_client(self, run, tmp_path):
        run("client", "add", "Acme Corp")
        run("activity", "add", "-c", "Acme Corp", "-s", "2025-01-12", "-h", "2", "-r", "90")

        result = run("export", "client", "acme corp", "--output", str(tmp_path / "out"))

        assert result.exit_code == 0
        path = tmp_path / "out" / "Raport_Activitate_Acme_Corp.pdf"
        assert path.read_bytes().startswith(b"%PDF")

    def test_export_client_without_activities(self, run):
        run("client", "add", "Idle Ltd")
        result = run("export", "client", "Idle Ltd")
        assert result.exit_code == 1
        assert "no activities to export" in result.output

    def test_export_pdf_to_output(self, run, tmp_path):
        result = run("export", "pdf", "-d", "2025-01-15", "--output", str(tmp_path / "out"))

        assert result.exit_code == 0
        assert (tmp_path / "out" / "Raport_Ianuarie_2025.pdf").read_bytes().startswith(b"%PDF")


class TestCalendarCommands:
    def test_month_marks_activity_days(self, run):
        run("activity", "add", "-t", "workshop", "-s", "2025-01-20", "-h", "1", "-r", "80")

        result = run("calendar", "month", "-m", "2025-01")

        assert result.exit_code == 0
        assert "Ianuarie 2025" in result.output
        assert "20W" in result.output

    def test_day_without_accounts(self, run):
        run("activity", "add", "-s", "2025-01-20 09:00", "-h", "1", "-r", "80")

        result = run("calendar", "day", "-d", "2025-01-20")

        assert result.exit_code == 0
        assert "Sesiuni" in result.output
        assert "No external events." in result.output

    def test_day_timeline_with_durations_and_gaps(self, run, config):
        config.gcal_accounts = [GcalAccount(config_folder="/tmp/work", label="Work")]
        calendar = MagicMock()
        calendar.request_access.return_value = True
        calendar.fetch_events.return_value = [
            Event(title="Intro call", start=datetime(2025, 1, 20, 9, 0), end=datetime(2025, 1, 20, 10, 30), calendar="Work"),
            Event(title="Review", start=datetime(2025, 1, 20, 12, 0), end=datetime(2025, 1, 20, 13, 0)),
        ]

        with patch("fingrowth.cli.get_calendar", return_value=calendar):
            result = run("calendar", "day", "-d", "2025-01-20")

        assert result.exit_code == 0
        assert "09:00-10:30 (1h 30m)  Intro call [Work]" in result.output
        assert "Liber 10:30-12:00 (1h 30m)" in result.output
        assert "12:00-13:00 (1h 0m)  Review" in result.output

    def test_draft(self, run):
        result = run("calendar", "draft", "Follow-up", "--at", "2025-01-15 09:20")
        assert "Follow-up: 15 ian. 2025 10:00-11:00" in result.output

    def test_cal_auth_without_accounts(self, run):
        result = run("cal-auth")
        assert result.exit_code == 1
        assert "No calendar accounts configured" in result.output

"""Tests for the command-line interface."""

import csv
import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from loan_calendar.main import cli


@pytest.fixture
def runner(monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    for name in ("LOAN_INSTALLMENT_COUNT", "LOAN_SCHEDULE_MAX_ITERATIONS", "LOAN_EPSILON", "CURRENCY"):
        monkeypatch.delenv(name, raising=False)
    return CliRunner()


@pytest.fixture
def loan_file(tmp_path: Path, loan_record: dict) -> Path:
    path = tmp_path / "loan.json"
    path.write_text(json.dumps(loan_record), encoding="utf-8")
    return path


@pytest.fixture
def holidays_file(tmp_path: Path) -> Path:
    path = tmp_path / "holidays.json"
    path.write_text(json.dumps([{"holiday": "2024-01-15", "isRecurring": False, "name": "Staff retreat"}]), encoding="utf-8")
    return path


class TestMetricsCommand:
    """Tests for `loan-calendar metrics`."""

    def test_prints_worked_example(self, runner: CliRunner, loan_file: Path) -> None:
        result = runner.invoke(cli, ["metrics", str(loan_file), "--today", "2024-01-31"])

        assert result.exit_code == 0, result.output
        assert "Business days       : 22" in result.output
        assert "Outstanding due     : ₦7,000.00" in result.output
        assert "Projected end date  : 2024-01-31" in result.output

    def test_holidays_reduce_elapsed_days(self, runner: CliRunner, loan_file: Path, holidays_file: Path) -> None:
        result = runner.invoke(
            cli, ["metrics", str(loan_file), "--holidays", str(holidays_file), "--today", "2024-01-31"]
        )

        assert result.exit_code == 0, result.output
        assert "Business days       : 21" in result.output
        assert "Outstanding due     : ₦6,000.00" in result.output

    def test_json_export(self, runner: CliRunner, loan_file: Path, tmp_path: Path) -> None:
        out = tmp_path / "metrics.json"
        result = runner.invoke(cli, ["metrics", str(loan_file), "--today", "2024-01-31", "--output", str(out)])

        assert result.exit_code == 0, result.output
        metrics = json.loads(out.read_text(encoding="utf-8"))["metrics"]
        assert metrics["outstandingDue"] == 7000.0
        assert metrics["balanceRemaining"] == 7000.0
        assert metrics["disbursedAt"] == "2024-01-01"

    def test_rejects_csv_export(self, runner: CliRunner, loan_file: Path, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["metrics", str(loan_file), "--output", str(tmp_path / "m.csv")])

        assert result.exit_code == 2

    def test_bad_today(self, runner: CliRunner, loan_file: Path) -> None:
        result = runner.invoke(cli, ["metrics", str(loan_file), "--today", "31/01/2024"])

        assert result.exit_code == 2
        assert "Invalid date" in result.output

    def test_invalid_json(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("[1, 2", encoding="utf-8")

        result = runner.invoke(cli, ["metrics", str(path)])

        assert result.exit_code == 1
        assert "not valid JSON" in result.output


class TestScheduleCommand:
    """Tests for `loan-calendar schedule`."""

    def test_prints_schedule(self, runner: CliRunner, loan_file: Path, holidays_file: Path) -> None:
        result = runner.invoke(cli, ["schedule", str(loan_file), "--holidays", str(holidays_file)])

        assert result.exit_code == 0, result.output
        assert "Holidays            : 1" in result.output
        assert "Staff retreat" in result.output
        assert "2024-01-02\tTue\t1000.00\t1000.00\tpaid" in result.output

    def test_csv_export(self, runner: CliRunner, loan_file: Path, holidays_file: Path, tmp_path: Path) -> None:
        out = tmp_path / "schedule.csv"
        result = runner.invoke(
            cli, ["schedule", str(loan_file), "--holidays", str(holidays_file), "--output", str(out)]
        )

        assert result.exit_code == 0, result.output
        with out.open(newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows[0] == ["Date", "Status", "Amount_Due", "Amount_Paid", "Holiday_Reason"]
        # 22 installments plus one holiday
        assert len(rows) == 24
        assert ["2024-01-15", "holiday", "0.00", "0.00", "Staff retreat"] in rows
        assert rows[-1][0] == "2024-02-01"

    def test_json_export(self, runner: CliRunner, loan_file: Path, tmp_path: Path) -> None:
        out = tmp_path / "schedule.json"
        result = runner.invoke(cli, ["schedule", str(loan_file), "--output", str(out)])

        assert result.exit_code == 0, result.output
        data = json.loads(out.read_text(encoding="utf-8"))
        assert len(data["schedule"]) == 22
        assert data["summary"]["statusCounts"] == {"paid": 15, "partial": 0, "pending": 7, "holiday": 0}
        assert data["summary"]["totalScheduled"] == 22000.0

    def test_unsupported_output(self, runner: CliRunner, loan_file: Path, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["schedule", str(loan_file), "--output", str(tmp_path / "s.xlsx")])

        assert result.exit_code == 2

    def test_undisbursed_loan(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "pending.json"
        path.write_text(json.dumps({"loanDetails": {"dailyAmount": 1000, "amountToBePaid": 22000}}), encoding="utf-8")

        result = runner.invoke(cli, ["schedule", str(path)])

        assert result.exit_code == 0
        assert "No schedule" in result.output


class TestPortfolioCommand:
    """Tests for `loan-calendar portfolio`."""

    def test_totals(self, runner: CliRunner, tmp_path: Path, loan_record: dict) -> None:
        second = dict(loan_record, _id="loan-test-002")
        path = tmp_path / "loans.json"
        path.write_text(json.dumps([loan_record, second]), encoding="utf-8")

        result = runner.invoke(cli, ["portfolio", str(path), "--today", "2024-01-31"])

        assert result.exit_code == 0, result.output
        assert "loan-test-002" in result.output
        assert "Loans               : 2" in result.output
        assert "Total outstanding   : ₦14,000.00" in result.output

    def test_not_a_list(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "loans.json"
        path.write_text(json.dumps({"loan": {}}), encoding="utf-8")

        result = runner.invoke(cli, ["portfolio", str(path)])

        assert result.exit_code == 1
        assert "Loans must be a list" in result.output

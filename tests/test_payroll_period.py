# tests/test_payroll_period.py
"""
Tests for period payroll (timelønn og fastlønn) and the CSV export.
"""

import datetime
import sys
from decimal import Decimal
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# ruff: noqa: E402
from app.core.models import Employee, TimeEntry, WageSupplementRule
from app.core.payroll import calculate_payroll_for_period, export_payroll_csv

PERIOD_START = datetime.date(2024, 1, 1)
PERIOD_END = datetime.date(2024, 1, 31)


def entry(employee_id: str, clock_in: str, clock_out: str, status: str = "approved") -> TimeEntry:
    return TimeEntry(
        employee_id=employee_id,
        clock_in=datetime.datetime.fromisoformat(clock_in),
        clock_out=datetime.datetime.fromisoformat(clock_out),
        status=status,
    )


@pytest.fixture
def hourly_employee():
    return Employee(id="kari", full_name="Kari Nordmann", hourly_rate=Decimal("200"))


@pytest.fixture
def fixed_employee():
    return Employee(
        id="anne",
        full_name="Anne Fast",
        salary_type="fixed",
        fixed_monthly_salary=Decimal("40000"),
        contracted_hours_per_month=Decimal("160"),
        included_night_hours=Decimal("2"),
    )


class TestHourlyPayroll:
    def test_only_approved_entries_inside_period(self, hourly_employee, standard_rules, calendar):
        entries = [
            entry("kari", "2024-01-08T08:00", "2024-01-08T16:00"),
            entry("kari", "2024-01-09T08:00", "2024-01-09T16:00"),
            entry("kari", "2024-01-10T08:00", "2024-01-10T16:00", status="pending"),
            entry("kari", "2024-02-01T08:00", "2024-02-01T16:00"),
        ]

        [result] = calculate_payroll_for_period(
            entries, [hourly_employee], standard_rules, PERIOD_START, PERIOD_END, calendar
        )

        assert result.salary_type == "hourly"
        assert result.total_hours == 16.0
        assert result.regular_hours == 16.0
        assert result.base_pay == Decimal("3200.00")
        assert result.gross_pay == Decimal("3200.00")
        assert len(result.line_items) == 2

    def test_weekly_overtime_across_entries(self, hourly_employee, standard_rules, calendar):
        entries = [
            entry("kari", f"2024-01-{day:02d}T08:00", f"2024-01-{day:02d}T17:00") for day in range(8, 13)
        ]

        [result] = calculate_payroll_for_period(
            entries, [hourly_employee], standard_rules, PERIOD_START, PERIOD_END, calendar
        )

        assert result.regular_hours == 40.0
        assert result.overtime_50_hours == 5.0
        assert result.base_pay == Decimal("8000.00")
        assert result.overtime_pay == Decimal("1500.00")
        assert result.gross_pay == Decimal("9500.00")

    def test_new_week_resets_weekly_total(self, hourly_employee, standard_rules, calendar):
        entries = [entry("kari", f"2024-01-{day:02d}T08:00", f"2024-01-{day:02d}T17:00") for day in range(8, 13)]
        entries.append(entry("kari", "2024-01-15T08:00", "2024-01-15T16:00"))

        [result] = calculate_payroll_for_period(
            entries, [hourly_employee], standard_rules, PERIOD_START, PERIOD_END, calendar
        )

        assert result.regular_hours == 48.0
        assert result.overtime_50_hours == 5.0

    def test_supplement_hours_by_category(self, hourly_employee, standard_rules, calendar):
        entries = [entry("kari", "2024-01-06T18:00", "2024-01-06T22:00")]

        [result] = calculate_payroll_for_period(
            entries, [hourly_employee], standard_rules, PERIOD_START, PERIOD_END, calendar
        )

        assert result.supplement_hours == {"evening": 3.0, "night": 1.0, "weekend": 4.0}

    def test_saturday_and_sunday_hours_are_split(self, hourly_employee, standard_rules, calendar):
        entries = [entry("kari", "2024-01-06T20:00", "2024-01-07T02:00")]

        [result] = calculate_payroll_for_period(
            entries, [hourly_employee], standard_rules, PERIOD_START, PERIOD_END, calendar
        )

        assert result.saturday_hours == 4.0
        assert result.sunday_hours == 2.0
        assert result.supplement_hours["weekend"] == 6.0

    def test_employee_without_entries_gets_empty_row(self, hourly_employee, standard_rules, calendar):
        [result] = calculate_payroll_for_period(
            [], [hourly_employee], standard_rules, PERIOD_START, PERIOD_END, calendar
        )

        assert result.total_hours == 0.0
        assert result.gross_pay == Decimal("0.00")
        assert result.line_items == []


class TestFixedPayroll:
    def test_night_supplement_only_beyond_included_hours(self, fixed_employee, standard_rules, calendar):
        entries = [entry("anne", "2024-01-10T22:00", "2024-01-11T06:00")]

        [result] = calculate_payroll_for_period(
            entries, [fixed_employee], standard_rules, PERIOD_START, PERIOD_END, calendar
        )

        assert result.salary_type == "fixed"
        # (40000 - 2 h * 62.50) / 160
        assert result.hourly_rate == Decimal("249.22")
        assert result.base_pay == Decimal("40000")
        # 8 h night, 2 h included: 6 h * 249.22 * 25 %
        assert result.supplement_pay == Decimal("373.83")
        assert result.overtime_pay == Decimal("0.00")
        assert result.gross_pay == Decimal("40373.83")
        assert result.extra_night_hours == 6.0
        assert result.supplement_hours == {"night": 8.0}

        types = [item.type for item in result.line_items]
        assert types == ["fixed_salary", "night"]
        assert result.line_items[0].date == PERIOD_END

    def test_night_within_included_hours_is_not_paid(self, fixed_employee, standard_rules, calendar):
        entries = [entry("anne", "2024-01-10T20:00", "2024-01-10T22:00")]

        [result] = calculate_payroll_for_period(
            entries, [fixed_employee], standard_rules, PERIOD_START, PERIOD_END, calendar
        )

        # Kveld 20-21 paid directly, natt 21-22 is covered by the included hours
        assert result.supplement_pay == Decimal("37.38")
        assert result.extra_night_hours == 0.0

    def test_hours_beyond_contract_are_overtime(self, standard_rules, calendar):
        employee = Employee(
            id="ola",
            full_name="Ola Fast",
            salary_type="fixed",
            fixed_monthly_salary=Decimal("30000"),
            contracted_hours_per_month=Decimal("8"),
        )
        entries = [
            entry("ola", "2024-01-08T08:00", "2024-01-08T16:00"),
            entry("ola", "2024-01-09T08:00", "2024-01-09T10:00"),
        ]

        [result] = calculate_payroll_for_period(entries, [employee], standard_rules, PERIOD_START, PERIOD_END, calendar)

        # 30000 / 8 = 3750 per hour, 2 h overtime at 1.5x
        assert result.overtime_50_hours == 2.0
        assert result.overtime_pay == Decimal("11250.00")
        assert result.total_hours == 10.0

    @pytest.mark.parametrize(
        "rules",
        [
            [],
            [{"name": "Natt", "supplement_type": "fixed", "amount": "65", "applies_to": "night"}],
        ],
        ids=["default-night-rate", "fixed-night-rule"],
    )
    def test_included_night_value_is_deducted_from_rate(self, calendar, rules):
        employee = Employee(
            id="siri",
            full_name="Siri Fast",
            salary_type="fixed",
            fixed_monthly_salary=Decimal("50000"),
            contracted_hours_per_month=Decimal("162.5"),
            included_night_hours=Decimal("10"),
        )
        rules = [WageSupplementRule(**rule) for rule in rules]

        [result] = calculate_payroll_for_period([], [employee], rules, PERIOD_START, PERIOD_END, calendar)

        # (50000 - 10 h * 65 kr) / 162.5
        assert result.hourly_rate == Decimal("303.69")
        assert result.gross_pay == Decimal("50000")

    def test_inactive_night_rule_is_ignored_for_rate(self, make_rule, calendar):
        employee = Employee(
            id="siri",
            full_name="Siri Fast",
            salary_type="fixed",
            fixed_monthly_salary=Decimal("50000"),
            contracted_hours_per_month=Decimal("162.5"),
            included_night_hours=Decimal("10"),
        )
        rules = [make_rule(name="Natt", amount=Decimal("40"), is_active=False)]

        [result] = calculate_payroll_for_period([], [employee], rules, PERIOD_START, PERIOD_END, calendar)

        assert result.hourly_rate == Decimal("303.69")

    def test_default_contracted_hours(self, standard_rules, calendar):
        employee = Employee(
            id="per", full_name="Per Fast", salary_type="fixed", fixed_monthly_salary=Decimal("32500")
        )

        [result] = calculate_payroll_for_period([], [employee], standard_rules, PERIOD_START, PERIOD_END, calendar)

        assert result.contracted_hours_per_month == Decimal("162.5")
        assert result.hourly_rate == Decimal("200.00")
        assert result.gross_pay == Decimal("32500.00")


class TestExport:
    def test_results_sorted_by_name(self, hourly_employee, fixed_employee, standard_rules, calendar):
        results = calculate_payroll_for_period(
            [], [hourly_employee, fixed_employee], standard_rules, PERIOD_START, PERIOD_END, calendar
        )

        assert [r.employee_name for r in results] == ["Anne Fast", "Kari Nordmann"]

    def test_csv_layout(self, hourly_employee, standard_rules, calendar):
        entries = [
            entry("kari", "2024-01-08T08:00", "2024-01-08T16:00"),
            entry("kari", "2024-01-09T08:00", "2024-01-09T16:00"),
        ]
        results = calculate_payroll_for_period(
            entries, [hourly_employee], standard_rules, PERIOD_START, PERIOD_END, calendar
        )

        lines = export_payroll_csv(results).splitlines()

        assert lines[0] == (
            "Ansatt;Lønnstype;Timer totalt;Ordinære timer;Overtid 50%;Overtid 100%;"
            "Kveld-timer;Natt-timer;Lørdag-timer;Søndag-timer;Helligdag-timer;"
            "Grunnlønn;Overtidstillegg;Andre tillegg;Brutto lønn"
        )
        assert lines[1] == (
            "Kari Nordmann;Timelønn;16.00;16.00;0.00;0.00;0.00;0.00;0.00;0.00;0.00;3200.00;0.00;0.00;3200.00"
        )
        assert len(lines) == 2

    def test_csv_marks_fixed_salary(self, fixed_employee, standard_rules, calendar):
        results = calculate_payroll_for_period([], [fixed_employee], standard_rules, PERIOD_START, PERIOD_END, calendar)

        row = export_payroll_csv(results).splitlines()[1].split(";")

        assert row[0] == "Anne Fast"
        assert row[1] == "Fastlønn"
        assert row[-1] == "40000.00"

    def test_csv_weekend_columns(self, hourly_employee, standard_rules, calendar):
        entries = [entry("kari", "2024-01-06T20:00", "2024-01-07T02:00")]
        results = calculate_payroll_for_period(
            entries, [hourly_employee], standard_rules, PERIOD_START, PERIOD_END, calendar
        )

        header, row = (line.split(";") for line in export_payroll_csv(results).splitlines())

        assert row[header.index("Lørdag-timer")] == "4.00"
        assert row[header.index("Søndag-timer")] == "2.00"
        assert row[header.index("Helligdag-timer")] == "0.00"

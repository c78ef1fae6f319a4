"""Lønnskjøring for en periode: timelønn, fastlønn og eksport."""

import csv
import datetime
import io
import logging
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from app.core.config import (
    CSV_DELIMITER,
    DEFAULT_CONTRACTED_HOURS_PER_MONTH,
    DEFAULT_NIGHT_SUPPLEMENT_RATE,
    MONEY_QUANTUM,
    OVERTIME_50_MULTIPLIER,
)
from app.core.constants import (
    CATEGORY_EVENING,
    CATEGORY_HOLIDAY,
    CATEGORY_NIGHT,
    LINE_DESCRIPTIONS,
    LINE_FIXED_SALARY,
    LINE_OVERTIME_50,
    MINUTES_PER_HOUR,
    SALARY_TYPE_FIXED,
    SALARY_TYPE_HOURLY,
    SATURDAY_WEEKDAY,
    SUNDAY_WEEKDAY,
    SUPPLEMENT_TYPE_PERCENTAGE,
    TIME_ENTRY_STATUS_APPROVED,
)
from app.core.holidays import HolidayCalendar
from app.core.models import Employee, OverlapResult, PayrollLineItem, PayrollResult, TimeEntry, WageSupplementRule
from app.core.time_utils import weekday_minutes

from .overtime import minutes_pay
from .shift_pay import build_supplement_line_items, calculate_shift_pay
from .supplements import compute_supplements, rule_sort_key, supplement_amount

logger = logging.getLogger(__name__)


def calculate_payroll_for_period(
    entries: Iterable[TimeEntry],
    employees: Iterable[Employee],
    rules: Iterable[WageSupplementRule],
    period_start: datetime.date,
    period_end: datetime.date,
    calendar: HolidayCalendar | None = None,
) -> list[PayrollResult]:
    """
    Beregner lønn for alle ansatte i en periode.

    Kun godkjente timeføringer med innstempling i perioden tas med.
    Ansatte uten timeføringer får likevel en rad (fastlønn betales uansett).

    Returns:
        Liste av PayrollResult sortert på navn
    """
    rules = list(rules)
    if calendar is None:
        calendar = HolidayCalendar()

    by_employee: dict[str, list[TimeEntry]] = {}
    for entry in entries:
        if entry.status != TIME_ENTRY_STATUS_APPROVED:
            continue
        if not period_start <= entry.clock_in.date() <= period_end:
            continue
        by_employee.setdefault(entry.employee_id, []).append(entry)

    results = []
    for employee in employees:
        employee_entries = sorted(by_employee.get(employee.id, []), key=lambda e: e.clock_in)

        if employee.salary_type == SALARY_TYPE_FIXED:
            results.append(_fixed_payroll(employee, employee_entries, rules, calendar, period_end))
        else:
            results.append(_hourly_payroll(employee, employee_entries, rules, calendar))

    logger.info(
        "Payroll calculated for %d employees (%s - %s)",
        len(results),
        period_start,
        period_end,
    )
    return sorted(results, key=lambda r: r.employee_name)


def export_payroll_csv(results: Iterable[PayrollResult]) -> str:
    """Eksporterer lønnsgrunnlaget som semikolonseparert CSV for lønnssystemet."""
    headers = [
        "Ansatt",
        "Lønnstype",
        "Timer totalt",
        "Ordinære timer",
        "Overtid 50%",
        "Overtid 100%",
        "Kveld-timer",
        "Natt-timer",
        "Lørdag-timer",
        "Søndag-timer",
        "Helligdag-timer",
        "Grunnlønn",
        "Overtidstillegg",
        "Andre tillegg",
        "Brutto lønn",
    ]

    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=CSV_DELIMITER, lineterminator="\n")
    writer.writerow(headers)

    for r in results:
        writer.writerow(
            [
                r.employee_name,
                "Fastlønn" if r.salary_type == SALARY_TYPE_FIXED else "Timelønn",
                f"{r.total_hours:.2f}",
                f"{r.regular_hours:.2f}",
                f"{r.overtime_50_hours:.2f}",
                f"{r.overtime_100_hours:.2f}",
                f"{r.supplement_hours.get(CATEGORY_EVENING, 0.0):.2f}",
                f"{r.supplement_hours.get(CATEGORY_NIGHT, 0.0):.2f}",
                f"{r.saturday_hours:.2f}",
                f"{r.sunday_hours:.2f}",
                f"{r.supplement_hours.get(CATEGORY_HOLIDAY, 0.0):.2f}",
                f"{r.base_pay:.2f}",
                f"{r.overtime_pay:.2f}",
                f"{r.supplement_pay:.2f}",
                f"{r.gross_pay:.2f}",
            ]
        )

    return buffer.getvalue()


# === Private hjelpefunksjoner ===


def _hourly_payroll(
    employee: Employee,
    entries: list[TimeEntry],
    rules: list[WageSupplementRule],
    calendar: HolidayCalendar,
) -> PayrollResult:
    """Timelønn: hver vakt prises for seg, overtid per dag og per ISO-uke."""
    weekly_minutes: dict[tuple[int, int], int] = {}
    category_minutes: dict[str, int] = {}
    weekend_minutes = {SATURDAY_WEEKDAY: 0, SUNDAY_WEEKDAY: 0}
    regular = overtime_50 = overtime_100 = 0
    base_pay = overtime_pay = supplement_pay = Decimal("0.00")
    line_items: list[PayrollLineItem] = []

    for entry in entries:
        iso = entry.clock_in.isocalendar()
        week = (iso[0], iso[1])
        before = weekly_minutes.get(week, 0)

        pay = calculate_shift_pay(entry, employee.hourly_rate, rules, calendar, before)
        weekly_minutes[week] = before + pay.worked_minutes

        regular += pay.overtime.regular_minutes
        overtime_50 += pay.overtime.overtime_50_minutes
        overtime_100 += pay.overtime.overtime_100_minutes
        base_pay += pay.base_pay
        overtime_pay += pay.overtime_pay
        supplement_pay += pay.supplement_pay
        line_items.extend(pay.line_items)
        _add_category_minutes(category_minutes, pay.supplements)
        _add_weekend_minutes(weekend_minutes, entry)

    return PayrollResult(
        employee_id=employee.id,
        employee_name=employee.full_name,
        salary_type=SALARY_TYPE_HOURLY,
        hourly_rate=employee.hourly_rate,
        employment_percentage=employee.employment_percentage,
        regular_hours=regular / MINUTES_PER_HOUR,
        overtime_50_hours=overtime_50 / MINUTES_PER_HOUR,
        overtime_100_hours=overtime_100 / MINUTES_PER_HOUR,
        supplement_hours=_to_hours(category_minutes),
        saturday_hours=weekend_minutes[SATURDAY_WEEKDAY] / MINUTES_PER_HOUR,
        sunday_hours=weekend_minutes[SUNDAY_WEEKDAY] / MINUTES_PER_HOUR,
        total_hours=(regular + overtime_50 + overtime_100) / MINUTES_PER_HOUR,
        base_pay=base_pay,
        overtime_pay=overtime_pay,
        supplement_pay=supplement_pay,
        gross_pay=base_pay + overtime_pay + supplement_pay,
        line_items=line_items,
    )


def _fixed_payroll(
    employee: Employee,
    entries: list[TimeEntry],
    rules: list[WageSupplementRule],
    calendar: HolidayCalendar,
    period_end: datetime.date,
) -> PayrollResult:
    """
    Fastlønn: månedslønn er grunnlønn.

    - Effektiv timelønn = (månedslønn - innbakte nattetimer * nattsats) / avtalte timer
    - Prosentbasert nattillegg betales kun for timer utover innbakte nattetimer
    - Timer utover avtalt tid betales som 50 % overtid
    """
    salary = employee.fixed_monthly_salary or Decimal("0")
    contracted = employee.contracted_hours_per_month or DEFAULT_CONTRACTED_HOURS_PER_MONTH
    included_minutes = int(employee.included_night_hours * MINUTES_PER_HOUR)
    night_rate = _included_night_rate(rules, salary / contracted)
    included_value = employee.included_night_hours * night_rate
    effective_rate = ((salary - included_value) / contracted).quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)

    rules_by_key = {(rule.id, rule.name): rule for rule in rules}
    night_minutes: dict[tuple[str | None, str], int] = {}
    category_minutes: dict[str, int] = {}
    weekend_minutes = {SATURDAY_WEEKDAY: 0, SUNDAY_WEEKDAY: 0}
    worked = 0
    supplement_pay = Decimal("0.00")
    line_items = [
        PayrollLineItem(
            date=period_end,
            type=LINE_FIXED_SALARY,
            hours=float(contracted),
            rate=effective_rate,
            amount=salary,
            description=LINE_DESCRIPTIONS[LINE_FIXED_SALARY],
        )
    ]

    for entry in entries:
        interval = entry.interval()
        worked += max(0, interval.duration_minutes - entry.break_minutes)
        results = compute_supplements(interval, rules, effective_rate, calendar)
        _add_category_minutes(category_minutes, results)
        _add_weekend_minutes(weekend_minutes, entry)

        immediate = []
        for result in results:
            if result.applies_to == CATEGORY_NIGHT and result.supplement_type == SUPPLEMENT_TYPE_PERCENTAGE:
                key = (result.rule_id, result.rule_name)
                night_minutes[key] = night_minutes.get(key, 0) + result.overlap_minutes
            else:
                immediate.append(result)

        supplement_pay += sum((r.amount for r in immediate), Decimal("0.00"))
        line_items.extend(build_supplement_line_items(entry.clock_in.date(), immediate, rules, effective_rate))

    for key, minutes in night_minutes.items():
        paid = max(0, minutes - included_minutes)
        if paid <= 0:
            continue
        rule = rules_by_key[key]
        amount = supplement_amount(rule, paid, effective_rate)
        supplement_pay += amount
        line_items.append(
            PayrollLineItem(
                date=period_end,
                type=CATEGORY_NIGHT,
                hours=paid / MINUTES_PER_HOUR,
                rate=(effective_rate * rule.amount / Decimal(100)).quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP),
                amount=amount,
                description=f"{rule.name} (utover {employee.included_night_hours}t innbakt)",
            )
        )

    overtime_minutes = max(0, worked - int(contracted * MINUTES_PER_HOUR))
    overtime_rate = effective_rate * OVERTIME_50_MULTIPLIER
    overtime_pay = minutes_pay(overtime_minutes, overtime_rate)
    if overtime_minutes > 0:
        line_items.append(
            PayrollLineItem(
                date=period_end,
                type=LINE_OVERTIME_50,
                hours=overtime_minutes / MINUTES_PER_HOUR,
                rate=overtime_rate,
                amount=overtime_pay,
                description="Overtid (utover avtalt)",
            )
        )

    extra_night = max(0, category_minutes.get(CATEGORY_NIGHT, 0) - included_minutes)

    return PayrollResult(
        employee_id=employee.id,
        employee_name=employee.full_name,
        salary_type=SALARY_TYPE_FIXED,
        hourly_rate=effective_rate,
        employment_percentage=employee.employment_percentage,
        regular_hours=float(contracted),
        overtime_50_hours=overtime_minutes / MINUTES_PER_HOUR,
        overtime_100_hours=0.0,
        supplement_hours=_to_hours(category_minutes),
        saturday_hours=weekend_minutes[SATURDAY_WEEKDAY] / MINUTES_PER_HOUR,
        sunday_hours=weekend_minutes[SUNDAY_WEEKDAY] / MINUTES_PER_HOUR,
        total_hours=worked / MINUTES_PER_HOUR,
        base_pay=salary,
        overtime_pay=overtime_pay,
        supplement_pay=supplement_pay,
        gross_pay=salary + overtime_pay + supplement_pay,
        line_items=line_items,
        fixed_monthly_salary=salary,
        contracted_hours_per_month=contracted,
        included_night_hours=employee.included_night_hours,
        extra_night_hours=extra_night / MINUTES_PER_HOUR,
    )


def _included_night_rate(rules: list[WageSupplementRule], base_rate: Decimal) -> Decimal:
    """
    Kroner per time for innbakte nattetimer.

    Første aktive nattregel etter prioritet: fast beløp er kr/t, prosent
    regnes av månedslønn / avtalte timer. Uten nattregel brukes standardsatsen.
    """
    night_rules = sorted((r for r in rules if r.is_active and r.applies_to == CATEGORY_NIGHT), key=rule_sort_key)
    if not night_rules:
        return DEFAULT_NIGHT_SUPPLEMENT_RATE
    rule = night_rules[0]
    if rule.supplement_type == SUPPLEMENT_TYPE_PERCENTAGE:
        return base_rate * rule.amount / Decimal(100)
    return rule.amount


def _add_category_minutes(totals: dict[str, int], results: list[OverlapResult]) -> None:
    """Legger til minutter per kategori. Stablede regler i samme kategori telles én gang."""
    per_category: dict[str, int] = {}
    for result in results:
        per_category[result.applies_to] = max(per_category.get(result.applies_to, 0), result.overlap_minutes)
    for category, minutes in per_category.items():
        totals[category] = totals.get(category, 0) + minutes


def _add_weekend_minutes(totals: dict[int, int], entry: TimeEntry) -> None:
    """Minutter arbeidet på lørdag og søndag, fordelt på faktisk ukedag."""
    for weekday in totals:
        totals[weekday] += weekday_minutes(entry.clock_in, entry.clock_out, weekday)


def _to_hours(minutes_by_category: dict[str, int]) -> dict[str, float]:
    return {category: minutes / MINUTES_PER_HOUR for category, minutes in minutes_by_category.items()}

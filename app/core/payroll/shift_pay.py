"""Lønn for én timeføring: grunnlønn, overtid og tillegg."""

import datetime
import logging
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from app.core.config import LATE_OVERTIME_HOUR, MONEY_QUANTUM, OVERTIME_50_MULTIPLIER, OVERTIME_100_MULTIPLIER
from app.core.constants import (
    LINE_DESCRIPTIONS,
    LINE_OVERTIME_50,
    LINE_OVERTIME_100,
    LINE_REGULAR,
    MINUTES_PER_HOUR,
    SUNDAY_WEEKDAY,
    SUPPLEMENT_TYPE_PERCENTAGE,
)
from app.core.holidays import HolidayCalendar
from app.core.models import OverlapResult, OvertimeSplit, PayrollLineItem, ShiftPay, TimeEntry, WageSupplementRule

from .overtime import calculate_overtime, minutes_after, minutes_pay, overtime_pay
from .supplements import compute_supplements

logger = logging.getLogger(__name__)


def calculate_shift_pay(
    entry: TimeEntry,
    hourly_rate: Decimal | int | str,
    rules: Iterable[WageSupplementRule],
    calendar: HolidayCalendar | None = None,
    weekly_minutes_before: int = 0,
) -> ShiftPay:
    """
    Beregner lønn for en timeføring.

    Arbeidstid = inn til ut minus pause. Overtid avgjøres av dagen vakten
    starter. Tilleggene regnes på hele inn/ut-intervallet.

    Args:
        entry: Timeføringen
        hourly_rate: Timelønn i kroner
        rules: Tilleggsregler
        calendar: Helligdagskalender (ny opprettes om None)
        weekly_minutes_before: Minutter arbeidet tidligere samme uke

    Returns:
        ShiftPay med linjer og totaler
    """
    rules = list(rules)
    if calendar is None:
        calendar = HolidayCalendar()

    interval = entry.interval()
    rate = Decimal(str(hourly_rate))
    supplements = compute_supplements(interval, rules, rate, calendar)

    worked = max(0, interval.duration_minutes - entry.break_minutes)
    day = entry.clock_in.date()
    split = calculate_overtime(
        worked,
        weekly_minutes_before=weekly_minutes_before,
        is_sunday=day.weekday() == SUNDAY_WEEKDAY,
        is_holiday_day=calendar.is_holiday(day),
        late_minutes=minutes_after(interval, LATE_OVERTIME_HOUR),
    )

    base_pay = minutes_pay(split.regular_minutes, rate)
    ot_pay = overtime_pay(split, rate)
    supplement_pay = sum((s.amount for s in supplements), Decimal("0.00"))

    line_items = build_work_line_items(day, split, rate)
    line_items.extend(build_supplement_line_items(day, supplements, rules, rate))

    logger.debug(
        "Shift pay for entry %s: worked=%d min base=%s overtime=%s supplements=%s",
        entry.id,
        worked,
        base_pay,
        ot_pay,
        supplement_pay,
    )

    return ShiftPay(
        worked_minutes=worked,
        overtime=split,
        base_pay=base_pay,
        overtime_pay=ot_pay,
        supplement_pay=supplement_pay,
        total_pay=base_pay + ot_pay + supplement_pay,
        supplements=supplements,
        line_items=line_items,
    )


def build_work_line_items(day: datetime.date, split: OvertimeSplit, rate: Decimal) -> list[PayrollLineItem]:
    """Linjer for ordinær tid og overtid. Tomme komponenter utelates."""
    parts = [
        (LINE_REGULAR, split.regular_minutes, rate),
        (LINE_OVERTIME_50, split.overtime_50_minutes, rate * OVERTIME_50_MULTIPLIER),
        (LINE_OVERTIME_100, split.overtime_100_minutes, rate * OVERTIME_100_MULTIPLIER),
    ]

    items = []
    for line_type, minutes, line_rate in parts:
        if minutes <= 0:
            continue
        items.append(
            PayrollLineItem(
                date=day,
                type=line_type,
                hours=minutes / MINUTES_PER_HOUR,
                rate=line_rate,
                amount=minutes_pay(minutes, line_rate),
                description=LINE_DESCRIPTIONS[line_type],
            )
        )
    return items


def build_supplement_line_items(
    day: datetime.date,
    supplements: list[OverlapResult],
    rules: list[WageSupplementRule],
    rate: Decimal,
) -> list[PayrollLineItem]:
    """Én linje per tillegg. Satsen er kroner per time for prosenttillegg."""
    by_key = {(rule.id, rule.name): rule for rule in rules}

    items = []
    for result in supplements:
        rule = by_key.get((result.rule_id, result.rule_name))
        if rule is not None and rule.supplement_type == SUPPLEMENT_TYPE_PERCENTAGE:
            line_rate = (rate * rule.amount / Decimal(100)).quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)
        else:
            line_rate = result.amount

        items.append(
            PayrollLineItem(
                date=day,
                type=result.applies_to,
                hours=result.overlap_hours,
                rate=line_rate,
                amount=result.amount,
                description=(rule.description if rule is not None and rule.description else result.rule_name),
            )
        )
    return items

"""Lønnstillegg for natt, kveld, helg og helligdag."""

import datetime
import logging
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from app.core.config import DEFAULT_CATEGORY_WINDOWS, MONEY_QUANTUM
from app.core.constants import (
    CATEGORY_HOLIDAY,
    CATEGORY_WEEKEND,
    DAY_CATEGORIES,
    MINUTES_PER_DAY,
    MINUTES_PER_HOUR,
    SUPPLEMENT_TYPE_PERCENTAGE,
    WEEKEND_WEEKDAYS,
)
from app.core.holidays import HolidayCalendar
from app.core.models import OverlapResult, WageSupplementRule, WorkInterval
from app.core.time_utils import (
    Span,
    at_minutes,
    day_span,
    intersect_spans,
    iter_days,
    local_days,
    merge_spans,
    parse_clock_minutes,
    span_minutes,
)
from app.core.validators import validate_interval, validate_rule

logger = logging.getLogger(__name__)


def compute_supplements(
    interval: WorkInterval,
    rules: Iterable[WageSupplementRule],
    base_hourly_rate: Decimal | int | str,
    calendar: HolidayCalendar | None = None,
) -> list[OverlapResult]:
    """
    Beregner tillegg per regel for et arbeidsintervall.

    Alle regler valideres, også inaktive. Aktive regler med minst ett
    minutts overlapp gir én rad hver. Regler i samme kategori stables
    (de utelukker ikke hverandre), og en helgenatt gir både natt- og
    helgetillegg.

    Args:
        interval: Faktisk arbeidet tid
        rules: Tilleggsregler
        base_hourly_rate: Timelønn i kroner
        calendar: Helligdagskalender (ny opprettes om None)

    Returns:
        Liste av OverlapResult sortert på prioritet (lavest først, None sist)
        og deretter navn

    Raises:
        InvalidIntervalError: Slutt før start
        InvalidRuleConfigurationError: Ukjent kategori eller ugyldig regel
    """
    validate_interval(interval)
    checked = [(rule, validate_rule(rule)) for rule in rules]

    if interval.end == interval.start:
        return []

    if calendar is None:
        calendar = HolidayCalendar()

    rate = Decimal(str(base_hourly_rate))
    shift: list[Span] = [(interval.start, interval.end)]
    results: list[OverlapResult] = []

    for rule, window in sorted(checked, key=lambda item: rule_sort_key(item[0])):
        if not rule.is_active:
            continue

        spans = rule_spans(rule, window, interval, calendar)
        minutes = span_minutes(intersect_spans(shift, spans))
        if minutes <= 0:
            continue

        results.append(
            OverlapResult(
                rule_id=rule.id,
                rule_name=rule.name,
                applies_to=rule.applies_to,
                supplement_type=rule.supplement_type,
                overlap_minutes=minutes,
                amount=supplement_amount(rule, minutes, rate),
            )
        )

    logger.debug(
        "Computed %d supplements for %s -> %s (%d rules)",
        len(results),
        interval.start,
        interval.end,
        len(checked),
    )
    return results


def supplement_amount(rule: WageSupplementRule, minutes: int, base_hourly_rate: Decimal) -> Decimal:
    """
    Beløp for en regel gitt antall overlappende minutter.

    Prosent: timelønn * timer * prosent / 100. Fast: hele beløpet én gang
    så lenge overlappet er minst ett minutt.
    """
    if minutes <= 0:
        return Decimal("0.00")

    if rule.supplement_type == SUPPLEMENT_TYPE_PERCENTAGE:
        raw = base_hourly_rate * Decimal(minutes) * rule.amount / Decimal(MINUTES_PER_HOUR * 100)
    else:
        raw = rule.amount

    return raw.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def rule_sort_key(rule: WageSupplementRule) -> tuple[bool, int, str]:
    """Prioritet stigende, regler uten prioritet sist, deretter navn."""
    return (rule.priority is None, rule.priority or 0, rule.name)


def rule_spans(
    rule: WageSupplementRule,
    window: tuple[int, int] | None,
    interval: WorkInterval,
    calendar: HolidayCalendar,
) -> list[Span]:
    """
    Bygger regelens konkrete tidsrom for dagene intervallet berører.

    Dagen før start tas med slik at et vindu som krysser midnatt
    (f.eks. 23:00-06:00) og starter kvelden før, blir med.
    """
    tzinfo, first_day, last_day = local_days(interval.start, interval.end)
    first_day -= datetime.timedelta(days=1)

    if window is None:
        window = _default_window(rule.applies_to)

    clock = _clock_spans(window, first_day, last_day, tzinfo) if window is not None else None

    if rule.applies_to not in DAY_CATEGORIES:
        return clock or []

    days = merge_spans(
        day_span(day, tzinfo)
        for day in iter_days(first_day, last_day)
        if _day_qualifies(rule.applies_to, day, calendar)
    )
    if clock is None:
        return days
    return intersect_spans(days, clock)


# === Private hjelpefunksjoner ===


def _default_window(category: str) -> tuple[int, int] | None:
    default = DEFAULT_CATEGORY_WINDOWS.get(category)
    if default is None:
        return None
    return parse_clock_minutes(default[0]), parse_clock_minutes(default[1])


def _clock_spans(
    window: tuple[int, int],
    first_day: datetime.date,
    last_day: datetime.date,
    tzinfo: datetime.tzinfo | None = None,
) -> list[Span]:
    """Klokkevinduet for hver dag; slutt <= start betyr neste dag."""
    start_min, end_min = window
    if end_min <= start_min:
        end_min += MINUTES_PER_DAY

    return merge_spans(
        (at_minutes(day, start_min, tzinfo), at_minutes(day, end_min, tzinfo)) for day in iter_days(first_day, last_day)
    )


def _day_qualifies(category: str, day: datetime.date, calendar: HolidayCalendar) -> bool:
    if category == CATEGORY_WEEKEND:
        return day.weekday() in WEEKEND_WEEKDAYS
    if category == CATEGORY_HOLIDAY:
        return calendar.is_holiday(day)
    return False

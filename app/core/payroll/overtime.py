"""Overtidsberegning etter daglige og ukentlige grenser."""

from decimal import ROUND_HALF_UP, Decimal

from app.core.config import (
    DAILY_NORMAL_MINUTES,
    DAILY_OVERTIME_50_CAP_MINUTES,
    MONEY_QUANTUM,
    OVERTIME_50_MULTIPLIER,
    OVERTIME_100_MULTIPLIER,
    WEEKLY_NORMAL_MINUTES,
)
from app.core.constants import MINUTES_PER_DAY, MINUTES_PER_HOUR
from app.core.models import OvertimeSplit, WorkInterval
from app.core.time_utils import at_minutes, intersect_spans, iter_days, local_days, merge_spans, span_minutes


def calculate_overtime(
    worked_minutes: int,
    weekly_minutes_before: int = 0,
    is_sunday: bool = False,
    is_holiday_day: bool = False,
    late_minutes: int = 0,
) -> OvertimeSplit:
    """
    Deler arbeidstid i ordinær tid, 50 % og 100 % overtid.

    Regler i rekkefølge:
    1. Søndag og helligdag: alt er 100 % fra første minutt
    2. Tid etter kl. 21:00 er 100 %
    3. Over 9 timer per dag: de to første timene 50 %, resten 100 %
    4. Over 40 timer per uke: overskytende ordinær tid blir 50 %

    Args:
        worked_minutes: Arbeidede minutter etter pause
        weekly_minutes_before: Arbeidede minutter tidligere samme uke
        is_sunday: Vakten starter på en søndag
        is_holiday_day: Vakten starter på en helligdag
        late_minutes: Minutter etter kl. 21:00

    Returns:
        OvertimeSplit i minutter
    """
    remaining = max(0, worked_minutes)

    if is_sunday or is_holiday_day:
        return OvertimeSplit(overtime_100_minutes=remaining)

    overtime_50 = 0
    overtime_100 = min(max(0, late_minutes), remaining)
    remaining -= overtime_100

    if remaining > DAILY_NORMAL_MINUTES:
        overtime_50 = min(remaining - DAILY_NORMAL_MINUTES, DAILY_OVERTIME_50_CAP_MINUTES)
        remaining -= overtime_50

        if remaining > DAILY_NORMAL_MINUTES:
            overtime_100 += remaining - DAILY_NORMAL_MINUTES
            remaining = DAILY_NORMAL_MINUTES

    weekly_excess = max(0, weekly_minutes_before) + remaining - WEEKLY_NORMAL_MINUTES
    if weekly_excess > 0:
        moved = min(weekly_excess, remaining)
        overtime_50 += moved
        remaining -= moved

    return OvertimeSplit(
        regular_minutes=remaining,
        overtime_50_minutes=overtime_50,
        overtime_100_minutes=overtime_100,
    )


def minutes_after(interval: WorkInterval, hour: int) -> int:
    """Minutter av intervallet mellom kl. `hour` og midnatt, alle dager."""
    if interval.end <= interval.start:
        return 0

    tzinfo, first_day, last_day = local_days(interval.start, interval.end)
    late = merge_spans(
        (at_minutes(day, hour * MINUTES_PER_HOUR, tzinfo), at_minutes(day, MINUTES_PER_DAY, tzinfo))
        for day in iter_days(first_day, last_day)
    )
    return span_minutes(intersect_spans([(interval.start, interval.end)], late))


def overtime_pay(split: OvertimeSplit, hourly_rate: Decimal) -> Decimal:
    """Overtidsbetaling: 50 % som 1,5 x timelønn, 100 % som 2 x timelønn."""
    return (
        minutes_pay(split.overtime_50_minutes, hourly_rate * OVERTIME_50_MULTIPLIER)
        + minutes_pay(split.overtime_100_minutes, hourly_rate * OVERTIME_100_MULTIPLIER)
    )


def minutes_pay(minutes: int, rate: Decimal) -> Decimal:
    """Betaling for et antall minutter til en timesats, avrundet til øre."""
    raw = rate * Decimal(minutes) / Decimal(MINUTES_PER_HOUR)
    return raw.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)

"""Validering av arbeidsintervaller og tilleggsregler."""

import logging

from app.core.config import TIME_END_OF_DAY_STRING
from app.core.constants import MINUTES_PER_DAY, SUPPLEMENT_CATEGORIES, SUPPLEMENT_TYPES
from app.core.models import WageSupplementRule, WorkInterval
from app.core.time_utils import parse_clock_minutes

logger = logging.getLogger(__name__)


class PayrollError(Exception):
    """Base class for payroll computation errors."""

    pass


class InvalidIntervalError(PayrollError, ValueError):
    """Work interval ends before it starts."""

    pass


class InvalidRuleConfigurationError(PayrollError, ValueError):
    """Wage supplement rule is configured in a way the calculator cannot use."""

    def __init__(self, rule_name: str, reason: str):
        self.rule_name = rule_name
        self.reason = reason
        super().__init__(f"Wage supplement {rule_name!r}: {reason}")


def validate_interval(interval: WorkInterval) -> None:
    """
    Avviser intervaller der slutt er før start.

    Et intervall med lik start og slutt er gyldig (null varighet). Start og
    slutt må enten begge ha tidssone eller begge mangle den.
    """
    if (interval.start.utcoffset() is None) != (interval.end.utcoffset() is None):
        logger.error("Work interval mixes naive and aware times. start=%s end=%s", interval.start, interval.end)
        raise InvalidIntervalError(
            f"Work interval mixes times with and without timezone: {interval.start} -> {interval.end}"
        )

    if interval.end < interval.start:
        logger.error("Work interval ends before it starts. start=%s end=%s", interval.start, interval.end)
        raise InvalidIntervalError(f"Work interval ends before it starts: {interval.start} -> {interval.end}")


def validate_rule(rule: WageSupplementRule) -> tuple[int, int] | None:
    """
    Kontrollerer en tilleggsregel og returnerer klokkevinduet.

    Returns:
        (start, slutt) i minutter etter midnatt, eller None om regelen
        ikke har klokkevindu. Slutt <= start betyr at vinduet krysser midnatt.

    Raises:
        InvalidRuleConfigurationError: Ukjent kategori eller type, negativt
            beløp, halvt eller ugyldig klokkevindu.
    """
    if rule.applies_to not in SUPPLEMENT_CATEGORIES:
        _fail(rule, f"unsupported category {rule.applies_to!r}")

    if rule.supplement_type not in SUPPLEMENT_TYPES:
        _fail(rule, f"unsupported supplement type {rule.supplement_type!r}")

    if rule.amount < 0:
        _fail(rule, f"negative amount {rule.amount}")

    if rule.time_start is None and rule.time_end is None:
        return None

    if rule.time_start is None or rule.time_end is None:
        _fail(rule, "time_start and time_end must both be set or both be empty")

    try:
        start = parse_clock_minutes(rule.time_start)
        end = parse_clock_minutes(rule.time_end)
    except ValueError as e:
        _fail(rule, str(e))

    if start == MINUTES_PER_DAY:
        _fail(rule, f"time_start cannot be {TIME_END_OF_DAY_STRING}")

    if start == end:
        _fail(rule, f"empty clock window {rule.time_start}-{rule.time_end}")

    return start, end


def _fail(rule: WageSupplementRule, reason: str) -> None:
    logger.error("Invalid wage supplement configuration. rule=%r reason=%s", rule.name, reason)
    raise InvalidRuleConfigurationError(rule.name, reason)

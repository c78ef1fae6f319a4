"""Norske helligdager."""

import datetime
import logging
import threading

from app.core.models import Holiday

logger = logging.getLogger(__name__)


def easter_sunday(year: int) -> datetime.date:
    """Anonymous Gregorian algorithm."""
    a = year % 19
    b = year // 100
    c = year % 100
    d = b // 4
    e = b % 4
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i = c // 4
    k = c % 4
    l = (32 + 2 * e + 2 * i - h - k) % 7
    m = (a + 11 * h + 22 * l) // 451
    month = (h + l - 7 * m + 114) // 31
    day = ((h + l - 7 * m + 114) % 31) + 1
    return datetime.date(year, month, day)


def nyttarsdag(year: int) -> datetime.date:
    """New Year's Day: January 1st."""
    return datetime.date(year, 1, 1)


def arbeidernes_dag(year: int) -> datetime.date:
    """Labour Day: May 1st."""
    return datetime.date(year, 5, 1)


def grunnlovsdagen(year: int) -> datetime.date:
    """Constitution Day: May 17th."""
    return datetime.date(year, 5, 17)


def forste_juledag(year: int) -> datetime.date:
    """Christmas Day: December 25th."""
    return datetime.date(year, 12, 25)


def andre_juledag(year: int) -> datetime.date:
    """Boxing Day: December 26th."""
    return datetime.date(year, 12, 26)


def skjaertorsdag(year: int) -> datetime.date:
    """Maundy Thursday: Thursday before Easter Sunday."""
    return easter_sunday(year) - datetime.timedelta(days=3)


def langfredag(year: int) -> datetime.date:
    """Good Friday: Friday before Easter Sunday."""
    return easter_sunday(year) - datetime.timedelta(days=2)


def andre_paskedag(year: int) -> datetime.date:
    """Easter Monday."""
    return easter_sunday(year) + datetime.timedelta(days=1)


def kristi_himmelfartsdag(year: int) -> datetime.date:
    """Ascension Day: 39 days after Easter Sunday (Thursday)."""
    return easter_sunday(year) + datetime.timedelta(days=39)


def forste_pinsedag(year: int) -> datetime.date:
    """Whit Sunday: 49 days after Easter Sunday."""
    return easter_sunday(year) + datetime.timedelta(days=49)


def andre_pinsedag(year: int) -> datetime.date:
    """Whit Monday: 50 days after Easter Sunday."""
    return easter_sunday(year) + datetime.timedelta(days=50)


def build_holidays_for_year(year: int) -> list[Holiday]:
    """
    Bygger alle norske helligdager for et år, sortert på dato.

    - Faste: 1. nyttårsdag, 1. mai, 17. mai, 1. og 2. juledag
    - Bevegelige (påskebasert): skjærtorsdag, langfredag, 1. og 2. påskedag,
      Kristi himmelfartsdag, 1. og 2. pinsedag

    Returnerer alltid 12 oppføringer. To helligdager kan falle på samme dato
    (Kristi himmelfartsdag på 1. mai i 2008, på 17. mai i 2012).
    """
    easter = easter_sunday(year)

    holidays = [
        Holiday(date=nyttarsdag(year), name="New Year's Day"),
        Holiday(date=arbeidernes_dag(year), name="Labour Day"),
        Holiday(date=grunnlovsdagen(year), name="Constitution Day"),
        Holiday(date=forste_juledag(year), name="Christmas Day"),
        Holiday(date=andre_juledag(year), name="Boxing Day"),
        Holiday(date=skjaertorsdag(year), name="Maundy Thursday"),
        Holiday(date=langfredag(year), name="Good Friday"),
        Holiday(date=easter, name="Easter Sunday"),
        Holiday(date=andre_paskedag(year), name="Easter Monday"),
        Holiday(date=kristi_himmelfartsdag(year), name="Ascension Day"),
        Holiday(date=forste_pinsedag(year), name="Whit Sunday"),
        Holiday(date=andre_pinsedag(year), name="Whit Monday"),
    ]

    return sorted(holidays, key=lambda h: h.date)


def holidays_to_mapping(holidays: list[Holiday]) -> dict[str, str]:
    """
    Gjør om en liste helligdager til "YYYY-MM-DD" -> navn.

    Sammenfallende datoer får navnene slått sammen med " / ".
    """
    mapping: dict[str, str] = {}
    for holiday in holidays:
        key = holiday.date.isoformat()
        if key in mapping:
            mapping[key] = f"{mapping[key]} / {holiday.name}"
        else:
            mapping[key] = holiday.name
    return mapping


class HolidayCalendar:
    """
    Helligdagskalender med cache per år.

    Eies av kalleren og sendes inn der den trengs. Cachen fylles på ved
    behov og tømmes aldri. Trygg å dele mellom tråder; to tråder som
    beregner samme år samtidig gir samme resultat.
    """

    def __init__(self) -> None:
        self._by_year: dict[int, tuple[list[Holiday], dict[str, str]]] = {}
        self._lock = threading.Lock()

    def _year(self, year: int) -> tuple[list[Holiday], dict[str, str]]:
        cached = self._by_year.get(year)
        if cached is not None:
            return cached

        with self._lock:
            cached = self._by_year.get(year)
            if cached is None:
                holidays = build_holidays_for_year(year)
                cached = (holidays, holidays_to_mapping(holidays))
                self._by_year[year] = cached
                logger.debug("Computed %d holidays for %d", len(holidays), year)
        return cached

    def holidays(self, year: int) -> list[Holiday]:
        """Alle helligdager for året som Holiday-poster."""
        return list(self._year(year)[0])

    def get_holidays(self, year: int) -> dict[str, str]:
        """Helligdager for året som "YYYY-MM-DD" -> navn."""
        return dict(self._year(year)[1])

    def is_holiday(self, date: datetime.date) -> bool:
        return date.isoformat() in self._year(date.year)[1]

    def holiday_name(self, date: datetime.date) -> str | None:
        return self._year(date.year)[1].get(date.isoformat())

    def cached_years(self) -> list[int]:
        return sorted(self._by_year)


def get_holidays(year: int) -> dict[str, str]:
    """Uncached "YYYY-MM-DD" -> navn for ett år."""
    return holidays_to_mapping(build_holidays_for_year(year))

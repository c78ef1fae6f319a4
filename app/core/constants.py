# app/core/constants.py
from typing import Final

# ==========================
# Tilleggskategorier
# ==========================

#: Nattillegg. Gjelder alle dager innenfor et klokkevindu (ofte over midnatt).
CATEGORY_NIGHT: Final[str] = "night"

#: Kveldstillegg. Gjelder alle dager innenfor et klokkevindu.
CATEGORY_EVENING: Final[str] = "evening"

#: Helgetillegg. Gjelder hele lørdag og søndag.
CATEGORY_WEEKEND: Final[str] = "weekend"

#: Helligdagstillegg. Gjelder hele døgnet på en norsk helligdag.
CATEGORY_HOLIDAY: Final[str] = "holiday"

#: Alle kategorier kalkulatoren kjenner. Andre verdier er konfigurasjonsfeil.
SUPPLEMENT_CATEGORIES: Final[tuple[str, ...]] = (
    CATEGORY_NIGHT,
    CATEGORY_EVENING,
    CATEGORY_WEEKEND,
    CATEGORY_HOLIDAY,
)

#: Kategorier der vinduet styres av kalenderdagen.
DAY_CATEGORIES: Final[tuple[str, ...]] = (CATEGORY_WEEKEND, CATEGORY_HOLIDAY)


# ==========================
# Tilleggstyper
# ==========================

#: Prosent av timelønn per time i vinduet.
SUPPLEMENT_TYPE_PERCENTAGE: Final[str] = "percentage"

#: Fast beløp, utbetales én gang når vakten berører vinduet.
SUPPLEMENT_TYPE_FIXED: Final[str] = "fixed"

SUPPLEMENT_TYPES: Final[tuple[str, ...]] = (
    SUPPLEMENT_TYPE_PERCENTAGE,
    SUPPLEMENT_TYPE_FIXED,
)


# ==========================
# Lønnstyper og timeføringer
# ==========================

SALARY_TYPE_HOURLY: Final[str] = "hourly"
SALARY_TYPE_FIXED: Final[str] = "fixed"

#: Kun godkjente timeføringer tas med i lønnskjøringen.
TIME_ENTRY_STATUS_APPROVED: Final[str] = "approved"


# ==========================
# Linjetyper i lønnsgrunnlaget
# ==========================

LINE_REGULAR: Final[str] = "regular"
LINE_OVERTIME_50: Final[str] = "overtime_50"
LINE_OVERTIME_100: Final[str] = "overtime_100"
LINE_FIXED_SALARY: Final[str] = "fixed_salary"

#: Visningstekster for linjetyper som ikke er tillegg.
LINE_DESCRIPTIONS: Final[dict[str, str]] = {
    LINE_REGULAR: "Ordinære timer",
    LINE_OVERTIME_50: "Overtid 50%",
    LINE_OVERTIME_100: "Overtid 100%",
    LINE_FIXED_SALARY: "Fastlønn",
}


# ==========================
# Uke og tid
# ==========================

#: Lørdag og søndag som datetime.weekday() (0 = mandag).
WEEKEND_WEEKDAYS: Final[tuple[int, ...]] = (5, 6)

#: Lørdag som datetime.weekday().
SATURDAY_WEEKDAY: Final[int] = 5

#: Søndag som datetime.weekday().
SUNDAY_WEEKDAY: Final[int] = 6

MINUTES_PER_HOUR: Final[int] = 60
MINUTES_PER_DAY: Final[int] = 24 * MINUTES_PER_HOUR
SECONDS_PER_MINUTE: Final[int] = 60

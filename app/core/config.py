# app/core/config.py

import os
from decimal import Decimal
from pathlib import Path
from typing import Final

from app.core.constants import CATEGORY_EVENING, CATEGORY_NIGHT


# ==========================
# Standardvinduer
# ==========================

#: Klokkevindu som brukes når en natt- eller kveldsregel mangler time_start/time_end.
#: Verdiene 21:00-06:00 og 17:00-21:00 er tariffens vanlige tidsrom.
DEFAULT_CATEGORY_WINDOWS: Final[dict[str, tuple[str, str]]] = {
    CATEGORY_NIGHT: ("21:00", "06:00"),
    CATEGORY_EVENING: ("17:00", "21:00"),
}


# ==========================
# Overtid (arbeidsmiljøloven)
# ==========================

#: Ordinær arbeidstid per dag før overtid, i minutter (9 timer).
DAILY_NORMAL_MINUTES: Final[int] = 9 * 60

#: De første overtidsminuttene per dag som betales med 50 % (2 timer).
DAILY_OVERTIME_50_CAP_MINUTES: Final[int] = 2 * 60

#: Ordinær arbeidstid per uke før overtid, i minutter (40 timer).
WEEKLY_NORMAL_MINUTES: Final[int] = 40 * 60

#: Timer etter dette klokkeslettet betales som 100 % overtid.
LATE_OVERTIME_HOUR: Final[int] = 21

#: Multiplikator for 50 % overtid.
OVERTIME_50_MULTIPLIER: Final[Decimal] = Decimal("1.5")

#: Multiplikator for 100 % overtid.
OVERTIME_100_MULTIPLIER: Final[Decimal] = Decimal("2")


# ==========================
# Fastlønn
# ==========================

#: Avtalte timer per måned når den ansatte mangler eget tall (37,5 t/uke).
DEFAULT_CONTRACTED_HOURS_PER_MONTH: Final[Decimal] = Decimal("162.5")

#: Nattillegg i kr/t for innbakte nattetimer når ingen aktiv nattregel finnes.
DEFAULT_NIGHT_SUPPLEMENT_RATE: Final[Decimal] = Decimal("65")


# ==========================
# Beløp og format
# ==========================

#: Beløp rundes til øre.
MONEY_QUANTUM: Final[Decimal] = Decimal("0.01")

#: Streng for "slutten av døgnet" i tilleggsregler.
TIME_END_OF_DAY_STRING: Final[str] = "24:00"

#: Skilletegn i CSV-eksporten til lønnssystemet.
CSV_DELIMITER: Final[str] = ";"


# ==========================
# Filer
# ==========================

#: Standard plassering av tilleggsreglene. Kan overstyres med WAGE_SUPPLEMENTS_FILE.
WAGE_SUPPLEMENTS_FILE: Final[Path] = Path(
    os.getenv("WAGE_SUPPLEMENTS_FILE", "data/wage_supplements.json")
)

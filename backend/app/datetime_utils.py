"""
Utilitaires de dates.

Les colonnes DateTime sont stockées en UTC sans fuseau : toute date reçue avec
un fuseau est convertie avant écriture ou comparaison.
"""

import calendar
from datetime import datetime, timezone
from typing import Optional

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def utcnow() -> datetime:
    """Heure courante UTC, naïve. Isolée pour pouvoir être patchée dans les tests."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def add_months(value: datetime, months: int) -> datetime:
    """Ajoute des mois calendaires ; le jour est ramené au dernier jour du mois si besoin (31/01 + 1 → 28 ou 29/02)."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def weekday_name(value: datetime) -> str:
    """Nom anglais du jour de la semaine (format des disponibilités enseignants)."""
    return WEEKDAYS[value.weekday()]

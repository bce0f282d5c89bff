"""Brazilian national holidays - fixed dates plus Easter-relative movable feasts"""

from datetime import date, timedelta
from typing import Dict, List, Optional, Tuple
from finplanner.domain.models import Holiday
from finplanner.utils.date_utils import days_in_month

FIXED_HOLIDAYS: Dict[str, str] = {
    "01-01": "Ano Novo",
    "04-21": "Tiradentes",
    "05-01": "Dia do Trabalho",
    "09-07": "Independência",
    "10-12": "N. Sra. Aparecida",
    "11-02": "Finados",
    "11-15": "Proclamação da República",
    "12-25": "Natal",
}

# Offsets in days from Easter Sunday
MOVABLE_HOLIDAY_OFFSETS: List[Tuple[int, str]] = [
    (-47, "Carnaval"),
    (-2, "Sexta-feira Santa"),
    (60, "Corpus Christi"),
]


def month_day_key(day: date) -> str:
    return f"{day.month:02d}-{day.day:02d}"


def easter_date(year: int) -> date:
    """
    Easter Sunday for a Gregorian year (anonymous Gauss/Meeus algorithm).

    All divisions are integer floor divisions; float division corrupts the
    result for some years.
    """
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
    l = (32 + 2 * e + 2 * i - h - k) % 7  # noqa: E741
    m = (a + 11 * h + 22 * l) // 451
    month = (h + l - 7 * m + 114) // 31
    day = ((h + l - 7 * m + 114) % 31) + 1
    return date(year, month, day)


def movable_holidays(year: int) -> Dict[str, str]:
    easter = easter_date(year)
    return {
        month_day_key(easter + timedelta(days=offset)): name
        for offset, name in MOVABLE_HOLIDAY_OFFSETS
    }


def holidays_for_year(year: int) -> Dict[str, str]:
    """
    Merged "MM-DD" -> name lookup table for a year.

    A movable holiday landing on a fixed date replaces the fixed name.
    """
    return {**FIXED_HOLIDAYS, **movable_holidays(year)}


def list_holidays(year: int) -> List[Holiday]:
    """Holidays of a year in calendar order"""
    table = holidays_for_year(year)
    return [Holiday(month_day=key, name=table[key]) for key in sorted(table)]


def holiday_name(day: date) -> Optional[str]:
    return holidays_for_year(day.year).get(month_day_key(day))


def holidays_in_month(year: int, month: int) -> List[Tuple[int, str]]:
    """(day, name) pairs for every holiday falling in the month"""
    table = holidays_for_year(year)
    result = []
    for day in range(1, days_in_month(year, month) + 1):
        name = table.get(f"{month:02d}-{day:02d}")
        if name:
            result.append((day, name))
    return result

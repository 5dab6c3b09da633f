"""Colombian public holidays (Ley 51 de 1983, "Ley Emiliani")."""

import datetime


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


def next_monday(date_: datetime.date) -> datetime.date:
    """The date itself if it is a Monday, otherwise the following Monday."""
    return date_ + datetime.timedelta(days=(7 - date_.weekday()) % 7)


def ano_nuevo(year: int) -> datetime.date:
    """New Year's Day: January 1st."""
    return datetime.date(year, 1, 1)


def reyes_magos(year: int) -> datetime.date:
    """Epiphany, moved to Monday."""
    return next_monday(datetime.date(year, 1, 6))


def san_jose(year: int) -> datetime.date:
    """Saint Joseph (March 19), moved to Monday."""
    return next_monday(datetime.date(year, 3, 19))


def jueves_santo(year: int) -> datetime.date:
    """Maundy Thursday: Thursday before Easter Sunday."""
    return easter_sunday(year) - datetime.timedelta(days=3)


def viernes_santo(year: int) -> datetime.date:
    """Good Friday: Friday before Easter Sunday."""
    return easter_sunday(year) - datetime.timedelta(days=2)


def dia_del_trabajo(year: int) -> datetime.date:
    """May 1st (Labour Day)."""
    return datetime.date(year, 5, 1)


def ascension(year: int) -> datetime.date:
    """Ascension Day (Easter + 39) moved to Monday, i.e. Easter + 43."""
    return easter_sunday(year) + datetime.timedelta(days=43)


def corpus_christi(year: int) -> datetime.date:
    """Corpus Christi (Easter + 60) moved to Monday, i.e. Easter + 64."""
    return easter_sunday(year) + datetime.timedelta(days=64)


def sagrado_corazon(year: int) -> datetime.date:
    """Sacred Heart (Easter + 68) moved to Monday, i.e. Easter + 71."""
    return easter_sunday(year) + datetime.timedelta(days=71)


def san_pedro_y_san_pablo(year: int) -> datetime.date:
    """Saints Peter and Paul (June 29), moved to Monday."""
    return next_monday(datetime.date(year, 6, 29))


def independencia(year: int) -> datetime.date:
    """Independence Day, July 20th."""
    return datetime.date(year, 7, 20)


def batalla_de_boyaca(year: int) -> datetime.date:
    """Battle of Boyacá, August 7th."""
    return datetime.date(year, 8, 7)


def asuncion(year: int) -> datetime.date:
    """Assumption (August 15), moved to Monday."""
    return next_monday(datetime.date(year, 8, 15))


def dia_de_la_raza(year: int) -> datetime.date:
    """Columbus Day (October 12), moved to Monday."""
    return next_monday(datetime.date(year, 10, 12))


def todos_los_santos(year: int) -> datetime.date:
    """All Saints (November 1), moved to Monday."""
    return next_monday(datetime.date(year, 11, 1))


def independencia_de_cartagena(year: int) -> datetime.date:
    """Independence of Cartagena (November 11), moved to Monday."""
    return next_monday(datetime.date(year, 11, 11))


def inmaculada_concepcion(year: int) -> datetime.date:
    """Immaculate Conception, December 8th."""
    return datetime.date(year, 12, 8)


def navidad(year: int) -> datetime.date:
    """Christmas Day, December 25th."""
    return datetime.date(year, 12, 25)


HOLIDAY_BUILDERS = (
    ano_nuevo,
    reyes_magos,
    san_jose,
    jueves_santo,
    viernes_santo,
    dia_del_trabajo,
    ascension,
    corpus_christi,
    sagrado_corazon,
    san_pedro_y_san_pablo,
    independencia,
    batalla_de_boyaca,
    asuncion,
    dia_de_la_raza,
    todos_los_santos,
    independencia_de_cartagena,
    inmaculada_concepcion,
    navidad,
)


def colombian_holidays(year: int) -> list[datetime.date]:
    """All non-working holidays of a year, sorted, without duplicates.

    Two holidays can land on the same Monday (San Pedro and Sagrado Corazón
    in 2025); that date is listed once.
    """
    return sorted({build(year) for build in HOLIDAY_BUILDERS})

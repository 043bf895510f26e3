# Copyright 2018 Brian T. Park
#
# MIT License

"""
Parsers of the mini-grammars embedded in the columns of the tz database
files. Each parser takes the raw token and either returns a typed value or
raises FieldParseError naming the column. No other exception escapes.
"""

import calendar
import datetime
import re
from typing import Optional
from typing import Tuple

from olsontools.data_types.ot_errors import FieldParseError
from olsontools.data_types.ot_types import MAX_YEAR
from olsontools.data_types.ot_types import MIN_YEAR
from olsontools.data_types.ot_types import RuleRef
from olsontools.data_types.ot_types import RuleRefKind
from olsontools.data_types.ot_types import TimeKind
from olsontools.data_types.ot_types import TimeOfDay

MONTH_TO_MONTH_INDEX = {
    'jan': 1,
    'feb': 2,
    'mar': 3,
    'apr': 4,
    'may': 5,
    'jun': 6,
    'jul': 7,
    'aug': 8,
    'sep': 9,
    'oct': 10,
    'nov': 11,
    'dec': 12,
}

MONTH_NAMES = [
    'january', 'february', 'march', 'april', 'may', 'june', 'july',
    'august', 'september', 'october', 'november', 'december',
]

# ISO-8601 specifies Monday=1, Sunday=7
WEEK_TO_WEEK_INDEX = {
    'Mon': 1,
    'Tue': 2,
    'Wed': 3,
    'Thu': 4,
    'Fri': 5,
    'Sat': 6,
    'Sun': 7,
}

WEEK_NAMES = [
    'monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday',
    'sunday',
]

# Suffix of AT and UNTIL times. 'g' (GMT) and 'z' (Zulu) are synonyms of 'u'.
SUFFIX_TO_TIME_KIND = {
    '': TimeKind.WALL,
    'w': TimeKind.WALL,
    's': TimeKind.STANDARD,
    'u': TimeKind.UTC,
    'g': TimeKind.UTC,
    'z': TimeKind.UTC,
}

_YEAR_RE = re.compile(r'^\d+$')

# [-]h[:mm[:ss]] followed by an optional single letter suffix.
_TIME_RE = re.compile(r'^([-+]?)(\d+)(?::(\d\d?))?(?::(\d\d?))?([a-z]?)$')

_ON_DAY_RE = re.compile(
    r'^(?:(?P<day>\d+)'
    r'|last(?P<last>[A-Za-z]+)'
    r'|(?P<dow>[A-Za-z]+)(?P<op>>=|<=)(?P<limit>\d+))$'
)


# -----------------------------------------------------------------------------
# Years.
# -----------------------------------------------------------------------------

def parse_year(year_string: str, field: str = 'FROM') -> int:
    """Parse the FROM field of a Rule, or any other year field. Accepts
    'minimum', 'maximum' and their 'min', 'max' abbreviations.
    An explicit year must lie strictly between the MIN_YEAR and MAX_YEAR
    sentinels.
    """
    lower = year_string.lower()
    if lower in ('minimum', 'min'):
        return MIN_YEAR
    if lower in ('maximum', 'max'):
        return MAX_YEAR
    return _parse_explicit_year(year_string, field)


def parse_to_year(year_string: str, from_year: int) -> int:
    """Parse the TO field of a Rule, where 'only' means the FROM year."""
    if year_string.lower() == 'only':
        return from_year
    return parse_year(year_string, 'TO')


def parse_until_year(year_string: str) -> int:
    """Parse the year of the UNTIL column of a Zone line."""
    return _parse_explicit_year(year_string, 'UNTIL')


def _parse_explicit_year(year_string: str, field: str) -> int:
    if not _YEAR_RE.match(year_string):
        raise FieldParseError(field, year_string)
    year = int(year_string)
    if year <= MIN_YEAR or year >= MAX_YEAR:
        raise FieldParseError(field, year_string)
    return year


# -----------------------------------------------------------------------------
# Months and days.
# -----------------------------------------------------------------------------

def month_to_index(month: str) -> int:
    """Convert a 3-letter or full month name, in any case, to 1-12."""
    lower = month.lower()
    index = MONTH_TO_MONTH_INDEX.get(lower)
    if index is not None:
        return index
    if lower in MONTH_NAMES:
        return MONTH_NAMES.index(lower) + 1
    raise FieldParseError('IN', month)


def _normalize_day_name(name: str, on_string: str) -> str:
    lower = name.lower()
    if lower in WEEK_NAMES:
        lower = lower[:3]
    day_name = lower.capitalize()
    if day_name not in WEEK_TO_WEEK_INDEX:
        raise FieldParseError('ON', on_string)
    return day_name


def _check_day_of_month(day: str, on_string: str) -> int:
    day_of_month = int(day)
    if day_of_month < 1 or day_of_month > 31:
        raise FieldParseError('ON', on_string)
    return day_of_month


def parse_on_day_string(on_string: str) -> str:
    """Validate things like "Sun>=1", "lastSun", "20", "Fri<=2" and return
    the normalized form ("lastsunday" becomes "lastSun"). The specifier is
    not resolved into a day of month, see resolve_on_day().
    """
    match = _ON_DAY_RE.match(on_string)
    if not match:
        raise FieldParseError('ON', on_string)

    day = match.group('day')
    if day is not None:
        return str(_check_day_of_month(day, on_string))

    last = match.group('last')
    if last is not None:
        return 'last' + _normalize_day_name(last, on_string)

    day_name = _normalize_day_name(match.group('dow'), on_string)
    limit = _check_day_of_month(match.group('limit'), on_string)
    return f"{day_name}{match.group('op')}{limit}"


def parse_on_day(on_day: str) -> Tuple[int, int]:
    """Convert a normalized ON specifier into (on_day_of_week,
    on_day_of_month) where

        (0, dayOfMonth) = exact match on dayOfMonth
        (dayOfWeek, dayOfMonth) = matches dayOfWeek>=dayOfMonth
        (dayOfWeek, -dayOfMonth) = matches dayOfWeek<=dayOfMonth
        (dayOfWeek, 0) = matches lastDayOfWeek

    and dayOfWeek is represented by a number (Mon=1, ..., Sun=7).
    """
    on_day = parse_on_day_string(on_day)
    if on_day.isdigit():
        return (0, int(on_day))
    if on_day.startswith('last'):
        return (WEEK_TO_WEEK_INDEX[on_day[4:]], 0)
    day_of_week = WEEK_TO_WEEK_INDEX[on_day[:3]]
    day_of_month = int(on_day[5:])
    if on_day[3:5] == '<=':
        day_of_month = -day_of_month
    return (day_of_week, day_of_month)


def resolve_on_day(on_day: str, year: int, month: int) -> Tuple[int, int]:
    """Return the actual (month, day) of the ON specifier in the given year.
    This is the resolution step deferred by the extractor, which keeps the
    specifier as a string because it needs a concrete year. 'Xxx>=N' and
    'lastXxx' can spill into the next month, 'Xxx<=N' into the previous one:

        Return (13, xx) if a shift to the next year occurs
        Return (0, xx) if a shift to the previous year occurs

    Raises FieldParseError('ON') if the specifier names a day which the
    month does not have, or if the year is outside of what datetime.date
    supports (which includes the MIN_YEAR and MAX_YEAR sentinels).
    """
    if not (datetime.MINYEAR < year < datetime.MAXYEAR):
        raise FieldParseError('ON', on_day)
    if not 1 <= month <= 12:
        raise FieldParseError('IN', str(month))
    day_of_week, day_of_month = parse_on_day(on_day)
    days_in_month = calendar.monthrange(year, month)[1]

    if day_of_week == 0:
        if day_of_month > days_in_month:
            raise FieldParseError('ON', on_day)
        return (month, day_of_month)

    if day_of_month == 0:
        # lastXxx is the same as Xxx>=(daysInMonth - 6)
        day_of_month = days_in_month - 6
    if abs(day_of_month) > days_in_month:
        raise FieldParseError('ON', on_day)

    limit = datetime.date(year, month, abs(day_of_month))
    if day_of_month > 0:
        shift = (day_of_week - limit.isoweekday()) % 7
    else:
        shift = -((limit.isoweekday() - day_of_week) % 7)
    resolved = limit + datetime.timedelta(days=shift)
    return ((resolved.year - year) * 12 + resolved.month, resolved.day)


# -----------------------------------------------------------------------------
# Times and offsets.
# -----------------------------------------------------------------------------

def _parse_hms(time_string: str, field: str) -> Tuple[int, str]:
    """Parse '[-]h[:mm[:ss]][suffix]' into (signed minutes, suffix). Seconds
    are truncated towards zero.
    """
    match = _TIME_RE.match(time_string)
    if not match:
        raise FieldParseError(field, time_string)
    sign, hour, minute, second, suffix = match.groups()
    minute = int(minute) if minute else 0
    second = int(second) if second else 0
    if minute > 59 or second > 59:
        raise FieldParseError(field, time_string)
    minutes = int(hour) * 60 + minute
    return (-minutes if sign == '-' else minutes), suffix


def parse_at_time_string(at_string: str) -> TimeOfDay:
    """Parse the AT field of a Rule (e.g. '2:00', '2:00s', '-0:30u', '25:00')
    into the minutes since midnight and its TimeKind. No suffix means wall
    clock time.
    """
    minutes, suffix = _parse_hms(at_string, 'AT')
    kind = SUFFIX_TO_TIME_KIND.get(suffix)
    if kind is None:
        raise FieldParseError('AT', at_string)
    return TimeOfDay(minutes, kind)


def parse_offset_string(offset_string: str, field: str = 'STDOFF') -> int:
    """Parse a signed offset such as '-5:00' or '5:45' into minutes. The
    placeholder '-' means zero.
    """
    if offset_string == '-':
        return 0
    minutes, suffix = _parse_hms(offset_string, field)
    if suffix:
        raise FieldParseError(field, offset_string)
    return minutes


def parse_save_string(save_string: str) -> int:
    """Parse the SAVE field of a Rule into minutes. Accepts the 's' (standard)
    and 'd' (daylight) suffixes of newer tz files, which are ignored.
    """
    if save_string == '-':
        return 0
    minutes, suffix = _parse_hms(save_string, 'SAVE')
    if suffix not in ('', 's', 'd'):
        raise FieldParseError('SAVE', save_string)
    return minutes


# -----------------------------------------------------------------------------
# Letters, rules, formats.
# -----------------------------------------------------------------------------

def parse_letter(letter: str) -> Optional[str]:
    """Return the LETTER/S field of a Rule, None for '-'."""
    if letter == '-':
        return None
    return letter


def parse_rules_string(rules: str) -> RuleRef:
    """Parse the RULES column of a Zone line: '-', a DST offset such as
    '1:00', or the name of a Rule group.
    """
    if rules == '-':
        return RuleRef(RuleRefKind.NONE)
    head = rules[1:] if rules[0] == '-' else rules
    if head[:1].isdigit():
        return RuleRef(
            RuleRefKind.SAVE,
            save_minutes=parse_offset_string(rules, 'RULES'),
        )
    return RuleRef(RuleRefKind.NAMED, name=rules)


def parse_format(format: str) -> str:
    """Validate the FORMAT column: 'E%sT', 'GMT/BST', '%z' or a literal."""
    if format.count('/') > 1:
        raise FieldParseError('FORMAT', format)
    if '%' in format and '%s' not in format and '%z' not in format:
        raise FieldParseError('FORMAT', format)
    return format

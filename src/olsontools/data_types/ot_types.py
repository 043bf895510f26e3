# Copyright 2018 Brian T. Park
#
# MIT License

from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import Any
from typing import Dict
from typing import List
from typing import NamedTuple
from typing import Optional
from typing_extensions import TypedDict

"""
Data types created or consumed by the extractor, transformer and generator
packages. Also contains global constants used by multiple packages.
"""

# -----------------------------------------------------------------------------
# Constants used by various modules.
# -----------------------------------------------------------------------------

# Marker year to indicate -Infinity year ('minimum' or 'min').
MIN_YEAR: int = 0

# Marker year to indicate +Infinity year ('maximum' or 'max').
MAX_YEAR: int = 9999

# Region files scanned in the given directory, in processing order.
ZONE_FILES: List[str] = [
    'africa',
    'antarctica',
    'asia',
    'australasia',
    'europe',
    'northamerica',
    'southamerica',
]

# Reference tables, loaded before the region files.
ISO3166_FILE = 'iso3166.tab'
ZONE_TAB_FILE = 'zone.tab'


class TimeKind(str, Enum):
    """Suffix of an AT or UNTIL time: wall clock, standard time, or UTC."""
    WALL = 'w'
    STANDARD = 's'
    UTC = 'u'


class RuleRefKind(str, Enum):
    """Tag of the RULES column of a Zone line."""
    NONE = 'none'  # '-'
    SAVE = 'save'  # literal 'hh:mm' DST offset
    NAMED = 'named'  # name of a Rule group


# -----------------------------------------------------------------------------
# Typed values produced by the field grammars.
# -----------------------------------------------------------------------------

class TimeOfDay(NamedTuple):
    """Parsed AT time, e.g. '2:00s' -> TimeOfDay(120, TimeKind.STANDARD)."""
    minutes: int  # signed minutes since midnight
    kind: TimeKind


@dataclass(frozen=True)
class RuleRef:
    """The RULES column of a Zone. The Rule group is referenced by name only
    and is never dereferenced by the extractor.
    """
    kind: RuleRefKind
    name: Optional[str] = None  # set if kind == NAMED
    save_minutes: int = 0  # set if kind == SAVE

    def __str__(self) -> str:
        if self.kind == RuleRefKind.NAMED:
            return str(self.name)
        if self.kind == RuleRefKind.SAVE:
            return f'{self.save_minutes}m'
        return '-'


# -----------------------------------------------------------------------------
# Records produced by the extractor and transformer.
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ZoneRef:
    """One line of the 'zone.tab' file, keyed by zone name."""
    sequence_id: int  # 1-based, in file order
    country_code: str
    country_name: str  # '' if the code is missing from 'iso3166.tab'
    coordinates: str
    comment: Optional[str]


@dataclass(frozen=True)
class Rule:
    """Represents a 'RULE' line in a tz database file:

    # Rule  NAME    FROM    TO    TYPE IN   ON      AT      SAVE    LETTER
    Rule    US      2007    max   -    Mar  Sun>=8  2:00    1:00    D
    """
    name: str  # name of the Rule group
    delta_minutes: int  # SAVE field
    from_year: int
    to_year: int  # MAX_YEAR means 'max'
    in_month: int  # 1-12
    on_day: str  # unresolved: '15', 'lastSun', 'Sun>=8', 'Sun<=25'
    at_time: int  # minutes since midnight, may be negative or >= 24:00
    at_time_kind: TimeKind
    letter: Optional[str]  # None if '-'


@dataclass(frozen=True)
class Zone:
    """The currently effective era of a 'ZONE' block in a tz database file:

    # Zone  NAME                STDOFF      RULES   FORMAT  [UNTIL]
    Zone    America/Chicago     -5:50:36    -       LMT     1883 Nov 18 12:09:24
                                -6:00       US      C%sT    1920
                                ...
                                -6:00       US      C%sT

    Only the last line of the block is kept.
    """
    id: int  # ZoneRef.sequence_id, or 0 if not in 'zone.tab'
    name: str
    gmt_offset_minutes: int
    rule_ref: RuleRef
    format: str  # e.g. 'P%sT', 'GMT/BST', 'LMT'
    country_code: str = ''
    country_name: str = ''
    comment: Optional[str] = None
    coordinates: str = ''
    until_year: Optional[int] = None  # None if the era is still open


@dataclass(frozen=True)
class Link:
    """Represents a 'LINK' line: 'Link America/New_York US/Eastern'."""
    from_zone_name: str  # existing zone
    to_zone_name: str  # alias


# Map of country code -> country name. Created from 'iso3166.tab'.
CountryTable = Dict[str, str]

# Map of zone name -> ZoneRef. Created from 'zone.tab'.
ZoneRefTable = Dict[str, ZoneRef]

# Map of zone name -> Zone, including the expanded aliases.
ZonesByName = Dict[str, Zone]


@dataclass
class IdCounter:
    """Sequence of zone ids, shared by the 'zone.tab' loader and the link
    resolver so that alias ids never collide with reference-table ids.
    """
    last_id: int = 0

    def next(self) -> int:
        self.last_id += 1
        return self.last_id


@dataclass
class ScanStats:
    """Line and record counters, accumulated per file and merged."""
    total_lines: int = 0
    comment_lines: int = 0  # blank lines and '#' lines
    entities: int = 0  # records seen, parsed or not
    skipped_records: int = 0  # bad fields or unknown keywords
    filtered_rules: int = 0  # Rules outside the current year
    filtered_zones: int = 0  # Zones which ended before the current year
    dangling_links: int = 0  # Links to an unknown zone
    resolved_links: int = 0  # Links expanded into alias Zones

    def merge(self, other: 'ScanStats') -> None:
        self.total_lines += other.total_lines
        self.comment_lines += other.comment_lines
        self.entities += other.entities
        self.skipped_records += other.skipped_records
        self.filtered_rules += other.filtered_rules
        self.filtered_zones += other.filtered_zones
        self.dangling_links += other.dangling_links
        self.resolved_links += other.resolved_links


@dataclass
class RegionData:
    """Records parsed from a single region file by RegionParser."""
    filename: str
    rules: List[Rule] = field(default_factory=list)
    zones: List[Zone] = field(default_factory=list)
    links: List[Link] = field(default_factory=list)
    stats: ScanStats = field(default_factory=ScanStats)


@dataclass
class ExtractorResult:
    """Result type of Extractor.get_data(). Updated in-situ by the
    LinkResolver.
    """
    countries: CountryTable
    zone_refs: ZoneRefTable
    rules: List[Rule]
    zones: List[Zone]
    links: List[Link]
    zones_by_name: ZonesByName
    stats: ScanStats
    id_counter: IdCounter
    current_year: int
    tz_files: List[str]


class Summary(NamedTuple):
    """Fixed-shape statistics of a run."""
    total_lines: int
    comment_lines: int
    total_entities: int
    zone_count: int
    rule_count: int
    link_count: int

    @property
    def total_parsed(self) -> int:
        return self.zone_count + self.rule_count + self.link_count


class OlsonDatabase(TypedDict):
    """JSON-serializable form of the parsed tz database files."""

    # Context data.
    current_year: int
    tz_files: List[str]
    num_zones: int
    num_rules: int
    num_links: int

    # Collections, each record converted by dataclasses.asdict().
    countries: CountryTable
    zone_refs: Dict[str, Dict[str, Any]]
    rules: List[Dict[str, Any]]
    zones: List[Dict[str, Any]]
    links: List[Dict[str, Any]]

    # Statistics.
    summary: Dict[str, int]

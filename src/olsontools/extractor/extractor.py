# Copyright 2018 Brian T. Park
#
# MIT License

"""
Parses the raw TZ Database region files (africa, europe, ...) into Rule, Zone
and Link records, after loading the iso3166.tab and zone.tab reference
tables.

Each region file is scanned by a RegionParser which keeps no state across
files, so the files can be scanned in worker processes. The Extractor merges
the per-file results in the order of its `tz_files` list. The only shared
state, the zone lookup table and the id counter, is written by the merge step
alone.

Usage:
    extractor = Extractor(input_dir, current_year)
    extractor.parse()
    extractor.print_summary()
    result = extractor.get_data()
"""

import logging
import os
from concurrent.futures import ProcessPoolExecutor
from typing import Callable
from typing import Iterable
from typing import List
from typing import Optional

from olsontools.data_types.ot_errors import FieldParseError
from olsontools.data_types.ot_types import CountryTable
from olsontools.data_types.ot_types import ExtractorResult
from olsontools.data_types.ot_types import IdCounter
from olsontools.data_types.ot_types import ISO3166_FILE
from olsontools.data_types.ot_types import Link
from olsontools.data_types.ot_types import RegionData
from olsontools.data_types.ot_types import Rule
from olsontools.data_types.ot_types import ScanStats
from olsontools.data_types.ot_types import Zone
from olsontools.data_types.ot_types import ZONE_FILES
from olsontools.data_types.ot_types import ZONE_TAB_FILE
from olsontools.data_types.ot_types import ZoneRefTable
from olsontools.data_types.ot_types import ZonesByName
from olsontools.extractor.fields import month_to_index
from olsontools.extractor.fields import parse_at_time_string
from olsontools.extractor.fields import parse_format
from olsontools.extractor.fields import parse_letter
from olsontools.extractor.fields import parse_offset_string
from olsontools.extractor.fields import parse_on_day_string
from olsontools.extractor.fields import parse_rules_string
from olsontools.extractor.fields import parse_save_string
from olsontools.extractor.fields import parse_to_year
from olsontools.extractor.fields import parse_until_year
from olsontools.extractor.fields import parse_year
from olsontools.extractor.lines import LineKind
from olsontools.extractor.lines import classify_line
from olsontools.extractor.lines import is_continuation
from olsontools.extractor.reftables import load_countries
from olsontools.extractor.reftables import load_zone_refs

RULE_KEYWORD = 'Rule'
ZONE_KEYWORD = 'Zone'
LINK_KEYWORD = 'Link'

# Minimum number of fields of each record.
RULE_FIELD_COUNT = 10  # Rule NAME FROM TO TYPE IN ON AT SAVE LETTER
ZONE_FIELD_COUNT = 5  # Zone NAME STDOFF RULES FORMAT [UNTIL]
ERA_FIELD_COUNT = 3  # STDOFF RULES FORMAT [UNTIL]
LINK_FIELD_COUNT = 3  # Link TARGET LINK-NAME


def match_keyword(token: str) -> Optional[str]:
    """Return the keyword matched by the first field of a line. Keywords are
    case-insensitive and can be abbreviated ('R', 'Z', 'L' in the compact
    format). Returns None for anything else.
    """
    lower = token.lower()
    for keyword in (RULE_KEYWORD, ZONE_KEYWORD, LINK_KEYWORD):
        if keyword.lower().startswith(lower):
            return keyword
    return None


class RegionParser:
    """Line-by-line state machine over one region file. A Rule or Link line
    is a complete record. A Zone line starts a block which extends over the
    following continuation lines, and only the last line of the block (the
    most recent era) is kept.
    """

    def __init__(
        self,
        filename: str,
        zone_refs: ZoneRefTable,
        current_year: int,
    ) -> None:
        self.filename = filename
        self.zone_refs = zone_refs
        self.current_year = current_year

        self.data = RegionData(filename=filename)
        self.stats = self.data.stats

        # State of InZoneContinuation. The header is None while Idle.
        self.zone_header: Optional[List[str]] = None
        self.zone_line_number = 0
        self.zone_era: List[str] = []

    def parse(self, lines: Iterable[str]) -> RegionData:
        for line_number, line in enumerate(lines, start=1):
            self.stats.total_lines += 1
            kind, fields = classify_line(line)

            if self.zone_header is not None:
                if kind != LineKind.CONTENT:
                    self.stats.comment_lines += 1
                    continue
                if is_continuation(line):
                    self.zone_era = fields
                    continue
                self._end_zone()

            if kind != LineKind.CONTENT:
                self.stats.comment_lines += 1
                continue

            self.stats.entities += 1
            keyword = match_keyword(fields[0])
            if keyword == ZONE_KEYWORD:
                self.zone_header = fields
                self.zone_line_number = line_number
                self.zone_era = fields[2:]
            elif keyword == RULE_KEYWORD:
                self._process_record(line_number, self._parse_rule, fields)
            elif keyword == LINK_KEYWORD:
                self._process_record(line_number, self._parse_link, fields)
            else:
                self.stats.skipped_records += 1
                logging.debug(
                    "%s:%d: Unknown keyword '%s'",
                    self.filename, line_number, fields[0])

        if self.zone_header is not None:
            self._end_zone()
        return self.data

    def _process_record(
        self,
        line_number: int,
        parse_func: Callable[..., None],
        *args: List[str],
    ) -> None:
        """Run the parse_func, skipping the record if a field is invalid."""
        try:
            parse_func(*args)
        except FieldParseError as e:
            self.stats.skipped_records += 1
            logging.debug('%s:%d: %s', self.filename, line_number, e)

    def _end_zone(self) -> None:
        header = self.zone_header
        assert header is not None
        self.zone_header = None
        self._process_record(
            self.zone_line_number, self._parse_zone, header, self.zone_era)
        self.zone_era = []

    def _parse_rule(self, fields: List[str]) -> None:
        if len(fields) < RULE_FIELD_COUNT:
            raise FieldParseError('Rule', ' '.join(fields))

        from_year = parse_year(fields[2])
        to_year = parse_to_year(fields[3], from_year)
        if from_year > to_year:
            raise FieldParseError('TO', fields[3])
        at_time = parse_at_time_string(fields[7])
        rule = Rule(
            name=fields[1],
            delta_minutes=parse_save_string(fields[8]),
            from_year=from_year,
            to_year=to_year,
            in_month=month_to_index(fields[5]),
            on_day=parse_on_day_string(fields[6]),
            at_time=at_time.minutes,
            at_time_kind=at_time.kind,
            letter=parse_letter(fields[9]),
        )

        if from_year > self.current_year or to_year < self.current_year:
            self.stats.filtered_rules += 1
            return
        self.data.rules.append(rule)

    def _parse_zone(self, header: List[str], era: List[str]) -> None:
        """Parse the Zone NAME from the header line, and the STDOFF, RULES,
        FORMAT, [UNTIL] columns from the last era of the block. For a
        single-line Zone, the era is the tail of the header line.
        """
        if len(header) < ZONE_FIELD_COUNT or len(era) < ERA_FIELD_COUNT:
            raise FieldParseError('Zone', ' '.join(header))
        name = header[1]

        until_year: Optional[int] = None
        if len(era) > ERA_FIELD_COUNT:
            until_year = parse_until_year(era[3])
            if len(era) > ERA_FIELD_COUNT + 1:
                month_to_index(era[4])

        zone_ref = self.zone_refs.get(name)
        zone = Zone(
            id=zone_ref.sequence_id if zone_ref else 0,
            name=name,
            gmt_offset_minutes=parse_offset_string(era[0]),
            rule_ref=parse_rules_string(era[1]),
            format=parse_format(era[2]),
            country_code=zone_ref.country_code if zone_ref else '',
            country_name=zone_ref.country_name if zone_ref else '',
            comment=zone_ref.comment if zone_ref else None,
            coordinates=zone_ref.coordinates if zone_ref else '',
            until_year=until_year,
        )

        if until_year is not None and until_year < self.current_year:
            self.stats.filtered_zones += 1
            return
        self.data.zones.append(zone)

    def _parse_link(self, fields: List[str]) -> None:
        if len(fields) < LINK_FIELD_COUNT:
            raise FieldParseError('Link', ' '.join(fields))
        self.data.links.append(
            Link(from_zone_name=fields[1], to_zone_name=fields[2]))


def parse_region_file(
    input_dir: str,
    filename: str,
    zone_refs: ZoneRefTable,
    current_year: int,
) -> RegionData:
    """Scan a single region file. Runs in a worker process if the Extractor
    was created with jobs > 1.
    """
    full_filename = os.path.join(input_dir, filename)
    parser = RegionParser(filename, zone_refs, current_year)
    with open(full_filename, 'r', encoding='utf-8') as f:
        return parser.parse(f)


class Extractor:
    """Reads the reference tables and the region files from the `input_dir`
    and produces the ordered collections of Rules, Zones and Links.
    """

    def __init__(
        self,
        input_dir: str,
        current_year: int,
        tz_files: Optional[List[str]] = None,
        jobs: int = 1,
    ) -> None:
        """
        Args:
            input_dir: directory of the tz database files
            current_year: Rules and Zones no longer valid in this year are
                discarded
            tz_files: region files to scan, default ZONE_FILES
            jobs: number of worker processes scanning the region files
        """
        self.input_dir = input_dir
        self.current_year = current_year
        self.tz_files = list(tz_files if tz_files is not None else ZONE_FILES)
        self.jobs = jobs

        self.id_counter = IdCounter()
        self.stats = ScanStats()
        self.countries: CountryTable = {}
        self.zone_refs: ZoneRefTable = {}
        self.rules: List[Rule] = []
        self.zones: List[Zone] = []
        self.links: List[Link] = []
        self.zones_by_name: ZonesByName = {}
        self.missing_files: List[str] = []

    def parse(self) -> None:
        """Load the reference tables, then scan and merge the region files.
        Raises MalformedRecord if a reference table is invalid.
        """
        self._load_reference_tables()

        filenames = []
        for filename in self.tz_files:
            if os.path.isfile(os.path.join(self.input_dir, filename)):
                filenames.append(filename)
            else:
                logging.warning("Region file '%s' not found", filename)
                self.missing_files.append(filename)

        for region in self._scan_region_files(filenames):
            self._merge(region)

    def _load_reference_tables(self) -> None:
        iso_filename = os.path.join(self.input_dir, ISO3166_FILE)
        with open(iso_filename, 'r', encoding='utf-8') as f:
            self.countries = load_countries(f, ISO3166_FILE, self.stats)

        zone_filename = os.path.join(self.input_dir, ZONE_TAB_FILE)
        with open(zone_filename, 'r', encoding='utf-8') as f:
            self.zone_refs = load_zone_refs(
                f, self.countries, self.id_counter, ZONE_TAB_FILE, self.stats)

    def _scan_region_files(self, filenames: List[str]) -> Iterable[RegionData]:
        """Return the RegionData of each file, in the order of filenames."""
        count = len(filenames)
        if self.jobs <= 1 or count <= 1:
            return [
                parse_region_file(
                    self.input_dir, filename, self.zone_refs,
                    self.current_year)
                for filename in filenames
            ]

        logging.info(
            'Scanning %d region files with %d workers', count, self.jobs)
        with ProcessPoolExecutor(max_workers=self.jobs) as executor:
            return list(executor.map(
                parse_region_file,
                [self.input_dir] * count,
                filenames,
                [self.zone_refs] * count,
                [self.current_year] * count,
            ))

    def _merge(self, region: RegionData) -> None:
        """Append the records of one region file. A repeated zone name
        replaces the earlier entry in the lookup table.
        """
        logging.info(
            'Scanned %s: Rules %d; Zones %d; Links %d; Skipped %d',
            region.filename, len(region.rules), len(region.zones),
            len(region.links), region.stats.skipped_records)
        self.rules.extend(region.rules)
        self.links.extend(region.links)
        for zone in region.zones:
            self.zones.append(zone)
            self.zones_by_name[zone.name] = zone
        self.stats.merge(region.stats)

    def print_summary(self) -> None:
        logging.info(
            'Summary: Lines: %d; Comments: %d; Entities: %d',
            self.stats.total_lines, self.stats.comment_lines,
            self.stats.entities)
        logging.info(
            'Summary: Rules: %d; Zones: %d; Links: %d',
            len(self.rules), len(self.zones), len(self.links))
        logging.info(
            'Summary: Skipped records: %d; Filtered rules: %d; '
            'Filtered zones: %d',
            self.stats.skipped_records, self.stats.filtered_rules,
            self.stats.filtered_zones)

    def get_data(self) -> ExtractorResult:
        return ExtractorResult(
            countries=self.countries,
            zone_refs=self.zone_refs,
            rules=self.rules,
            zones=self.zones,
            links=self.links,
            zones_by_name=self.zones_by_name,
            stats=self.stats,
            id_counter=self.id_counter,
            current_year=self.current_year,
            tz_files=self.tz_files,
        )

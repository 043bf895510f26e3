# Copyright 2018 Brian T. Park
#
# MIT License

"""
Loaders of the two reference tables which are read before the region files:

* iso3166.tab: "<code><TAB><country name>"
* zone.tab: "<code><TAB><coordinates><TAB><zone name>[<TAB><comment>]"

A bad line in either table raises MalformedRecord, since the zones would
otherwise be cross-referenced against incomplete data.
"""

import logging
from typing import Iterable
from typing import Optional

from olsontools.data_types.ot_errors import MalformedRecord
from olsontools.data_types.ot_types import CountryTable
from olsontools.data_types.ot_types import IdCounter
from olsontools.data_types.ot_types import ISO3166_FILE
from olsontools.data_types.ot_types import ScanStats
from olsontools.data_types.ot_types import ZONE_TAB_FILE
from olsontools.data_types.ot_types import ZoneRef
from olsontools.data_types.ot_types import ZoneRefTable
from olsontools.extractor.lines import is_comment_or_blank


def load_countries(
    stream: Iterable[str],
    filename: str = ISO3166_FILE,
    stats: Optional[ScanStats] = None,
) -> CountryTable:
    """Read the {code -> country name} table. The first 2 characters of each
    line are the code, the name follows a single separator character.
    """
    if stats is None:
        stats = ScanStats()
    countries: CountryTable = {}
    for line_number, line in enumerate(stream, start=1):
        stats.total_lines += 1
        if is_comment_or_blank(line):
            stats.comment_lines += 1
            continue

        line = line.rstrip('\r\n')
        if len(line) < 3:
            raise MalformedRecord(
                filename, line_number, line, 'Line too short')
        code = line[0:2]
        name = line[3:].strip()
        if code in countries:
            raise MalformedRecord(
                filename, line_number, line, f"Duplicate code '{code}'")
        countries[code] = name
        stats.entities += 1

    logging.info('Loaded %d countries from %s', len(countries), filename)
    return countries


def load_zone_refs(
    stream: Iterable[str],
    countries: CountryTable,
    id_counter: IdCounter,
    filename: str = ZONE_TAB_FILE,
    stats: Optional[ScanStats] = None,
) -> ZoneRefTable:
    """Read the {zone name -> ZoneRef} table. Each zone gets the next id of
    the id_counter, in file order. An unknown country code is not an error,
    the country name is left empty.
    """
    if stats is None:
        stats = ScanStats()
    zone_refs: ZoneRefTable = {}
    missing_countries = 0
    for line_number, line in enumerate(stream, start=1):
        stats.total_lines += 1
        if is_comment_or_blank(line):
            stats.comment_lines += 1
            continue

        line = line.rstrip('\r\n')
        fields = line.strip().split(None, 3)
        if len(fields) < 3:
            raise MalformedRecord(
                filename, line_number, line, 'Expected at least 3 fields')
        country_code, coordinates, zone_name = fields[0:3]
        comment = fields[3] if len(fields) > 3 else None
        if zone_name in zone_refs:
            raise MalformedRecord(
                filename, line_number, line,
                f"Duplicate zone '{zone_name}'")

        country_name = countries.get(country_code)
        if country_name is None:
            missing_countries += 1
            logging.debug(
                "%s:%d: Unknown country code '%s'",
                filename, line_number, country_code)
            country_name = ''

        zone_refs[zone_name] = ZoneRef(
            sequence_id=id_counter.next(),
            country_code=country_code,
            country_name=country_name,
            coordinates=coordinates,
            comment=comment,
        )
        stats.entities += 1

    logging.info(
        'Loaded %d zones from %s; unknown countries: %d',
        len(zone_refs), filename, missing_countries)
    return zone_refs

# Copyright 2020 Brian T. Park
#
# MIT License

from dataclasses import asdict
import os
import logging
import json

from olsontools.data_types.ot_types import ExtractorResult
from olsontools.data_types.ot_types import OlsonDatabase
from olsontools.data_types.ot_types import Summary


def create_olson_database(
    result: ExtractorResult,
    summary: Summary,
) -> OlsonDatabase:
    """Return an instance of OlsonDatabase from the various ingredients."""
    return {
        # Context data.
        'current_year': result.current_year,
        'tz_files': result.tz_files,
        'num_zones': len(result.zones),
        'num_rules': len(result.rules),
        'num_links': len(result.links),

        # Collections.
        'countries': result.countries,
        'zone_refs': {
            name: asdict(zone_ref)
            for name, zone_ref in result.zone_refs.items()
        },
        'rules': [asdict(rule) for rule in result.rules],
        'zones': [asdict(zone) for zone in result.zones],
        'links': [asdict(link) for link in result.links],

        # Statistics.
        'summary': summary._asdict(),
    }


class JsonGenerator:
    """Generate the JSON representation of the OlsonDatabase to the given
    'json_file'.
    """
    def __init__(
        self,
        odb: OlsonDatabase,
        json_file: str
    ):
        self.odb = odb
        self.json_file = json_file

    def generate_files(self, output_dir: str) -> None:
        """Serialize OlsonDatabase to the specified file."""
        full_filename = os.path.join(output_dir, self.json_file)
        with open(full_filename, 'w', encoding='utf-8') as output_file:
            json.dump(self.odb, output_file, indent=2)
            print(file=output_file)  # add terminating newline
        logging.info("Created %s", full_filename)

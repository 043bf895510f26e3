#!/usr/bin/env python3
#
# Copyright 2018 Brian T. Park
#
# MIT License.

"""
Read the raw TZ Database files at the location specified by `--input_dir` and
print statistics about the Rules, Zones and Links which are still in effect
in the `--current_year`.

The tool has a number of stages implemented by various helper classes:

* Extractor
    * Load the iso3166.tab and zone.tab reference tables, then parse the
      region files into Rule, Zone and Link records.
* LinkResolver
    * Expand each Link into an alias Zone.
* Generators
    * Print the summary, and optionally write it to `--output_file`, and the
      parsed records to `--json_file`.

Flags:

* `--input_dir`
    * Location of the raw TZDB files.
* `--current_year {year}`
    * Discard Rules and Zones which are not valid in this year
      (default: this year).
* `--files {a,b,c}`
    * Comma-separated list of region files (default: africa, antarctica,
      asia, australasia, europe, northamerica, southamerica).
* `--jobs {n}`
    * Number of worker processes scanning the region files (default: 1).
* `--output_dir {dir}`
    * The directory where the output files should be created.
* `--output_file {file}`
    * Name of the summary file (default: none).
* `--json_file {file}`
    * Name of the JSON file (default: none).

Examples:

    $ olsonstats --input_dir ../tz --output_file stats.txt
"""

import argparse
import datetime
import logging
import sys
from typing import List
from typing import Optional
from typing_extensions import Protocol

from olsontools.data_types.ot_errors import MalformedRecord
from olsontools.data_types.ot_types import ExtractorResult
from olsontools.data_types.ot_types import Summary
from olsontools.data_types.ot_types import ZONE_FILES
from olsontools.extractor.extractor import Extractor
from olsontools.generator.jsongenerator import JsonGenerator
from olsontools.generator.jsongenerator import create_olson_database
from olsontools.generator.summarygenerator import SummaryGenerator
from olsontools.generator.summarygenerator import create_summary
from olsontools.generator.summarygenerator import render_summary
from olsontools.transformer.linker import LinkResolver


class Generator(Protocol):
    """Define an interface for Generator subclasses for mypy type checking."""
    def generate_files(self, output_dir: str) -> None:
        ...


def process_tz_files(
    input_dir: str,
    current_year: int,
    tz_files: Optional[List[str]] = None,
    jobs: int = 1,
) -> ExtractorResult:
    """Run the Extractor and the LinkResolver over the files in input_dir.
    Raises MalformedRecord if a reference table is invalid, and OSError
    if it cannot be read.
    """
    logging.info('======== Extracting TZ Data files')
    extractor = Extractor(
        input_dir=input_dir,
        current_year=current_year,
        tz_files=tz_files,
        jobs=jobs,
    )
    extractor.parse()
    extractor.print_summary()
    result = extractor.get_data()

    logging.info('======== Resolving Links')
    resolver = LinkResolver()
    resolver.transform(result)
    resolver.print_summary()
    return result


def generate_outputs(
    invocation: str,
    output_dir: str,
    output_file: str,
    json_file: str,
    result: ExtractorResult,
    summary: Summary,
) -> None:
    """Write the optional summary and JSON files."""
    generator: Generator

    if output_file:
        logging.info('==== Creating %s file', output_file)
        generator = SummaryGenerator(
            invocation=invocation,
            summary=summary,
            summary_file=output_file,
        )
        generator.generate_files(output_dir)

    if json_file:
        logging.info('==== Creating %s file', json_file)
        generator = JsonGenerator(
            odb=create_olson_database(result, summary),
            json_file=json_file,
        )
        generator.generate_files(output_dir)


def main() -> None:
    """
    Main driver for the TZ Database statistics, which parses the IANA TZ
    Database files located at the --input_dir.

    Usage:
        olsonstats.py [flags...]
    """
    # Configure command line flags.
    parser = argparse.ArgumentParser(
        description='Print statistics of the TZ Database files.')

    # Extractor flags.
    parser.add_argument(
        '--input_dir', help='Location of the input directory', required=True)
    parser.add_argument(
        '--current_year',
        help='Discard Rules and Zones not valid in this year '
             '(default: this year)',
        type=int,
        default=datetime.date.today().year,
    )
    parser.add_argument(
        '--files',
        help='Comma-separated list of region files',
        default=','.join(ZONE_FILES),
    )
    parser.add_argument(
        '--jobs',
        help='Number of worker processes (default: 1)',
        type=int,
        default=1,
    )

    # Target location of the generated files.
    parser.add_argument(
        '--output_dir',
        help='Location of the output directory',
        default='',
    )
    parser.add_argument(
        '--output_file',
        help='Name of the summary file (default: none)',
        default='',
    )
    parser.add_argument(
        '--json_file',
        help='Name of the JSON file (default: none)',
        default='',
    )

    # Parse the command line arguments
    args = parser.parse_args()

    if args.jobs < 1:
        print(f'Invalid --jobs: {args.jobs}')
        sys.exit(1)
    tz_files = [name for name in args.files.split(',') if name]

    # Configure logging. This should normally be executed after the
    # parser.parse_args() because it allows us set the logging.level using a
    # flag.
    logging.basicConfig(level=logging.INFO)

    # How the script was invoked
    invocation = ' '.join(sys.argv)

    logging.info('======== TZ Statistics settings')
    logging.info(f'Input dir: {args.input_dir}')
    logging.info(f'Current year: {args.current_year}')
    logging.info(f'Region files: {tz_files}')
    logging.info(f'Jobs: {args.jobs}')

    try:
        result = process_tz_files(
            input_dir=args.input_dir,
            current_year=args.current_year,
            tz_files=tz_files,
            jobs=args.jobs,
        )
    except MalformedRecord as e:
        logging.error('Invalid reference table: %s', e)
        sys.exit(1)
    except OSError as e:
        logging.error('Unable to read TZ Database file: %s', e)
        sys.exit(1)

    summary = create_summary(result)
    print(render_summary(summary))

    logging.info('======== Generating files')
    generate_outputs(
        invocation=invocation,
        output_dir=args.output_dir,
        output_file=args.output_file,
        json_file=args.json_file,
        result=result,
        summary=summary,
    )

    logging.info('======== Finished processing TZ Data files.')


if __name__ == '__main__':
    main()

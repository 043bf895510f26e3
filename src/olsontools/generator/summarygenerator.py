# Copyright 2018 Brian T. Park
#
# MIT License

import logging
import os

from olsontools.data_types.ot_types import ExtractorResult
from olsontools.data_types.ot_types import Summary


def create_summary(result: ExtractorResult) -> Summary:
    """Collect the final counters and collection sizes. Must be called after
    the LinkResolver, so that the alias Zones are included.
    """
    return Summary(
        total_lines=result.stats.total_lines,
        comment_lines=result.stats.comment_lines,
        total_entities=result.stats.entities,
        zone_count=len(result.zones),
        rule_count=len(result.rules),
        link_count=len(result.links),
    )


def render_summary(summary: Summary) -> str:
    return (
        'Results:\n'
        f'There are {summary.total_entities} total entities '
        '(not necessarily parsed).\n'
        f'There are {summary.comment_lines} comment lines.\n'
        f'There are {summary.total_lines} total lines.\n'
        f'There are {summary.zone_count} timezones.\n'
        f'There are {summary.rule_count} rules.\n'
        f'There are {summary.link_count} links.\n'
        f'For a total of {summary.total_parsed} parsed entities.\n'
    )


class SummaryGenerator:
    """Write the text rendering of the Summary to the given 'summary_file'.
    """
    def __init__(
        self,
        invocation: str,
        summary: Summary,
        summary_file: str,
    ):
        self.invocation = invocation
        self.summary = summary
        self.summary_file = summary_file

    def generate_files(self, output_dir: str) -> None:
        full_filename = os.path.join(output_dir, self.summary_file)
        with open(full_filename, 'w', encoding='utf-8') as output_file:
            print(f'# Generated by: {self.invocation}', file=output_file)
            print(render_summary(self.summary), file=output_file)
        logging.info("Created %s", full_filename)

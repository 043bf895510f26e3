# Copyright 2018 Brian T. Park
#
# MIT License

import logging
from dataclasses import replace
from typing import Optional

from olsontools.data_types.ot_types import ExtractorResult
from olsontools.data_types.ot_types import Link
from olsontools.data_types.ot_types import Zone


class LinkResolver:
    """Expand each Link into an alias Zone which copies all the fields of its
    target Zone, except the name and the id. The id is taken from the same
    counter which numbered the 'zone.tab' entries. Runs after all the region
    files have been merged, since a Link often refers to a Zone defined later
    in the same or another file.
    """

    def __init__(self) -> None:
        self.resolved_count = 0
        self.dangling_count = 0

    def transform(self, result: ExtractorResult) -> None:
        """Append the alias Zones to result.zones and result.zones_by_name
        in-situ. A Link to an unknown Zone is dropped.
        """
        for link in result.links:
            alias = self._resolve(result, link)
            if alias is None:
                self.dangling_count += 1
                result.stats.dangling_links += 1
                logging.debug(
                    "Link '%s' to unknown zone '%s' dropped",
                    link.to_zone_name, link.from_zone_name)
                continue

            # A repeated alias name replaces the earlier entry.
            result.zones.append(alias)
            result.zones_by_name[alias.name] = alias
            result.stats.resolved_links += 1
            result.stats.entities += 1
            self.resolved_count += 1

    def _resolve(self, result: ExtractorResult, link: Link) -> Optional[Zone]:
        target = result.zones_by_name.get(link.from_zone_name)
        if target is None:
            return None
        return replace(
            target,
            id=result.id_counter.next(),
            name=link.to_zone_name,
        )

    def print_summary(self) -> None:
        logging.info(
            'Summary: Links: resolved=%d; dangling=%d',
            self.resolved_count, self.dangling_count)

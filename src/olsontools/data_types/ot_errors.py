# Copyright 2018 Brian T. Park
#
# MIT License


class OlsonError(Exception):
    """Base class of errors raised while reading the tz database files."""


class MalformedRecord(OlsonError):
    """A line of a reference table ('iso3166.tab', 'zone.tab') could not be
    loaded. Fatal to the whole run.
    """

    def __init__(
        self,
        filename: str,
        line_number: int,
        line: str,
        reason: str,
    ) -> None:
        self.filename = filename
        self.line_number = line_number
        self.line = line
        self.reason = reason
        super().__init__(
            f"{filename}:{line_number}: {reason}: '{line}'")


class FieldParseError(OlsonError, ValueError):
    """A single field of a Rule, Zone or Link line failed its grammar. The
    enclosing record is skipped.
    """

    def __init__(self, field: str, text: str) -> None:
        self.field = field
        self.text = text
        super().__init__(f"Invalid {field} field '{text}'")

# Copyright 2018 Brian T. Park
#
# MIT License

import re
from enum import Enum
from typing import List
from typing import NamedTuple

COMMENT_CHAR = '#'

_WHITESPACE = re.compile(r'\s+')


class LineKind(Enum):
    BLANK = 'blank'
    COMMENT = 'comment'
    CONTENT = 'content'


class ClassifiedLine(NamedTuple):
    kind: LineKind
    fields: List[str]  # empty unless kind == CONTENT


def classify_line(line: str) -> ClassifiedLine:
    """Classify a raw line of a tz database file. A CONTENT line is split
    into its whitespace-separated fields after removing any inline comment.
    """
    stripped = line.strip()
    if not stripped:
        return ClassifiedLine(LineKind.BLANK, [])
    if stripped[0] == COMMENT_CHAR:
        return ClassifiedLine(LineKind.COMMENT, [])
    fields = split_fields(stripped)
    if not fields:
        # Only whitespace before an inline comment.
        return ClassifiedLine(LineKind.COMMENT, [])
    return ClassifiedLine(LineKind.CONTENT, fields)


def is_comment_or_blank(line: str) -> bool:
    return classify_line(line).kind != LineKind.CONTENT


def strip_comment(line: str) -> str:
    """Truncate the line at the first '#'. There is no quoting."""
    index = line.find(COMMENT_CHAR)
    if index >= 0:
        line = line[:index]
    return line


def split_fields(line: str) -> List[str]:
    """Split on runs of whitespace, after removing the inline comment."""
    line = strip_comment(line).strip()
    if not line:
        return []
    return _WHITESPACE.split(line)


def is_continuation(line: str) -> bool:
    """Return True if the line continues a Zone block, i.e. the NAME column
    is blank and the rest of the line holds data.
    """
    if not line or not line[0].isspace():
        return False
    return classify_line(line).kind == LineKind.CONTENT

"""Line classification for the plaintext exposition format"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class LineKind(Enum):
    """Kinds of exposition lines"""
    HELP = "help"
    TYPE = "type"
    SAMPLE = "sample"
    BLANK = "blank"
    COMMENT = "comment"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class ClassifiedLine:
    """One classified line with the fields its kind carries"""
    kind: LineKind
    name: str = ""
    text: str = ""
    label_block: Optional[str] = None
    value: str = ""


HELP_LINE = re.compile(r'^# HELP (\S+) (.+)$')
TYPE_LINE = re.compile(r'^# TYPE (\S+) (\S+)$')

# name, optional {labels} (quoted values may hold '}' or escaped quotes),
# value and an optional trailing timestamp which is discarded
SAMPLE_LINE = re.compile(
    r'^(?P<name>[^\s{}"#][^\s{}"]*)'
    r'(?:\{(?P<labels>(?:[^"}]|"(?:[^"\\]|\\.)*")*)\})?'
    r'\s+(?P<value>\S+)'
    r'(?:\s+-?\d+)?\s*$'
)

BLANK_LINE = ClassifiedLine(LineKind.BLANK)
COMMENT_LINE = ClassifiedLine(LineKind.COMMENT)
UNRECOGNIZED_LINE = ClassifiedLine(LineKind.UNRECOGNIZED)


def classify_line(line: str) -> ClassifiedLine:
    """Classify a single line (without trailing newline); never raises"""
    if not line:
        return BLANK_LINE

    if line.startswith("# HELP"):
        match = HELP_LINE.match(line)
        if not match:
            return UNRECOGNIZED_LINE
        return ClassifiedLine(LineKind.HELP, name=match.group(1), text=match.group(2))

    if line.startswith("# TYPE"):
        match = TYPE_LINE.match(line)
        if not match:
            return UNRECOGNIZED_LINE
        return ClassifiedLine(LineKind.TYPE, name=match.group(1), text=match.group(2))

    if line.startswith("#"):
        return COMMENT_LINE

    match = SAMPLE_LINE.match(line)
    if not match:
        return UNRECOGNIZED_LINE
    return ClassifiedLine(
        LineKind.SAMPLE,
        name=match.group("name"),
        label_block=match.group("labels"),
        value=match.group("value"),
    )

"""Parser for the Prometheus plaintext exposition format"""
from typing import Dict, Optional
from .classifier import LineKind, classify_line
from .labels import decode_labels
from .models import MetricFamily, MetricSample, ParseResult
from logging_config import get_logger


logger = get_logger(__name__)

# Series a histogram, summary or counter family emits under its base name
SERIES_SUFFIXES = ("_total", "_bucket", "_sum", "_count", "_created")


def parse_value(token: str) -> Optional[float]:
    """Parse a sample value token, None when it is not a number"""
    # float() also takes digit separators, the exposition format does not
    if "_" in token:
        return None
    try:
        return float(token)
    except ValueError:
        return None


class ExpositionParser:
    """Assembles metric families from exposition text.

    Families are keyed by name: a repeated HELP line for a known name does
    not create a second family, and a TYPE line seen before the name's HELP
    line is held back and applied once the family exists. TYPE lines never
    create families. Samples attach to the family with the same name or,
    failing that, to the family named by the sample name minus one of
    SERIES_SUFFIXES (histogram buckets, summary sums and counts); series
    matching neither are dropped.

    Malformed lines are skipped and never raised to the caller.
    """

    def __init__(self):
        self.families: ParseResult = []
        self._by_name: Dict[str, MetricFamily] = {}
        self._pending_types: Dict[str, str] = {}
        self.current: Optional[MetricFamily] = None
        self.dropped_lines = 0

    def feed(self, text: str) -> ParseResult:
        for line_number, line in enumerate(text.split("\n"), start=1):
            if line.endswith("\r"):
                line = line[:-1]
            self.feed_line(line, line_number)

        logger.debug(
            "Parsed exposition text",
            families=len(self.families),
            samples=sum(len(family.values) for family in self.families),
            dropped_lines=self.dropped_lines,
            event_type="parse_complete"
        )
        return self.families

    def feed_line(self, line: str, line_number: int = 0) -> None:
        classified = classify_line(line)
        kind = classified.kind

        if kind is LineKind.HELP:
            self._on_help(classified.name, classified.text)
        elif kind is LineKind.TYPE:
            self._on_type(classified.name, classified.text)
        elif kind is LineKind.SAMPLE:
            self._on_sample(classified.name, classified.label_block, classified.value, line_number)
        elif kind is LineKind.UNRECOGNIZED:
            self._drop(line_number, "unrecognized line")

    def _on_help(self, name: str, help_text: str) -> None:
        family = self._by_name.get(name)
        if family is None:
            family = MetricFamily(name=name, help=help_text)
            pending_type = self._pending_types.pop(name, None)
            if pending_type:
                family.set_type(pending_type)
            self._by_name[name] = family
            self.families.append(family)
        self.current = family

    def _on_type(self, name: str, metric_type: str) -> None:
        family = self._by_name.get(name)
        if family is not None:
            family.set_type(metric_type)
        else:
            self._pending_types.setdefault(name, metric_type)

    def _family_for(self, name: str) -> Optional[MetricFamily]:
        if self.current is not None and self.current.name == name:
            return self.current
        family = self._by_name.get(name)
        if family is not None:
            return family
        for suffix in SERIES_SUFFIXES:
            if name.endswith(suffix):
                return self._by_name.get(name[:-len(suffix)])
        return None

    def _on_sample(self, name: str, label_block: Optional[str], token: str, line_number: int) -> None:
        family = self._family_for(name)
        if family is None:
            self._drop(line_number, "sample without HELP", metric=name)
            return

        value = parse_value(token)
        if value is None:
            self._drop(line_number, "non-numeric sample value", metric=name)
            return

        labels = decode_labels(label_block) if label_block is not None else {}
        series = name if name != family.name else ""
        family.add_sample(MetricSample(labels=labels, value=value, series=series))

    def _drop(self, line_number: int, reason: str, **context) -> None:
        self.dropped_lines += 1
        logger.debug(
            "Dropped exposition line",
            line_number=line_number,
            reason=reason,
            event_type="parse_line_dropped",
            **context
        )


def parse_metrics(text: str) -> ParseResult:
    """Parse exposition text into metric families in HELP order"""
    return ExpositionParser().feed(text)

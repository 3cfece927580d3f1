"""Metric family models for parsed exposition text"""
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Union


def format_value(value: float) -> Union[float, str]:
    """Render a sample value for JSON output (NaN/Inf have no JSON literal)"""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    return value


@dataclass(frozen=True)
class MetricSample:
    """Single observation of a metric family.

    series is set only when the sample line named a suffixed series of the
    family (e.g. req_seconds_bucket under req_seconds).
    """
    labels: Dict[str, str]
    value: float
    series: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data = {"labels": dict(self.labels), "value": format_value(self.value)}
        if self.series:
            data["series"] = self.series
        return data


@dataclass
class MetricFamily:
    """Named group of samples sharing one HELP/TYPE declaration"""
    name: str
    help: str = ""
    type: str = ""
    values: List[MetricSample] = field(default_factory=list)

    def add_sample(self, sample: MetricSample) -> None:
        self.values.append(sample)

    def set_type(self, metric_type: str) -> bool:
        """Set the family type once; later TYPE lines are ignored"""
        if self.type:
            return False
        self.type = metric_type
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "help": self.help,
            "type": self.type,
            "values": [sample.to_dict() for sample in self.values],
        }


# One parse per invocation, families in HELP order
ParseResult = List[MetricFamily]

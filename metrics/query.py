"""Query helpers over parsed metric families"""
from typing import Dict, List, Optional, Sequence, Tuple
from .models import MetricFamily


UNSET_LABEL = "unset"


def family_of(families: Sequence[MetricFamily], name: str) -> Optional[MetricFamily]:
    """First family with exactly this name, or None"""
    for family in families:
        if family.name == name:
            return family
    return None


def values_of(families: Sequence[MetricFamily], name: str) -> List[float]:
    """All sample values of the named family in source order"""
    family = family_of(families, name)
    if family is None:
        return []
    return [sample.value for sample in family.values]


def first_value(families: Sequence[MetricFamily], name: str, default: float = 0.0) -> float:
    """First sample value of the named family, or default"""
    values = values_of(families, name)
    return values[0] if values else default


def label_rows(families: Sequence[MetricFamily], name: str, label: str,
               unset: str = UNSET_LABEL) -> List[Tuple[str, float]]:
    """One (label value, sample value) row per sample, in source order"""
    family = family_of(families, name)
    if family is None:
        return []
    return [(sample.labels.get(label, unset), sample.value) for sample in family.values]


def group_by_label(families: Sequence[MetricFamily], name: str, label: str,
                   unset: str = UNSET_LABEL) -> Dict[str, float]:
    """Sum sample values per label value, keeping first-seen key order"""
    grouped: Dict[str, float] = {}
    for key, value in label_rows(families, name, label, unset):
        grouped[key] = grouped.get(key, 0.0) + value
    return grouped

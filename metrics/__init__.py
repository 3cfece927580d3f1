"""Exposition format reader and query helpers"""
from .models import MetricFamily, MetricSample, ParseResult
from .parser import ExpositionParser, parse_metrics
from .query import family_of, group_by_label, values_of

__all__ = [
    'MetricFamily',
    'MetricSample',
    'ParseResult',
    'ExpositionParser',
    'parse_metrics',
    'family_of',
    'group_by_label',
    'values_of'
]

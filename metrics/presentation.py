"""Display policy layered on top of the query helpers"""
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple
from .models import MetricFamily, format_value
from .query import group_by_label, label_rows


class DisplayNames:
    """Immutable identifier -> display name lookup"""

    def __init__(self, names: Optional[Mapping[str, str]] = None):
        self._names = MappingProxyType(dict(names or {}))

    @property
    def names(self) -> Mapping[str, str]:
        return self._names

    def resolve(self, identifier: str) -> str:
        """Display name for identifier, or the identifier itself"""
        return self._names.get(identifier, identifier)

    def __contains__(self, identifier: str) -> bool:
        return identifier in self._names

    def __len__(self) -> int:
        return len(self._names)


def filter_rows(rows: Iterable[Tuple[str, float]], hidden: Iterable[str] = (),
                hide_zero: bool = True) -> List[Tuple[str, float]]:
    """Drop hidden keys and, optionally, rows without a positive value"""
    hidden = set(hidden)
    return [
        (key, value) for key, value in rows
        if key not in hidden and not (hide_zero and not value > 0)
    ]


def category_rows(families: Sequence[MetricFamily], name: str, label: str,
                  display_names: Optional[DisplayNames] = None,
                  hidden: Iterable[str] = (), hide_zero: bool = True,
                  passthrough: Iterable[str] = (), aggregate: bool = True) -> List[Dict[str, object]]:
    """Per-category chart rows: {label: display name, "count": value}

    With aggregate=False every sample keeps its own row, so repeated label
    values are not summed.
    """
    display_names = display_names or DisplayNames()
    passthrough = set(passthrough)

    if aggregate:
        source = group_by_label(families, name, label).items()
    else:
        source = label_rows(families, name, label)
    rows = filter_rows(source, hidden=hidden, hide_zero=hide_zero)

    return [
        {label: key if key in passthrough else display_names.resolve(key), "count": format_value(value)}
        for key, value in rows
    ]

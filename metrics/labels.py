"""Label-set decoding for exposition sample lines"""
import re
from typing import Dict, List, Optional, Tuple


_ESCAPE_SEQUENCE = re.compile(r'\\(["\\n])')
_ESCAPES = {'"': '"', '\\': '\\', 'n': '\n'}


def unescape_label_value(value: str) -> str:
    """Decode the \\" \\\\ and \\n escapes allowed inside label values"""
    return _ESCAPE_SEQUENCE.sub(lambda match: _ESCAPES[match.group(1)], value)


def split_label_fragments(block: str) -> List[str]:
    """Split a label block on commas that sit outside quoted values"""
    fragments = []
    current = []
    in_quotes = False
    escaped = False

    for char in block:
        if escaped:
            escaped = False
        elif char == '\\' and in_quotes:
            escaped = True
        elif char == '"':
            in_quotes = not in_quotes
        elif char == ',' and not in_quotes:
            fragments.append(''.join(current))
            current = []
            continue
        current.append(char)

    fragments.append(''.join(current))
    return fragments


def decode_label_fragment(fragment: str) -> Optional[Tuple[str, str]]:
    """Decode one key="value" fragment, None when it is unusable"""
    key, sep, raw_value = fragment.partition('=')
    if not sep:
        return None

    key = key.strip()
    raw_value = raw_value.strip()

    # Exactly one outer pair of quotes
    if raw_value.startswith('"'):
        raw_value = raw_value[1:]
    if raw_value.endswith('"'):
        raw_value = raw_value[:-1]

    value = unescape_label_value(raw_value)
    if not key or not value:
        return None
    return key, value


def decode_labels(block: str) -> Dict[str, str]:
    """Decode the text between '{' and '}' into an ordered label mapping.

    Malformed fragments (no '=', empty key or empty value) are dropped
    rather than failing the whole sample.
    """
    labels: Dict[str, str] = {}
    if not block or not block.strip():
        return labels

    for fragment in split_label_fragments(block):
        decoded = decode_label_fragment(fragment)
        if decoded is None:
            continue
        key, value = decoded
        labels[key] = value

    return labels

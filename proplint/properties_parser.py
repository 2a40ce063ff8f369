import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from proplint.errors import Failure, FailureKind
from proplint.escapes import unescape

logger = logging.getLogger("proplint")

LINE_BREAK = re.compile(r'\r\n|\r|\n')


@dataclass(frozen=True)
class PropertyEntry:
    """One logical property after continuation lines are joined and escapes decoded."""
    key: str
    value: str
    comment_lines: Tuple[str, ...] = ()
    line_number: int = 0


def has_unescaped_trailing_backslash(s: str) -> bool:
    """Check if a string ends with an odd number of backslashes."""
    if not s.endswith('\\'):
        return False
    # Count trailing backslashes
    count = 0
    i = len(s) - 1
    while i >= 0 and s[i] == '\\':
        count += 1
        i -= 1
    # An odd number of trailing backslashes indicates an unescaped one
    return count % 2 == 1


def find_separator(line: str) -> int:
    """Return the index of the first unescaped '=' in ``line``, or -1."""
    escaped = False
    for index, char in enumerate(line):
        if escaped:
            escaped = False
        elif char == '\\':
            escaped = True
        elif char == '=':
            return index
    return -1


def _is_comment_or_blank(line: str) -> bool:
    stripped = line.lstrip()
    return not stripped or stripped.startswith('#')


def _split_continuation(raw: str) -> Tuple[str, bool]:
    if has_unescaped_trailing_backslash(raw):
        return raw[:-1], True
    return raw, False


class _PendingEntry:
    """A property whose value is still being continued over several lines."""

    def __init__(self, key: str, value: str, line_number: int):
        self.key = key
        self.value_parts = [value]
        self.line_number = line_number

    @property
    def value(self) -> str:
        return ''.join(self.value_parts)


def parse_properties(text: str) -> Union[Dict[str, PropertyEntry], Failure]:
    """
    Parse the decoded content of a .properties file.

    Only ``key=value`` lines are understood; ``key: value`` and ``key value``
    forms are reported as malformed. An empty mapping is a valid result, it is
    up to the caller to decide whether a file without properties is acceptable.

    Args:
        text: The file content, already decoded and without a byte-order mark.

    Returns:
        An insertion-ordered mapping of key to PropertyEntry (a repeated key
        keeps its last value), or the first Failure found, located by line.
    """
    entries: Dict[str, PropertyEntry] = {}
    comment_lines: List[str] = []
    pending: Optional[_PendingEntry] = None

    def commit(entry: _PendingEntry) -> Optional[Failure]:
        value = entry.value
        if entry.key != entry.key.strip():
            return Failure(FailureKind.WHITESPACE_IN_KEY, f"key {entry.key!r} has surrounding whitespace")
        if value != value.strip():
            return Failure(FailureKind.WHITESPACE_IN_VALUE, f"value {value!r} has surrounding whitespace")
        if entry.key in entries:
            logger.debug("Key '%s' defined again on line %d, keeping the later value", entry.key, entry.line_number)
            # Re-insert so iteration order follows the winning definition.
            del entries[entry.key]
        entries[entry.key] = PropertyEntry(
            key=entry.key,
            value=value,
            comment_lines=tuple(comment_lines),
            line_number=entry.line_number,
        )
        comment_lines.clear()
        return None

    for line_number, line in enumerate(LINE_BREAK.split(text), 1):
        location = f"line {line_number}"
        if line and line[-1].isspace():
            return Failure(FailureKind.TRAILING_WHITESPACE, f"{line!r} ends with whitespace").within(location)

        if pending is not None:
            raw, continues = _split_continuation(line.lstrip())
            decoded = unescape(raw)
            if isinstance(decoded, Failure):
                return decoded.within(location)
            pending.value_parts.append(decoded)
            if not continues:
                failure = commit(pending)
                pending = None
                if failure:
                    return failure.within(location)
            continue

        if _is_comment_or_blank(line):
            comment_lines.append(line)
            continue

        separator = find_separator(line)
        if separator == -1:
            return Failure(FailureKind.MALFORMED_LINE, f"no '=' separator in {line!r}").within(location)

        raw_key = line[:separator].rstrip()
        raw_value, continues = _split_continuation(line[separator + 1:].lstrip())

        key = unescape(raw_key)
        if isinstance(key, Failure):
            return key.within(location)
        value = unescape(raw_value)
        if isinstance(value, Failure):
            return value.within(f"key '{key}'").within(location)

        entry = _PendingEntry(key, value, line_number)
        if continues:
            pending = entry
        else:
            failure = commit(entry)
            if failure:
                return failure.within(location)

    if pending is not None:
        # A continuation backslash on the last line ends the value there.
        failure = commit(pending)
        if failure:
            return failure.within(f"line {pending.line_number}")

    return entries

"""Decoding of Java .properties escape sequences."""
from enum import Enum
from typing import Union

from proplint.errors import Failure, FailureKind

# Characters allowed after a backslash, and what they stand for.
ESCAPES = {
    'r': '\r',
    'n': '\n',
    'f': '\f',
    't': '\t',
    '\\': '\\',
    ' ': ' ',
    '=': '=',
    ':': ':',
    '!': '!',
    '#': '#',
    '"': '"',
    "'": "'",
}

HEX_DIGITS = frozenset('0123456789abcdefABCDEF')
UNICODE_ESCAPE_LENGTH = 4


class _State(Enum):
    PLAIN = 1
    AFTER_BACKSLASH = 2
    IN_UNICODE_ESCAPE = 3


def unescape(text: str) -> Union[str, Failure]:
    """
    Decode the escape sequences of one line of a .properties file.

    ``\\uXXXX`` escapes are decoded one code point at a time, so a surrogate
    pair written as two escapes stays two separate code points.

    Args:
        text: Raw text taken from a key or a value.

    Returns:
        The decoded string, or a Failure describing the first bad escape.
    """
    if '\\' not in text:
        return text

    decoded = []
    hex_digits = []
    state = _State.PLAIN
    for column, char in enumerate(text, 1):
        if state is _State.PLAIN:
            if char == '\\':
                state = _State.AFTER_BACKSLASH
            else:
                decoded.append(char)
        elif state is _State.AFTER_BACKSLASH:
            if char == 'u':
                hex_digits = []
                state = _State.IN_UNICODE_ESCAPE
            elif char in ESCAPES:
                decoded.append(ESCAPES[char])
                state = _State.PLAIN
            else:
                return Failure(
                    FailureKind.UNNECESSARY_ESCAPE,
                    f"'\\{char}' is not a valid escape sequence, {char!r} at column {column} of {text!r}",
                )
        else:
            if char not in HEX_DIGITS:
                return Failure(
                    FailureKind.MALFORMED_UNICODE_ESCAPE,
                    f"'\\u{''.join(hex_digits)}{char}' is not a valid unicode escape, "
                    f"{char!r} at column {column} of {text!r}",
                )
            hex_digits.append(char)
            if len(hex_digits) == UNICODE_ESCAPE_LENGTH:
                decoded.append(chr(int(''.join(hex_digits), 16)))
                state = _State.PLAIN

    if state is _State.AFTER_BACKSLASH:
        return Failure(FailureKind.UNTERMINATED_ESCAPE, f"lone backslash at the end of {text!r}")
    if state is _State.IN_UNICODE_ESCAPE:
        return Failure(
            FailureKind.UNTERMINATED_ESCAPE,
            f"'\\u{''.join(hex_digits)}' needs {UNICODE_ESCAPE_LENGTH} hexadecimal digits in {text!r}",
        )
    return ''.join(decoded)

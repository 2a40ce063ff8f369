"""Failure values returned by every proplint checker.

Parsers and rules never raise for bad input. They return a ``Failure`` and each
caller adds its own location with ``Failure.within`` before handing it further
out, so the final message reads as a chain from the file down to the innermost
sub-parse.
"""
from dataclasses import dataclass, replace
from enum import Enum
from typing import Tuple


class FailureKind(Enum):
    """Every reason a properties file can be rejected."""
    # Encoding
    INVALID_ENCODING = "InvalidEncoding"
    UNEXPECTED_BOM = "UnexpectedBOM"
    STRAY_BOM = "StrayBOM"
    BROKEN_ENCODING = "BrokenEncoding"
    MOJIBAKE = "Mojibake"
    UNREADABLE_FILE = "UnreadableFile"

    # Structure
    INVALID_FILENAME = "InvalidFilename"
    MALFORMED_LINE = "MalformedLine"
    TRAILING_WHITESPACE = "TrailingWhitespace"
    WHITESPACE_IN_KEY = "WhitespaceInKey"
    WHITESPACE_IN_VALUE = "WhitespaceInValue"
    NO_PROPERTIES = "NoProperties"
    UNNECESSARY_ESCAPE = "UnnecessaryEscape"
    UNTERMINATED_ESCAPE = "UnterminatedEscape"
    MALFORMED_UNICODE_ESCAPE = "MalformedUnicodeEscape"
    UNMATCHED_CLOSE_BRACE = "UnmatchedCloseBrace"
    UNEXPECTED_CHARACTER = "UnexpectedCharacter"
    UNTERMINATED_TEMPLATE = "UnterminatedTemplate"
    UNTERMINATED_PLURAL_FORMAT = "UnterminatedPluralFormat"
    DUPLICATE_PLURAL_CATEGORY = "DuplicatePluralCategory"

    # Semantic rules
    EMPTY_VALUE = "EmptyValue"
    LEFTOVER_ESCAPE = "LeftoverEscape"
    DOUBLE_SPACE = "DoubleSpace"
    CLEVER_PLURAL_MISUSE = "CleverPluralMisuse"
    WRONG_FORMAT_STYLE = "WrongFormatStyle"
    BANNED_CHOICE_FORMAT = "BannedChoiceFormat"
    UNKNOWN_LOCALE_PLURALS = "UnknownLocalePlurals"
    PLURAL_CATEGORY_MISMATCH = "PluralCategoryMismatch"
    INVALID_NUMBER_STYLE = "InvalidNumberStyle"
    INVALID_DATE_STYLE = "InvalidDateStyle"
    UNKNOWN_FORMAT_TYPE = "UnknownFormatType"

    # Accelerators
    INVALID_TYPED_KEY = "InvalidTypedKey"
    INVALID_KEY_CODE = "InvalidKeyCode"
    TRAILING_TOKENS = "TrailingTokens"
    MISSING_KEY_CODE = "MissingKeyCode"


@dataclass(frozen=True)
class Failure:
    """
    A located reason for rejecting input.

    Attributes:
        kind: The failure category.
        detail: Human-readable description of the innermost problem.
        context: Locations from the outermost (usually the file name) to the
            innermost, each added by the layer that knew about it.
    """
    kind: FailureKind
    detail: str
    context: Tuple[str, ...] = ()

    def within(self, location: str) -> "Failure":
        """Return a copy of this failure located inside ``location``."""
        return replace(self, context=(location,) + self.context)

    def describe(self) -> str:
        """
        Render the failure as one line, outermost location first.

        Lone surrogates (from split \\uXXXX pairs) cannot be encoded and are
        written as backslash escapes.
        """
        parts = list(self.context)
        parts.append(f"{self.kind.value}: {self.detail}")
        return ": ".join(parts).encode('utf-8', 'backslashreplace').decode('utf-8')

    def __str__(self) -> str:
        return self.describe()

import logging
import re
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import AbstractSet, Dict, FrozenSet, Iterable, Mapping, Optional, Tuple

from proplint.accelerators import VALID_KEY_CODES, VALID_MODIFIERS, check_accelerator
from proplint.errors import Failure, FailureKind
from proplint.locales import PLURAL_CATEGORIES, ZERO_CATEGORY, LocaleInfo
from proplint.message_format import (
    Literal,
    Parameter,
    format_segment,
    parse_plural_style,
    parse_template,
)
from proplint.properties_parser import PropertyEntry

logger = logging.getLogger("proplint")

BYTE_ORDER_MARK = '\ufeff'
REPLACEMENT_CHARACTER = '\ufffd'

NUMBER_STYLES = frozenset({'integer', 'currency', 'percent'})
DATE_STYLES = frozenset({'short', 'medium', 'long', 'full'})

# %s, %d, %,d and %x, optionally positional as in %1$s
PRINTF_SPECIFIER = re.compile(r'%(?:\d+\$)?(?:s|,?d|x)')

# This regex looks for the character 'Ã' followed by another character
# in the range 0x80-0xFF, which is a strong indicator of UTF-8 text being
# incorrectly decoded as a single-byte encoding like latin-1 or cp1252.
MOJIBAKE_PATTERN = re.compile(r'Ã[\x80-\xff]')

# Other templating syntaxes whose braces must not be read as MessageFormat.
LOOKALIKE_TEMPLATE_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r'\$\{[^{}]*\}'),
    re.compile(r'\{\{[^{}]*\}\}'),
)

DEFAULT_ACCELERATOR_MARKER = 'accelerator'


@dataclass(frozen=True)
class ValidationRules:
    """
    The lookup tables the semantic rules consult.

    The defaults are the module-level constants; tests and configuration can
    build alternate rule sets without touching them.
    """
    plural_categories: Mapping[str, FrozenSet[str]] = field(default_factory=lambda: PLURAL_CATEGORIES)
    modifiers: AbstractSet[str] = VALID_MODIFIERS
    key_codes: AbstractSet[str] = VALID_KEY_CODES
    accelerator_marker: str = DEFAULT_ACCELERATOR_MARKER
    lookalike_patterns: Tuple[re.Pattern, ...] = field(default=LOOKALIKE_TEMPLATE_PATTERNS)

    def with_plural_overrides(self, overrides: Mapping[str, Iterable[str]]) -> "ValidationRules":
        """Return a copy whose plural table is extended (or overridden) by ``overrides``."""
        if not overrides:
            return self
        merged: Dict[str, FrozenSet[str]] = dict(self.plural_categories)
        for language, categories in overrides.items():
            merged[language] = frozenset(categories) - {ZERO_CATEGORY}
        return replace(self, plural_categories=MappingProxyType(merged))


DEFAULT_RULES = ValidationRules()


def check_encoding_and_mojibake(text: str) -> Optional[Failure]:
    """
    Checks decoded file content for common mojibake patterns.

    Args:
        text: The decoded content of the file.

    Returns:
        A Failure naming the first suspicious sequence and its line, or None.
    """
    match = MOJIBAKE_PATTERN.search(text)
    if match:
        line_number = text.count('\n', 0, match.start()) + 1
        return Failure(
            FailureKind.MOJIBAKE,
            f"'{match.group()}' looks like UTF-8 text decoded as a single-byte encoding",
        ).within(f"line {line_number}")
    return None


def validate_key(key: str, rules: ValidationRules = DEFAULT_RULES) -> Optional[Failure]:
    if BYTE_ORDER_MARK in key:
        return Failure(FailureKind.STRAY_BOM, "key contains a byte-order mark (U+FEFF)")
    return None


def strip_lookalike_templates(value: str, rules: ValidationRules = DEFAULT_RULES) -> str:
    for pattern in rules.lookalike_patterns:
        value = pattern.sub('', value)
    return value


def validate_value(value: str, locale: LocaleInfo, rules: ValidationRules = DEFAULT_RULES) -> Optional[Failure]:
    """
    Apply the forbidden-pattern rules to a decoded value, then check its template structure.

    Args:
        value: The decoded property value.
        locale: Locale of the file the value belongs to.
        rules: Lookup tables to validate against.

    Returns:
        None if the value is acceptable, otherwise the first Failure.
    """
    if not value:
        return Failure(FailureKind.EMPTY_VALUE, "value is empty")
    if REPLACEMENT_CHARACTER in value:
        return Failure(
            FailureKind.BROKEN_ENCODING,
            "value contains the Unicode replacement character (U+FFFD), a sign of an earlier decoding error",
        )
    if '\\u' in value:
        return Failure(FailureKind.LEFTOVER_ESCAPE, "value still contains a '\\u' escape after decoding")
    if '  ' in value:
        return Failure(FailureKind.DOUBLE_SPACE, "value contains two consecutive spaces")
    printf = PRINTF_SPECIFIER.search(value)
    if printf:
        return Failure(
            FailureKind.WRONG_FORMAT_STYLE,
            f"'{printf.group()}' is a printf specifier, use MessageFormat parameters such as {{0}}",
        )

    template = strip_lookalike_templates(value, rules)
    if '{' in template:
        return validate_template(template, locale, rules)
    return None


def validate_template(text: str, locale: LocaleInfo, rules: ValidationRules = DEFAULT_RULES) -> Optional[Failure]:
    """
    Parse a MessageFormat template and check every typed parameter.

    Plural branches are validated by calling this function again on their text.
    """
    segments = parse_template(text)
    if isinstance(segments, Failure):
        return segments

    has_plural = any(
        isinstance(segment, Parameter) and segment.format_type == 'plural' for segment in segments
    )
    if has_plural and any(isinstance(segment, Literal) and segment.text.strip() for segment in segments):
        return Failure(
            FailureKind.CLEVER_PLURAL_MISUSE,
            "a plural format must wrap the whole message, move the surrounding text into every branch",
        )

    for segment in segments:
        if isinstance(segment, Literal) or segment.format_type is None:
            continue
        failure = _validate_parameter(segment, locale, rules)
        if failure:
            return failure.within(f"parameter {format_segment(segment)}")
    return None


def _validate_parameter(parameter: Parameter, locale: LocaleInfo, rules: ValidationRules) -> Optional[Failure]:
    format_type = parameter.format_type
    if format_type == 'choice':
        return Failure(FailureKind.BANNED_CHOICE_FORMAT, "choice formats are not allowed, use plural instead")
    if format_type == 'plural':
        return _validate_plural(parameter.style or '', locale, rules)
    if format_type == 'number':
        if parameter.style is not None and parameter.style not in NUMBER_STYLES:
            return Failure(
                FailureKind.INVALID_NUMBER_STYLE,
                f"number style '{parameter.style}' is not one of {_format_set(NUMBER_STYLES)}",
            )
        return None
    if format_type in ('date', 'time'):
        if parameter.style is not None and parameter.style not in DATE_STYLES:
            return Failure(
                FailureKind.INVALID_DATE_STYLE,
                f"{format_type} style '{parameter.style}' is not one of {_format_set(DATE_STYLES)}",
            )
        return None
    return Failure(FailureKind.UNKNOWN_FORMAT_TYPE, f"'{format_type}' is not a known format type")


def _validate_plural(style: str, locale: LocaleInfo, rules: ValidationRules) -> Optional[Failure]:
    branches = parse_plural_style(style)
    if isinstance(branches, Failure):
        return branches

    expected = rules.plural_categories.get(locale.language_code)
    if expected is None:
        return Failure(
            FailureKind.UNKNOWN_LOCALE_PLURALS,
            f"no plural categories are registered for language '{locale.language_code}'",
        )

    found = set(branches) - {ZERO_CATEGORY}
    if found != expected:
        missing = expected - found
        unexpected = found - expected
        details = [f"expected {_format_set(expected)}, found {_format_set(found)}"]
        if missing:
            details.append(f"missing {_format_set(missing)}")
        if unexpected:
            details.append(f"unexpected {_format_set(unexpected)}")
        return Failure(
            FailureKind.PLURAL_CATEGORY_MISMATCH,
            f"plural categories for '{locale}': " + ", ".join(details),
        )

    for category, branch_text in branches.items():
        failure = validate_template(branch_text, locale, rules)
        if failure:
            return failure.within(f"plural branch '{category}'")
    return None


def _format_set(values: Iterable[str]) -> str:
    return '{' + ', '.join(sorted(values)) + '}'


def validate_entry(entry: PropertyEntry, locale: LocaleInfo, rules: ValidationRules = DEFAULT_RULES) -> Optional[Failure]:
    """
    Run every per-key and per-value rule on one property.

    Args:
        entry: The parsed property.
        locale: Locale of the file the property belongs to.
        rules: Lookup tables to validate against.

    Returns:
        None if the property passes, otherwise a Failure located at the key and value.
    """
    key_failure = validate_key(entry.key, rules)
    if key_failure:
        return key_failure.within(f"key '{entry.key}'")

    failure = validate_value(entry.value, locale, rules)
    if failure is None and rules.accelerator_marker and rules.accelerator_marker in entry.key:
        failure = check_accelerator(entry.value, rules.modifiers, rules.key_codes)
    if failure:
        return failure.within(f"value {entry.value!r}").within(f"key '{entry.key}'")

    logger.debug("Key '%s' passed validation", entry.key)
    return None

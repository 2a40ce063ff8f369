"""Checks applied to a whole .properties file, from its name down to every entry."""
import codecs
import logging
import os
import unicodedata
from typing import Optional, Union

from proplint.errors import Failure, FailureKind
from proplint.locales import DEFAULT_LANGUAGE, LocaleInfo, locale_from_filename
from proplint.properties_parser import parse_properties
from proplint.translation_validator import (
    BYTE_ORDER_MARK,
    DEFAULT_RULES,
    ValidationRules,
    check_encoding_and_mojibake,
    validate_entry,
)

logger = logging.getLogger("proplint")

DEFAULT_ENCODING = 'utf-8'

# Encodings for which a leading byte-order mark is expected rather than an error.
BOM_ENCODINGS = frozenset({'utf-8-sig', 'utf-16', 'utf-32'})


def _codec_name(encoding: str) -> str:
    return codecs.lookup(encoding).name


def bom_is_conventional(encoding: str) -> bool:
    name = _codec_name(encoding)
    return name in BOM_ENCODINGS or name.startswith(('utf-16', 'utf-32'))


def decode_content(data: bytes, encoding: str = DEFAULT_ENCODING) -> Union[str, Failure]:
    """
    Decode raw file bytes and normalize them to NFC.

    A leading byte-order mark is dropped for encodings that conventionally
    carry one and rejected for all others.

    Args:
        data: The raw file content.
        encoding: The encoding the file is expected to be written in.

    Returns:
        The decoded text, or a Failure if the bytes do not match the encoding.
    """
    try:
        text = data.decode(encoding)
    except UnicodeDecodeError as e:
        return Failure(
            FailureKind.INVALID_ENCODING,
            f"not valid {encoding}: byte {data[e.start:e.start + 1]!r} at offset {e.start}",
        )
    except LookupError:
        return Failure(FailureKind.INVALID_ENCODING, f"'{encoding}' is not a known encoding")

    if text.startswith(BYTE_ORDER_MARK):
        if not bom_is_conventional(encoding):
            return Failure(FailureKind.UNEXPECTED_BOM, f"file starts with a byte-order mark, which {encoding} does not use")
        text = text[1:]

    return unicodedata.normalize('NFC', text)


def check_content(
        text: str,
        locale: LocaleInfo,
        rules: ValidationRules = DEFAULT_RULES,
        detect_mojibake: bool = True
) -> Optional[Failure]:
    """
    Validate already decoded file content.

    Args:
        text: Decoded file content without byte-order mark.
        locale: Locale of the file, as derived from its name.
        rules: Lookup tables for the semantic rules.
        detect_mojibake: Whether to look for double-encoded UTF-8.

    Returns:
        None if every property passes, otherwise the first Failure (not yet
        located at the file).
    """
    if detect_mojibake:
        failure = check_encoding_and_mojibake(text)
        if failure:
            return failure

    entries = parse_properties(text)
    if isinstance(entries, Failure):
        return entries
    if not entries:
        return Failure(FailureKind.NO_PROPERTIES, "file defines no properties")

    for entry in entries.values():
        failure = validate_entry(entry, locale, rules)
        if failure:
            return failure.within(f"line {entry.line_number}")

    logger.debug("Validated %d properties for locale '%s'", len(entries), locale)
    return None


def check_file(
        file_path: str,
        rules: ValidationRules = DEFAULT_RULES,
        encoding: str = DEFAULT_ENCODING,
        default_language: str = DEFAULT_LANGUAGE,
        detect_mojibake: bool = True
) -> Optional[Failure]:
    """
    Run the full check pipeline on one .properties file.

    The file name is checked before anything is read.

    Returns:
        None if the file is valid, otherwise the first Failure, located at the file.
    """
    filename = os.path.basename(file_path)
    locale = locale_from_filename(file_path, default_language)
    if isinstance(locale, Failure):
        return locale.within(filename)

    try:
        with open(file_path, 'rb') as f:
            data = f.read()
    except OSError as e:
        return Failure(FailureKind.UNREADABLE_FILE, f"could not read file: {e}").within(filename)

    text = decode_content(data, encoding)
    if isinstance(text, Failure):
        return text.within(filename)

    failure = check_content(text, locale, rules, detect_mojibake)
    if failure:
        return failure.within(filename)
    return None

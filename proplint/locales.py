import os
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional, Union

from proplint.errors import Failure, FailureKind

# <name>[_<lang>[_<COUNTRY>|_<3-digit variant>]].properties
BUNDLE_FILENAME = re.compile(
    r'^(?P<name>[^_]+)'
    r'(?:_(?P<language>[a-z]{2})(?:_(?P<country>[A-Z]{2}|[0-9]{3}))?)?'
    r'\.properties$'
)

DEFAULT_LANGUAGE = 'en'

ZERO_CATEGORY = 'zero'

_ONE_OTHER = frozenset({'one', 'other'})
_OTHER = frozenset({'other'})
_ONE_FEW_OTHER = frozenset({'one', 'few', 'other'})
_ONE_FEW_MANY_OTHER = frozenset({'one', 'few', 'many', 'other'})

# Cardinal plural categories expected for integer counts, by language.
# 'zero' is never required and therefore not listed.
PLURAL_CATEGORIES: Mapping[str, FrozenSet[str]] = MappingProxyType({
    'ar': frozenset({'one', 'two', 'few', 'many', 'other'}),
    'bg': _ONE_OTHER,
    'bs': _ONE_FEW_OTHER,
    'ca': _ONE_OTHER,
    'cs': _ONE_FEW_OTHER,
    'cy': frozenset({'one', 'two', 'few', 'many', 'other'}),
    'da': _ONE_OTHER,
    'de': _ONE_OTHER,
    'el': _ONE_OTHER,
    'en': _ONE_OTHER,
    'eo': _ONE_OTHER,
    'es': _ONE_OTHER,
    'et': _ONE_OTHER,
    'eu': _ONE_OTHER,
    'fa': _ONE_OTHER,
    'fi': _ONE_OTHER,
    'fr': _ONE_OTHER,
    'ga': frozenset({'one', 'two', 'few', 'many', 'other'}),
    'gl': _ONE_OTHER,
    'he': frozenset({'one', 'two', 'many', 'other'}),
    'hi': _ONE_OTHER,
    'hr': _ONE_FEW_OTHER,
    'hu': _ONE_OTHER,
    'hy': _ONE_OTHER,
    'id': _OTHER,
    'is': _ONE_OTHER,
    'it': _ONE_OTHER,
    'ja': _OTHER,
    'ka': _ONE_OTHER,
    'kk': _ONE_OTHER,
    'km': _OTHER,
    'ko': _OTHER,
    'lt': _ONE_FEW_OTHER,
    'lv': _ONE_OTHER,
    'mk': _ONE_OTHER,
    'ms': _OTHER,
    'nb': _ONE_OTHER,
    'nl': _ONE_OTHER,
    'nn': _ONE_OTHER,
    'pl': _ONE_FEW_MANY_OTHER,
    'pt': _ONE_OTHER,
    'ro': _ONE_FEW_OTHER,
    'ru': _ONE_FEW_MANY_OTHER,
    'sk': _ONE_FEW_OTHER,
    'sl': frozenset({'one', 'two', 'few', 'other'}),
    'sq': _ONE_OTHER,
    'sr': _ONE_FEW_OTHER,
    'sv': _ONE_OTHER,
    'ta': _ONE_OTHER,
    'th': _OTHER,
    'tr': _ONE_OTHER,
    'uk': _ONE_FEW_MANY_OTHER,
    'ur': _ONE_OTHER,
    'vi': _OTHER,
    'zh': _OTHER,
})


@dataclass(frozen=True)
class LocaleInfo:
    """Language and optional country (or numeric region) a bundle is written for."""
    language_code: str
    country_code: Optional[str] = None

    def __str__(self) -> str:
        if self.country_code:
            return f"{self.language_code}_{self.country_code}"
        return self.language_code


def locale_from_filename(file_path: str, default_language: str = DEFAULT_LANGUAGE) -> Union[LocaleInfo, Failure]:
    """
    Derive the locale of a bundle from its file name.

    Args:
        file_path: Path or name of the .properties file, e.g. ``messages_pt_BR.properties``.
        default_language: Language assumed for the base bundle (``messages.properties``).

    Returns:
        The LocaleInfo, or a Failure if the name does not follow the bundle naming convention.
    """
    filename = os.path.basename(file_path)
    match = BUNDLE_FILENAME.match(filename)
    if not match:
        return Failure(
            FailureKind.INVALID_FILENAME,
            f"'{filename}' does not match <name>[_<lang>[_<COUNTRY>|_<variant>]].properties",
        )
    language = match.group('language') or default_language
    return LocaleInfo(language_code=language, country_code=match.group('country'))

import pytest

from proplint.errors import Failure, FailureKind
from proplint.locales import PLURAL_CATEGORIES, ZERO_CATEGORY, LocaleInfo, locale_from_filename


@pytest.mark.parametrize("filename, expected", [
    ("messages.properties", LocaleInfo("en")),
    ("messages_fr.properties", LocaleInfo("fr")),
    ("messages_pt_BR.properties", LocaleInfo("pt", "BR")),
    ("messages_es_419.properties", LocaleInfo("es", "419")),
    ("/some/dir/Bundle_de.properties", LocaleInfo("de")),
])
def test_locale_from_filename(filename, expected):
    assert locale_from_filename(filename) == expected


def test_base_bundle_uses_default_language():
    assert locale_from_filename("messages.properties", default_language="de") == LocaleInfo("de")


@pytest.mark.parametrize("filename", [
    "messages_FR.properties",
    "messages_fr_br.properties",
    "messages_fra.properties",
    "messages_fr_BR_extra.properties",
    "messages_fr_12.properties",
    "messages_fr.txt",
    "messages_fr.properties.bak",
])
def test_invalid_filenames(filename):
    failure = locale_from_filename(filename)
    assert isinstance(failure, Failure)
    assert failure.kind == FailureKind.INVALID_FILENAME


def test_locale_str():
    assert str(LocaleInfo("pt", "BR")) == "pt_BR"
    assert str(LocaleInfo("fr")) == "fr"


def test_plural_table_is_read_only():
    with pytest.raises(TypeError):
        PLURAL_CATEGORIES['xx'] = frozenset({'other'})


def test_plural_table_never_requires_zero():
    for language, categories in PLURAL_CATEGORIES.items():
        assert ZERO_CATEGORY not in categories, language
        assert 'other' in categories, language

import codecs
import os
import tempfile
import textwrap
import unittest
from unittest.mock import patch

import pytest

from proplint.errors import FailureKind
from proplint.file_checks import bom_is_conventional, check_content, check_file, decode_content
from proplint.locales import LocaleInfo


class TestFileValidation(unittest.TestCase):

    def _check(self, filename, content, **kwargs):
        with tempfile.TemporaryDirectory() as temp_dir:
            temp_path = os.path.join(temp_dir, filename)
            with open(temp_path, 'wb') as f:
                f.write(content if isinstance(content, bytes) else content.encode('utf-8'))
            return check_file(temp_path, **kwargs)

    def test_valid_file_passes(self):
        content = textwrap.dedent("""\
            # Window titles
            window.title=Fenêtre principale
            files.deleted={0,plural,one{# fichier supprimé} other{# fichiers supprimés}}
            files.progress=Copie de {0} sur {1,number,integer} \\
                fichiers le {2,date,short}
            menu.delete.accelerator=control alt DELETE
        """)
        self.assertIsNone(self._check('messages_fr.properties', content))

    def test_failure_chain_runs_from_file_to_template(self):
        content = "ok=Bien\nfiles.deleted={0,plural,other{# fichiers}}\n"
        failure = self._check('messages_fr.properties', content)

        self.assertEqual(failure.kind, FailureKind.PLURAL_CATEGORY_MISMATCH)
        self.assertEqual(failure.context[:3], ('messages_fr.properties', 'line 2', "key 'files.deleted'"))
        description = failure.describe()
        self.assertTrue(description.startswith("messages_fr.properties: line 2: key 'files.deleted': value "))
        self.assertIn("missing {one}", description)

    def test_invalid_filename_fails_before_reading(self):
        failure = check_file('/does/not/exist/messages-FR.props')
        self.assertEqual(failure.kind, FailureKind.INVALID_FILENAME)

    def test_missing_file(self):
        failure = check_file('/does/not/exist/messages_fr.properties')
        self.assertEqual(failure.kind, FailureKind.UNREADABLE_FILE)
        self.assertEqual(failure.context, ('messages_fr.properties',))

    def test_file_without_properties(self):
        failure = self._check('messages_fr.properties', "# nothing here\n\n")
        self.assertEqual(failure.kind, FailureKind.NO_PROPERTIES)

    def test_encoding_is_not_utf8(self):
        content_bytes = "key.one=verf\xfcgbare Videos\n".encode('latin-1')
        failure = self._check('messages_de.properties', content_bytes)
        self.assertEqual(failure.kind, FailureKind.INVALID_ENCODING)

    def test_latin1_when_configured(self):
        content_bytes = "key.one=verf\xfcgbare Videos\n".encode('latin-1')
        self.assertIsNone(self._check('messages_de.properties', content_bytes, encoding='latin-1'))

    def test_mojibake_detection_can_be_disabled(self):
        content = "key.one=verfÃ¼gbar\n"
        self.assertEqual(self._check('messages_de.properties', content).kind, FailureKind.MOJIBAKE)
        self.assertIsNone(self._check('messages_de.properties', content, detect_mojibake=False))


class TestDecodeContent:

    def test_utf8_bom_is_rejected(self):
        failure = decode_content(codecs.BOM_UTF8 + b"a=b\n")
        assert failure.kind == FailureKind.UNEXPECTED_BOM

    def test_utf8_sig_accepts_bom(self):
        assert decode_content(codecs.BOM_UTF8 + b"a=b\n", 'utf-8-sig') == "a=b\n"

    def test_utf16_bom_is_stripped(self):
        assert decode_content("a=b\n".encode('utf-16'), 'utf-16') == "a=b\n"
        assert decode_content(codecs.BOM_UTF16_LE + "a=b\n".encode('utf-16-le'), 'utf-16-le') == "a=b\n"

    def test_content_is_normalized_to_nfc(self):
        decomposed = "cafe\u0301"
        assert decode_content(f"k={decomposed}\n".encode('utf-8')) == "k=café\n"

    def test_unknown_encoding(self):
        assert decode_content(b"a=b\n", 'no-such-codec').kind == FailureKind.INVALID_ENCODING

    @pytest.mark.parametrize("encoding, expected", [
        ('utf-8', False),
        ('UTF8', False),
        ('latin-1', False),
        ('utf-8-sig', True),
        ('utf-16', True),
        ('UTF-16LE', True),
        ('utf-32-be', True),
    ])
    def test_bom_is_conventional(self, encoding, expected):
        assert bom_is_conventional(encoding) is expected


class TestCheckContent:

    def test_injected_rules_reach_entries(self, test_rules):
        text = "count={0,plural,few{a} other{b}}\n"
        assert check_content(text, LocaleInfo('xx'), rules=test_rules) is None
        failure = check_content(text, LocaleInfo('xx'))
        assert failure.kind == FailureKind.UNKNOWN_LOCALE_PLURALS

    def test_entries_are_checked_against_the_given_locale(self):
        text = "count={0,plural,one{a} other{b}}\n"
        assert check_content(text, LocaleInfo('en')) is None
        failure = check_content(text, LocaleInfo('ru'))
        assert failure.kind == FailureKind.PLURAL_CATEGORY_MISMATCH
        assert failure.context[0] == 'line 1'

    def test_base_bundle_takes_the_default_language(self, tmp_path):
        base = tmp_path / 'messages.properties'
        base.write_text("count={0,plural,one{a} other{b}}\n", encoding='utf-8')
        assert check_file(str(base)) is None
        failure = check_file(str(base), default_language='ru')
        assert failure.kind == FailureKind.PLURAL_CATEGORY_MISMATCH

    def test_locale_is_derived_once_per_file(self, tmp_path):
        bundle = tmp_path / 'messages_fr.properties'
        bundle.write_text("a=b\n", encoding='utf-8')
        with patch('proplint.file_checks.locale_from_filename', return_value=LocaleInfo('fr')) as derive:
            assert check_file(str(bundle)) is None
        derive.assert_called_once_with(str(bundle), 'en')


if __name__ == '__main__':
    unittest.main()

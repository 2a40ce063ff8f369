import textwrap
import unittest

from proplint.errors import Failure, FailureKind
from proplint.properties_parser import (
    PropertyEntry,
    find_separator,
    has_unescaped_trailing_backslash,
    parse_properties,
)


def _content(text):
    return textwrap.dedent(text).lstrip('\n')


class TestParseProperties(unittest.TestCase):

    def test_parse_properties_with_multiline_values(self):
        """
        Tests that parse_properties correctly handles comments, blank lines
        and values continued with a trailing backslash.
        """
        content = _content("""
            # This is a comment

            key.one=Simple value
            key.two=This is a multi-line value that \\
                     continues on the next line.
            # Another comment
            key.three = Another simple value
        """)

        entries = parse_properties(content)

        self.assertEqual(
            {key: entry.value for key, entry in entries.items()},
            {
                'key.one': 'Simple value',
                'key.two': 'This is a multi-line value that continues on the next line.',
                'key.three': 'Another simple value',
            }
        )
        self.assertEqual(entries['key.one'].comment_lines, ('# This is a comment', ''))
        self.assertEqual(entries['key.two'].comment_lines, ())
        self.assertEqual(entries['key.three'].comment_lines, ('# Another comment',))
        self.assertEqual(entries['key.three'].line_number, 7)

    def test_continuation_matches_single_line_form(self):
        continued = parse_properties("greeting=Hello \\\n    wide world\n")
        single = parse_properties("greeting=Hello wide world\n")
        self.assertEqual(continued['greeting'].value, single['greeting'].value)

    def test_escapes_are_decoded_in_key_and_value(self):
        entries = parse_properties("a\\=b=line\\nbreak \\u0041\n")
        self.assertEqual(entries['a=b'], PropertyEntry('a=b', 'line\nbreak A', (), 1))

    def test_later_duplicate_key_wins(self):
        entries = parse_properties("k=first\nother=x\nk=second\n")
        self.assertEqual(entries['k'].value, 'second')
        self.assertEqual(entries['k'].line_number, 3)
        self.assertEqual(len(entries), 2)

    def test_empty_file_gives_empty_mapping(self):
        self.assertEqual(parse_properties(""), {})
        self.assertEqual(parse_properties("# only a comment\n\n"), {})

    def test_crlf_line_endings(self):
        entries = parse_properties("a=1\r\nb=2\r\n")
        self.assertEqual([entry.value for entry in entries.values()], ['1', '2'])

    def test_continuation_on_last_line_ends_value(self):
        entries = parse_properties("k=value\\")
        self.assertEqual(entries['k'].value, 'value')

    def test_trailing_whitespace_fails(self):
        failure = parse_properties("a=1\nb=2 \n")
        self.assertIsInstance(failure, Failure)
        self.assertEqual(failure.kind, FailureKind.TRAILING_WHITESPACE)
        self.assertEqual(failure.context, ('line 2',))

    def test_escaped_trailing_space_still_counts_as_trailing_whitespace(self):
        failure = parse_properties("k=value\\ \n")
        self.assertEqual(failure.kind, FailureKind.TRAILING_WHITESPACE)

    def test_line_without_separator_fails(self):
        failure = parse_properties("key: value\n")
        self.assertEqual(failure.kind, FailureKind.MALFORMED_LINE)

    def test_escaped_whitespace_in_value_fails(self):
        failure = parse_properties("k=value\\u0020\n")
        self.assertEqual(failure.kind, FailureKind.WHITESPACE_IN_VALUE)

    def test_leading_whitespace_in_key_fails(self):
        failure = parse_properties("\\ k=value\n")
        self.assertEqual(failure.kind, FailureKind.WHITESPACE_IN_KEY)

    def test_bad_escape_is_located_at_key_and_line(self):
        failure = parse_properties("ok=fine\nkey.three.bad.escape=\\n\\Usando Tor externo\n")
        self.assertEqual(failure.kind, FailureKind.UNNECESSARY_ESCAPE)
        self.assertEqual(failure.context, ('line 2', "key 'key.three.bad.escape'"))

    def test_bad_escape_in_continuation_line(self):
        failure = parse_properties("k=first \\\n  \\q\n")
        self.assertEqual(failure.kind, FailureKind.UNNECESSARY_ESCAPE)
        self.assertEqual(failure.context, ('line 2',))


class TestHelpers(unittest.TestCase):

    def test_has_unescaped_trailing_backslash(self):
        self.assertTrue(has_unescaped_trailing_backslash('abc\\'))
        self.assertFalse(has_unescaped_trailing_backslash('abc\\\\'))
        self.assertTrue(has_unescaped_trailing_backslash('abc\\\\\\'))
        self.assertFalse(has_unescaped_trailing_backslash('abc'))

    def test_find_separator_skips_escaped_equals(self):
        self.assertEqual(find_separator('a\\=b=c'), 4)
        self.assertEqual(find_separator('a\\\\=b'), 3)
        self.assertEqual(find_separator('no separator'), -1)


if __name__ == '__main__':
    unittest.main()

"""
Structural parsing of MessageFormat-style templates.

A template such as ``Deleted {0,number,integer} of {1} files`` is split into
literal text and parameters, one level deep. The style of a parameter is kept as
raw text; for ``plural`` parameters it can be handed to ``parse_plural_style``,
whose branches are templates again.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from proplint.errors import Failure, FailureKind


@dataclass(frozen=True)
class Literal:
    """Plain text, with any quote characters kept as written."""
    text: str


@dataclass(frozen=True)
class Parameter:
    """
    A ``{...}`` placeholder.

    ``format_type`` is None for a plain ``{0}`` substitution. ``style`` is None
    when no style was given at all and ``""`` when an empty one was written
    (``{0,number,}``).
    """
    number: str
    format_type: Optional[str] = None
    style: Optional[str] = None


TemplateSegment = Union[Literal, Parameter]


class _TemplateState(Enum):
    TEXT = 1
    PARAM_NUMBER = 2
    TYPE = 3
    STYLE = 4
    LITERAL_QUOTE = 5


def _is_word_char(char: str) -> bool:
    return char.isalnum() or char == '_'


def parse_template(text: str) -> Union[Tuple[TemplateSegment, ...], Failure]:
    """
    Split a template into literal and parameter segments.

    A single quote starts a quoted run in which braces are ordinary text; the
    quote characters themselves stay part of the literal, and a doubled quote
    is kept as two quotes rather than collapsed into one.

    Args:
        text: The template text.

    Returns:
        The segments in order, or a Failure naming the offending column.
    """
    segments: List[TemplateSegment] = []
    literal: List[str] = []
    number: List[str] = []
    format_type: List[str] = []
    style: List[str] = []
    depth = 0
    state = _TemplateState.TEXT

    def close_parameter(with_type: bool, with_style: bool) -> None:
        segments.append(Parameter(
            number=''.join(number),
            format_type=''.join(format_type) if with_type else None,
            style=''.join(style) if with_style else None,
        ))

    for column, char in enumerate(text, 1):
        if state is _TemplateState.TEXT:
            if char == '{':
                if literal:
                    segments.append(Literal(''.join(literal)))
                    literal = []
                number, format_type, style = [], [], []
                state = _TemplateState.PARAM_NUMBER
            elif char == '}':
                return Failure(FailureKind.UNMATCHED_CLOSE_BRACE, f"'}}' at column {column} closes nothing")
            else:
                literal.append(char)
                if char == "'":
                    state = _TemplateState.LITERAL_QUOTE
        elif state is _TemplateState.LITERAL_QUOTE:
            literal.append(char)
            if char == "'":
                state = _TemplateState.TEXT
        elif state is _TemplateState.PARAM_NUMBER:
            if char.isdigit():
                number.append(char)
            elif char in ',}' and number:
                if char == ',':
                    state = _TemplateState.TYPE
                else:
                    close_parameter(with_type=False, with_style=False)
                    state = _TemplateState.TEXT
            else:
                return Failure(
                    FailureKind.UNEXPECTED_CHARACTER,
                    f"{char!r} at column {column} where a parameter number was expected",
                )
        elif state is _TemplateState.TYPE:
            if _is_word_char(char):
                format_type.append(char)
            elif char in ',}' and format_type:
                if char == ',':
                    depth = 0
                    state = _TemplateState.STYLE
                else:
                    close_parameter(with_type=True, with_style=False)
                    state = _TemplateState.TEXT
            else:
                return Failure(
                    FailureKind.UNEXPECTED_CHARACTER,
                    f"{char!r} at column {column} where a format type was expected",
                )
        else:
            if char == '{':
                depth += 1
                style.append(char)
            elif char == '}':
                if depth == 0:
                    close_parameter(with_type=True, with_style=True)
                    state = _TemplateState.TEXT
                else:
                    depth -= 1
                    style.append(char)
            else:
                style.append(char)

    if state is not _TemplateState.TEXT:
        if state is _TemplateState.LITERAL_QUOTE:
            return Failure(FailureKind.UNTERMINATED_TEMPLATE, "quoted text is never closed")
        return Failure(FailureKind.UNTERMINATED_TEMPLATE, "parameter is never closed")
    if literal:
        segments.append(Literal(''.join(literal)))
    return tuple(segments)


def format_segment(segment: TemplateSegment) -> str:
    if isinstance(segment, Literal):
        return segment.text
    parts = [segment.number]
    if segment.format_type is not None:
        parts.append(segment.format_type)
        if segment.style is not None:
            parts.append(segment.style)
    return '{' + ','.join(parts) + '}'


def format_template(segments: Tuple[TemplateSegment, ...]) -> str:
    """Write segments back as template text that parses to the same segments."""
    return ''.join(format_segment(segment) for segment in segments)


class _PluralState(Enum):
    BEFORE_KEYWORD = 1
    IN_KEYWORD = 2
    AFTER_KEYWORD = 3
    IN_BRANCH_TEXT = 4


def _is_keyword_char(char: str) -> bool:
    # '=' allows explicit value selectors such as '=0'
    return _is_word_char(char) or char == '='


def parse_plural_style(style: str) -> Union[Dict[str, str], Failure]:
    """
    Parse the style of a plural parameter into its branches.

    ``one{# file} other{# files}`` becomes ``{'one': '# file', 'other': '# files'}``.
    Branch text is returned unparsed.
    """
    branches: Dict[str, str] = {}
    keyword: List[str] = []
    branch: List[str] = []
    depth = 0
    state = _PluralState.BEFORE_KEYWORD

    for column, char in enumerate(style, 1):
        if state is _PluralState.BEFORE_KEYWORD:
            if char.isspace():
                continue
            if char == '}':
                return Failure(FailureKind.UNMATCHED_CLOSE_BRACE, f"'}}' at column {column} closes nothing")
            if char == '{':
                return Failure(
                    FailureKind.UNEXPECTED_CHARACTER,
                    f"plural branch at column {column} has no category keyword",
                )
            if not _is_keyword_char(char):
                return Failure(
                    FailureKind.UNEXPECTED_CHARACTER,
                    f"{char!r} at column {column} where a plural category was expected",
                )
            keyword = [char]
            state = _PluralState.IN_KEYWORD
        elif state is _PluralState.IN_KEYWORD:
            if _is_keyword_char(char):
                keyword.append(char)
            elif char.isspace():
                state = _PluralState.AFTER_KEYWORD
            elif char == '{':
                branch, depth = [], 0
                state = _PluralState.IN_BRANCH_TEXT
            elif char == '}':
                return Failure(FailureKind.UNMATCHED_CLOSE_BRACE, f"'}}' at column {column} closes nothing")
            else:
                return Failure(
                    FailureKind.UNEXPECTED_CHARACTER,
                    f"{char!r} at column {column} inside plural category '{''.join(keyword)}'",
                )
        elif state is _PluralState.AFTER_KEYWORD:
            if char.isspace():
                continue
            if char == '{':
                branch, depth = [], 0
                state = _PluralState.IN_BRANCH_TEXT
            elif char == '}':
                return Failure(FailureKind.UNMATCHED_CLOSE_BRACE, f"'}}' at column {column} closes nothing")
            else:
                return Failure(
                    FailureKind.UNEXPECTED_CHARACTER,
                    f"{char!r} at column {column}, expected '{{' after plural category '{''.join(keyword)}'",
                )
        else:
            if char == '{':
                depth += 1
                branch.append(char)
            elif char == '}':
                if depth:
                    depth -= 1
                    branch.append(char)
                    continue
                category = ''.join(keyword)
                if category in branches:
                    return Failure(
                        FailureKind.DUPLICATE_PLURAL_CATEGORY,
                        f"plural category '{category}' appears more than once",
                    )
                branches[category] = ''.join(branch)
                state = _PluralState.BEFORE_KEYWORD
            else:
                branch.append(char)

    if state is not _PluralState.BEFORE_KEYWORD:
        return Failure(
            FailureKind.UNTERMINATED_PLURAL_FORMAT,
            f"plural branch '{''.join(keyword)}' is never closed in {style!r}",
        )
    return branches

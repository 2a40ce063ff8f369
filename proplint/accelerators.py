"""
Grammar check for keyboard accelerator descriptions.

The accepted syntax is the AWT keystroke one::

    <modifiers>* (typed <character> | (pressed | released)? <key code>)

e.g. ``control alt DELETE``, ``shift typed a`` or ``meta released F4``.
"""
from enum import Enum
from typing import AbstractSet, Optional

from proplint.errors import Failure, FailureKind

VALID_MODIFIERS = frozenset({
    'shift', 'control', 'ctrl', 'meta', 'alt', 'altGraph',
    'button1', 'button2', 'button3',
})

# KeyEvent.VK_* names without the prefix.
VALID_KEY_CODES = frozenset(
    [chr(letter) for letter in range(ord('A'), ord('Z') + 1)]
    + [str(digit) for digit in range(10)]
    + [f'F{number}' for number in range(1, 25)]
    + [f'NUMPAD{digit}' for digit in range(10)]
    + [
        'ENTER', 'BACK_SPACE', 'TAB', 'CANCEL', 'CLEAR', 'SHIFT', 'CONTROL', 'ALT',
        'PAUSE', 'CAPS_LOCK', 'ESCAPE', 'SPACE', 'PAGE_UP', 'PAGE_DOWN', 'END', 'HOME',
        'LEFT', 'UP', 'RIGHT', 'DOWN', 'COMMA', 'MINUS', 'PERIOD', 'SLASH', 'SEMICOLON',
        'EQUALS', 'OPEN_BRACKET', 'BACK_SLASH', 'CLOSE_BRACKET', 'MULTIPLY', 'ADD',
        'SEPARATOR', 'SUBTRACT', 'DECIMAL', 'DIVIDE', 'DELETE', 'NUM_LOCK', 'SCROLL_LOCK',
        'PRINTSCREEN', 'INSERT', 'HELP', 'META', 'BACK_QUOTE', 'QUOTE',
        'KP_UP', 'KP_DOWN', 'KP_LEFT', 'KP_RIGHT',
        'DEAD_GRAVE', 'DEAD_ACUTE', 'DEAD_CIRCUMFLEX', 'DEAD_TILDE', 'DEAD_MACRON',
        'DEAD_BREVE', 'DEAD_ABOVEDOT', 'DEAD_DIAERESIS', 'DEAD_ABOVERING',
        'DEAD_DOUBLEACUTE', 'DEAD_CARON', 'DEAD_CEDILLA', 'DEAD_OGONEK', 'DEAD_IOTA',
        'DEAD_VOICED_SOUND', 'DEAD_SEMIVOICED_SOUND',
        'AMPERSAND', 'ASTERISK', 'QUOTEDBL', 'LESS', 'GREATER', 'BRACELEFT', 'BRACERIGHT',
        'AT', 'COLON', 'CIRCUMFLEX', 'DOLLAR', 'EURO_SIGN', 'EXCLAMATION_MARK',
        'INVERTED_EXCLAMATION_MARK', 'LEFT_PARENTHESIS', 'NUMBER_SIGN', 'PLUS',
        'RIGHT_PARENTHESIS', 'UNDERSCORE', 'WINDOWS', 'CONTEXT_MENU',
        'FINAL', 'CONVERT', 'NONCONVERT', 'ACCEPT', 'MODECHANGE', 'KANA', 'KANJI',
        'ALPHANUMERIC', 'KATAKANA', 'HIRAGANA', 'FULL_WIDTH', 'HALF_WIDTH',
        'ROMAN_CHARACTERS', 'ALL_CANDIDATES', 'PREVIOUS_CANDIDATE', 'CODE_INPUT',
        'JAPANESE_KATAKANA', 'JAPANESE_HIRAGANA', 'JAPANESE_ROMAN', 'KANA_LOCK',
        'INPUT_METHOD_ON_OFF', 'CUT', 'COPY', 'PASTE', 'UNDO', 'AGAIN', 'FIND', 'PROPS',
        'STOP', 'COMPOSE', 'ALT_GRAPH', 'BEGIN',
    ]
)


class _State(Enum):
    MAYBE_MODIFIERS = 1
    AFTER_TYPED = 2
    AFTER_PRESSED = 3
    AT_END = 4


def check_accelerator(
        text: str,
        modifiers: AbstractSet[str] = VALID_MODIFIERS,
        key_codes: AbstractSet[str] = VALID_KEY_CODES
) -> Optional[Failure]:
    """
    Check an accelerator description against the keystroke grammar.

    Args:
        text: The accelerator, e.g. ``"control shift S"``.
        modifiers: Accepted modifier tokens.
        key_codes: Accepted key code tokens.

    Returns:
        None if the accelerator is well formed, otherwise a Failure.
    """
    state = _State.MAYBE_MODIFIERS
    for token in text.split():
        if state is _State.MAYBE_MODIFIERS:
            if token in modifiers:
                continue
            if token == 'typed':
                state = _State.AFTER_TYPED
            elif token in ('pressed', 'released'):
                state = _State.AFTER_PRESSED
            elif token in key_codes:
                state = _State.AT_END
            else:
                return Failure(FailureKind.INVALID_KEY_CODE, f"'{token}' is neither a modifier nor a key code")
        elif state is _State.AFTER_TYPED:
            if len(token) != 1:
                return Failure(FailureKind.INVALID_TYPED_KEY, f"'{token}' after 'typed' must be a single character")
            state = _State.AT_END
        elif state is _State.AFTER_PRESSED:
            if token not in key_codes:
                return Failure(FailureKind.INVALID_KEY_CODE, f"'{token}' is not a key code")
            state = _State.AT_END
        else:
            return Failure(FailureKind.TRAILING_TOKENS, f"'{token}' follows a complete accelerator in {text!r}")

    if state is not _State.AT_END:
        return Failure(FailureKind.MISSING_KEY_CODE, f"{text!r} does not end with a key")
    return None

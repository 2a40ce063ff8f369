import pytest

from proplint.accelerators import VALID_KEY_CODES, VALID_MODIFIERS, check_accelerator
from proplint.errors import FailureKind


@pytest.mark.parametrize("accelerator", [
    "control alt DELETE",
    "shift X",
    "F5",
    "ctrl shift S",
    "meta typed a",
    "alt pressed F4",
    "control released ENTER",
    "typed ?",
    "  control   A  ",
])
def test_valid_accelerators(accelerator):
    assert check_accelerator(accelerator) is None


@pytest.mark.parametrize("accelerator, kind", [
    ("pressed", FailureKind.MISSING_KEY_CODE),
    ("control shift", FailureKind.MISSING_KEY_CODE),
    ("typed", FailureKind.MISSING_KEY_CODE),
    ("", FailureKind.MISSING_KEY_CODE),
    ("A B", FailureKind.TRAILING_TOKENS),
    ("control typed a b", FailureKind.TRAILING_TOKENS),
    ("control Delete", FailureKind.INVALID_KEY_CODE),
    ("Strg S", FailureKind.INVALID_KEY_CODE),
    ("pressed shift", FailureKind.INVALID_KEY_CODE),
    ("typed ab", FailureKind.INVALID_TYPED_KEY),
    ("A shift", FailureKind.TRAILING_TOKENS),
])
def test_invalid_accelerators(accelerator, kind):
    failure = check_accelerator(accelerator)
    assert failure is not None
    assert failure.kind == kind


def test_modifiers_are_not_key_codes():
    assert not VALID_MODIFIERS & VALID_KEY_CODES


def test_alternate_tables():
    assert check_accelerator("hyper Q", modifiers={"hyper"}, key_codes={"Q"}) is None
    failure = check_accelerator("control Q", modifiers={"hyper"}, key_codes={"Q"})
    assert failure.kind == FailureKind.INVALID_KEY_CODE

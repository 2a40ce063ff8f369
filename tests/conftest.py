import os
import textwrap
from types import MappingProxyType

import pytest

from proplint.translation_validator import DEFAULT_RULES, ValidationRules


@pytest.fixture
def write_properties(tmp_path):
    """
    Function-scoped fixture returning a helper that writes a bundle into a
    temporary directory and returns its path.

    ``content`` may be text (dedented and encoded with ``encoding``) or raw bytes.
    """
    def _write(filename, content, encoding='utf-8'):
        file_path = os.path.join(str(tmp_path), filename)
        os.makedirs(os.path.dirname(file_path), exist_ok=True)
        if isinstance(content, bytes):
            data = content
        else:
            data = textwrap.dedent(content).lstrip('\n').encode(encoding)
        with open(file_path, 'wb') as f:
            f.write(data)
        return file_path

    return _write


@pytest.fixture
def test_rules():
    """Rules with a small, test-only locale table instead of the built-in one."""
    return ValidationRules(
        plural_categories=MappingProxyType({
            'en': frozenset({'one', 'other'}),
            'xx': frozenset({'few', 'other'}),
        }),
        modifiers=DEFAULT_RULES.modifiers,
        key_codes=frozenset({'A', 'B', 'DELETE'}),
        accelerator_marker='.shortcut',
    )


@pytest.fixture
def clean_environment(monkeypatch):
    """Remove every PROPLINT_* variable so configuration tests start from defaults."""
    for name in list(os.environ):
        if name.startswith('PROPLINT_'):
            monkeypatch.delenv(name)
    return monkeypatch

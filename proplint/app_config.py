"""Application configuration module for the properties checker."""
import codecs
import os
import sys
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

import jsonschema
import yaml
from dotenv import load_dotenv

from proplint.locales import DEFAULT_LANGUAGE
from proplint.translation_validator import DEFAULT_ACCELERATOR_MARKER, DEFAULT_RULES, ValidationRules

DEFAULT_FILE_PATTERNS = ['**/*.properties']
DEFAULT_MAX_CONCURRENT_FILES = 4

# Shape of config.yaml; unknown keys are tolerated so older files keep loading.
CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "file_patterns": {"type": "array", "items": {"type": "string"}},
        "encoding": {"type": "string"},
        "default_language": {"type": "string", "pattern": "^[a-z]{2}$"},
        "fail_fast": {"type": "boolean"},
        "max_concurrent_files": {"type": "integer", "minimum": 1},
        "detect_mojibake": {"type": "boolean"},
        "accelerator_key_marker": {"type": "string"},
        "plural_categories": {
            "type": "object",
            "patternProperties": {
                "^[a-z]{2}$": {
                    "type": "array",
                    "items": {
                        "anyOf": [
                            {"enum": ["zero", "one", "two", "few", "many", "other"]},
                            {"type": "string", "pattern": "^=[0-9]+$"}
                        ]
                    },
                    "minItems": 1
                }
            },
            "additionalProperties": False
        },
        "logging": {
            "type": "object",
            "properties": {
                "log_level": {"type": "string"},
                "log_file_path": {"type": ["string", "null"]},
                "log_to_console": {"type": "boolean"}
            }
        }
    }
}


@dataclass
class AppConfig:
    """Application configuration dataclass."""
    project_root: str

    # Files
    file_patterns: List[str]
    encoding: str
    default_language: str

    # Run behaviour
    fail_fast: bool
    max_concurrent_files: int

    # Rules
    detect_mojibake: bool
    accelerator_key_marker: str
    plural_categories: Dict[str, List[str]] = field(default_factory=dict)

    # Logging
    log_level: str = 'INFO'
    log_file_path: Optional[str] = None
    log_to_console: bool = True

    def build_rules(self, base: ValidationRules = DEFAULT_RULES) -> ValidationRules:
        """Build the rule tables for this configuration on top of ``base``."""
        rules = base.with_plural_overrides(self.plural_categories)
        if self.accelerator_key_marker != rules.accelerator_marker:
            rules = replace(rules, accelerator_marker=self.accelerator_key_marker)
        return rules


def _compute_project_root() -> str:
    """The project root is the directory proplint is run from."""
    return os.path.abspath(os.getcwd())


def _load_dotenv_files(project_root: str) -> None:
    """Load a .env file from the project root, if there is one."""
    dotenv_path = os.path.join(project_root, '.env')
    if os.path.exists(dotenv_path):
        load_dotenv(dotenv_path)


def _load_yaml_config(project_root: str, config_file: Optional[str] = None) -> Dict[str, Any]:
    """Load and schema-check the YAML configuration file, falling back to defaults on any problem."""
    if config_file is None:
        default_config_path = os.path.join(project_root, 'config.yaml')
        config_file = os.environ.get('PROPLINT_CONFIG_FILE', default_config_path)
        explicit = 'PROPLINT_CONFIG_FILE' in os.environ
    else:
        explicit = True

    # Ensure we have an absolute path for better error reporting
    if not os.path.isabs(config_file):
        config_file = os.path.abspath(config_file)

    config: Dict[str, Any] = {}
    if not os.path.exists(config_file):
        if explicit:
            print(f"Warning: Configuration file '{config_file}' not found. Using default configuration.",
                  file=sys.stderr)
        return config

    try:
        with open(config_file, 'r', encoding='utf-8') as config_file_stream:
            loaded_config = yaml.safe_load(config_file_stream)
    except yaml.YAMLError as e:
        print(f"Error: Invalid YAML in configuration file '{config_file}': {e}", file=sys.stderr)
        print("Please check your YAML syntax. Using default configuration.", file=sys.stderr)
        return config
    except OSError as e:
        print(f"Error: Could not read configuration file '{config_file}': {e}", file=sys.stderr)
        print("Using default configuration.", file=sys.stderr)
        return config

    if loaded_config is None:
        print(f"Warning: Configuration file '{config_file}' is empty. Using default configuration.",
              file=sys.stderr)
        return config
    if not isinstance(loaded_config, dict):
        print(f"Error: Configuration file '{config_file}' must contain a YAML dictionary. Using defaults.",
              file=sys.stderr)
        return config

    try:
        jsonschema.validate(instance=loaded_config, schema=CONFIG_SCHEMA)
    except jsonschema.ValidationError as e:
        location = '.'.join(str(part) for part in e.absolute_path) or '<root>'
        print(f"Error: Configuration file '{config_file}' is invalid at '{location}': {e.message}. Using defaults.",
              file=sys.stderr)
        return config

    return loaded_config


def _resolve_encoding(config: Dict[str, Any]) -> str:
    encoding = os.environ.get('PROPLINT_ENCODING', config.get('encoding', 'utf-8'))
    try:
        codecs.lookup(encoding)
    except LookupError:
        print(f"Error: Unknown encoding '{encoding}'. Using utf-8.", file=sys.stderr)
        return 'utf-8'
    return encoding


def load_app_config(config_file: Optional[str] = None) -> AppConfig:
    """
    Load application configuration from the YAML file and environment variables.

    Args:
        config_file: Explicit configuration file. When omitted, PROPLINT_CONFIG_FILE
            or config.yaml in the project root is used.

    Returns:
        AppConfig: The loaded application configuration.
    """
    project_root = _compute_project_root()
    _load_dotenv_files(project_root)
    config = _load_yaml_config(project_root, config_file)

    log_config = config.get('logging', {})
    log_level = os.environ.get('PROPLINT_LOG_LEVEL', log_config.get('log_level', 'INFO')).upper()

    return AppConfig(
        project_root=project_root,
        file_patterns=config.get('file_patterns', list(DEFAULT_FILE_PATTERNS)),
        encoding=_resolve_encoding(config),
        default_language=config.get('default_language', DEFAULT_LANGUAGE),
        fail_fast=config.get('fail_fast', True),
        max_concurrent_files=config.get('max_concurrent_files', DEFAULT_MAX_CONCURRENT_FILES),
        detect_mojibake=config.get('detect_mojibake', True),
        accelerator_key_marker=config.get('accelerator_key_marker', DEFAULT_ACCELERATOR_MARKER),
        plural_categories=config.get('plural_categories', {}),
        log_level=log_level,
        log_file_path=log_config.get('log_file_path'),
        log_to_console=log_config.get('log_to_console', True),
    )

"""Command line entry point: expand glob patterns and check every matching bundle."""
import argparse
import asyncio
import glob
import logging
import os
import sys
from typing import Dict, List, Optional, Sequence, Tuple

from tqdm.asyncio import tqdm

from proplint.app_config import AppConfig, load_app_config
from proplint.errors import Failure
from proplint.file_checks import check_file
from proplint.logging_config import setup_logger
from proplint.translation_validator import ValidationRules

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_NO_FILES = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='proplint',
        description='Validate Java .properties localization bundles.',
    )
    parser.add_argument('patterns', nargs='*', metavar='PATTERN',
                        help="glob patterns of files to check (default: file_patterns from the configuration)")
    parser.add_argument('--config', dest='config_file', help='path to a YAML configuration file')
    parser.add_argument('--encoding', help='expected file encoding (default: utf-8)')
    parser.add_argument('--no-fail-fast', dest='fail_fast', action='store_false', default=None,
                        help='check every file and report all failures instead of stopping at the first')
    parser.add_argument('--log-level', help='DEBUG, INFO, WARNING or ERROR')
    return parser


def expand_patterns(patterns: Sequence[str]) -> List[str]:
    """Expand glob patterns (``**`` included) into a sorted list of unique files."""
    matches = set()
    for pattern in patterns:
        for path in glob.glob(pattern, recursive=True):
            if os.path.isfile(path):
                matches.add(os.path.normpath(path))
    return sorted(matches)


async def validate_files(
        file_paths: List[str],
        rules: ValidationRules,
        app_config: AppConfig
) -> Dict[str, Failure]:
    """
    Check every file and collect failures.

    In fail-fast mode files are checked one after the other and the run stops
    at the first invalid file. Otherwise up to ``max_concurrent_files`` files
    are checked at once and the first failure of each file is collected.

    Returns:
        A mapping of file path to its failure, sorted by path. Empty if all files are valid.
    """
    def check(path: str) -> Optional[Failure]:
        return check_file(
            path,
            rules=rules,
            encoding=app_config.encoding,
            default_language=app_config.default_language,
            detect_mojibake=app_config.detect_mojibake,
        )

    logger = logging.getLogger("proplint")

    if app_config.fail_fast:
        for path in tqdm(file_paths, desc="Checking", unit="file", disable=None):
            logger.debug("Checking '%s'", path)
            failure = await asyncio.to_thread(check, path)
            if failure:
                return {path: failure}
        return {}

    semaphore = asyncio.Semaphore(app_config.max_concurrent_files)

    async def check_async(path: str) -> Tuple[str, Optional[Failure]]:
        async with semaphore:
            logger.debug("Checking '%s'", path)
            return path, await asyncio.to_thread(check, path)

    failures: Dict[str, Failure] = {}
    tasks = [check_async(path) for path in file_paths]
    for coro in tqdm.as_completed(tasks, desc="Checking", unit="file", disable=None):
        path, failure = await coro
        if failure:
            failures[path] = failure
    return dict(sorted(failures.items()))


def apply_arguments(app_config: AppConfig, args: argparse.Namespace) -> AppConfig:
    """Let command line options take precedence over the configuration file."""
    if args.patterns:
        app_config.file_patterns = list(args.patterns)
    if args.encoding:
        app_config.encoding = args.encoding
    if args.fail_fast is not None:
        app_config.fail_fast = args.fail_fast
    if args.log_level:
        app_config.log_level = args.log_level.upper()
    return app_config


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    app_config = apply_arguments(load_app_config(args.config_file), args)
    logger = setup_logger(app_config.log_level, app_config.log_file_path, app_config.log_to_console)

    file_paths = expand_patterns(app_config.file_patterns)
    if not file_paths:
        logger.error("No files match %s", ', '.join(app_config.file_patterns))
        return EXIT_NO_FILES
    logger.info("Checking %d file(s)", len(file_paths))

    failures = asyncio.run(validate_files(file_paths, app_config.build_rules(), app_config))
    for failure in failures.values():
        logger.error("%s", failure.describe())

    if failures:
        if app_config.fail_fast:
            logger.error("Stopped at the first invalid file.")
        else:
            logger.error("%d of %d file(s) are invalid.", len(failures), len(file_paths))
        return EXIT_INVALID

    logger.info("All %d file(s) are valid.", len(file_paths))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

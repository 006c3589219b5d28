#!/usr/bin/env python
# Copyright 2026-present Kensho Technologies, LLC.
"""Write the conformance suite to a directory, as one JSON file per test plus the whole suite.

Used as: python -m firestore_resolver.conformance.tool -o <output directory> [--check]
"""
import argparse
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional, Sequence

from .encoding import encode_conformance_test
from .model import ConformanceTest
from .suite import check_conformance_suite, generate_conformance_suite


logger = logging.getLogger(__name__)

GENERATED_HEADER = "DO NOT MODIFY. This file was generated by firestore_resolver.conformance.tool."
SUITE_FILE_NAME = "test-suite.json"


def _write_json_file(path: str, contents: Dict[str, Any]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(contents, f, indent=2)
        f.write("\n")


def write_conformance_suite(tests: Sequence[ConformanceTest], output_dir: str) -> List[str]:
    """Write each test to <name>.json, and all tests to the suite file.

    Returns:
        list of the paths of the written files, the suite file last
    """
    os.makedirs(output_dir, exist_ok=True)
    written_paths: List[str] = []
    encoded_tests = []
    for test in tests:
        encoded_test = encode_conformance_test(test)
        encoded_tests.append(encoded_test)

        test_path = os.path.join(output_dir, f"{test.name}.json")
        _write_json_file(test_path, {"header": GENERATED_HEADER, "test": encoded_test})
        written_paths.append(test_path)

    suite_path = os.path.join(output_dir, SUITE_FILE_NAME)
    _write_json_file(suite_path, {"header": GENERATED_HEADER, "tests": encoded_tests})
    written_paths.append(suite_path)
    return written_paths


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate the Firestore conformance suite.")
    parser.add_argument(
        "-o", "--output-dir", required=True, help="directory to write the test files to"
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="also run every test against the resolvers, and fail if any of them does not pass",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Generate the suite, optionally check it, and write it out. Return the exit status."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args = parse_args(argv)

    tests = generate_conformance_suite().tests
    if args.check:
        failed_names = check_conformance_suite(tests)
        if failed_names:
            logger.error("%d of %d tests failed: %s", len(failed_names), len(tests), failed_names)
            return 1

    write_conformance_suite(tests, args.output_dir)
    logger.info("wrote %d tests to %s", len(tests), args.output_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())

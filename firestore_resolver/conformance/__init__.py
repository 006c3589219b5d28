# Copyright 2026-present Kensho Technologies, LLC.
"""Conformance vectors shared by every client of the resolution engine."""
from .encoding import encode_conformance_test  # noqa
from .json_data import parse_json_data, parse_json_value  # noqa
from .model import ConformanceTest, VectorKind  # noqa
from .registry import VectorRegistry  # noqa
from .suite import (  # noqa
    check_conformance_suite,
    check_conformance_test,
    generate_conformance_suite,
    run_conformance_test,
)

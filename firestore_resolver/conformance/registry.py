# Copyright 2026-present Kensho Technologies, LLC.
from typing import Dict, Iterator, List

from ..exceptions import ConformanceVectorError
from .model import ConformanceTest


# Vector names become file names, so they may not contain any of these characters.
INVALID_NAME_CHARACTERS = frozenset(" \t\n',")


class VectorRegistry:
    """The conformance tests of a suite, indexed by their unique names, in registration order."""

    def __init__(self) -> None:
        """Construct a new empty VectorRegistry."""
        self._tests: Dict[str, ConformanceTest] = {}

    def register(self, test: ConformanceTest) -> None:
        """Add a test to the registry, ensuring its name is usable as a unique file name."""
        name = test.name
        if not name or name.endswith("-"):
            raise ConformanceVectorError(
                f"Conformance test {test.description!r} is missing a name suffix: {name!r}"
            )
        invalid_characters = INVALID_NAME_CHARACTERS.intersection(name)
        if invalid_characters:
            raise ConformanceVectorError(
                f"Conformance test name {name!r} contains invalid characters "
                f"{sorted(invalid_characters)}"
            )
        if name in self._tests:
            raise ConformanceVectorError(f"Duplicate conformance test name {name!r}")
        self._tests[name] = test

    @property
    def tests(self) -> List[ConformanceTest]:
        """Return the registered tests, in registration order."""
        return list(self._tests.values())

    def __getitem__(self, name: str) -> ConformanceTest:
        """Return the test registered under the given name."""
        return self._tests[name]

    def __contains__(self, name: object) -> bool:
        """Return True if a test is registered under the given name."""
        return name in self._tests

    def __iter__(self) -> Iterator[str]:
        """Iterate over the registered names, in registration order."""
        return iter(self._tests)

    def __len__(self) -> int:
        """Return the number of registered tests."""
        return len(self._tests)

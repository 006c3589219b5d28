# Copyright 2026-present Kensho Technologies, LLC.
from typing import Any, Dict, Literal, Tuple


# A Firestore resource path, e.g. "projects/p/databases/(default)/documents/C/d".
ResourcePath = str

# The raw components of a field path, before validation.
FieldPathParts = Tuple[str, ...]

# Values are plain Python objects: None, bool, int, float, str, datetime, bytes, Reference,
# lists and dicts of values, and (in mutation input data only) the sentinel objects.
FieldValue = Any
FieldMap = Dict[str, FieldValue]

# The direction argument accepted by OrderBy clauses.
DirectionName = Literal["asc", "desc"]

# The comparison operators accepted by Where clauses.
OperatorName = Literal["<", "<=", "==", ">=", ">"]

# Copyright 2026-present Kensho Technologies, LLC.
from .resolver import resolve_mutation  # noqa
from .specs import (  # noqa
    MERGE_ALL,
    CreateSpec,
    DeleteSpec,
    MergeAll,
    MutationSpec,
    Precondition,
    SetSpec,
    UpdatePathsSpec,
    UpdateSpec,
)
from .writes import (  # noqa
    DeleteWrite,
    FieldTransform,
    TransformKind,
    TransformWrite,
    UpdateWrite,
    Write,
)

# Copyright 2026-present Kensho Technologies, LLC.
from .engine import (  # noqa
    WatchStream,
    WatchTargetRegistry,
    collect_snapshots,
    resolve_event,
)
from .events import (  # noqa
    NO_INDEX,
    ChangeKind,
    DocChange,
    DocumentChange,
    DocumentDelete,
    DocumentRemove,
    ExistenceFilter,
    Snapshot,
    TargetChange,
    TargetChangeType,
)
from .state import WatchTargetState  # noqa

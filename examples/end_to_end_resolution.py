from firestore_resolver import (
    SERVER_TIMESTAMP,
    DatabaseInfo,
    Document,
    UpdateSpec,
    WatchStream,
    WatchTargetRegistry,
    make_query_comparator,
    resolve_commit_request,
    resolve_query,
)
from firestore_resolver.query import OrderBy, Where
from firestore_resolver.values import timestamp_from_seconds
from firestore_resolver.watch import DocumentChange, TargetChange, TargetChangeType

database = DatabaseInfo("my-project")
collection_path = database.collection_path("cities")

# Resolve an Update call into the writes of a commit request.
update = UpdateSpec(
    database.document_path("cities", "SF"),
    {"population": 870000, "stats.updated": SERVER_TIMESTAMP},
)
commit_request = resolve_commit_request(update)

# Resolve a query, then watch its results change.
query = resolve_query(collection_path, [Where("population", ">", 100000), OrderBy("population")])
stream = WatchStream(WatchTargetRegistry(), 1, make_query_comparator(query))

stream.enqueue(TargetChange(TargetChangeType.ADD, (1,)))
stream.enqueue(
    DocumentChange(
        Document(
            database.document_path("cities", "SF"),
            {"population": 870000},
            update_time=timestamp_from_seconds(1),
        ),
        target_ids=(1,),
    )
)
stream.enqueue(TargetChange(TargetChangeType.CURRENT, (1,)))
stream.enqueue(TargetChange(TargetChangeType.NO_CHANGE, read_time=timestamp_from_seconds(2)))

for snapshot in stream.drain():
    print([document.name for document in snapshot.documents])

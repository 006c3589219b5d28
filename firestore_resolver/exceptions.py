# Copyright 2026-present Kensho Technologies, LLC.
class FirestoreResolutionError(Exception):
    """Generic error when resolving Firestore mutations, queries or watch streams."""


class FirestoreValidationError(FirestoreResolutionError):
    """Exception raised when the arguments to a resolver are rejected before any output is built."""


class MalformedPathError(FirestoreValidationError):
    """Exception raised when a field path or resource path cannot be used.

    For example:
    - the path or one of its components is empty;
    - the same field path is supplied more than once;
    - one field path is a prefix of another field path in the same call;
    - an Update key contains characters that are not allowed outside of back-tick quoting.
    """


class SentinelMisuseError(FirestoreValidationError):
    """Exception raised when a sentinel value appears where it is not allowed.

    For example:
    - Delete in a Create call, or in a Set call without a merge option;
    - Delete nested inside a map value of an Update call;
    - any sentinel inside an array value, or inside the elements of ArrayUnion/ArrayRemove;
    - any sentinel inside a query filter value or cursor value.
    """


class PreconditionConflictError(FirestoreValidationError):
    """Exception raised when a precondition is redundant or contradictory for the call."""


class CursorMismatchError(FirestoreValidationError):
    """Exception raised when a query cursor cannot be aligned with the query's ordering.

    For example:
    - the cursor has a different number of values than there are explicit orderings;
    - the cursor's document snapshot belongs to a different collection than the query;
    - the document snapshot has no value for one of the ordering fields.
    """


class InvalidQueryArgumentError(FirestoreValidationError):
    """Exception raised when a query clause has an unsupported operator, direction or number."""


class WatchProtocolError(FirestoreResolutionError):
    """Exception raised when the change stream violates the watch protocol.

    The subscription that observed it must be torn down; retrying is the transport's concern.
    """


class WatchInconsistencyError(FirestoreResolutionError):
    """Exception raised when an existence filter disagrees with the locally-tracked document set."""


class ConformanceVectorError(FirestoreResolutionError):
    """Exception raised when a conformance vector is malformed or registered under a bad name."""

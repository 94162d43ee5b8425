"""MongoDB index definitions and reconciliation.

Indexes are declared per collection and reconciled at startup: an existing
index that shares a name or key spec with a declared one but differs from it
is dropped and recreated.
"""

from dataclasses import dataclass, field
from logging import getLogger

from pymongo.collection import Collection
from pymongo.errors import PyMongoError

logger = getLogger(__name__)


@dataclass(frozen=True)
class IndexSpec:
    name: str
    keys: list[tuple[str, int]]
    options: dict = field(default_factory=dict)


USER_INDEXES = [
    IndexSpec('idx_users_email', [('email', 1)], {'unique': True}),
    IndexSpec('idx_users_google_id', [('google_id', 1)], {'sparse': True}),
    IndexSpec('idx_users_created_at', [('created_at', -1)]),
]


def _conflicts(spec: IndexSpec, existing: dict) -> list[str]:
    """Names of existing indexes that clash with `spec`."""
    wanted_keys = dict(spec.keys)
    clashes = []
    for idx_name, idx_info in existing.items():
        if idx_name == '_id_':
            continue
        same_name = idx_name == spec.name
        same_keys = dict(idx_info.get('key', [])) == wanted_keys
        if same_name != same_keys:
            clashes.append(idx_name)
        elif same_name and any(idx_info.get(k) != v for k, v in spec.options.items()):
            clashes.append(idx_name)
    return clashes


def reconcile_indexes(collection: Collection, specs: list[IndexSpec]) -> bool:
    """Create declared indexes, replacing conflicting ones. Return True if all succeeded."""
    ok = True
    for spec in specs:
        try:
            for idx_name in _conflicts(spec, collection.index_information()):
                logger.warning("Dropping conflicting index", extra={"index": idx_name})
                collection.drop_index(idx_name)
            collection.create_index(spec.keys, name=spec.name, **spec.options)
        except PyMongoError as e:
            logger.error("Failed to create index", extra={"index": spec.name, "error": str(e)})
            ok = False
    return ok


def ensure_all_indexes(db) -> bool:
    """Ensure indexes for all collections. Called at app startup."""
    from adapter.mongodb.user_repository import MongoUserRepository

    return MongoUserRepository(db).ensure_indexes()

"""Snapshot codec: export a model subtree and merge it back by identifier.

Snapshot layout (JSON-serializable):

    {
        "id": "...", "cid": "c12", "attrs": {...},
        "collections": {"posts": {"id": "...", "models": [<snapshot>, ...]}},
        "models": {"author": <snapshot>},
    }

``collections`` and ``models`` are present only for models that own
children. ``cid`` is a local correlation tag and is not expected to match
across processes.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, NotRequired, TypedDict

from treesync.core.identity import ID_ATTRIBUTE

if TYPE_CHECKING:
    from treesync.tree.model import Model

logger = logging.getLogger(__name__)


class CollectionSnapshot(TypedDict):
    id: str | None
    models: list[ModelSnapshot]


class ModelSnapshot(TypedDict):
    id: str | None
    cid: str
    attrs: dict[str, Any]
    collections: NotRequired[dict[str, CollectionSnapshot]]
    models: NotRequired[dict[str, ModelSnapshot]]


class SnapshotMismatchError(ValueError):
    """Raised by strict import when a snapshot names a child the local tree lacks."""

    pass


def export_snapshot(model: Model, recurse: bool = True) -> ModelSnapshot:
    """Export a model and, by default, everything it owns.

    Back-references (owning collection, parent) are never followed, so the
    result is finite and cycle-free.

    Args:
        model: Subtree root.
        recurse: Include child collections and models.

    Returns:
        Snapshot dict with shallow-copied attributes.
    """
    snapshot: ModelSnapshot = {"id": model.id, "cid": model.cid, "attrs": model.attributes}
    logger.debug(f"Exporting {type(model).__name__} id={model.id}")
    if not recurse:
        return snapshot

    collections = model.collections
    if collections:
        snapshot["collections"] = {
            label: {"id": collection.id, "models": [export_snapshot(m) for m in collection]}
            for label, collection in collections.items()
        }
    children = model.models
    if children:
        snapshot["models"] = {label: export_snapshot(child) for label, child in children.items()}
    return snapshot


def _snapshot_id(snapshot: Mapping[str, Any]) -> str | None:
    identifier = snapshot.get("id")
    if identifier is None:
        identifier = (snapshot.get("attrs") or {}).get(ID_ATTRIBUTE)
    return identifier


def _missing(model: Model, kind: str, label: str, strict: bool) -> None:
    message = f"Snapshot names {kind} {label!r} which {type(model).__name__} does not own"
    if strict:
        raise SnapshotMismatchError(message)
    logger.warning(message + "; skipping")


def import_snapshot(
    model: Model, snapshot: Mapping[str, Any], silent: bool = False, strict: bool = False
) -> Model:
    """Merge a snapshot into an existing model subtree.

    Attributes are applied to ``model``. Each child collection adopts the
    snapshot's collection identifier; each listed member is matched by
    identifier against the local collection, or built fresh, filled from its
    snapshot and then appended. Members not listed are left untouched, so
    re-importing the same snapshot changes nothing.

    Date strings are parsed back into dates for ``date``-tagged attributes.
    Silent merges raise no change events, so radio groups are settled
    explicitly afterwards: the last listed member the snapshot marks true
    keeps each radio attribute and every other member is cleared.

    Args:
        model: Local subtree root.
        snapshot: Snapshot produced by ``export_snapshot``.
        silent: Apply without change/add events, so a full reconciliation
            does not flood the transport.
        strict: Raise instead of skipping unknown child labels.

    Returns:
        ``model``.

    Raises:
        SnapshotMismatchError: If strict and the snapshot names an unknown child.
        AttributeTypeError: If snapshot attributes violate a ``required`` schema.
    """
    attrs = dict(snapshot.get("attrs") or {})
    identifier = _snapshot_id(snapshot)
    if identifier is not None:
        attrs.setdefault(ID_ATTRIBUTE, identifier)
    model.set(model.parse_wire_attributes(attrs), silent=silent)

    collections = model.collections
    for label, collection_snapshot in (snapshot.get("collections") or {}).items():
        collection = collections.get(label)
        if collection is None:
            _missing(model, "collection", label, strict)
            continue
        if collection_snapshot.get("id") is not None:
            collection.id = collection_snapshot["id"]
        holders: dict[str, Model] = {}
        for child_snapshot in collection_snapshot.get("models") or ():
            child = collection.get(_snapshot_id(child_snapshot))
            if child is None:
                child = collection.new_model()
                import_snapshot(child, child_snapshot, silent=silent, strict=strict)
                collection.add(child, silent=silent)
            else:
                import_snapshot(child, child_snapshot, silent=silent, strict=strict)
            claimed = child_snapshot.get("attrs") or {}
            for name in collection.radio_groups:
                if claimed.get(name):
                    holders[name] = child
        collection.settle_radio_groups(holders, silent=silent)

    children = model.models
    for label, child_snapshot in (snapshot.get("models") or {}).items():
        child = children.get(label)
        if child is None:
            _missing(model, "model", label, strict)
            continue
        import_snapshot(child, child_snapshot, silent=silent, strict=strict)

    logger.debug(f"Imported snapshot into {type(model).__name__} id={model.id}")
    return model

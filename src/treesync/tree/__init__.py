"""Document tree: nodes, bubbling, snapshots and the authorization gate.

Architecture Note:
    tree/ is a stateful layer. Nodes hold attributes and ordered members,
    raise local events on mutation and re-emit them toward the root as
    publish messages. The gate in tree/gate.py depends only on capability
    protocols, never on the concrete node classes.
"""

from treesync.tree.codec import (
    CollectionSnapshot,
    ModelSnapshot,
    SnapshotMismatchError,
    export_snapshot,
    import_snapshot,
)
from treesync.tree.collection import Collection
from treesync.tree.gate import (
    Addable,
    CapabilityContractError,
    DeniedHandler,
    Editable,
    Movable,
    safe_add,
    safe_call,
    safe_delete,
    safe_move,
    safe_set,
)
from treesync.tree.model import Model
from treesync.tree.node import Node

__all__ = [
    # Nodes
    "Node",
    "Model",
    "Collection",
    # Snapshots
    "ModelSnapshot",
    "CollectionSnapshot",
    "SnapshotMismatchError",
    "export_snapshot",
    "import_snapshot",
    # Gate
    "Editable",
    "Addable",
    "Movable",
    "DeniedHandler",
    "CapabilityContractError",
    "safe_set",
    "safe_delete",
    "safe_add",
    "safe_move",
    "safe_call",
]

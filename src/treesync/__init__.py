"""TreeSync: observable document trees replicated over a message transport.

Usage:
    from treesync import Collection, Model, SyncSession, CommandRouter

    class Post(Model):
        client_editable = ("title",)

        def can_edit(self, requester) -> bool:
            return self.collection.parent.author is requester

    class Posts(Collection):
        model_class = Post

    class App(Model):
        def __init__(self, attributes=None, /, **kwargs):
            super().__init__(attributes, **kwargs)
            self.add_child_collection("posts", Posts)
            self.add_child_model("author", Model)

    app = App()
    session = SyncSession(app, transport)
    app.posts.add({"title": "hello"})  # transport receives {"event": "add", ...}

    router = CommandRouter()
    router.handle({"event": "set", "id": post_id, "change": {"title": "x"}}, user)
"""

__version__ = "0.1.0"

# Configuration
from treesync.config import SyncSettings

# Core primitives
from treesync.core import (
    ID_ATTRIBUTE,
    AddCommand,
    AddEvent,
    AttributeTypeError,
    BaseCommand,
    ChangeEvent,
    Channel,
    Command,
    DeleteCommand,
    EventKind,
    IdSource,
    MethodCommand,
    MoveCommand,
    MoveEvent,
    RemoveEvent,
    SequentialIdSource,
    SetCommand,
    TypeTag,
    UnknownTypeTagError,
    UuidIdSource,
    event_from_message,
    parse_command,
)

# Registry
from treesync.registry import (
    LocalRegistry,
    Registry,
    get_registry,
    registry_from_settings,
    set_registry,
    use_registry,
)

# Transport boundary
from treesync.sync import (
    CommandRouter,
    CommandSender,
    Replica,
    SyncSession,
    Transport,
    decode,
    encode,
)

# Document tree
from treesync.tree import (
    CapabilityContractError,
    Collection,
    CollectionSnapshot,
    DeniedHandler,
    Model,
    ModelSnapshot,
    Node,
    SnapshotMismatchError,
    export_snapshot,
    import_snapshot,
)

__all__ = [
    # Version
    "__version__",
    # Configuration
    "SyncSettings",
    # Core
    "ID_ATTRIBUTE",
    "IdSource",
    "UuidIdSource",
    "SequentialIdSource",
    "TypeTag",
    "AttributeTypeError",
    "UnknownTypeTagError",
    "Channel",
    "EventKind",
    "ChangeEvent",
    "AddEvent",
    "RemoveEvent",
    "MoveEvent",
    "event_from_message",
    "BaseCommand",
    "Command",
    "SetCommand",
    "DeleteCommand",
    "AddCommand",
    "MoveCommand",
    "MethodCommand",
    "parse_command",
    # Registry
    "Registry",
    "LocalRegistry",
    "get_registry",
    "set_registry",
    "use_registry",
    "registry_from_settings",
    # Tree
    "Node",
    "Model",
    "Collection",
    "ModelSnapshot",
    "CollectionSnapshot",
    "SnapshotMismatchError",
    "CapabilityContractError",
    "DeniedHandler",
    "export_snapshot",
    "import_snapshot",
    # Sync
    "Transport",
    "SyncSession",
    "CommandRouter",
    "Replica",
    "CommandSender",
    "encode",
    "decode",
]

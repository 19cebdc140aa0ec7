"""Transport boundary: outbound sessions, inbound routing and observer replicas."""

from treesync.sync.protocol import Transport
from treesync.sync.remote import CommandSender
from treesync.sync.replica import Replica
from treesync.sync.router import CommandRouter
from treesync.sync.session import SyncSession
from treesync.sync.wire import decode, encode

__all__ = [
    "Transport",
    "SyncSession",
    "CommandRouter",
    "Replica",
    "CommandSender",
    "encode",
    "decode",
]

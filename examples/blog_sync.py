"""Authoritative blog and one observer, connected by in-memory queues.

Run with: python -m examples.blog_sync
"""

import logging
from collections import deque

from treesync import (
    CommandRouter,
    CommandSender,
    LocalRegistry,
    Replica,
    SyncSession,
    decode,
    encode,
    use_registry,
)

from .blog import App


class QueueTransport:
    """Encodes messages onto a queue the other side drains."""

    def __init__(self):
        self.queue: deque[bytes] = deque()

    def send(self, message) -> None:
        self.queue.append(encode(message))

    def drain(self):
        while self.queue:
            yield decode(self.queue.popleft())


def report(kind, requester, *context) -> None:
    print(f"  denied {kind} for {requester!r}")


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    # Authoritative side
    app = App()
    app.author.set(name="henrik")
    post = app.posts.add({"title": "Hello", "published": False})
    post.comments.add({"subject": "first", "body": "nice post"})

    downstream, upstream = QueueTransport(), QueueTransport()
    session = SyncSession(app, downstream)
    router = CommandRouter(registry=app.registry)

    # Observer side
    with use_registry(LocalRegistry(authoritative=False)):
        mirror = App()
    replica = Replica(mirror)
    replica.load(decode(encode(session.snapshot())))
    sender = CommandSender(upstream)

    print("Observer requests edits as the author")
    sender.set(mirror.posts[0], {"title": "Hello, world", "views": 1000})
    sender.toggle(mirror.posts[0], "published")
    sender.add(mirror.posts, {"title": "Second post"})
    sender.call(mirror.author, "dance")
    for command in upstream.drain():
        router.handle(command, app.author, on_denied=report)
    for message in downstream.drain():
        replica.apply(message)

    print("Observer tree after replay:")
    for mirrored in mirror.posts:
        print(f"  {mirrored.id}: {mirrored.attributes}")
    print(f"  author: {mirror.author.attributes}")
    print(f"Messages published: {session.sent}")


if __name__ == "__main__":
    main()

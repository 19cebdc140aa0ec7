"""Shared test fixtures."""

import sys
from types import SimpleNamespace

import pytest

# Ensure src is in path
sys.path.insert(0, "src")

from treesync import Collection, LocalRegistry, Model, SequentialIdSource, set_registry


class Person(Model):
    exposed_methods = ("dance",)

    def can_edit(self, requester) -> bool:
        return requester is self

    def dance(self) -> None:
        self.set(body_movin="dancin'")

    def stop_dancing(self) -> None:
        self.unset("body_movin")


class Comment(Model):
    pass


class Comments(Collection):
    model_class = Comment

    def can_move(self, requester) -> bool:
        return self.parent.collection.parent.author is requester


class Post(Model):
    required = {"title": "string"}
    client_editable = ("title",)

    def __init__(self, attributes=None, /, **kwargs):
        super().__init__(attributes, **kwargs)
        self.add_child_collection("comments", Comments)

    def can_edit(self, requester) -> bool:
        return self.collection is not None and self.collection.parent.author is requester


class Posts(Collection):
    model_class = Post

    def can_add(self, requester) -> bool:
        return self.parent.author is requester


class App(Model):
    def __init__(self, attributes=None, /, **kwargs):
        super().__init__(attributes, **kwargs)
        self.add_child_collection("posts", Posts)
        self.add_child_model("author", Person)


def build_app() -> App:
    """Author, one post, one comment on that post."""
    app = App()
    app.author.set(name="henrik")
    post = app.posts.add({"title": "some post"})
    post.comments.add({"subject": "first", "body": "first comment"})
    return app


class RecordingTransport:
    """Transport that keeps every message it is asked to send."""

    def __init__(self):
        self.messages = []

    def send(self, message):
        self.messages.append(message)


class Denials:
    """on_denied sink that records ``(kind, requester, *context)`` tuples."""

    def __init__(self):
        self.calls = []

    def __call__(self, *args):
        self.calls.append(args)

    def __len__(self):
        return len(self.calls)


@pytest.fixture(autouse=True)
def registry():
    """Fresh default registry with predictable identifiers for every test."""
    registry = LocalRegistry(id_source=SequentialIdSource(prefix="n"))
    previous = set_registry(registry)
    yield registry
    set_registry(previous)


@pytest.fixture
def blog():
    """Blog node types: App owns posts and an author; posts own comments."""
    return SimpleNamespace(
        Person=Person,
        Comment=Comment,
        Comments=Comments,
        Post=Post,
        Posts=Posts,
        App=App,
        build_app=build_app,
    )


@pytest.fixture
def app():
    return build_app()


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def denials():
    return Denials()


def strip_cids(snapshot):
    """Snapshot without local correlation tags, for cross-registry comparison."""
    stripped = {key: value for key, value in snapshot.items() if key != "cid"}
    if "collections" in snapshot:
        stripped["collections"] = {
            label: {"id": c["id"], "models": [strip_cids(m) for m in c["models"]]}
            for label, c in snapshot["collections"].items()
        }
    if "models" in snapshot:
        stripped["models"] = {label: strip_cids(m) for label, m in snapshot["models"].items()}
    return stripped


@pytest.fixture
def without_cids():
    return strip_cids

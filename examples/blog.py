"""A small blog document: an author, posts, and comments on each post."""

from treesync import Collection, Model


class Person(Model):
    required = {"name": "string"}
    exposed_methods = ("dance",)

    def can_edit(self, requester) -> bool:
        return requester is self

    def dance(self) -> None:
        self.set(body_movin="dancin'")


class Comment(Model):
    required = {"subject": "string", "body": "string"}


class Comments(Collection):
    model_class = Comment
    radio_properties = ("pinned",)

    def can_add(self, requester) -> bool:
        return requester is not None

    def can_move(self, requester) -> bool:
        return self.parent.collection.parent.author is requester


class Post(Model):
    required = {"title": "string", "published": "boolean"}
    client_editable = ("title", "published")

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

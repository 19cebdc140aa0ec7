"""Tests for Model attributes, validation and child ownership."""

import pytest

from treesync import AttributeTypeError, CapabilityContractError, Collection, Model


class Task(Model):
    required = {"title": "string", "done": "boolean", "estimate": "number"}


def record(channel):
    calls = []
    channel.subscribe(lambda *args: calls.append(args))
    return calls


class TestAttributes:
    def test_initial_attributes_are_set_silently(self):
        task = Task({"title": "write"}, done=False)

        assert task.get("title") == "write"
        assert task.get("done") is False
        assert task.has("title")
        assert not task.has("estimate")

    def test_attributes_returns_a_copy(self):
        task = Task(title="write")
        task.attributes["title"] = "changed"

        assert task.get("title") == "write"

    def test_set_reports_only_changed_keys(self):
        task = Task(title="write", done=False)
        changed = record(task.changed)

        result = task.set(title="write", done=True)

        assert result == {"done": True}
        assert changed == [(task, {"done": True})]

    def test_setting_current_value_raises_no_event(self):
        task = Task(title="write")
        changed = record(task.changed)

        assert task.set(title="write") == {}
        assert task.set() == {}
        assert changed == []

    def test_silent_set_commits_without_event(self):
        task = Task()
        changed = record(task.changed)

        task.set(title="quiet", silent=True)

        assert task.get("title") == "quiet"
        assert changed == []

    def test_unset_removes_attribute(self):
        task = Task(title="write")
        changed = record(task.changed)

        assert task.unset("title")
        assert not task.unset("title")
        assert task.get("title") is None
        assert changed == [(task, {"title": None})]

    def test_identifier_cannot_be_unset(self):
        with pytest.raises(ValueError, match="identifier"):
            Task().unset("id")

    def test_toggle_flips_boolean(self):
        task = Task(done=False)

        task.toggle("done")
        assert task.get("done") is True
        task.toggle("done")
        assert task.get("done") is False

    def test_toggle_treats_unset_as_false(self):
        task = Task()

        task.toggle("done")

        assert task.get("done") is True


class TestValidation:
    def test_wrong_type_is_rejected(self):
        with pytest.raises(AttributeTypeError, match="The 'title' attribute of a 'task'"):
            Task(title=5)

    def test_failed_batch_applies_nothing(self):
        task = Task(title="before", estimate=1)
        changed = record(task.changed)

        with pytest.raises(AttributeTypeError):
            task.set(title="after", estimate="two")

        assert task.get("title") == "before"
        assert task.get("estimate") == 1
        assert changed == []

    def test_undeclared_attributes_are_unchecked(self):
        task = Task(notes=["anything", 1])

        assert task.get("notes") == ["anything", 1]

    def test_ensure_required_checks_presence(self):
        with pytest.raises(AttributeTypeError, match="You gave me None"):
            Task(title="only title").ensure_required()

        Task(title="t", done=True, estimate=2.5).ensure_required()

    def test_check_type_names_model_type(self):
        with pytest.raises(AttributeTypeError, match="of a 'task'"):
            Task().check_type("date", "yesterday", "due")

    def test_type_name_defaults_to_lowercase_class_name(self):
        class Explicit(Model):
            type_name = "custom"

        assert Task.type_name == "task"
        assert Explicit.type_name == "custom"


class TestCapabilityContract:
    def test_whitelist_without_can_edit_fails_at_definition(self):
        with pytest.raises(CapabilityContractError, match="can_edit"):

            class Careless(Model):
                client_editable = ("title",)

    def test_exposed_method_must_exist(self):
        with pytest.raises(CapabilityContractError, match="launch"):

            class Rocket(Model):
                exposed_methods = ("launch",)

                def can_edit(self, requester):
                    return True

    def test_inherited_can_edit_satisfies_contract(self):
        class Base(Model):
            def can_edit(self, requester):
                return True

        class Child(Base):
            client_editable = ("title",)

        assert Child.client_editable == frozenset({"title"})


class TestChildren:
    def test_children_are_attributes_with_parent(self, app):
        assert app.collections == {"posts": app.posts}
        assert app.models == {"author": app.author}
        assert app.posts.parent is app
        assert app.author.parent is app

    def test_children_share_parent_registry(self, app, registry):
        assert app.posts.registry is registry
        assert registry.lookup(app.posts.id) is app.posts

    def test_duplicate_label_is_rejected(self, app):
        with pytest.raises(ValueError, match="already has a child"):
            app.add_child_model("author", Model)

    def test_label_cannot_shadow_attribute(self):
        with pytest.raises(ValueError, match="shadow"):
            Model().add_child_collection("set", Collection)

    def test_walk_visits_owned_nodes_depth_first(self, app):
        post = app.posts[0]
        comment = post.comments[0]

        assert list(app.walk()) == [app, app.posts, post, post.comments, comment, app.author]

"""
Tests for the model registry and model bridge

Covers override-or-core selection and how access policies move onto the
request context.
"""

import copy
from types import SimpleNamespace

import pytest

from minerva.bridge.bridge import apply_access_policy, bridge_model
from minerva.bridge.context import RequestContext
from minerva.bridge.registry import ModelRegistry
from minerva.libraries.gallery.models import GalleryBlockModel
from minerva.models import BLOCKS_ACCESS, BlockModel, PageModel, UserModel
from minerva.security.access import AccessRule


class PlainBlockModel(BlockModel):
    """An override that leaves the access policy alone."""

    library = "plain"


class TestModelRegistry:
    def test_core_lookup(self, registry):
        assert registry.core("Block") is BlockModel
        assert registry.core("Page") is PageModel

    def test_resolve_prefers_override(self, registry):
        assert registry.resolve("Block", "gallery") is GalleryBlockModel

    def test_resolve_falls_back_to_core(self, registry):
        assert registry.resolve("Block", "missing") is BlockModel
        assert registry.resolve("Page", "gallery") is PageModel
        assert registry.resolve("Block", None) is BlockModel
        assert registry.resolve("Block", "") is BlockModel

    def test_unknown_resource_type(self, registry):
        assert registry.resolve("Comment", "gallery") is None
        assert not registry.knows("Comment")
        assert registry.knows("Block")

    def test_override_must_belong_to_library(self):
        reg = ModelRegistry()
        with pytest.raises(ValueError):
            reg.register_override("blog", GalleryBlockModel)

    def test_libraries(self, registry):
        assert registry.libraries() == {"gallery"}

    def test_unregister_library(self, registry):
        registry.unregister_library("gallery")
        assert registry.resolve("Block", "gallery") is BlockModel

    def test_qualified_name(self):
        assert ModelRegistry.qualified_name("Block", "gallery") == "libraries.gallery.models.Block"


class TestBridgeModel:
    @pytest.mark.parametrize("library", [None, "", "nonexistent"])
    def test_core_model_without_usable_override(self, registry, library):
        model = bridge_model("Block", library, registry=registry)
        assert type(model) is BlockModel

    def test_override_model(self, registry):
        model = bridge_model("Block", "gallery", registry=registry)
        assert type(model) is GalleryBlockModel
        assert model.library == "gallery"

    def test_store_bound_to_instance(self, registry):
        sentinel = object()
        model = bridge_model("Block", "gallery", store=sentinel, registry=registry)
        assert model.store is sentinel

    def test_no_model_for_unknown_resource_type(self, registry):
        assert bridge_model("Comment", None, registry=registry) is None

    def test_fresh_instance_per_call(self, registry):
        assert bridge_model("Block", "gallery", registry=registry) is not bridge_model(
            "Block", "gallery", registry=registry
        )


class TestApplyAccessPolicy:
    def _context(self):
        return RequestContext(controller="blocks", action="update", access_policy=copy.deepcopy(BLOCKS_ACCESS))

    def test_override_policy_replaces_controller_policy(self):
        context = self._context()
        apply_access_policy(context, GalleryBlockModel())
        assert context.access_policy == GalleryBlockModel.access
        assert context.access_policy["update"] == [AccessRule("allowAuthenticated", "/users/login")]

    def test_policy_is_copied_not_shared(self):
        context = self._context()
        apply_access_policy(context, GalleryBlockModel())
        context.access_policy["update"].append(AccessRule("denyAll"))
        assert AccessRule("denyAll") not in GalleryBlockModel.access["update"]

    def test_model_without_policy_leaves_context_unchanged(self):
        context = self._context()
        before = copy.deepcopy(context.access_policy)
        apply_access_policy(context, PlainBlockModel())
        assert context.access_policy == before

    def test_core_model_leaves_context_unchanged(self):
        context = self._context()
        apply_access_policy(context, BlockModel())
        assert context.access_policy == BLOCKS_ACCESS

    def test_controller_default_never_modified(self):
        snapshot = copy.deepcopy(BLOCKS_ACCESS)
        apply_access_policy(self._context(), GalleryBlockModel())
        assert BLOCKS_ACCESS == snapshot

    def test_none_model(self):
        context = self._context()
        assert apply_access_policy(context, None) is context
        assert context.access_policy == BLOCKS_ACCESS


class TestWritePermissions:
    def test_restricted_fields_dropped(self):
        data = UserModel().permitted({"username": "eve", "role": "administrator", "active": False}, {"role": "user"})
        assert data == {"username": "eve"}

    def test_restricted_fields_kept_for_allowed_user(self):
        data = {"role": "manager", "active": False}
        assert UserModel().permitted(data, {"role": "administrator"}) == data

    def test_models_without_restrictions(self):
        data = {"title": "Hero", "role": "administrator"}
        assert BlockModel().permitted(data, None) == data

    def test_users_modify_only_themselves(self):
        record = SimpleNamespace(username="bob")
        model = UserModel()
        assert model.can_modify(record, {"username": "bob", "role": "user"})
        assert not model.can_modify(record, {"username": "eve", "role": "editor"})
        assert not model.can_modify(record, None)
        assert model.can_modify(record, {"username": "mia", "role": "manager"})

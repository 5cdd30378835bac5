"""
Tests for the dispatch interceptor

Exercises the per-action policy: which actions look up the owning library,
which model ends up on the context, and which access policy applies.
"""

import asyncio
import copy

import pytest

from minerva.bridge.chain import FilterChain
from minerva.bridge.context import RequestContext
from minerva.bridge.interceptor import DispatchInterceptor
from minerva.libraries.gallery.models import GalleryBlockModel
from minerva.models import BLOCKS_ACCESS, PAGES_ACCESS, BlockModel, PageModel
from utils.fakes import FakeStore, make_record


@pytest.fixture
def fake_store():
    return FakeStore(
        {
            "Block": [make_record("gallery-home", library="gallery"), make_record("sidebar")],
            "Page": [make_record("about", library="gallery")],
        }
    )


@pytest.fixture
def interceptor(registry):
    return DispatchInterceptor(registry=registry)


def make_context(store, action, controller="blocks", url=None, library=None, access=BLOCKS_ACCESS):
    return RequestContext(
        controller=controller,
        action=action,
        url=url,
        library=library,
        access_policy=copy.deepcopy(access),
        store=store,
    )


class TestResourceType:
    async def test_resource_type_from_controller(self, interceptor, fake_store):
        context = await interceptor(make_context(fake_store, "index"))
        assert context.resource_type == "Block"

    async def test_camel_case_controller(self, interceptor, fake_store):
        context = await interceptor(make_context(fake_store, "index", controller="Pages", access=PAGES_ACCESS))
        assert context.resource_type == "Page"
        assert type(context.model) is PageModel


class TestSkipBridging:
    async def test_no_library_and_no_slug_uses_core(self, interceptor, fake_store):
        context = await interceptor(make_context(fake_store, "create"))
        assert type(context.model) is BlockModel
        assert context.access_policy == BLOCKS_ACCESS
        assert fake_store.lookups == 0

    async def test_unknown_resource_type_is_not_an_error(self, interceptor, fake_store):
        context = await interceptor(make_context(fake_store, "read", controller="comments", url="x"))
        assert context.resource_type == "Comment"
        assert context.model is None
        assert fake_store.lookups == 0


class TestCreateAndIndex:
    @pytest.mark.parametrize("action", ["create", "index"])
    async def test_routed_library_bridges_override(self, interceptor, fake_store, action):
        context = await interceptor(make_context(fake_store, action, library="gallery"))
        assert type(context.model) is GalleryBlockModel
        assert context.access_policy == GalleryBlockModel.access
        assert fake_store.lookups == 0

    @pytest.mark.parametrize("action", ["create", "index"])
    async def test_slug_never_triggers_lookup(self, interceptor, fake_store, action):
        context = await interceptor(make_context(fake_store, action, url="gallery-home"))
        assert type(context.model) is BlockModel
        assert context.library is None
        assert fake_store.lookups == 0

    async def test_library_without_override_keeps_core(self, interceptor, fake_store):
        context = await interceptor(make_context(fake_store, "create", library="blog"))
        assert type(context.model) is BlockModel
        assert context.library == "blog"
        assert context.access_policy == BLOCKS_ACCESS


class TestReadUpdateDelete:
    @pytest.mark.parametrize("action", ["read", "update", "delete"])
    async def test_library_resolved_from_record(self, interceptor, fake_store, action):
        context = await interceptor(make_context(fake_store, action, url="gallery-home"))
        assert context.library == "gallery"
        assert context.library_resolved
        assert type(context.model) is GalleryBlockModel
        assert context.access_policy == GalleryBlockModel.access
        assert fake_store.lookups == 1

    async def test_core_record(self, interceptor, fake_store):
        context = await interceptor(make_context(fake_store, "read", url="sidebar"))
        assert context.library is None
        assert type(context.model) is BlockModel
        assert context.access_policy == BLOCKS_ACCESS

    async def test_missing_record_behaves_as_core(self, interceptor, fake_store):
        context = await interceptor(make_context(fake_store, "update", url="nope"))
        assert context.library is None
        assert type(context.model) is BlockModel

    async def test_explicit_library_skips_lookup(self, interceptor, fake_store):
        context = await interceptor(make_context(fake_store, "read", url="sidebar", library="gallery"))
        assert context.library == "gallery"
        assert type(context.model) is GalleryBlockModel
        assert fake_store.lookups == 0

    async def test_record_owned_by_library_without_override(self, interceptor, fake_store):
        context = await interceptor(
            make_context(fake_store, "read", controller="pages", url="about", access=PAGES_ACCESS)
        )
        assert context.library == "gallery"
        assert type(context.model) is PageModel
        assert context.access_policy == PAGES_ACCESS


class TestOtherActions:
    async def test_no_bridging_for_unlisted_action(self, interceptor, fake_store):
        context = await interceptor(make_context(fake_store, "view", url="gallery-home", library="gallery"))
        assert type(context.model) is BlockModel
        assert context.access_policy == BLOCKS_ACCESS
        assert fake_store.lookups == 0


class TestResolveOnce:
    async def test_rerun_on_same_context_does_not_requery(self, interceptor, fake_store):
        chain = FilterChain([interceptor, interceptor])
        context = await chain.run(make_context(fake_store, "read", url="gallery-home"))
        assert context.library == "gallery"
        assert fake_store.lookups == 1

    async def test_not_found_is_cached_too(self, interceptor, fake_store):
        context = make_context(fake_store, "read", url="nope")
        await interceptor(context)
        await interceptor(context)
        assert context.library is None
        assert fake_store.lookups == 1


class TestIdempotence:
    @pytest.mark.parametrize(
        "action,url,library",
        [
            ("read", "gallery-home", None),
            ("update", "sidebar", None),
            ("create", None, "gallery"),
            ("index", None, None),
        ],
    )
    async def test_identical_inputs_identical_results(self, interceptor, fake_store, action, url, library):
        first = await interceptor(make_context(fake_store, action, url=url, library=library))
        second = await interceptor(make_context(fake_store, action, url=url, library=library))
        assert first.library == second.library
        assert type(first.model) is type(second.model)
        assert first.access_policy == second.access_policy


class TestRequestIsolation:
    async def test_concurrent_requests_keep_their_own_policy(self, interceptor, fake_store):
        gallery, core = await asyncio.gather(
            interceptor(make_context(fake_store, "update", url="gallery-home")),
            interceptor(make_context(fake_store, "update", url="sidebar")),
        )
        assert gallery.access_policy == GalleryBlockModel.access
        assert core.access_policy == BLOCKS_ACCESS
        assert gallery.access_policy is not core.access_policy

    async def test_controller_default_untouched(self, interceptor, fake_store):
        snapshot = copy.deepcopy(BLOCKS_ACCESS)
        await interceptor(make_context(fake_store, "update", url="gallery-home"))
        assert BLOCKS_ACCESS == snapshot

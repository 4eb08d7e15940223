"""Tests for symbol classification and the dispatch cache."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

import pyoshka.rendering.core as rendering_core
from pyoshka import Environment, Handler, HandlerKind, Rendering
from pyoshka.rendering.dispatch import classify, tag_name

SiteName = "pyoshka"


class TestClassify:
    """classify() decides the handler for a non-local name."""

    def test_lowercase_is_tag(self):
        handler = classify("div", {})
        assert handler == Handler(HandlerKind.TAG, "div", "div")

    def test_trailing_underscore_dropped(self):
        assert classify("del_", {}).value == "del"

    @pytest.mark.parametrize(
        ("name", "expected"),
        [("del_", "del"), ("div", "div"), ("_", "_"), ("dunder__", "dunder__")],
    )
    def test_tag_name(self, name, expected):
        assert tag_name(name) == expected

    def test_registry_component(self):
        handler = classify("Logo", {"Logo": "<img/>"})
        assert handler.kind is HandlerKind.COMPONENT_STRING
        assert handler.value == "<img/>"

    def test_scope_component(self):
        handler = classify("SiteName", {}, globals())
        assert handler.kind is HandlerKind.COMPONENT_STRING
        assert handler.value == "pyoshka"

    def test_callable_component(self):
        handler = classify("Now", {"Now": lambda: "12:00"})
        assert handler.kind is HandlerKind.COMPONENT_PROC

    def test_handler_is_frozen(self):
        handler = classify("div", {})
        with pytest.raises(AttributeError):
            handler.value = "span"  # type: ignore[misc]


class TestDispatchCache:
    """Classifications are cached per environment and reused."""

    def test_tag_cached_after_first_use(self, env, render):
        assert "span" not in env.dispatch_cache
        render(lambda r: r.span("x"))
        assert env.dispatch_cache.get("span") == Handler(HandlerKind.TAG, "span", "span")

    def test_same_handler_across_renderings(self, env, render):
        first = render(lambda r: r.span("x"))
        handler = env.dispatch_cache.get("span")
        second = render(lambda r: r.span("x"))
        assert first == second == "<span>x</span>"
        assert env.dispatch_cache.get("span") is handler

    def test_classified_once_per_name(self, env, render, monkeypatch):
        calls = []
        original = rendering_core.classify

        def counting(name, *args, **kwargs):
            calls.append(name)
            return original(name, *args, **kwargs)

        monkeypatch.setattr(rendering_core, "classify", counting)
        for _ in range(3):
            render(lambda r: (r.span("a"), r.span("b"), r.em("c")))

        assert sorted(calls) == ["em", "span"]

    def test_locals_not_cached(self, env, render):
        output = render(lambda r: r.text(r.invoke("title")), {"title": "T"})
        assert output == "T"
        assert "title" not in env.dispatch_cache

    def test_local_checked_on_every_call(self, env, render):
        def body(r):
            r.b("tag")
            r.with_scope({"b": "local"}, lambda r: r.text(r.invoke("b")))
            r.b("tag again")

        assert render(body) == "<b>tag</b>local<b>tag again</b>"

    def test_classify_reports_local(self, render):
        handlers = []
        render(lambda r: handlers.append(r.classify("title")), {"title": "T"})
        assert handlers == [Handler(HandlerKind.LOCAL, "title", "T")]

    def test_environments_do_not_share_cache(self):
        first, second = Environment(), Environment()
        first.template(lambda r: r.aside()).render()
        assert "aside" in first.dispatch_cache
        assert "aside" not in second.dispatch_cache

    def test_cache_info_and_clear(self, env, render):
        render(lambda r: (r.ul(lambda r: r.li("x")),))
        assert env.cache_info() == {"size": 2, "names": ["li", "ul"]}
        env.clear_caches()
        assert env.cache_info() == {"size": 0, "names": []}

    def test_setdefault_keeps_first(self, env):
        cache = env.dispatch_cache
        first = Handler(HandlerKind.TAG, "x", "x")
        second = Handler(HandlerKind.TAG, "x", "y")
        assert cache.setdefault("x", first) is first
        assert cache.setdefault("x", second) is first
        assert len(cache) == 1


class TestConcurrentDispatch:
    """First-use classification from many threads converges."""

    def test_concurrent_first_use(self, env):
        barrier = threading.Barrier(8)
        page = env.template(lambda r: r.ol(lambda r: [r.li(i) for i in range(3)]))

        def worker(_):
            barrier.wait()
            return page.render()

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(worker, range(8)))

        assert set(results) == {"<ol><li>0</li><li>1</li><li>2</li></ol>"}
        assert env.cache_info()["names"] == ["li", "ol"]

    def test_concurrent_setdefault_converges(self, env):
        cache = env.dispatch_cache
        barrier = threading.Barrier(16)

        def worker(i):
            barrier.wait()
            return cache.setdefault("race", Handler(HandlerKind.TAG, "race", str(i)))

        with ThreadPoolExecutor(max_workers=16) as pool:
            winners = list(pool.map(worker, range(16)))

        assert len({id(handler) for handler in winners}) == 1
        assert cache.get("race") is winners[0]

    def test_renderings_on_threads_have_own_buffers(self, env):
        page = env.template(lambda r: r.p(r.n))

        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(lambda n: Rendering({"n": n}, page.body, env=env), range(20)))

        assert [str(r) for r in results] == [f"<p>{n}</p>" for n in range(20)]

"""Tests for wireroutes.middleware.post_chain: sequential deferred post middleware."""

import anyio
import pytest

from wireroutes.middleware.post_chain import (
    ChainState,
    Continuation,
    PostAction,
    build_post_action,
)
from wireroutes.middleware.protocol import next_tick
from wireroutes.testing import DeferredScheduler


def _start_chain():
    """Action that starts the post chain with its own request/response."""

    def action(req, res, nxt, post):
        post(req, res)
        return post

    return action


class TestPostAction:
    def test_passes_entry_point_last(self) -> None:
        seen = []

        def action(req, res, nxt, post):
            seen.append((req, res, nxt, post))
            return "result"

        wrapped = build_post_action(action, (), DeferredScheduler())
        assert wrapped("req", "res", "next") == "result"

        req, res, nxt, post = seen[0]
        assert (req, res, nxt) == ("req", "res", "next")
        assert isinstance(post, Continuation)

    def test_keyword_arguments_forwarded(self) -> None:
        def action(request, post, *, user=None):
            return user

        wrapped = build_post_action(action, (), DeferredScheduler())
        assert wrapped("req", user="alice") == "alice"

    def test_name_and_repr(self) -> None:
        def list_users(req, res, nxt, post):
            pass

        wrapped = build_post_action(list_users, (lambda *a: None,), DeferredScheduler())
        assert isinstance(wrapped, PostAction)
        assert wrapped.__name__ == "list_users"
        assert repr(wrapped) == "PostAction(list_users, post=1)"

    def test_action_never_starting_chain(self) -> None:
        ran = []
        scheduler = DeferredScheduler()
        wrapped = build_post_action(lambda *a: None, (lambda *a: ran.append(a),), scheduler)

        wrapped("req", "res", None)
        scheduler.run_all()

        assert scheduler.pending == 0
        assert ran == []

    def test_each_call_gets_its_own_run(self) -> None:
        posts = []
        wrapped = build_post_action(lambda *a: posts.append(a[-1]), (), DeferredScheduler())

        wrapped("r1", "s1", None)
        wrapped("r2", "s2", None)

        assert posts[0].run is not posts[1].run


class TestEmptyChain:
    def test_entry_is_noop(self) -> None:
        scheduler = DeferredScheduler()
        wrapped = build_post_action(_start_chain(), (), scheduler)

        post = wrapped("req", "res", None)
        post("anything", 1, 2, key="value")

        assert post.terminal
        assert scheduler.pending == 0
        assert post.run.state is ChainState.DONE


class TestChainOrdering:
    def test_sequential_and_deferred(self) -> None:
        calls = []
        scheduler = DeferredScheduler()

        def m1(req, res, nxt):
            calls.append(("m1", req, res))
            nxt(req, "changed")

        def m2(req, res, nxt):
            calls.append(("m2", req, res))
            nxt()

        wrapped = build_post_action(_start_chain(), (m1, m2), scheduler)
        post = wrapped("req", "res", None)

        # Nothing runs inside the action
        assert calls == []
        assert post.run.state is ChainState.WAITING

        assert scheduler.run_pending() == 1
        assert calls == [("m1", "req", "res")]

        assert scheduler.run_pending() == 1
        assert calls == [("m1", "req", "res"), ("m2", "req", "changed")]
        assert post.run.state is ChainState.DONE
        assert post.run.position == 2

    def test_stalled_chain(self) -> None:
        reached = []
        scheduler = DeferredScheduler()

        def m1(req, res, nxt):
            pass  # never calls nxt

        def m2(req, res, nxt):
            reached.append(True)

        wrapped = build_post_action(_start_chain(), (m1, m2), scheduler)
        post = wrapped("req", "res", None)
        scheduler.run_all()

        assert reached == []
        assert post.run.state is ChainState.WAITING
        assert post.run.position == 1

    def test_last_middleware_gets_terminal_continuation(self) -> None:
        received = []
        scheduler = DeferredScheduler()

        def only(req, res, nxt):
            received.append(nxt)
            nxt("extra", args=True)

        wrapped = build_post_action(_start_chain(), (only,), scheduler)
        wrapped("req", "res", None)
        scheduler.run_all()

        assert received[0].terminal
        assert received[0].run.state is ChainState.DONE
        assert scheduler.pending == 0

    def test_next_scheduled_only_when_called(self) -> None:
        scheduler = DeferredScheduler()
        held = []

        def m1(req, res, nxt):
            held.append(nxt)

        def m2(req, res, nxt):
            held.append("m2")

        wrapped = build_post_action(_start_chain(), (m1, m2), scheduler)
        wrapped("req", "res", None)
        scheduler.run_all()
        assert len(held) == 1

        held[0]("req", "res")
        assert scheduler.pending == 1
        scheduler.run_all()
        assert held[-1] == "m2"


class TestAsyncMiddlewareWithoutLoop:
    def test_runs_to_completion_and_continues(self) -> None:
        order = []
        scheduler = DeferredScheduler()

        async def m1(req, res, nxt):
            order.append("m1")
            nxt(req, res)

        def m2(req, res, nxt):
            order.append("m2")
            nxt()

        wrapped = build_post_action(_start_chain(), (m1, m2), scheduler)
        post = wrapped("req", "res", None)

        assert scheduler.run_pending() == 1
        assert order == ["m1"]
        assert post.run.state is ChainState.WAITING

        scheduler.run_all()
        assert order == ["m1", "m2"]
        assert post.run.state is ChainState.DONE

    def test_errors_surface_in_scheduled_callback(self) -> None:
        scheduler = DeferredScheduler()

        async def broken(req, res, nxt):
            raise ValueError("boom")

        wrapped = build_post_action(_start_chain(), (broken,), scheduler)
        wrapped("req", "res", None)

        with pytest.raises(ValueError, match="boom"):
            scheduler.run_all()


class TestNextTick:
    def test_requires_running_loop(self) -> None:
        with pytest.raises(RuntimeError):
            next_tick(lambda: None)

    @pytest.mark.anyio
    async def test_runs_after_current_turn(self) -> None:
        order = []
        done = anyio.Event()

        def m1(tag, nxt):
            order.append("m1")
            nxt(tag)

        def m2(tag, nxt):
            order.append("m2")
            done.set()

        def action(req, res, nxt, post):
            post("tag")
            order.append("action")

        build_post_action(action, (m1, m2))("req", "res", None)
        assert order == ["action"]

        with anyio.fail_after(1):
            await done.wait()
        assert order == ["action", "m1", "m2"]

    @pytest.mark.anyio
    async def test_async_middleware(self) -> None:
        order = []
        done = anyio.Event()

        async def m1(tag, nxt):
            await anyio.sleep(0)
            order.append(("m1", tag))
            nxt(tag)

        def m2(tag, nxt):
            order.append(("m2", tag))
            done.set()

        def action(req, res, nxt, post):
            post(req)

        build_post_action(action, (m1, m2))("req", "res", None)

        with anyio.fail_after(1):
            await done.wait()
        assert order == [("m1", "req"), ("m2", "req")]

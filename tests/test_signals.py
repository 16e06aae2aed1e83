"""Tests for waypoint.signals — synchronous signals and observable fields."""

import pytest

from waypoint.signals import Observable, SignalDispatcher


class Store(SignalDispatcher):
    username = Observable("")


class TestSignals:
    def test_trigger_in_subscription_order(self) -> None:
        d = SignalDispatcher()
        calls: list[str] = []
        d.on("ping", lambda: calls.append("first"))
        d.on("ping", lambda: calls.append("second"))
        d.trigger("ping")
        assert calls == ["first", "second"]

    def test_trigger_passes_arguments(self) -> None:
        d = SignalDispatcher()
        got: list[tuple[int, int]] = []
        d.on("sum", lambda a, b: got.append((a, b)))
        d.trigger("sum", 1, 2)
        assert got == [(1, 2)]

    def test_trigger_without_listeners(self) -> None:
        SignalDispatcher().trigger("nothing")

    def test_off_specific_callback(self) -> None:
        d = SignalDispatcher()
        calls: list[str] = []

        def listener() -> None:
            calls.append("x")

        d.on("ping", listener)
        d.off("ping", listener)
        d.off("ping", listener)
        d.trigger("ping")
        assert calls == []

    def test_off_all(self) -> None:
        d = SignalDispatcher()
        calls: list[str] = []
        d.on("ping", lambda: calls.append("a"))
        d.on("ping", lambda: calls.append("b"))
        d.off("ping")
        d.trigger("ping")
        assert calls == []

    def test_on_returns_unsubscribe(self) -> None:
        d = SignalDispatcher()
        calls: list[str] = []
        unsubscribe = d.on("ping", lambda: calls.append("x"))
        unsubscribe()
        d.trigger("ping")
        assert calls == []

    def test_changes_during_trigger_apply_next_time(self) -> None:
        d = SignalDispatcher()
        calls: list[str] = []

        def late() -> None:
            calls.append("late")

        def first() -> None:
            calls.append("first")
            d.on("ping", late)
            d.off("ping", second)

        def second() -> None:
            calls.append("second")

        d.on("ping", first)
        d.on("ping", second)
        d.trigger("ping")
        assert calls == ["first", "second"]

        calls.clear()
        d.off("ping", first)
        d.trigger("ping")
        assert calls == ["late"]


class TestDispose:
    def test_listen_to_ends_on_dispose(self) -> None:
        source = SignalDispatcher()
        owner = SignalDispatcher()
        calls: list[str] = []
        owner.listen_to(source, "ping", lambda: calls.append("x"))

        source.trigger("ping")
        owner.dispose()
        source.trigger("ping")

        assert calls == ["x"]

    def test_link_dispatcher_and_callable(self) -> None:
        owner = SignalDispatcher()
        child = owner.link(SignalDispatcher())
        order: list[str] = []
        owner.link(lambda: order.append("cleanup"))

        owner.dispose()

        assert child.disposed is True
        assert order == ["cleanup"]

    def test_links_run_newest_first(self) -> None:
        owner = SignalDispatcher()
        order: list[int] = []
        owner.link(lambda: order.append(1))
        owner.link(lambda: order.append(2))
        owner.dispose()
        assert order == [2, 1]

    def test_link_rejects_other_objects(self) -> None:
        with pytest.raises(TypeError, match="Cannot link"):
            SignalDispatcher().link(42)

    def test_dispose_is_idempotent(self) -> None:
        owner = SignalDispatcher()
        calls: list[str] = []
        owner.link(lambda: calls.append("x"))
        owner.dispose()
        owner.dispose()
        assert calls == ["x"]

    def test_dispose_drops_listeners(self) -> None:
        d = SignalDispatcher()
        calls: list[str] = []
        d.on("ping", lambda: calls.append("x"))
        d.dispose()
        d.trigger("ping")
        assert calls == []


class TestObservable:
    def test_default(self) -> None:
        assert Store().username == ""

    def test_change_notifies_new_and_old(self) -> None:
        store = Store()
        seen: list[tuple[str, str]] = []
        store.watch("username", lambda new, old: seen.append((new, old)))
        store.username = "ada"
        store.username = "grace"
        assert seen == [("ada", ""), ("grace", "ada")]

    def test_same_value_does_not_notify(self) -> None:
        store = Store()
        seen: list[str] = []
        store.watch("username", lambda new, old: seen.append(new))
        store.username = ""
        assert seen == []

    def test_values_are_per_instance(self) -> None:
        first, second = Store(), Store()
        first.username = "ada"
        assert second.username == ""

    def test_class_access_returns_descriptor(self) -> None:
        assert isinstance(Store.username, Observable)

    def test_define_observable(self) -> None:
        d = SignalDispatcher()
        d.define_observable("id", "1")
        seen: list[tuple[str, str]] = []
        d.watch("id", lambda new, old: seen.append((new, old)))

        d.id = "2"

        assert d.id == "2"
        assert seen == [("2", "1")]

    def test_plain_attributes_still_work(self) -> None:
        d = SignalDispatcher()
        d.name = "plain"
        assert d.name == "plain"

    def test_missing_attribute(self) -> None:
        with pytest.raises(AttributeError, match="no attribute 'nope'"):
            SignalDispatcher().nope  # noqa: B018

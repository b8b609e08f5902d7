from __future__ import annotations

from pagelifecycle.listeners import CallbackArena, Subscription


def test_dispatch_in_subscription_order() -> None:
    arena: CallbackArena[int] = CallbackArena("test")
    seen: list[tuple[str, int]] = []
    arena.add(lambda value: seen.append(("a", value)))
    arena.add(lambda value: seen.append(("b", value)))

    arena.dispatch(1)

    assert seen == [("a", 1), ("b", 1)]


def test_removal_during_dispatch_skips_removed_listener() -> None:
    arena: CallbackArena[int] = CallbackArena("test")
    seen: list[str] = []
    subscriptions: dict[str, Subscription] = {}

    def first(value: int) -> None:
        seen.append("first")
        arena.remove(subscriptions["first"])
        arena.remove(subscriptions["second"])

    subscriptions["first"] = arena.add(first)
    subscriptions["second"] = arena.add(lambda value: seen.append("second"))
    subscriptions["third"] = arena.add(lambda value: seen.append("third"))

    arena.dispatch(0)
    arena.dispatch(0)

    assert seen == ["first", "third", "third"]
    assert len(arena) == 1


def test_same_callback_twice_gets_distinct_handles() -> None:
    arena: CallbackArena[int] = CallbackArena("test")
    seen: list[int] = []
    one = arena.add(seen.append)
    two = arena.add(seen.append)

    assert one != two
    assert arena.remove(one) is True
    assert arena.remove(one) is False
    arena.dispatch(5)
    assert seen == [5]


def test_failing_listener_does_not_stop_dispatch() -> None:
    arena: CallbackArena[int] = CallbackArena("test")
    seen: list[int] = []

    def broken(value: int) -> None:
        raise RuntimeError("boom")

    arena.add(broken)
    arena.add(seen.append)
    arena.dispatch(3)

    assert seen == [3]

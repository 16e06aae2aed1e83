"""Synchronous signals and observable fields.

The minimal reactive substrate the router is built on:

- ``SignalDispatcher``: named events with ``on``/``off``/``trigger``,
  ``listen_to`` for subscriptions that end with the owner, and ``link``
  to tie arbitrary cleanup to ``dispose()``.
- ``Observable``: a class-level field that triggers ``change:<name>``
  whenever its value changes.
- ``define_observable``: the same, declared per instance (route params).

Everything runs on the caller's thread. Listeners for one ``trigger``
are called in subscription order, and a listener added or removed
during a trigger does not affect that trigger.

Example::

    class Store(SignalDispatcher):
        username = Observable("")

    store = Store()
    store.watch("username", lambda new, old: print(old, "->", new))
    store.username = "ada"
"""

from collections.abc import Callable
from typing import Any

type Unsubscribe = Callable[[], None]


class Observable:
    """A field whose changes are broadcast as ``change:<name>`` signals.

    The owner class must be a ``SignalDispatcher``. Listeners receive
    ``(new_value, old_value)``.
    """

    __slots__ = ("default", "name")

    def __init__(self, default: Any = None) -> None:
        self.default = default
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return instance._observed.get(self.name, self.default)

    def __set__(self, instance: Any, value: Any) -> None:
        instance._set_observable(self.name, value, self.default)


class SignalDispatcher:
    """Named synchronous signals with automatic cleanup on dispose."""

    def __init__(self) -> None:
        object.__setattr__(self, "_observed", {})
        self._listeners: dict[str, list[Callable[..., Any]]] = {}
        self._links: list[Callable[[], Any]] = []
        self.disposed = False

    # -- Signals --

    def on(self, name: str, callback: Callable[..., Any]) -> Unsubscribe:
        """Subscribe *callback* to *name*. Returns a function that unsubscribes."""
        self._listeners.setdefault(name, []).append(callback)
        return lambda: self.off(name, callback)

    def off(self, name: str, callback: Callable[..., Any] | None = None) -> None:
        """Unsubscribe *callback* from *name*, or every listener when omitted."""
        if callback is None:
            self._listeners.pop(name, None)
            return
        listeners = self._listeners.get(name)
        if not listeners:
            return
        try:
            listeners.remove(callback)
        except ValueError:
            return
        if not listeners:
            del self._listeners[name]

    def trigger(self, name: str, *args: Any) -> None:
        """Call every listener of *name* with *args*, in subscription order."""
        for callback in tuple(self._listeners.get(name, ())):
            callback(*args)

    def listen_to(
        self,
        other: "SignalDispatcher",
        name: str,
        callback: Callable[..., Any],
    ) -> Unsubscribe:
        """Subscribe to *other*'s signal for as long as this object lives."""
        unsubscribe = other.on(name, callback)
        self._links.append(unsubscribe)
        return unsubscribe

    def link[T](self, item: T) -> T:
        """Tie *item* to this object's lifetime.

        *item* is either a ``SignalDispatcher`` (disposed with us) or a
        zero-argument cleanup callable. Returns *item* unchanged.
        """
        if isinstance(item, SignalDispatcher):
            self._links.append(item.dispose)
        elif callable(item):
            self._links.append(item)
        else:
            msg = f"Cannot link {item!r}: expected a SignalDispatcher or a callable"
            raise TypeError(msg)
        return item

    def dispose(self) -> None:
        """Run linked cleanups (newest first) and drop all listeners."""
        if self.disposed:
            return
        self.disposed = True
        links, self._links = self._links, []
        for cleanup in reversed(links):
            cleanup()
        self._listeners.clear()

    # -- Observable fields --

    def watch(self, name: str, callback: Callable[[Any, Any], Any]) -> Unsubscribe:
        """Call ``callback(new, old)`` whenever observable *name* changes."""
        return self.on(f"change:{name}", callback)

    def define_observable(self, name: str, value: Any = None) -> None:
        """Declare an instance-level observable field with an initial value."""
        self._observed[name] = value

    def _set_observable(self, name: str, value: Any, default: Any = None) -> None:
        observed = self._observed
        old = observed.get(name, default)
        observed[name] = value
        if old is value or old == value:
            return
        self.trigger(f"change:{name}", value, old)

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails: instance-level observables
        observed = self.__dict__.get("_observed")
        if observed is not None and name in observed:
            return observed[name]
        msg = f"{type(self).__name__!r} object has no attribute {name!r}"
        raise AttributeError(msg)

    def __setattr__(self, name: str, value: Any) -> None:
        observed = self.__dict__.get("_observed")
        if observed is not None and name in observed and not isinstance(
            getattr(type(self), name, None), Observable
        ):
            self._set_observable(name, value)
            return
        object.__setattr__(self, name, value)

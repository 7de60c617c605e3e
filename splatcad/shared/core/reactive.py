"""Reactive value containers.

``Writable`` holds a single value and pushes every replacement to its
subscribers synchronously, in registration order. ``Derived`` recomputes a
value from other stores whenever any of them changes.

Re-entrancy contract: a ``set`` issued while the store is still notifying
does not recurse. The running round stops handing out the superseded value
and a fresh round delivers the newest one, so the last value every active
subscriber receives is always the final one written (last-write-wins).
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, List, Optional, Sequence, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Subscription:
    """Handle returned by ``subscribe``; call it to stop notifications.

    Unsubscribing more than once is a no-op.
    """

    __slots__ = ("_store", "callback", "active")

    def __init__(self, store: "Writable[Any]", callback: Callable[[Any], None]) -> None:
        self._store: Optional[Writable[Any]] = store
        self.callback = callback
        self.active = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        store, self._store = self._store, None
        if store is not None:
            store._remove(self)

    def __call__(self) -> None:
        self.unsubscribe()


class Readable(ABC, Generic[T]):
    """Read side shared by every store."""

    name: str

    @property
    @abstractmethod
    def value(self) -> T:
        """Current value."""

    @abstractmethod
    def subscribe(self, callback: Callable[[T], None]) -> Subscription:
        """Register ``callback``; it is invoked at once with the current value."""


class Writable(Readable[T]):
    """A store holding one value of type ``T``."""

    def __init__(self, value: T, name: Optional[str] = None) -> None:
        self.name = name or type(self).__name__
        self._value = value
        self._subscriptions: List[Subscription] = []
        self._dispatching = False
        self._superseded = False

    @property
    def value(self) -> T:
        return self._value

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(self, callback: Callable[[T], None]) -> Subscription:
        """Register ``callback``; it is invoked at once with the current value."""
        subscription = Subscription(self, callback)
        self._subscriptions.append(subscription)
        self._deliver(subscription, self._value)
        return subscription

    def set(self, value: T) -> None:
        """Replace the value and notify subscribers."""
        self._value = value
        if self._dispatching:
            self._superseded = True
            return

        self._dispatching = True
        try:
            while True:
                self._superseded = False
                current = self._value
                for subscription in tuple(self._subscriptions):
                    if self._superseded:
                        break
                    if subscription.active:
                        self._deliver(subscription, current)
                if not self._superseded:
                    break
        finally:
            self._dispatching = False

    def update(self, fn: Callable[[T], T]) -> None:
        self.set(fn(self._value))

    def readonly(self) -> "ReadonlyView[T]":
        return ReadonlyView(self)

    def _deliver(self, subscription: Subscription, value: T) -> None:
        try:
            subscription.callback(value)
        except Exception:
            callback_name = getattr(subscription.callback, "__name__", repr(subscription.callback))
            logger.exception(f"Subscriber '{callback_name}' of store '{self.name}' failed")

    def _remove(self, subscription: Subscription) -> None:
        try:
            self._subscriptions.remove(subscription)
        except ValueError:
            pass

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name!r} value={self._value!r}>"


class ReadonlyView(Readable[T]):
    """Exposes a writable store without its ``set``."""

    def __init__(self, store: Readable[T]) -> None:
        self._store = store
        self.name = store.name

    @property
    def value(self) -> T:
        return self._store.value

    def subscribe(self, callback: Callable[[T], None]) -> Subscription:
        return self._store.subscribe(callback)


class Derived(Readable[T]):
    """A store recomputed from the current values of its inputs.

    The computation receives one positional argument per input store, in
    the order given. Only the last result is kept; subscribers joining
    later receive it immediately.
    """

    def __init__(
        self,
        inputs: Sequence[Readable[Any]],
        compute: Callable[..., T],
        name: Optional[str] = None,
    ) -> None:
        self.name = name or compute.__name__
        self._inputs = tuple(inputs)
        self._compute = compute
        self._ready = False
        self._upstream: List[Subscription] = []

        # Each subscribe fires immediately; compute once after wiring all inputs
        for store in self._inputs:
            self._upstream.append(store.subscribe(self._on_input))
        self._output: Writable[T] = Writable(self._evaluate(), name=self.name)
        self._ready = True

    @property
    def value(self) -> T:
        return self._output.value

    @property
    def closed(self) -> bool:
        return not self._upstream

    def subscribe(self, callback: Callable[[T], None]) -> Subscription:
        return self._output.subscribe(callback)

    def close(self) -> None:
        """Detach from the inputs; the last value stays readable."""
        for subscription in self._upstream:
            subscription.unsubscribe()
        self._upstream = []

    def _evaluate(self) -> T:
        return self._compute(*(store.value for store in self._inputs))

    def _on_input(self, _value: Any) -> None:
        if not self._ready:
            return
        self._output.set(self._evaluate())


def derived(
    inputs: Union[Readable[Any], Sequence[Readable[Any]]],
    compute: Callable[..., T],
    name: Optional[str] = None,
) -> Derived[T]:
    """Build a :class:`Derived` store from one store or a sequence of stores."""
    if isinstance(inputs, Readable):
        inputs = (inputs,)
    return Derived(inputs, compute, name=name)


def get(store: Readable[T]) -> T:
    """Snapshot the current value of ``store``."""
    return store.value

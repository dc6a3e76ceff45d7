"""Synchronous push-based signals for view-model event graphs.

A ``Signal`` is a hot stream: values are delivered to the observers that are
registered at the moment ``send`` is called, in subscription order, on the
caller's thread. ``MutableProperty`` is a latest-value slot whose ``signal``
fires on every assignment.

Operators build new signals that subscribe to their upstream immediately, so
a graph is wired once at construction and then reacts to input writes.

Pairing semantics:
- ``combine_latest`` / ``take_when`` / ``take_pair_when`` pair with the latest
  value seen on the other side.
- ``zip_signals`` pairs positionally: the n-th value of each source is
  combined with the n-th value of every other source.
"""

from __future__ import annotations

import logging
import operator
from collections import deque
from typing import Any, Callable, Deque, Generic, List, Optional, Tuple, TypeAlias, TypeVar

T = TypeVar("T")
U = TypeVar("U")

Observer: TypeAlias = Callable[[Any], None]

logger = logging.getLogger(__name__)


class _Unset:
    """Marker for a slot that has not received a value yet."""

    def __repr__(self) -> str:
        return "<unset>"


UNSET: Any = _Unset()


class Disposable:
    """Handle that detaches an observer when disposed."""

    def __init__(self, action: Optional[Callable[[], None]] = None) -> None:
        self._action = action
        self._disposed = False

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        if self._action is not None:
            self._action()
            self._action = None


class CompositeDisposable(Disposable):
    """Disposes a group of handles together."""

    def __init__(self) -> None:
        super().__init__()
        self._children: List[Disposable] = []

    def add(self, disposable: Disposable) -> Disposable:
        if self.is_disposed:
            disposable.dispose()
        else:
            self._children.append(disposable)
        return disposable

    def __len__(self) -> int:
        return len(self._children)

    def dispose(self) -> None:
        if self.is_disposed:
            return
        super().dispose()
        children, self._children = self._children, []
        for child in children:
            child.dispose()


class Signal(Generic[T]):
    """Observer list with stream operators."""

    def __init__(self, name: Optional[str] = None) -> None:
        self.name = name
        self._observers: List[Callable[[T], None]] = []

    def __repr__(self) -> str:
        return f"Signal(name={self.name!r}, observers={len(self._observers)})"

    @classmethod
    def pipe(cls, name: Optional[str] = None) -> Tuple["Signal[T]", Callable[[T], None]]:
        """Create a signal together with the function that feeds it."""
        signal: Signal[T] = cls(name)
        return signal, signal.send

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    def observe(self, observer: Callable[[T], None]) -> Disposable:
        """Register an observer; dispose the returned handle to detach it."""
        self._observers.append(observer)

        def detach() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return Disposable(detach)

    def observe_values(self, observer: Callable[[T], None]) -> Disposable:
        return self.observe(observer)

    def send(self, value: T) -> None:
        """Deliver a value to every current observer."""
        for observer in list(self._observers):
            self._safe_dispatch(observer, value)

    def _safe_dispatch(self, observer: Callable[[T], None], value: T) -> None:
        """Keep one failing observer from stopping delivery to the others."""
        try:
            observer(value)
        except Exception as exc:
            observer_name = getattr(observer, "__name__", repr(observer))
            logger.exception(
                f"Observer '{observer_name}' failed on signal '{self.name}'",
                exc_info=exc,
            )

    def _derive(self, suffix: str) -> "Signal[Any]":
        return Signal(f"{self.name}.{suffix}" if self.name else None)

    # --- Operators ---

    def map(self, transform: Callable[[T], U]) -> "Signal[U]":
        out = self._derive("map")
        self.observe(lambda value: out.send(transform(value)))
        return out

    def filter(self, predicate: Callable[[T], bool]) -> "Signal[T]":
        out = self._derive("filter")

        def on_value(value: T) -> None:
            if predicate(value):
                out.send(value)

        self.observe(on_value)
        return out

    def skip_nil(self) -> "Signal[Any]":
        """Drop ``None`` values."""
        out = self.filter(lambda value: value is not None)
        out.name = f"{self.name}.skip_nil" if self.name else None
        return out

    def skip_repeats(self, equals: Callable[[T, T], bool] = operator.eq) -> "Signal[T]":
        """Drop values equal to the previously forwarded one."""
        out = self._derive("skip_repeats")
        last: Any = UNSET

        def on_value(value: T) -> None:
            nonlocal last
            if last is not UNSET and equals(last, value):
                return
            last = value
            out.send(value)

        self.observe(on_value)
        return out

    def ignore_values(self) -> "Signal[None]":
        out = self.map(lambda _: None)
        out.name = f"{self.name}.ignore_values" if self.name else None
        return out

    def scan(self, initial: U, combine: Callable[[U, T], U]) -> "Signal[U]":
        """Fold values into an accumulator and emit every new accumulator."""
        out = self._derive("scan")
        state: Any = initial

        def on_value(value: T) -> None:
            nonlocal state
            state = combine(state, value)
            out.send(state)

        self.observe(on_value)
        return out

    def take_when(self, trigger: "Signal[Any]") -> "Signal[T]":
        """Emit the latest value of this signal each time ``trigger`` fires.

        Trigger events that arrive before this signal has a value are dropped.
        """
        out = self._derive("take_when")
        latest: Any = UNSET

        def on_value(value: T) -> None:
            nonlocal latest
            latest = value

        def on_trigger(_: Any) -> None:
            if latest is not UNSET:
                out.send(latest)

        self.observe(on_value)
        trigger.observe(on_trigger)
        return out

    def take_pair_when(self, trigger: "Signal[U]") -> "Signal[Tuple[T, U]]":
        """Like ``take_when`` but emits ``(latest, trigger_value)``."""
        out = self._derive("take_pair_when")
        latest: Any = UNSET

        def on_value(value: T) -> None:
            nonlocal latest
            latest = value

        def on_trigger(trigger_value: U) -> None:
            if latest is not UNSET:
                out.send((latest, trigger_value))

        self.observe(on_value)
        trigger.observe(on_trigger)
        return out


def merge(*signals: Signal[Any]) -> Signal[Any]:
    """Forward every value from every source as it arrives."""
    out: Signal[Any] = Signal("merge")
    for signal in signals:
        signal.observe(out.send)
    return out


def combine_latest(*signals: Signal[Any]) -> Signal[Tuple[Any, ...]]:
    """Emit a tuple of the latest values once every source has fired."""
    out: Signal[Tuple[Any, ...]] = Signal("combine_latest")
    latest: List[Any] = [UNSET] * len(signals)

    def make_observer(position: int) -> Observer:
        def on_value(value: Any) -> None:
            latest[position] = value
            if all(item is not UNSET for item in latest):
                out.send(tuple(latest))

        return on_value

    for position, signal in enumerate(signals):
        signal.observe(make_observer(position))
    return out


def zip_signals(*signals: Signal[Any]) -> Signal[Tuple[Any, ...]]:
    """Pair the n-th value of each source; unmatched values wait in a queue.

    Pairing is by position only. Sending into a source from inside an observer
    of the zipped output is unsupported and can pair values from different rounds.
    """
    out: Signal[Tuple[Any, ...]] = Signal("zip")
    buffers: List[Deque[Any]] = [deque() for _ in signals]

    def make_observer(position: int) -> Observer:
        def on_value(value: Any) -> None:
            buffers[position].append(value)
            if all(buffers):
                out.send(tuple(buffer.popleft() for buffer in buffers))

        return on_value

    for position, signal in enumerate(signals):
        signal.observe(make_observer(position))
    return out


class MutableProperty(Generic[T]):
    """Latest-value slot. ``signal`` fires on every write, equal values included."""

    def __init__(self, initial: T, name: Optional[str] = None) -> None:
        self._value = initial
        self._signal: Signal[T] = Signal(name)

    def __repr__(self) -> str:
        return f"MutableProperty(name={self._signal.name!r}, value={self._value!r})"

    @property
    def value(self) -> T:
        return self._value

    @value.setter
    def value(self, new_value: T) -> None:
        self._value = new_value
        self._signal.send(new_value)

    @property
    def signal(self) -> Signal[T]:
        """Subsequent writes only; the current value is not replayed."""
        return self._signal

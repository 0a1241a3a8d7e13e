"""Reactive state primitives with Qt signal integration.

``Observable`` holds a piece of authoritative state and notifies listeners
when it changes. ``Derived`` exposes a value computed from one or more
observables; it keeps no copy of its own, so it can never drift from the
state it is derived from.
"""

from typing import Callable, Generic, Optional, TypeVar

from PySide6.QtCore import QObject, Signal

T = TypeVar("T")


class Observable(QObject, Generic[T]):
    """Reactive state container with Qt signal integration.

    Example:
        >>> query = Observable("")
        >>> query.changed.connect(lambda q: print(f"Searching for {q!r}"))
        >>> query.set("jo")  # Prints: "Searching for 'jo'"
    """

    changed = Signal(object)  # Emitted when value changes

    def __init__(self, initial: T, parent: Optional[QObject] = None):
        """Initialize observable with initial value.

        Args:
            initial: Initial value
            parent: Optional Qt parent object
        """
        super().__init__(parent)
        self._value = initial

    @property
    def value(self) -> T:
        """Get current value."""
        return self._value

    def set(self, new_value: T) -> bool:
        """Set new value and emit change signal if different.

        Args:
            new_value: New value to set

        Returns:
            True if the value changed and listeners were notified
        """
        if new_value == self._value:
            return False
        self._value = new_value
        self.changed.emit(new_value)
        return True

    def update(self, fn: Callable[[T], T]) -> bool:
        """Update value using a function of the current value.

        Example:
            >>> selection = Observable(frozenset())
            >>> selection.update(lambda s: s | {7})
        """
        return self.set(fn(self._value))


class Derived(QObject, Generic[T]):
    """Read-only value computed from observables on every read.

    The ``changed`` signal re-emits a freshly computed value whenever any
    source observable changes.

    Example:
        >>> items = Observable([1, 2, 3])
        >>> count = Derived(lambda: len(items.value), items)
        >>> items.set([1])
        >>> count.value  # 1
    """

    changed = Signal(object)

    def __init__(self, compute: Callable[[], T], *sources: Observable, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._compute = compute
        for source in sources:
            source.changed.connect(self._on_source_changed)

    @property
    def value(self) -> T:
        return self._compute()

    def _on_source_changed(self, _value: object) -> None:
        self.changed.emit(self._compute())

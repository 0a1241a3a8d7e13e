"""Multi-row selection scoped to the currently filtered rows."""

from typing import Iterable

from tourdesk.domain.models import EntityId
from tourdesk.state.observable import Observable


class SelectionTracker(Observable):
    """Set of selected entity identifiers.

    The selection is always a subset of the identifiers visible under the
    active query: ``reconcile`` is called after every filter change and
    deletion to drop identifiers that are no longer visible.

    Example:
        >>> selection = SelectionTracker()
        >>> selection.toggle_all([1, 2, 3])
        >>> selection.value  # frozenset({1, 2, 3})
        >>> selection.toggle_all([1, 2, 3])
        >>> selection.value  # frozenset()
    """

    def __init__(self, parent=None):
        super().__init__(frozenset(), parent)

    def __contains__(self, id: EntityId) -> bool:
        return id in self._value

    @property
    def count(self) -> int:
        return len(self._value)

    def toggle(self, id: EntityId) -> None:
        """Add the id if absent, remove it if present."""
        self.update(lambda s: s - {id} if id in s else s | {id})

    def toggle_all(self, visible_ids: Iterable[EntityId]) -> None:
        """Select every visible row, or clear if they are all selected already.

        Selecting replaces any prior selection rather than merging with it.
        """
        visible = frozenset(visible_ids)
        if visible and self._value == visible:
            self.set(frozenset())
        else:
            self.set(visible)

    def reconcile(self, visible_ids: Iterable[EntityId]) -> None:
        """Intersect the selection with the currently visible identifiers."""
        visible = frozenset(visible_ids)
        self.update(lambda s: s & visible)

    def discard(self, ids: Iterable[EntityId]) -> None:
        """Remove identifiers (e.g. after they were deleted)."""
        removed = frozenset(ids)
        self.update(lambda s: s - removed)

    def clear(self) -> None:
        self.set(frozenset())

    def is_all_selected(self, visible_count: int) -> bool:
        return visible_count > 0 and len(self._value) == visible_count

    def is_indeterminate(self, visible_count: int) -> bool:
        return 0 < len(self._value) < visible_count

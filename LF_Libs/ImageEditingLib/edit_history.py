"""
Undo/redo history for image edits.

EditParameters is immutable, so a snapshot is simply the parameters value
that was current before a change.
"""

from typing import List, Optional

from LF_Libs.ImageEditingLib.image_models import EditParameters
from LF_Libs.constants import EDIT_HISTORY_LIMIT


class EditHistory:
    """
    Bounded undo/redo stacks of EditParameters snapshots.

    Example:
        >>> history = EditHistory()
        >>> params = EditParameters()
        >>> history.push(params)
        >>> params = params.with_changes(padding=10)
        >>> params = history.undo(current=params)
        >>> params.padding
        0
    """

    def __init__(self, max_history: int = EDIT_HISTORY_LIMIT):
        if max_history < 1:
            raise ValueError(f"max_history must be >= 1, got {max_history}")
        self.max_history = max_history
        self._undo_stack: List[EditParameters] = []
        self._redo_stack: List[EditParameters] = []

    @property
    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    def push(self, snapshot: EditParameters) -> None:
        """Record the state before a change. Clears the redo stack."""
        self._undo_stack.append(snapshot)
        if len(self._undo_stack) > self.max_history:
            self._undo_stack.pop(0)
        self._redo_stack.clear()

    def undo(self, current: EditParameters) -> Optional[EditParameters]:
        """Return the previous state, or None if there is nothing to undo."""
        if not self._undo_stack:
            return None
        previous = self._undo_stack.pop()
        self._redo_stack.append(current)
        return previous

    def redo(self, current: EditParameters) -> Optional[EditParameters]:
        """Return the next state, or None if there is nothing to redo."""
        if not self._redo_stack:
            return None
        following = self._redo_stack.pop()
        self._undo_stack.append(current)
        return following

    def clear(self) -> None:
        self._undo_stack.clear()
        self._redo_stack.clear()

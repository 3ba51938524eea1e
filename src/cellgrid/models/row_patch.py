"""Row patch for accumulating field changes to a GridRow.

RowPatch provides a mutable interface for building a partial field map.
Changes are accumulated and then frozen into a new immutable GridRow via
the freeze() method.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .grid_row import KEY_FIELD

if TYPE_CHECKING:
    from .grid_row import GridRow


@dataclass
class RowPatch(Mapping[str, Any]):
    """Accumulator for building changes to a GridRow.

    Only fields explicitly set are part of the patch. When freeze() is
    called, they are merged over the base row to create a new row.

    Usage:
        patch = RowPatch()
        patch.set_field("name", "bee")
        new_row = patch.freeze(base_row)
    """

    changes: dict[str, Any] = field(default_factory=dict)

    def __getitem__(self, field_id: str) -> Any:
        return self.changes[field_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self.changes)

    def __len__(self) -> int:
        return len(self.changes)

    def has_changes(self) -> bool:
        """Check if any fields have been set."""
        return bool(self.changes)

    def set_field(self, field_id: str, value: Any) -> None:
        """Set a field value by name.

        Raises:
            ValueError: If field_id is the reserved key field.
        """
        if field_id == KEY_FIELD:
            raise ValueError("The row key cannot be patched")
        self.changes[field_id] = value

    def freeze(self, base: GridRow) -> GridRow:
        """Apply accumulated changes to base row and return the new row.

        Args:
            base: The GridRow to apply changes to.

        Returns:
            New GridRow with changes applied, or base itself if empty.
        """
        if not self.has_changes():
            return base
        return base.with_patch(self.changes)

    def copy(self) -> RowPatch:
        """Create a copy of this patch."""
        return RowPatch(changes=dict(self.changes))

    @classmethod
    def of(cls, patch: Mapping[str, Any]) -> RowPatch:
        """Coerce a mapping (or RowPatch) into a RowPatch.

        A "key" entry is dropped: keys are never patched.
        """
        if isinstance(patch, RowPatch):
            return patch.copy()
        built = cls()
        for field_id, value in patch.items():
            if field_id != KEY_FIELD:
                built.set_field(field_id, value)
        return built

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

from .data.row_store import MissingKeyPolicy
from .models.grid_row import DEFAULT_NEW_ROW_NAME, DEFAULT_NEW_ROW_VALUE, make_template_fields

# Counter seed used when keys are not unified
DEFAULT_COUNTER_SEED = 2


@dataclass
class GridSettings:
    """Grid configuration."""

    # Key minting: with unify_keys, added rows get string keys and the
    # counter starts at the initial row count instead of counter_seed.
    counter_seed: int = DEFAULT_COUNTER_SEED
    unify_keys: bool = False

    missing_key_policy: MissingKeyPolicy = MissingKeyPolicy.RAISE

    # Template for rows created by the add action
    new_row_name_template: str = DEFAULT_NEW_ROW_NAME
    new_row_value: Any = DEFAULT_NEW_ROW_VALUE

    # Presentation
    delete_label: str = "Delete"
    delete_confirm_text: str = "Sure to delete?"

    csv_encoding: str = "utf-8"

    def initial_counter(self, initial_row_count: int) -> int:
        """Counter value for a grid created with initial_row_count rows."""
        if self.unify_keys:
            return initial_row_count
        return self.counter_seed

    def template_for(self, n: int) -> dict[str, Any]:
        """Field values for a new row minted with counter value n."""
        return make_template_fields(n, self.new_row_name_template, self.new_row_value)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> GridSettings:
        """Build settings from a plain mapping (e.g. parsed JSON).

        Raises:
            ValueError: On unknown keys or an invalid missing_key_policy.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")

        values = dict(data)
        policy = values.get("missing_key_policy")
        if isinstance(policy, str):
            values["missing_key_policy"] = MissingKeyPolicy(policy)
        return cls(**values)

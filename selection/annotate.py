"""ABOUTME: Read-side projection marking search result items as selected or not."""

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence

ID_FIELD = "uuid"
SELECTED_FIELD = "selected"
KIND_FIELD = "kind"

# Result pages may carry a summary entry that is not a record
SUMMARY_KIND = "summary"


@dataclass
class AnnotatedBatch:
    """A page of items flagged against the selection.

    Attributes:
        items: Copies of the input items; records gain a boolean "selected" field
        selected_count: Total size of the selection, not just the matches on this page
    """
    items: list[dict] = field(default_factory=list)
    selected_count: int = 0

    @property
    def selected_items(self) -> list[dict]:
        return [item for item in self.items if item.get(SELECTED_FIELD) is True]

    def to_dict(self) -> dict:
        return {"items": self.items, SELECTED_FIELD: self.selected_count}


def annotate_items(
    items: Sequence[Mapping[str, Any]],
    selection: frozenset[str],
    id_field: str = ID_FIELD,
) -> AnnotatedBatch:
    """Flag each record whose identifier is in selection.

    Summary entries are passed through unflagged. Records without an
    identifier are flagged as not selected.
    """
    annotated = []
    for item in items:
        copied = dict(item)
        if copied.get(KIND_FIELD) != SUMMARY_KIND:
            identifier = copied.get(id_field)
            copied[SELECTED_FIELD] = identifier is not None and identifier in selection
        annotated.append(copied)

    return AnnotatedBatch(items=annotated, selected_count=len(selection))

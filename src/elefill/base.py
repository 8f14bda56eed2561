"""Common interface of the per-collection filler pipelines."""

from __future__ import annotations

from typing import Mapping

from .models import EventInput, OutputEvent
from .object_map import ObjectMapStore


class FillerBase:
    """One pipeline producing one output collection per event.

    The event processor calls `fill` on every filler first, then `set_refs`
    on every filler once all of them have filled. `set_refs` may read the
    object maps of other fillers; `fill` must not.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.object_map = ObjectMapStore(owner=name)

    def reset(self) -> None:
        """Drop per-event state."""
        self.object_map.clear()

    def fill(self, out_event: OutputEvent, in_event: EventInput) -> None:
        raise NotImplementedError

    def set_refs(self, object_maps: Mapping[str, ObjectMapStore]) -> None:
        """Resolve references into other collections. No-op by default."""

    def excluded_fields(self, is_real_data: bool) -> list[str]:
        """Output fields of this collection that are not persisted for this kind of run."""
        return []

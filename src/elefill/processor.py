"""Event loop driving the filler pipelines."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Sequence

from .base import FillerBase
from .config import RunConfig
from .electrons import ElectronsFiller
from .errors import ConfigurationError
from .models import EventInput, OutputEvent
from .superclusters import SuperClustersFiller

logger = logging.getLogger(__name__)


class EventProcessor:
    """Run every filler on an event, then resolve cross-collection references.

    Phase 1 calls `fill` on each filler in order. Phase 2 starts only after
    all fills returned and calls `set_refs` on each filler with the object
    maps of all fillers. An exception in either phase propagates and no
    output is returned for the event.
    """

    def __init__(self, fillers: Sequence[FillerBase]) -> None:
        names = [f.name for f in fillers]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ConfigurationError(f"Duplicate filler name(s): {', '.join(duplicates)}")
        self.fillers = list(fillers)

    @classmethod
    def from_config(cls, config: RunConfig) -> "EventProcessor":
        """Standard cluster + electron pipeline setup."""
        return cls([SuperClustersFiller(config.super_clusters), ElectronsFiller(config.electrons)])

    def process(self, in_event: EventInput) -> OutputEvent:
        out_event = OutputEvent(event_id=in_event.event_id, is_real_data=in_event.is_real_data)
        for filler in self.fillers:
            filler.reset()

        for filler in self.fillers:
            filler.fill(out_event, in_event)

        object_maps = {f.name: f.object_map for f in self.fillers}
        for filler in self.fillers:
            filler.set_refs(object_maps)

        return out_event

    def process_events(self, events: Iterable[EventInput]) -> Iterator[OutputEvent]:
        """Process events one at a time, yielding each finished output event."""
        n_events = 0
        for event in events:
            yield self.process(event)
            n_events += 1
        logger.info("Processed %d events", n_events)

    def excluded_fields(self, is_real_data: bool) -> dict[str, list[str]]:
        """Per-filler output fields dropped from the persisted schema."""
        return {f.name: f.excluded_fields(is_real_data) for f in self.fillers}

"""Per-event bidirectional maps between input identities and output records."""

from __future__ import annotations

from typing import Generic, Hashable, TypeVar

from .errors import UpstreamInconsistencyError

K = TypeVar("K", bound=Hashable)
R = TypeVar("R")


class IdentityMap(Generic[K, R]):
    """Input identity <-> output record association for one event.

    `fwd_map` goes from input identity to record, `bwd_map` from record back
    to the input identity. Records must hash by identity.
    """

    def __init__(self, label: str = "") -> None:
        self.label = label
        self.fwd_map: dict[K, R] = {}
        self.bwd_map: dict[R, K] = {}

    def add(self, key: K, record: R) -> None:
        """Associate `key` with `record`; each side may appear only once."""
        if key in self.fwd_map:
            raise UpstreamInconsistencyError(f"{self.label}: input {key!r} is already mapped")
        if record in self.bwd_map:
            raise UpstreamInconsistencyError(f"{self.label}: output record is already mapped")
        self.fwd_map[key] = record
        self.bwd_map[record] = key

    def record_for(self, key: K) -> R:
        return self.fwd_map[key]

    def key_for(self, record: R) -> K:
        return self.bwd_map[record]

    def clear(self) -> None:
        self.fwd_map.clear()
        self.bwd_map.clear()

    def __len__(self) -> int:
        return len(self.fwd_map)


class ObjectMapStore:
    """All identity maps owned by one pipeline, keyed by `(input type, output type)`."""

    def __init__(self, owner: str = "") -> None:
        self.owner = owner
        self._maps: dict[tuple[type, type], IdentityMap] = {}

    def get(self, input_type: type, output_type: type) -> IdentityMap:
        """Return the map for a type pair, creating it on first use."""
        key = (input_type, output_type)
        if key not in self._maps:
            label = f"{self.owner}[{input_type.__name__} -> {output_type.__name__}]"
            self._maps[key] = IdentityMap(label)
        return self._maps[key]

    def clear(self) -> None:
        """Reset every map for the next event."""
        for identity_map in self._maps.values():
            identity_map.clear()

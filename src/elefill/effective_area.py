"""Pseudorapidity-binned effective-area tables.

Table files are plain text, one bin per line, either as
`eta_min eta_max area` or as `eta_max area`. Blank lines and lines starting
with `#` are ignored. Bins must be listed with strictly ascending upper
edges; the last bin also covers every value beyond its upper edge. In the
three-column form the first bin starts at 0 and every later bin starts where
the previous one ends.
"""

from __future__ import annotations

import logging
from bisect import bisect_right
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from .errors import EffectiveAreaError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EffectiveAreaTable:
    """Immutable `(upper_edge, area)` lookup over |eta|."""

    upper_edges: tuple[float, ...]
    areas: tuple[float, ...]
    source: str = "<memory>"

    def __post_init__(self) -> None:
        if not self.upper_edges:
            raise EffectiveAreaError(f"Effective-area table {self.source} has no bins.")
        if len(self.upper_edges) != len(self.areas):
            raise EffectiveAreaError(
                f"Effective-area table {self.source} has {len(self.upper_edges)} edges "
                f"but {len(self.areas)} areas."
            )
        for lo, hi in zip(self.upper_edges, self.upper_edges[1:]):
            if not hi > lo:
                raise EffectiveAreaError(
                    f"Effective-area table {self.source} bin edges are not strictly ascending "
                    f"({lo!r} followed by {hi!r})."
                )

    @classmethod
    def from_bins(cls, bins: Iterable[tuple[float, float]], source: str = "<memory>") -> "EffectiveAreaTable":
        """Build a table from `(upper_edge, area)` pairs."""
        pairs = [(float(edge), float(area)) for edge, area in bins]
        return cls(
            upper_edges=tuple(edge for edge, _ in pairs),
            areas=tuple(area for _, area in pairs),
            source=source,
        )

    @classmethod
    def from_file(cls, path: str | Path) -> "EffectiveAreaTable":
        """Load a table file, raising `EffectiveAreaError` on any problem."""
        p = Path(path)
        try:
            text = p.read_text(encoding="utf-8")
        except OSError as exc:
            raise EffectiveAreaError(f"Cannot read effective-area table {p}: {exc}") from exc

        bins: list[tuple[float, float]] = []
        for lineno, line in enumerate(text.splitlines(), start=1):
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            source = f"{p}:{lineno}"
            eta_min, eta_max, area = _parse_bin(stripped, source)
            expected_min = bins[-1][0] if bins else 0.0
            if eta_min is not None and eta_min != expected_min:
                raise EffectiveAreaError(
                    f"Effective-area bin at {source} starts at {eta_min!r}, expected {expected_min!r} "
                    "(bins must be contiguous from 0)."
                )
            bins.append((eta_max, area))
        table = cls.from_bins(bins, source=str(p))
        logger.info("Loaded effective-area table %s (%d bins)", p, len(bins))
        return table

    def area(self, eta: float) -> float:
        """Return the effective area for the bin containing `|eta|`."""
        idx = bisect_right(self.upper_edges, abs(eta))
        if idx == len(self.areas):
            return self.areas[-1]
        return self.areas[idx]

    def __len__(self) -> int:
        return len(self.areas)


def _parse_bin(line: str, source: str) -> tuple[float | None, float, float]:
    """Parse one table row into `(lower_edge, upper_edge, area)`.

    The lower edge is `None` for two-column rows.
    """
    fields = line.split()
    try:
        values = [float(x) for x in fields]
    except ValueError as exc:
        raise EffectiveAreaError(f"Non-numeric effective-area row at {source}: {line!r}") from exc
    if len(values) == 3:
        eta_min, eta_max, area = values
        if not eta_max > eta_min:
            raise EffectiveAreaError(f"Empty eta bin at {source}: {line!r}")
        return eta_min, eta_max, area
    if len(values) == 2:
        return None, values[0], values[1]
    raise EffectiveAreaError(
        f"Effective-area row at {source} must have 2 or 3 columns, got {len(values)}."
    )

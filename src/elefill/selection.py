"""Candidate-level preselection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from .isolation import side_map_value
from .models import ElectronCandidate


@dataclass(frozen=True)
class CandidateSelector:
    """Keep candidates passing pt / |eta| thresholds and the veto identification."""

    min_pt: float | None = None
    max_eta: float | None = None
    component: str = "electrons"

    def accepts(self, candidate: ElectronCandidate, veto_id: Mapping[str, bool]) -> bool:
        """Return whether a single candidate passes every requirement."""
        if self.min_pt is not None and candidate.pt < self.min_pt:
            return False
        if self.max_eta is not None and abs(candidate.eta) > self.max_eta:
            return False
        # The veto map is only read for candidates inside the kinematic acceptance.
        return bool(side_map_value(veto_id, candidate.key, "veto_id", self.component))

    def select(
        self,
        candidates: Sequence[ElectronCandidate],
        veto_id: Mapping[str, bool],
    ) -> list[ElectronCandidate]:
        """Apply the selection, preserving input order."""
        return [c for c in candidates if self.accepts(c, veto_id)]

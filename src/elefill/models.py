"""Core data models used by the electron filler.

This module defines:
- immutable per-event inputs (`Cluster`, `ElectronCandidate`, `PhotonCandidate`,
  `TriggerObject`) and the event container (`EventInput`)
- mutable output records (`ElectronRecord`, `SuperClusterRecord`) filled during
  one event and collected in `OutputEvent`
- the ordered list of electron trigger-match categories.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Union

# Order defines the bit position of each category in `ElectronRecord.match_hlt`.
ELECTRON_HLT_CATEGORIES: tuple[str, ...] = (
    "el23_loose",
    "el27_loose",
    "ph120",
    "ph135",
    "ph165_he10",
    "ph175",
    "el22_eta_r_loose",
    "el25_eta_r_tight",
    "el27_eta_r_loose",
    "el27_tight",
)
N_ELECTRON_HLT_CATEGORIES = len(ELECTRON_HLT_CATEGORIES)


@dataclass(frozen=True)
class Cluster:
    """Localized energy deposit, compared and hashed by `key` only.

    Two collections referencing the same `key` describe the same deposit.
    """

    key: str
    eta: float = field(default=0.0, compare=False)
    phi: float = field(default=0.0, compare=False)
    raw_energy: float = field(default=0.0, compare=False)


@dataclass(frozen=True)
class ElectronCandidate:
    """One reconstructed electron candidate as delivered for an event.

    `ecal_pf_cluster_iso` / `hcal_pf_cluster_iso` are only set when the source
    record embeds calorimeter-cluster isolation; otherwise they stay `None`
    and the values must come from the event side-maps.
    """

    key: str
    pt: float
    eta: float
    phi: float
    cluster: Cluster
    mass: float = 0.0
    charge: int = 0
    sieie: float = 0.0  # full5x5 sigma_ietaieta
    sipip: float = 0.0  # full5x5 sigma_iphiiphi
    h_over_e: float = 0.0
    chiso: float = 0.0
    nhiso: float = 0.0
    phoiso: float = 0.0
    puiso: float = 0.0
    ecal_pf_cluster_iso: float | None = None
    hcal_pf_cluster_iso: float | None = None

    @property
    def has_pf_cluster_iso(self) -> bool:
        """True when both calorimeter-cluster isolation sums are embedded."""
        return self.ecal_pf_cluster_iso is not None and self.hcal_pf_cluster_iso is not None


@dataclass(frozen=True)
class PhotonCandidate:
    """Photon candidate from the secondary collection."""

    key: str
    pt: float
    eta: float
    phi: float
    cluster: Cluster


@dataclass(frozen=True)
class TriggerObject:
    """Online trigger object with the filter labels it passed."""

    eta: float
    phi: float
    filter_labels: tuple[str, ...] = ()

    def has_filter_label(self, label: str) -> bool:
        """Return whether this object passed the named filter."""
        return label in self.filter_labels


@dataclass(frozen=True)
class EventInput:
    """One event payload: input collections plus their side-maps.

    Side-maps are keyed by the `key` of the object they describe. `ecal_iso`,
    `hcal_iso` and `trigger_objects` are optional products and may be `None`.
    """

    event_id: str
    is_real_data: bool
    rho: float
    rho_central_calo: float
    clusters: tuple[Cluster, ...] = ()
    electrons: tuple[ElectronCandidate, ...] = ()
    photons: tuple[PhotonCandidate, ...] = ()
    veto_id: Mapping[str, bool] = field(default_factory=dict)
    loose_id: Mapping[str, bool] = field(default_factory=dict)
    medium_id: Mapping[str, bool] = field(default_factory=dict)
    tight_id: Mapping[str, bool] = field(default_factory=dict)
    photon_ch_iso: Mapping[str, float] = field(default_factory=dict)
    photon_nh_iso: Mapping[str, float] = field(default_factory=dict)
    photon_ph_iso: Mapping[str, float] = field(default_factory=dict)
    ecal_iso: Mapping[str, float] | None = None
    hcal_iso: Mapping[str, float] | None = None
    trigger_objects: tuple[TriggerObject, ...] | None = None


@dataclass(eq=False)
class SuperClusterRecord:
    """Output record of the cluster collection."""

    raw_energy: float
    eta: float
    phi: float


@dataclass(eq=False)
class ElectronRecord:
    """Output electron, filled once per selected candidate.

    Records compare and hash by identity so they can be used as identity-map
    keys. `super_cluster` holds the input `Cluster` until references are
    resolved, then the matching `SuperClusterRecord`.
    """

    pt: float
    eta: float
    phi: float
    mass: float = 0.0
    charge: int = 0
    veto: bool = False
    loose: bool = False
    medium: bool = False
    tight: bool = False
    sieie: float = 0.0
    sipip: float = 0.0
    h_over_e: float = 0.0
    chiso: float = 0.0
    nhiso: float = 0.0
    phoiso: float = 0.0
    puiso: float = 0.0
    iso_pu_offset: float = 0.0
    ecaliso: float = 0.0
    hcaliso: float = 0.0
    # Photon-side isolation; stays None when no photon shares the cluster.
    chiso_ph: float | None = None
    nhiso_ph: float | None = None
    phiso_ph: float | None = None
    match_hlt: list[bool] | None = None
    tau_decay: bool | None = None
    had_decay: bool | None = None
    super_cluster: Union[Cluster, SuperClusterRecord, None] = None

    @property
    def neutral_iso_corrected(self) -> float:
        """Neutral-hadron plus photon sum after pileup subtraction."""
        return self.nhiso + self.phoiso - self.iso_pu_offset

    @property
    def combined_iso(self) -> float:
        """Effective-area corrected combined isolation."""
        return self.chiso + max(0.0, self.neutral_iso_corrected)


@dataclass
class OutputEvent:
    """Collections produced for one event."""

    event_id: str
    is_real_data: bool = False
    electrons: list[ElectronRecord] = field(default_factory=list)
    super_clusters: list[SuperClusterRecord] = field(default_factory=list)

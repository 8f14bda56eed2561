"""Pileup-corrected isolation helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from .config import ElectronsConfig
from .effective_area import EffectiveAreaTable
from .errors import ConfigurationError, UpstreamInconsistencyError
from .models import ElectronCandidate


@dataclass(frozen=True)
class IsolationTables:
    """The effective-area tables used by the electron pipeline, loaded once per run."""

    comb: EffectiveAreaTable
    ecal: EffectiveAreaTable
    hcal: EffectiveAreaTable
    photon_ch: EffectiveAreaTable
    photon_nh: EffectiveAreaTable
    photon_ph: EffectiveAreaTable

    @classmethod
    def from_config(cls, config: ElectronsConfig) -> "IsolationTables":
        """Load every table named in `config`."""
        return cls(
            comb=EffectiveAreaTable.from_file(config.comb_iso_ea),
            ecal=EffectiveAreaTable.from_file(config.ecal_iso_ea),
            hcal=EffectiveAreaTable.from_file(config.hcal_iso_ea),
            photon_ch=EffectiveAreaTable.from_file(config.photon_ch_iso_ea),
            photon_nh=EffectiveAreaTable.from_file(config.photon_nh_iso_ea),
            photon_ph=EffectiveAreaTable.from_file(config.photon_ph_iso_ea),
        )


def pileup_offset(table: EffectiveAreaTable, abs_eta: float, rho: float) -> float:
    """Expected pileup contribution `area(|eta|) * rho`."""
    return table.area(abs_eta) * rho


def correct_isolation(raw_sum: float, table: EffectiveAreaTable, abs_eta: float, rho: float) -> float:
    """Return `raw_sum - area(|eta|) * rho`."""
    return raw_sum - pileup_offset(table, abs_eta, rho)


def pf_cluster_isolation(
    candidate: ElectronCandidate,
    ecal_iso: Mapping[str, float] | None,
    hcal_iso: Mapping[str, float] | None,
    component: str = "electrons",
) -> tuple[float, float]:
    """Return raw `(ecal, hcal)` PF-cluster isolation for one candidate.

    Embedded values win. Otherwise the event side-maps are required; a missing
    map is a configuration error.
    """
    if candidate.has_pf_cluster_iso:
        assert candidate.ecal_pf_cluster_iso is not None
        assert candidate.hcal_pf_cluster_iso is not None
        return candidate.ecal_pf_cluster_iso, candidate.hcal_pf_cluster_iso
    if ecal_iso is None:
        raise ConfigurationError(f"{component}: ECAL PF cluster iso missing")
    ecal = side_map_value(ecal_iso, candidate.key, "ecal_iso", component)
    if hcal_iso is None:
        raise ConfigurationError(f"{component}: HCAL PF cluster iso missing")
    hcal = side_map_value(hcal_iso, candidate.key, "hcal_iso", component)
    return ecal, hcal


def side_map_value(mapping: Mapping, key: str, map_name: str, component: str):
    """Look up `key` in an event side-map, reporting a missing entry as upstream inconsistency."""
    try:
        return mapping[key]
    except KeyError as exc:
        raise UpstreamInconsistencyError(
            f"{component}: side-map '{map_name}' has no entry for '{key}'"
        ) from exc

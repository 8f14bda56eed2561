"""Electron collection pipeline.

Per event the filler:
1. Selects candidates (pt, |eta|, veto identification).
2. Builds one `ElectronRecord` per selected candidate: kinematics, ID flags,
   shower shapes, pileup-corrected isolation, photon-side isolation of the
   photon sharing the same cluster, and trigger-match flags.
3. Sorts the records by descending pt.
4. Records candidate -> record and cluster -> record identity maps.

Cluster references are resolved in `set_refs`, after every filler of the
event has run.
"""

from __future__ import annotations

import logging
from typing import Mapping, Sequence

from .base import FillerBase
from .config import ElectronsConfig
from .errors import ConfigurationError, ReferenceResolutionError
from .isolation import IsolationTables, correct_isolation, pf_cluster_isolation, pileup_offset, side_map_value
from .matching import group_trigger_objects, match_photon_isolation, match_trigger
from .models import (
    N_ELECTRON_HLT_CATEGORIES,
    Cluster,
    ElectronCandidate,
    ElectronRecord,
    EventInput,
    OutputEvent,
    SuperClusterRecord,
    TriggerObject,
)
from .object_map import ObjectMapStore
from .ranking import sort_by_pt
from .selection import CandidateSelector

logger = logging.getLogger(__name__)

MC_ONLY_FIELDS = ("tau_decay", "had_decay")
TRIGGER_FIELDS = ("match_hlt",)


class ElectronsFiller(FillerBase):
    """Fill the output electron collection from electron and photon candidates."""

    def __init__(self, config: ElectronsConfig, tables: IsolationTables | None = None) -> None:
        super().__init__(config.name)
        self.config = config
        if config.use_trigger and len(config.hlt_filters) != N_ELECTRON_HLT_CATEGORIES:
            raise ConfigurationError(
                f"{self.name}: hlt_filters has {len(config.hlt_filters)} labels, "
                f"expected {N_ELECTRON_HLT_CATEGORIES}"
            )
        self.tables = tables if tables is not None else IsolationTables.from_config(config)
        self.selector = CandidateSelector(min_pt=config.min_pt, max_eta=config.max_eta, component=self.name)

    def excluded_fields(self, is_real_data: bool) -> list[str]:
        excluded: list[str] = []
        if is_real_data:
            excluded.extend(MC_ONLY_FIELDS)
        if not self.config.use_trigger:
            excluded.extend(TRIGGER_FIELDS)
        return excluded

    def fill(self, out_event: OutputEvent, in_event: EventInput) -> None:
        hlt_objects = self._trigger_groups(in_event)

        candidates = self.selector.select(in_event.electrons, in_event.veto_id)
        records = [self._make_record(c, in_event, hlt_objects) for c in candidates]

        ranked, original_indices = sort_by_pt(records)
        out_event.electrons.extend(ranked)

        ele_map = self.object_map.get(ElectronCandidate, ElectronRecord)
        sc_map = self.object_map.get(Cluster, ElectronRecord)
        for record, idx in zip(ranked, original_indices, strict=True):
            source = candidates[idx]
            ele_map.add(source.key, record)
            sc_map.add(source.cluster, record)

        logger.debug(
            "%s: event %s selected %d of %d candidates",
            self.name,
            in_event.event_id,
            len(ranked),
            len(in_event.electrons),
        )

    def set_refs(self, object_maps: Mapping[str, ObjectMapStore]) -> None:
        """Point each record's `super_cluster` at the output cluster record."""
        source = self.config.cluster_source
        if source not in object_maps:
            raise ConfigurationError(f"{self.name}: no object maps for cluster collection '{source}'")
        sc_map = object_maps[source].get(Cluster, SuperClusterRecord).fwd_map
        sc_ele_map = self.object_map.get(Cluster, ElectronRecord)

        for record, cluster in sc_ele_map.bwd_map.items():
            try:
                record.super_cluster = sc_map[cluster]
            except KeyError as exc:
                raise ReferenceResolutionError(
                    f"{self.name}: cluster '{cluster.key}' has no record in '{source}'"
                ) from exc

    def _trigger_groups(self, in_event: EventInput) -> list[list[TriggerObject]] | None:
        """Trigger objects grouped per category, or None when trigger use is off."""
        if not self.config.use_trigger:
            return None
        if in_event.trigger_objects is None:
            raise ConfigurationError(f"{self.name}: trigger objects missing from event {in_event.event_id}")
        return group_trigger_objects(in_event.trigger_objects, self.config.hlt_filters)

    def _make_record(
        self,
        candidate: ElectronCandidate,
        in_event: EventInput,
        hlt_objects: Sequence[Sequence[TriggerObject]] | None,
    ) -> ElectronRecord:
        key = candidate.key
        record = ElectronRecord(
            pt=candidate.pt,
            eta=candidate.eta,
            phi=candidate.phi,
            mass=candidate.mass,
            charge=candidate.charge,
            veto=True,
            loose=bool(side_map_value(in_event.loose_id, key, "loose_id", self.name)),
            medium=bool(side_map_value(in_event.medium_id, key, "medium_id", self.name)),
            tight=bool(side_map_value(in_event.tight_id, key, "tight_id", self.name)),
            sieie=candidate.sieie,
            sipip=candidate.sipip,
            h_over_e=candidate.h_over_e,
            super_cluster=candidate.cluster,
        )

        sc_eta = abs(candidate.cluster.eta)
        rho = in_event.rho
        rho_calo = in_event.rho_central_calo

        record.chiso = candidate.chiso
        record.nhiso = candidate.nhiso
        record.phoiso = candidate.phoiso
        record.puiso = candidate.puiso
        record.iso_pu_offset = pileup_offset(self.tables.comb, sc_eta, rho)

        ecal_raw, hcal_raw = pf_cluster_isolation(candidate, in_event.ecal_iso, in_event.hcal_iso, self.name)
        record.ecaliso = correct_isolation(ecal_raw, self.tables.ecal, sc_eta, rho_calo)
        record.hcaliso = correct_isolation(hcal_raw, self.tables.hcal, sc_eta, rho_calo)

        photon_iso = match_photon_isolation(
            candidate.cluster,
            in_event.photons,
            (in_event.photon_ch_iso, in_event.photon_nh_iso, in_event.photon_ph_iso),
            (self.tables.photon_ch, self.tables.photon_nh, self.tables.photon_ph),
            sc_eta,
            rho,
            self.name,
        )
        if photon_iso is not None:
            record.chiso_ph, record.nhiso_ph, record.phiso_ph = photon_iso

        if hlt_objects is not None:
            record.match_hlt = match_trigger(candidate.eta, candidate.phi, hlt_objects)

        if not in_event.is_real_data:
            record.tau_decay = False
            record.had_decay = False

        return record

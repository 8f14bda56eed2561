"""Cluster collection pipeline."""

from __future__ import annotations

import logging

from .base import FillerBase
from .config import SuperClustersConfig
from .models import Cluster, EventInput, OutputEvent, SuperClusterRecord

logger = logging.getLogger(__name__)


class SuperClustersFiller(FillerBase):
    """Copy every input cluster into the output and record cluster -> record links."""

    def __init__(self, config: SuperClustersConfig | None = None) -> None:
        config = config or SuperClustersConfig()
        super().__init__(config.name)

    def fill(self, out_event: OutputEvent, in_event: EventInput) -> None:
        sc_map = self.object_map.get(Cluster, SuperClusterRecord)
        for cluster in in_event.clusters:
            record = SuperClusterRecord(raw_energy=cluster.raw_energy, eta=cluster.eta, phi=cluster.phi)
            out_event.super_clusters.append(record)
            sc_map.add(cluster, record)
        logger.debug("%s: event %s filled %d clusters", self.name, in_event.event_id, len(sc_map))

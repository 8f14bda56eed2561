"""Unit tests for the two-phase event processing and cluster reference resolution."""

from __future__ import annotations

import unittest

from elefill import (
    Cluster,
    ConfigurationError,
    EffectiveAreaTable,
    ElectronCandidate,
    ElectronsConfig,
    ElectronsFiller,
    EventInput,
    EventProcessor,
    IdentityMap,
    IsolationTables,
    OutputEvent,
    ReferenceResolutionError,
    SuperClusterRecord,
    SuperClustersFiller,
    UpstreamInconsistencyError,
)


def _electrons_filler(**overrides) -> ElectronsFiller:
    flat = EffectiveAreaTable.from_bins([(5.0, 0.1)])
    tables = IsolationTables(comb=flat, ecal=flat, hcal=flat, photon_ch=flat, photon_nh=flat, photon_ph=flat)
    options = dict(
        comb_iso_ea="comb.txt",
        ecal_iso_ea="ecal.txt",
        hcal_iso_ea="hcal.txt",
        photon_ch_iso_ea="ph_ch.txt",
        photon_nh_iso_ea="ph_nh.txt",
        photon_ph_iso_ea="ph_ph.txt",
    )
    options.update(overrides)
    return ElectronsFiller(ElectronsConfig(**options), tables=tables)


def _event(event_id: str = "evt0", with_orphan: bool = False) -> EventInput:
    """Three clusters, two electrons on the first two; optionally one electron on an unlisted cluster."""
    clusters = (
        Cluster("sc0", eta=0.3, phi=0.1, raw_energy=50.0),
        Cluster("sc1", eta=-1.2, phi=2.0, raw_energy=80.0),
        Cluster("sc2", eta=2.0, phi=-1.0, raw_energy=10.0),
    )
    electrons = [
        ElectronCandidate("e0", pt=30.0, eta=0.3, phi=0.1, cluster=Cluster("sc0"),
                          ecal_pf_cluster_iso=1.0, hcal_pf_cluster_iso=1.0),
        ElectronCandidate("e1", pt=70.0, eta=-1.2, phi=2.0, cluster=Cluster("sc1"),
                          ecal_pf_cluster_iso=1.0, hcal_pf_cluster_iso=1.0),
    ]
    if with_orphan:
        electrons.append(
            ElectronCandidate("e2", pt=20.0, eta=0.0, phi=0.0, cluster=Cluster("sc_missing"),
                              ecal_pf_cluster_iso=1.0, hcal_pf_cluster_iso=1.0)
        )
    keys = [e.key for e in electrons]
    return EventInput(
        event_id=event_id,
        is_real_data=False,
        rho=10.0,
        rho_central_calo=5.0,
        clusters=clusters,
        electrons=tuple(electrons),
        veto_id={k: True for k in keys},
        loose_id={k: True for k in keys},
        medium_id={k: True for k in keys},
        tight_id={k: True for k in keys},
    )


class TestReferenceResolution(unittest.TestCase):
    """Validate that cluster references are rewritten only after every fill."""

    def test_cluster_reference_points_to_output_cluster(self) -> None:
        """After processing each electron references the record built from its cluster."""
        out = EventProcessor([SuperClustersFiller(), _electrons_filler()]).process(_event())
        self.assertEqual([e.pt for e in out.electrons], [70.0, 30.0])
        self.assertEqual(len(out.super_clusters), 3)
        self.assertIs(out.electrons[0].super_cluster, out.super_clusters[1])
        self.assertIs(out.electrons[1].super_cluster, out.super_clusters[0])
        for ele in out.electrons:
            self.assertIsInstance(ele.super_cluster, SuperClusterRecord)

    def test_resolution_does_not_depend_on_filler_order(self) -> None:
        """Electrons filled before clusters still resolve, since resolution waits for all fills."""
        out = EventProcessor([_electrons_filler(), SuperClustersFiller()]).process(_event())
        self.assertIs(out.electrons[0].super_cluster, out.super_clusters[1])
        self.assertIs(out.electrons[1].super_cluster, out.super_clusters[0])

    def test_fill_alone_keeps_input_cluster(self) -> None:
        """Before the resolve phase the reference is still the input cluster."""
        filler = _electrons_filler()
        out = OutputEvent(event_id="evt0")
        filler.fill(out, _event())
        self.assertEqual(out.electrons[0].super_cluster, Cluster("sc1"))
        self.assertIsInstance(out.electrons[0].super_cluster, Cluster)

    def test_unknown_cluster_is_fatal(self) -> None:
        """A cluster missing from the cluster pipeline aborts the event."""
        processor = EventProcessor([SuperClustersFiller(), _electrons_filler()])
        with self.assertRaises(ReferenceResolutionError) as ctx:
            processor.process(_event(with_orphan=True))
        self.assertIn("sc_missing", str(ctx.exception))
        self.assertIsInstance(ctx.exception, UpstreamInconsistencyError)

    def test_missing_cluster_pipeline_is_configuration_error(self) -> None:
        """Resolution needs the configured cluster pipeline to be present."""
        processor = EventProcessor([_electrons_filler(cluster_source="clusters_elsewhere"), SuperClustersFiller()])
        with self.assertRaises(ConfigurationError):
            processor.process(_event())

    def test_duplicate_filler_names_rejected(self) -> None:
        """Each filler name must be unique so its maps can be looked up."""
        with self.assertRaises(ConfigurationError):
            EventProcessor([SuperClustersFiller(), SuperClustersFiller()])

    def test_consecutive_events_are_independent(self) -> None:
        """Maps are rebuilt per event and records of one event never leak into the next."""
        processor = EventProcessor([SuperClustersFiller(), _electrons_filler()])
        outputs = list(processor.process_events([_event("evt0"), _event("evt1")]))
        self.assertEqual([o.event_id for o in outputs], ["evt0", "evt1"])
        first, second = outputs
        self.assertIs(second.electrons[0].super_cluster, second.super_clusters[1])
        self.assertIsNot(second.electrons[0].super_cluster, first.super_clusters[1])

    def test_excluded_fields_per_filler(self) -> None:
        """Schema exclusions are reported per filler name."""
        processor = EventProcessor([SuperClustersFiller(), _electrons_filler()])
        excluded = processor.excluded_fields(is_real_data=True)
        self.assertEqual(excluded["super_clusters"], [])
        self.assertEqual(excluded["electrons"], ["tau_decay", "had_decay", "match_hlt"])


class TestIdentityMap(unittest.TestCase):
    """Validate the one-to-one constraint of identity maps."""

    def test_duplicate_key_or_record_raises(self) -> None:
        """Neither side of the association may be reused."""
        identity_map: IdentityMap = IdentityMap("test")
        rec_a, rec_b = SuperClusterRecord(1.0, 0.0, 0.0), SuperClusterRecord(2.0, 0.0, 0.0)
        identity_map.add("a", rec_a)
        with self.assertRaises(UpstreamInconsistencyError):
            identity_map.add("a", rec_b)
        with self.assertRaises(UpstreamInconsistencyError):
            identity_map.add("b", rec_a)
        self.assertEqual(len(identity_map), 1)
        self.assertIs(identity_map.record_for("a"), rec_a)
        self.assertEqual(identity_map.key_for(rec_a), "a")


if __name__ == "__main__":
    unittest.main()

"""Geometric and identity-based matching helpers."""

from __future__ import annotations

import math
from typing import Mapping, Sequence

from .effective_area import EffectiveAreaTable
from .isolation import correct_isolation, side_map_value
from .models import Cluster, PhotonCandidate, TriggerObject

TRIGGER_MATCH_DR = 0.3


def delta_phi(phi1: float, phi2: float) -> float:
    """Azimuthal difference wrapped into [-pi, pi)."""
    return (phi1 - phi2 + math.pi) % (2.0 * math.pi) - math.pi


def delta_r(eta1: float, phi1: float, eta2: float, phi2: float) -> float:
    """Angular separation `sqrt(deta^2 + dphi^2)`."""
    return math.hypot(eta1 - eta2, delta_phi(phi1, phi2))


def match_photon_isolation(
    cluster: Cluster,
    photons: Sequence[PhotonCandidate],
    iso_maps: tuple[Mapping[str, float], Mapping[str, float], Mapping[str, float]],
    tables: tuple[EffectiveAreaTable, EffectiveAreaTable, EffectiveAreaTable],
    abs_eta: float,
    rho: float,
    component: str = "electrons",
) -> tuple[float, float, float] | None:
    """Return corrected `(ch, nh, ph)` isolation of the photon sharing `cluster`.

    Every photon with the same cluster overwrites the previous result, so the
    last one in collection order wins. Returns `None` when no photon matches.
    """
    result: tuple[float, float, float] | None = None
    map_names = ("photon_ch_iso", "photon_nh_iso", "photon_ph_iso")
    for photon in photons:
        if photon.cluster != cluster:
            continue
        result = tuple(
            correct_isolation(
                side_map_value(iso_map, photon.key, map_name, component),
                table,
                abs_eta,
                rho,
            )
            for iso_map, table, map_name in zip(iso_maps, tables, map_names, strict=True)
        )
    return result


def group_trigger_objects(
    trigger_objects: Sequence[TriggerObject],
    filter_labels: Sequence[str],
) -> list[list[TriggerObject]]:
    """Split trigger objects into one list per filter label (objects may appear in several)."""
    groups: list[list[TriggerObject]] = [[] for _ in filter_labels]
    for obj in trigger_objects:
        for idx, label in enumerate(filter_labels):
            if obj.has_filter_label(label):
                groups[idx].append(obj)
    return groups


def match_trigger(
    eta: float,
    phi: float,
    groups: Sequence[Sequence[TriggerObject]],
    max_dr: float = TRIGGER_MATCH_DR,
) -> list[bool]:
    """Return one flag per category: any object of that category within `max_dr`.

    The scan of a category stops at the first object inside the cone.
    """
    flags = [False] * len(groups)
    for idx, objects in enumerate(groups):
        for obj in objects:
            if delta_r(eta, phi, obj.eta, obj.phi) < max_dr:
                flags[idx] = True
                break
    return flags

"""Input/output helpers for JSON event inputs and tabular record export."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Sequence

from .models import (
    ELECTRON_HLT_CATEGORIES,
    Cluster,
    ElectronCandidate,
    EventInput,
    OutputEvent,
    PhotonCandidate,
    TriggerObject,
)

logger = logging.getLogger(__name__)

_ELECTRON_COLUMNS = (
    "pt",
    "eta",
    "phi",
    "mass",
    "charge",
    "veto",
    "loose",
    "medium",
    "tight",
    "sieie",
    "sipip",
    "h_over_e",
    "chiso",
    "nhiso",
    "phoiso",
    "puiso",
    "iso_pu_offset",
    "ecaliso",
    "hcaliso",
    "chiso_ph",
    "nhiso_ph",
    "phiso_ph",
    "tau_decay",
    "had_decay",
)


def load_events_json(path: str | Path) -> list[EventInput]:
    """Load multi-event input JSON into `EventInput` objects.

    Expected shape:
    {
      "events": [
        {"event_id": "...", "is_real_data": false, "rho": ..., "rho_central_calo": ...,
         "clusters": [...], "electrons": [...], "photons": [...],
         "trigger_objects": [...], "ecal_iso": {...}, "hcal_iso": {...}},
        ...
      ]
    }
    """
    data = _load_json(path)
    events_data = data.get("events")
    if not isinstance(events_data, list):
        raise ValueError("Events JSON must contain a list under key 'events'.")
    events = [_parse_event(item, idx) for idx, item in enumerate(events_data)]
    logger.info("Loaded %d events from %s", len(events), path)
    return events


def write_electrons_table(
    path: str | Path,
    events: Iterable[OutputEvent],
    excluded: Sequence[str] = (),
) -> None:
    """Write one row per output electron into a Parquet/CSV/Pickle table."""
    _write_table(path, electron_rows(events, excluded))


def write_super_clusters_table(path: str | Path, events: Iterable[OutputEvent]) -> None:
    """Write one row per output cluster."""
    rows: list[dict[str, Any]] = []
    for event in events:
        for idx, sc in enumerate(event.super_clusters):
            rows.append(
                {"event_id": event.event_id, "index": idx, "raw_energy": sc.raw_energy, "eta": sc.eta, "phi": sc.phi}
            )
    _write_table(path, rows)


def write_trigger_table(path: str | Path, hlt_filters: Sequence[str]) -> None:
    """Write the trigger-category table: index, category name, filter label."""
    rows = [
        {"index": idx, "category": category, "filter": label}
        for idx, (category, label) in enumerate(zip(ELECTRON_HLT_CATEGORIES, hlt_filters, strict=True))
    ]
    _write_table(path, rows)


def electron_rows(events: Iterable[OutputEvent], excluded: Sequence[str] = ()) -> list[dict[str, Any]]:
    """Flatten output electrons into DataFrame-ready row dictionaries.

    `super_cluster` becomes the index of the referenced record in the event's
    cluster collection (None if the reference was never resolved).
    """
    skip = set(excluded)
    rows: list[dict[str, Any]] = []
    for event in events:
        sc_index = {id(sc): idx for idx, sc in enumerate(event.super_clusters)}
        for idx, ele in enumerate(event.electrons):
            row: dict[str, Any] = {"event_id": event.event_id, "index": idx}
            for column in _ELECTRON_COLUMNS:
                if column not in skip:
                    row[column] = getattr(ele, column)
            if "match_hlt" not in skip:
                flags = ele.match_hlt or [False] * len(ELECTRON_HLT_CATEGORIES)
                for category, flag in zip(ELECTRON_HLT_CATEGORIES, flags, strict=True):
                    row[f"match_hlt_{category}"] = flag
            row["super_cluster"] = sc_index.get(id(ele.super_cluster))
            rows.append(row)
    return rows


def _write_table(path: str | Path, rows: list[dict[str, Any]]) -> None:
    """Write rows into Parquet/CSV/Pickle depending on the file suffix."""
    pd = _require_pandas()
    df = pd.DataFrame(rows)
    out = Path(path)
    suffix = out.suffix.lower()
    if suffix == ".parquet":
        df.to_parquet(out, index=False)
    elif suffix in (".pkl", ".pickle"):
        df.to_pickle(out)
    elif suffix == ".csv":
        df.to_csv(out, index=False)
    else:
        raise ValueError(
            f"Unsupported output format '{suffix}'. Use .parquet, .csv, or .pkl"
        )
    logger.info("Wrote %d rows to %s", len(df), out)


def _require_pandas():
    """Import pandas lazily and provide a clear installation hint on failure."""
    try:
        import pandas as pd  # type: ignore
    except ModuleNotFoundError as exc:
        raise ModuleNotFoundError(
            "pandas is required to write output tables. Install pandas and pyarrow."
        ) from exc
    return pd


def _parse_event(item: Any, idx: int) -> EventInput:
    """Parse one event dictionary into an `EventInput`."""
    if not isinstance(item, dict):
        raise ValueError(f"Event entry at index {idx} must be an object.")
    event_id = str(item.get("event_id", f"evt{idx}"))
    context = f"event '{event_id}'"

    clusters = tuple(
        _parse_cluster(c, cidx, context) for cidx, c in enumerate(_list_field(item, "clusters", context))
    )
    cluster_by_key = {c.key: c for c in clusters}
    if len(cluster_by_key) != len(clusters):
        raise ValueError(f"Duplicate cluster keys in {context}.")

    electrons_data = _list_field(item, "electrons", context)
    photons_data = _list_field(item, "photons", context)
    electrons = tuple(
        _parse_electron(e, eidx, context, cluster_by_key) for eidx, e in enumerate(electrons_data)
    )
    photons = tuple(
        _parse_photon(p, pidx, context, cluster_by_key) for pidx, p in enumerate(photons_data)
    )

    trigger_data = item.get("trigger_objects")
    if trigger_data is None:
        trigger_objects = None
    elif isinstance(trigger_data, list):
        trigger_objects = tuple(_parse_trigger_object(t, tidx, context) for tidx, t in enumerate(trigger_data))
    else:
        raise ValueError(f"Key 'trigger_objects' in {context} must be a list.")

    return EventInput(
        event_id=event_id,
        is_real_data=bool(item.get("is_real_data", False)),
        rho=float(item.get("rho", 0.0)),
        rho_central_calo=float(item.get("rho_central_calo", 0.0)),
        clusters=clusters,
        electrons=electrons,
        photons=photons,
        veto_id=_side_map(electrons_data, "veto", bool),
        loose_id=_side_map(electrons_data, "loose", bool),
        medium_id=_side_map(electrons_data, "medium", bool),
        tight_id=_side_map(electrons_data, "tight", bool),
        photon_ch_iso=_side_map(photons_data, "ch_iso", float),
        photon_nh_iso=_side_map(photons_data, "nh_iso", float),
        photon_ph_iso=_side_map(photons_data, "ph_iso", float),
        ecal_iso=_optional_float_map(item, "ecal_iso", context),
        hcal_iso=_optional_float_map(item, "hcal_iso", context),
        trigger_objects=trigger_objects,
    )


def _side_map(objects: list[Any], field: str, convert) -> dict[str, Any]:
    """Collect one per-object value keyed by object key; objects without the field get no entry."""
    return {str(obj["key"]): convert(obj[field]) for obj in objects if field in obj}


def _parse_cluster(item: Any, idx: int, context: str) -> Cluster:
    if not isinstance(item, dict):
        raise ValueError(f"Cluster entry at index {idx} in {context} must be an object.")
    return Cluster(
        key=str(item.get("key", f"sc{idx}")),
        eta=float(item["eta"]),
        phi=float(item["phi"]),
        raw_energy=float(item.get("raw_energy", 0.0)),
    )


def _parse_electron(item: Any, idx: int, context: str, clusters: dict[str, Cluster]) -> ElectronCandidate:
    """Parse one electron dictionary; `cluster` must name a cluster of the same event."""
    if not isinstance(item, dict):
        raise ValueError(f"Electron entry at index {idx} in {context} must be an object.")
    if "key" not in item:
        raise ValueError(f"Electron entry at index {idx} in {context} must define 'key'.")
    ecal = item.get("ecal_pf_cluster_iso")
    hcal = item.get("hcal_pf_cluster_iso")
    return ElectronCandidate(
        key=str(item["key"]),
        pt=float(item["pt"]),
        eta=float(item["eta"]),
        phi=float(item["phi"]),
        cluster=_cluster_ref(item, clusters, context),
        mass=float(item.get("mass", 0.0)),
        charge=int(item.get("charge", 0)),
        sieie=float(item.get("sieie", 0.0)),
        sipip=float(item.get("sipip", 0.0)),
        h_over_e=float(item.get("h_over_e", 0.0)),
        chiso=float(item.get("chiso", 0.0)),
        nhiso=float(item.get("nhiso", 0.0)),
        phoiso=float(item.get("phoiso", 0.0)),
        puiso=float(item.get("puiso", 0.0)),
        ecal_pf_cluster_iso=None if ecal is None else float(ecal),
        hcal_pf_cluster_iso=None if hcal is None else float(hcal),
    )


def _parse_photon(item: Any, idx: int, context: str, clusters: dict[str, Cluster]) -> PhotonCandidate:
    if not isinstance(item, dict):
        raise ValueError(f"Photon entry at index {idx} in {context} must be an object.")
    if "key" not in item:
        raise ValueError(f"Photon entry at index {idx} in {context} must define 'key'.")
    return PhotonCandidate(
        key=str(item["key"]),
        pt=float(item.get("pt", 0.0)),
        eta=float(item.get("eta", 0.0)),
        phi=float(item.get("phi", 0.0)),
        cluster=_cluster_ref(item, clusters, context),
    )


def _parse_trigger_object(item: Any, idx: int, context: str) -> TriggerObject:
    if not isinstance(item, dict):
        raise ValueError(f"Trigger object at index {idx} in {context} must be an object.")
    labels = item.get("filter_labels", [])
    if not isinstance(labels, list):
        raise ValueError(f"Trigger object field 'filter_labels' in {context} must be a list.")
    return TriggerObject(eta=float(item["eta"]), phi=float(item["phi"]), filter_labels=tuple(str(x) for x in labels))


def _cluster_ref(item: dict[str, Any], clusters: dict[str, Cluster], context: str) -> Cluster:
    key = str(item.get("cluster"))
    try:
        return clusters[key]
    except KeyError as exc:
        raise ValueError(f"Object '{item.get('key')}' in {context} references unknown cluster '{key}'.") from exc


def _list_field(item: dict[str, Any], key: str, context: str) -> list[Any]:
    value = item.get(key, [])
    if not isinstance(value, list):
        raise ValueError(f"Key '{key}' in {context} must be a list.")
    return value


def _optional_float_map(item: dict[str, Any], key: str, context: str) -> dict[str, float] | None:
    value = item.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ValueError(f"Key '{key}' in {context} must be an object keyed by electron key.")
    return {str(k): float(v) for k, v in value.items()}


def _load_json(path: str | Path) -> dict[str, Any]:
    """Read and validate a JSON object document from disk."""
    raw = Path(path).read_text(encoding="utf-8")
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError(f"JSON document at {path} must be an object.")
    return data

"""Run configuration for the filler pipelines.

Configuration objects are built once per run and passed by reference into
every per-event call. JSON documents use the same key names as the dataclass
fields.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from .errors import ConfigurationError

_TABLE_KEYS = (
    "comb_iso_ea",
    "ecal_iso_ea",
    "hcal_iso_ea",
    "photon_ch_iso_ea",
    "photon_nh_iso_ea",
    "photon_ph_iso_ea",
)


@dataclass(frozen=True)
class ElectronsConfig:
    """Options for the electron pipeline.

    `min_pt` / `max_eta` set to `None` disable the corresponding cut.
    `hlt_filters` lists one filter label per trigger-match category and is
    only consulted when `use_trigger` is set.
    """

    comb_iso_ea: str
    ecal_iso_ea: str
    hcal_iso_ea: str
    photon_ch_iso_ea: str
    photon_nh_iso_ea: str
    photon_ph_iso_ea: str
    min_pt: float | None = None
    max_eta: float | None = None
    use_trigger: bool = False
    hlt_filters: tuple[str, ...] = ()
    cluster_source: str = "super_clusters"
    name: str = "electrons"


@dataclass(frozen=True)
class SuperClustersConfig:
    """Options for the cluster pipeline."""

    name: str = "super_clusters"


@dataclass(frozen=True)
class RunConfig:
    """Everything read from one configuration document."""

    electrons: ElectronsConfig
    super_clusters: SuperClustersConfig


def load_config_json(path: str | Path) -> RunConfig:
    """Load a run configuration document.

    Expected shape:
    {
      "electrons": {"comb_iso_ea": "...", ..., "min_pt": 10.0, "use_trigger": true,
                    "hlt_filters": [...]},
      "super_clusters": {"name": "super_clusters"}
    }

    Relative table paths are resolved against the config file directory.
    """
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Cannot read configuration {p}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration document at {p} must be an object.")

    electrons_data = data.get("electrons")
    if not isinstance(electrons_data, dict):
        raise ConfigurationError(f"Configuration {p} must contain an 'electrons' object.")
    sc_data = data.get("super_clusters", {})
    if not isinstance(sc_data, dict):
        raise ConfigurationError(f"Configuration {p} key 'super_clusters' must be an object.")

    return RunConfig(
        electrons=parse_electrons_config(electrons_data, base_dir=p.parent),
        super_clusters=SuperClustersConfig(**_checked_kwargs(SuperClustersConfig, sc_data, "super_clusters")),
    )


def parse_electrons_config(data: dict[str, Any], base_dir: str | Path | None = None) -> ElectronsConfig:
    """Build an `ElectronsConfig` from a plain mapping."""
    kwargs = _checked_kwargs(ElectronsConfig, data, "electrons")
    missing = [k for k in _TABLE_KEYS if k not in kwargs]
    if missing:
        raise ConfigurationError(
            f"electrons: missing effective-area table option(s): {', '.join(missing)}"
        )
    for key in _TABLE_KEYS:
        kwargs[key] = _resolve_path(kwargs[key], base_dir)
    for key in ("min_pt", "max_eta"):
        if kwargs.get(key) is not None:
            kwargs[key] = float(kwargs[key])
    if "use_trigger" in kwargs and not isinstance(kwargs["use_trigger"], bool):
        raise ConfigurationError("electrons: 'use_trigger' must be true or false.")
    if "hlt_filters" in kwargs:
        filters = kwargs["hlt_filters"]
        if not isinstance(filters, (list, tuple)):
            raise ConfigurationError("electrons: 'hlt_filters' must be a list of labels.")
        kwargs["hlt_filters"] = tuple(str(x) for x in filters)
    return ElectronsConfig(**kwargs)


def _checked_kwargs(cls, data: dict[str, Any], section: str) -> dict[str, Any]:
    """Reject keys that are not fields of `cls`."""
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(f"{section}: unknown option(s): {', '.join(unknown)}")
    return dict(data)


def _resolve_path(value: Any, base_dir: str | Path | None) -> str:
    path = Path(str(value))
    if base_dir is not None and not path.is_absolute():
        path = Path(base_dir) / path
    return str(path)

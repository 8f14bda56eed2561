"""Public package exports for the electron filler."""

from .base import FillerBase
from .config import ElectronsConfig, RunConfig, SuperClustersConfig, load_config_json
from .effective_area import EffectiveAreaTable
from .electrons import ElectronsFiller
from .errors import (
    ConfigurationError,
    EffectiveAreaError,
    FillerError,
    ReferenceResolutionError,
    UpstreamInconsistencyError,
)
from .isolation import IsolationTables, correct_isolation
from .models import (
    ELECTRON_HLT_CATEGORIES,
    Cluster,
    ElectronCandidate,
    ElectronRecord,
    EventInput,
    OutputEvent,
    PhotonCandidate,
    SuperClusterRecord,
    TriggerObject,
)
from .object_map import IdentityMap, ObjectMapStore
from .processor import EventProcessor
from .selection import CandidateSelector
from .superclusters import SuperClustersFiller

__all__ = [
    "ElectronsFiller",
    "SuperClustersFiller",
    "FillerBase",
    "EventProcessor",
    "ElectronsConfig",
    "SuperClustersConfig",
    "RunConfig",
    "load_config_json",
    "EffectiveAreaTable",
    "IsolationTables",
    "correct_isolation",
    "CandidateSelector",
    "IdentityMap",
    "ObjectMapStore",
    "Cluster",
    "ElectronCandidate",
    "PhotonCandidate",
    "TriggerObject",
    "EventInput",
    "ElectronRecord",
    "SuperClusterRecord",
    "OutputEvent",
    "ELECTRON_HLT_CATEGORIES",
    "FillerError",
    "ConfigurationError",
    "EffectiveAreaError",
    "UpstreamInconsistencyError",
    "ReferenceResolutionError",
]

"""hepselect: event selection for particle-collision generator runs."""

from __future__ import annotations

__version__ = "0.1.0"

from .models import Event, EventBuilder, Particle, Vertex, STABLE_STATUS
from .oscillation import is_genuine_production
from .topology import daughters, daughters_of, is_charged_track_species, collect_charged_tracks
from .tracks import TrackSet
from .policies import (
    Decision,
    AdmissionPolicy,
    AcceptAllPolicy,
    StableMultiplicityPolicy,
    SoftPairPolicy,
    KeySpeciesPolicy,
    InclusiveSignalPolicy,
)
from .registry import available_policies, make_policy, register_policy
from .collaborators import EventSource, EventSink, IterableSource, CallableSource, RecordingSink, CallableSink, SourceExhausted
from .run import RunReport, run_selection
from .config import ConfigError, RunConfig, run_from_config
from .validation import validate

__all__ = [
    "__version__",
    "Event",
    "EventBuilder",
    "Particle",
    "Vertex",
    "STABLE_STATUS",
    "is_genuine_production",
    "daughters",
    "daughters_of",
    "is_charged_track_species",
    "collect_charged_tracks",
    "TrackSet",
    "Decision",
    "AdmissionPolicy",
    "AcceptAllPolicy",
    "StableMultiplicityPolicy",
    "SoftPairPolicy",
    "KeySpeciesPolicy",
    "InclusiveSignalPolicy",
    "available_policies",
    "make_policy",
    "register_policy",
    "EventSource",
    "EventSink",
    "IterableSource",
    "CallableSource",
    "RecordingSink",
    "CallableSink",
    "SourceExhausted",
    "RunReport",
    "run_selection",
    "ConfigError",
    "RunConfig",
    "run_from_config",
    "validate",
]

from __future__ import annotations

import logging
from importlib import metadata
from typing import Any, Callable, Dict, List

from .policies import (
    AcceptAllPolicy,
    AdmissionPolicy,
    InclusiveSignalPolicy,
    KeySpeciesPolicy,
    SoftPairPolicy,
    StableMultiplicityPolicy,
)

logger = logging.getLogger(__name__)

PolicyFactory = Callable[..., AdmissionPolicy]

_REGISTRY: Dict[str, PolicyFactory] = {}

_PLUGINS_LOADED = False


def register_policy(name: str, factory: PolicyFactory) -> None:
    _REGISTRY[name] = factory


def load_plugins() -> None:
    """Register third-party policies from the ``hepselect.policies`` entry points.

    Each entry point must load to a callable returning ``(name, factory)``.
    """
    global _PLUGINS_LOADED
    if _PLUGINS_LOADED:
        return
    _PLUGINS_LOADED = True

    for ep in metadata.entry_points(group="hepselect.policies"):
        try:
            name, factory = ep.load()()
        except Exception as e:
            logger.warning("Skipping policy plugin %s: %s", ep.name, e)
            continue
        register_policy(name, factory)


def available_policies() -> List[str]:
    load_plugins()
    return sorted(_REGISTRY)


def make_policy(name: str, **options: Any) -> AdmissionPolicy:
    load_plugins()
    if name not in _REGISTRY:
        raise ValueError(f"Unknown policy: {name}. Available: {', '.join(sorted(_REGISTRY))}")
    try:
        return _REGISTRY[name](**options)
    except TypeError as e:
        raise ValueError(f"Bad options for policy '{name}': {e}") from e


for _cls in (
    AcceptAllPolicy,
    StableMultiplicityPolicy,
    SoftPairPolicy,
    KeySpeciesPolicy,
    InclusiveSignalPolicy,
):
    register_policy(_cls.name, _cls)

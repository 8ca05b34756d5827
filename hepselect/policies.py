"""
Admission policies.

A policy looks at one event and returns a ``Decision``: whether the event is
kept, and how many units it contributes towards the run target. Policies keep
no per-event state between calls; they only accumulate run-level tallies,
exposed through ``summary()`` for the final report.

Built-in policies:
    AcceptAllPolicy           every generated event
    StableMultiplicityPolicy  events with few final-state particles
    SoftPairPolicy            a particle pair, both below a momentum threshold
    KeySpeciesPolicy          genuine productions of one species
    InclusiveSignalPolicy     B -> K pi tau(-> 3 pi) with >= 3 extra tracks
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional

from . import pdg
from .models import Event, Particle
from .oscillation import is_genuine_production
from .topology import collect_charged_tracks, daughters
from .tracks import TrackSet

logger = logging.getLogger(__name__)

TAU = 15
PION = 211
KAON = 321


@dataclass(frozen=True)
class Decision:
    admit: bool
    increment: int = 0

    @classmethod
    def reject(cls) -> Decision:
        return cls(False, 0)

    @classmethod
    def units(cls, n: int) -> Decision:
        """Admit with ``n`` units; ``n == 0`` is a rejection."""
        return cls(n > 0, n)


class AdmissionPolicy(ABC):
    name = ""

    @abstractmethod
    def decide(self, event: Event) -> Decision:
        ...

    def summary(self) -> Dict[str, Any]:
        return {}

    def describe(self) -> str:
        """What one admitted unit is, for progress messages."""
        return "events"


class AcceptAllPolicy(AdmissionPolicy):
    name = "all"

    def decide(self, event: Event) -> Decision:
        return Decision.units(1)


class StableMultiplicityPolicy(AdmissionPolicy):
    """Keep events with at most ``max_stable`` final-state particles."""

    name = "stable-multiplicity"

    def __init__(self, max_stable: int = 7) -> None:
        if max_stable < 0:
            raise ValueError("max_stable must be >= 0")
        self.max_stable = max_stable
        self.histogram: Counter[int] = Counter()

    def decide(self, event: Event) -> Decision:
        n_stable = event.n_final
        if n_stable > self.max_stable:
            return Decision.reject()
        self.histogram[n_stable] += 1
        return Decision.units(1)

    def summary(self) -> Dict[str, Any]:
        return {"stable_multiplicity": dict(sorted(self.histogram.items()))}

    def describe(self) -> str:
        return f"events with {self.max_stable} or less particles in the final state"


class SoftPairPolicy(AdmissionPolicy):
    """Keep events where both designated particles are softer than a threshold.

    The designated particle of a species is its last copy in the record
    (generators append recoil copies after the original).
    """

    name = "soft-pair"

    def __init__(self, species: Iterable[int] = (12, -12), max_momentum: float = 1.0) -> None:
        self.species = tuple(int(s) for s in species)
        if len(self.species) != 2:
            raise ValueError("species must name exactly two PDG IDs")
        if max_momentum <= 0:
            raise ValueError("max_momentum must be > 0")
        self.max_momentum = float(max_momentum)
        self.n_pair_found = 0
        self.n_admitted = 0

    def _designated(self, event: Event, pdg_id: int) -> Optional[Particle]:
        found = None
        for p in event.particles:
            if p.pdg_id == pdg_id:
                found = p
        return found

    def decide(self, event: Event) -> Decision:
        pair = [self._designated(event, s) for s in self.species]
        if any(p is None for p in pair):
            return Decision.reject()
        self.n_pair_found += 1
        if all(p.p < self.max_momentum for p in pair):
            self.n_admitted += 1
            return Decision.units(1)
        return Decision.reject()

    def summary(self) -> Dict[str, Any]:
        return {"pair_found": self.n_pair_found, "admitted": self.n_admitted}

    def describe(self) -> str:
        return f"events with {pdg.names(self.species)} below {self.max_momentum:g} GeV"


class KeySpeciesPolicy(AdmissionPolicy):
    """Count genuine productions of ``key_species``.

    An event with two B0 contributes two units.
    """

    name = "key-species"

    def __init__(self, key_species: int = 511) -> None:
        self.key_species = abs(int(key_species))

    def decide(self, event: Event) -> Decision:
        n = sum(1 for p in event.particles_with((self.key_species,)) if is_genuine_production(p))
        return Decision.units(n)

    def describe(self) -> str:
        return f"events with {pdg.name(self.key_species)} production"


@dataclass
class CandidateResult:
    """Bookkeeping for one B candidate of the inclusive selection."""

    b: Particle
    n_tau: int = 0
    n_tau_to_3pi: int = 0
    k_found: bool = False
    pi_found: bool = False
    excluded: TrackSet = field(default_factory=TrackSet)
    tracks: TrackSet = field(default_factory=TrackSet)

    @property
    def tau_found(self) -> bool:
        return self.n_tau > 0

    @property
    def tau_to_3pi(self) -> bool:
        return self.n_tau_to_3pi > 0

    @property
    def n_tracks(self) -> int:
        return len(self.tracks)


class InclusiveSignalPolicy(AdmissionPolicy):
    """Search for B -> K pi tau, tau -> 3 pi with at least three further tracks.

    For every genuinely produced B candidate the three pions of a
    tau -> 3 pi decay are excluded from the charged-track count, and the
    remaining charged tracks among the B descendants are counted (up to three
    generations deep, each particle once). With ``exclude_signal_hadrons`` the
    direct K and pi daughters of the B are excluded as well.

    Each accepted candidate is one unit, so an event with two accepted
    candidates counts twice.
    """

    name = "inclusive-signal"

    def __init__(
        self,
        b_species: Iterable[int] = (511,),
        *,
        min_tracks: int = 3,
        exclude_signal_hadrons: bool = False,
    ) -> None:
        self.b_species = frozenset(abs(int(s)) for s in b_species)
        if not self.b_species:
            raise ValueError("b_species must not be empty")
        self.min_tracks = min_tracks
        self.exclude_signal_hadrons = exclude_signal_hadrons
        self.n_b = 0
        self.n_tau = 0
        self.n_tau_to_3pi = 0
        self.n_three_tracks = 0
        self.n_accepted = 0

    def examine(self, event: Event, b: Particle) -> CandidateResult:
        """Classify the decay products of one B candidate."""
        res = CandidateResult(b=b)

        for d in daughters(event, b):
            aid = abs(d.pdg_id)
            if aid == TAU:
                res.n_tau += 1
                pions = TrackSet(g for g in daughters(event, d) if abs(g.pdg_id) == PION)
                if len(pions) == 3:
                    res.n_tau_to_3pi += 1
                    res.excluded.update(pions)
            elif aid == PION:
                res.pi_found = True
                if self.exclude_signal_hadrons:
                    res.excluded.add(d)
            elif aid == KAON:
                res.k_found = True
                if self.exclude_signal_hadrons:
                    res.excluded.add(d)

        # The exclusion set must be complete before tracks are collected.
        res.tracks = collect_charged_tracks(event, b, res.excluded)
        return res

    def decide(self, event: Event) -> Decision:
        n = 0
        for b in event.particles:
            if abs(b.pdg_id) not in self.b_species or not is_genuine_production(b):
                continue
            self.n_b += 1
            res = self.examine(event, b)
            self.n_tau += res.n_tau
            self.n_tau_to_3pi += res.n_tau_to_3pi
            if res.n_tracks >= self.min_tracks:
                self.n_three_tracks += 1
            if res.tau_to_3pi and res.k_found and res.pi_found and res.n_tracks >= self.min_tracks:
                n += 1
                logger.debug("Signal candidate accepted in event %d: B barcode %d", event.event_number, b.barcode)
            elif res.tau_found and res.k_found and res.pi_found:
                logger.debug(
                    "Event %d: tau%s, pi and K found with %d charged tracks; excluded %s, tracks %s",
                    event.event_number,
                    "->pipipi" if res.tau_to_3pi else "",
                    res.n_tracks,
                    sorted(res.excluded.barcodes),
                    sorted(res.tracks.barcodes),
                )
        self.n_accepted += n
        return Decision.units(n)

    def summary(self) -> Dict[str, Any]:
        return {
            "b_found": self.n_b,
            "tau_found": self.n_tau,
            "tau_to_3pi": self.n_tau_to_3pi,
            "three_tracks": self.n_three_tracks,
            "accepted": self.n_accepted,
        }

    def describe(self) -> str:
        return f"{pdg.names(sorted(self.b_species))} -> K pi tau decays"

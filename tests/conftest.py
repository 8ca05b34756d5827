"""Test fixtures.

Events are assembled in memory with ``EventBuilder``. The signal topology
used throughout is

    B0 -> K+ pi- tau+ [pi ...],  tau+ -> pi+ pi- pi+ nu_tau

with every vertex at its own spatial point.
"""

from __future__ import annotations

import pytest

from hepselect.models import STABLE_STATUS, EventBuilder, Vertex

DECAYED = 2


def add_signal_b(
    builder: EventBuilder,
    production: Vertex,
    *,
    offset: float = 0.0,
    b_pdg: int = 511,
    extra_pions: int = 0,
    tau_pions: int = 3,
):
    """Attach a B -> K pi tau decay chain to ``production``; return the B."""
    bv = builder.add_vertex(1.0 + offset, 0.5, 0.0, 1.0)
    b = builder.add_particle(b_pdg, DECAYED, 0.0, 0.0, 10.0, 5.28, production=production, end=bv)
    builder.add_particle(321, STABLE_STATUS, 1.0, 0.0, 2.0, 0.494, production=bv)
    builder.add_particle(-211, STABLE_STATUS, -1.0, 0.0, 2.0, 0.140, production=bv)
    tv = builder.add_vertex(2.0 + offset, 0.5, 0.0, 2.0)
    builder.add_particle(-15, DECAYED, 0.0, 1.0, 4.0, 1.777, production=bv, end=tv)
    for i in range(tau_pions):
        builder.add_particle(211 if i % 2 == 0 else -211, STABLE_STATUS, 0.1, 0.3, 1.0, 0.140, production=tv)
    builder.add_particle(-16, STABLE_STATUS, 0.0, 0.1, 0.5, 0.0, production=tv)
    for _ in range(extra_pions):
        builder.add_particle(211, STABLE_STATUS, 0.2, -0.2, 1.0, 0.140, production=bv)
    return b


@pytest.fixture
def builder() -> EventBuilder:
    return EventBuilder()


@pytest.fixture
def make_signal_event():
    """Factory: event with ``n_candidates`` independent B -> K pi tau chains."""

    def _make(n_candidates: int = 1, extra_pions: int = 0, tau_pions: int = 3, b_pdg: int = 511, event_number: int = 1):
        b = EventBuilder()
        pv = b.add_vertex()
        b.add_particle(11, 4, 0.0, 0.0, 45.6, 0.000511, end=pv)
        b.add_particle(-11, 4, 0.0, 0.0, -45.6, 0.000511, end=pv)
        for i in range(n_candidates):
            add_signal_b(b, pv, offset=10.0 * i, b_pdg=b_pdg, extra_pions=extra_pions, tau_pions=tau_pions)
        return b.build(event_number)

    return _make


@pytest.fixture
def make_stable_event():
    """Factory: event with ``n_stable`` final-state photons from one vertex."""

    def _make(n_stable: int, event_number: int = 1):
        b = EventBuilder()
        pv = b.add_vertex()
        b.add_particle(11, 4, 0.0, 0.0, 45.6, end=pv)
        b.add_particle(-11, 4, 0.0, 0.0, -45.6, end=pv)
        for _ in range(n_stable):
            b.add_particle(22, STABLE_STATUS, 1.0, 0.0, 0.0, production=pv)
        return b.build(event_number)

    return _make

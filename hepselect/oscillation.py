"""Neutral B meson oscillation tagging.

A B0 that oscillated into its antiparticle appears twice in the generator
record: once at production, once as the charge conjugate produced from a
1 -> 1 "decay" of the first. Only the first one is a genuine production.
"""

from __future__ import annotations

from .models import Particle

# |PDG ID| of species that undergo flavour oscillation (B0, Bs0).
OSCILLATING_SPECIES = frozenset({511, 531})


def is_genuine_production(particle: Particle) -> bool:
    """Return False iff ``particle`` is the oscillation image of its parent."""
    if abs(particle.pdg_id) not in OSCILLATING_SPECIES:
        return True
    vertex = particle.production_vertex
    if vertex is None:
        return True
    if len(vertex.incoming) != 1:
        return True
    return vertex.incoming[0].pdg_id != -particle.pdg_id

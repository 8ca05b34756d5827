"""PDG helpers.

Names come from the scikit-hep "particle" package. Species it does not know
are labelled with their raw numeric code.
"""

from __future__ import annotations

from particle import PDGID, InvalidParticle, Particle, ParticleNotFound


def is_valid_pdg_id(pdg_id: int) -> bool:
    return bool(PDGID(pdg_id).is_valid)


def name(pdg_id: int) -> str:
    try:
        return Particle.from_pdgid(pdg_id).name
    except (ParticleNotFound, InvalidParticle):
        return str(pdg_id)


def names(pdg_ids) -> str:
    """Comma-separated labels, e.g. for log lines."""
    return ", ".join(name(i) for i in pdg_ids)

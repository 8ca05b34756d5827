from __future__ import annotations

import pytest

from hepselect.models import EventBuilder
from hepselect.oscillation import is_genuine_production


def _oscillation_chain(parent_pdg: int, child_pdg: int):
    b = EventBuilder()
    pv = b.add_vertex()
    ov = b.add_vertex(0.5, 0.0, 0.0, 0.5)
    parent = b.add_particle(parent_pdg, 2, production=pv, end=ov)
    child = b.add_particle(child_pdg, 2, production=ov)
    return parent, child


@pytest.mark.parametrize("pdg_id", [211, -321, 15, 521, 421])
def test_non_oscillating_species_are_always_genuine(pdg_id):
    # Even when produced from its own charge conjugate.
    _, child = _oscillation_chain(-pdg_id, pdg_id)
    assert is_genuine_production(child)


def test_primary_particle_is_genuine():
    b = EventBuilder()
    p = b.add_particle(511, 2)
    assert is_genuine_production(p)


@pytest.mark.parametrize("pdg_id", [511, -511, 531, -531])
def test_oscillated_b_is_not_genuine(pdg_id):
    parent, child = _oscillation_chain(-pdg_id, pdg_id)
    assert is_genuine_production(parent)
    assert not is_genuine_production(child)


@pytest.mark.parametrize("parent_pdg", [511, 521, 513, 22])
def test_parent_not_charge_conjugate_is_genuine(parent_pdg):
    _, child = _oscillation_chain(parent_pdg, 511)
    assert is_genuine_production(child)


def test_vertex_with_several_incoming_is_genuine():
    b = EventBuilder()
    v = b.add_vertex(1.0, 0.0, 0.0, 0.0)
    b.add_particle(-511, 2, end=v)
    b.add_particle(22, 1, end=v)
    child = b.add_particle(511, 2, production=v)
    assert is_genuine_production(child)

from __future__ import annotations

from hepselect.models import Event, EventBuilder, Particle, Vertex
from hepselect.validation import validate, validate_event


def test_signal_event_is_consistent(make_signal_event):
    issues = validate_event(make_signal_event(n_candidates=2, extra_pions=1))
    assert issues == []


def test_duplicate_barcodes():
    v = Vertex(barcode=-1)
    a = Particle(barcode=1, pdg_id=211, status=1, production_vertex=v)
    b = Particle(barcode=1, pdg_id=-211, status=1, production_vertex=v)
    issues = validate_event(Event(particles=[a, b], vertices=[v]))
    assert [i.level for i in issues] == ["error"]
    assert "Duplicate" in issues[0].message


def test_vertex_outside_event_is_a_warning():
    inside = Vertex(barcode=-1)
    outside = Vertex(barcode=-9, x=5.0)
    p = Particle(barcode=1, pdg_id=22, status=1, production_vertex=inside)
    q = Particle(barcode=2, pdg_id=22, status=1, production_vertex=outside)
    issues = validate_event(Event(particles=[p, q], vertices=[inside]))
    assert len(issues) == 1
    assert issues[0].level == "warning"
    assert issues[0].barcode == 2


def test_decay_product_away_from_parent_end_vertex():
    b = EventBuilder()
    pv = b.add_vertex()
    dv = b.add_vertex(1.0, 0.0, 0.0, 0.0)
    b.add_particle(511, 2, production=pv, end=dv)
    child = b.add_particle(321, 1, production=dv)
    # Break the link on the child side only.
    child.production_vertex = pv
    issues = validate_event(b.build())
    assert [i.level for i in issues] == ["error"]
    assert issues[0].barcode == child.barcode


def test_invalid_pdg_id_is_reported_unless_disabled():
    b = EventBuilder()
    b.add_particle(0, 1)
    ev = b.build(event_number=3)
    issues = validate_event(ev)
    assert len(issues) == 1
    assert "PDG" in str(issues[0])
    assert "event 3" in str(issues[0])
    assert validate_event(ev, check_pdg=False) == []


def test_report_over_events(make_signal_event):
    bad = EventBuilder()
    bad.add_particle(0, 1)
    report = validate([make_signal_event(), bad.build(), bad.build()], max_events=2)
    assert report.is_valid
    assert report.n_warnings == 1
    d = report.to_dict()
    assert d["n_warnings"] == 1
    assert "1 warnings" in str(report)

"""
Event graph data model for hepselect.

An event is a directed graph of decay vertices and particles, as handed over
by the external generator. Relationships between particles are resolved by
vertex *position*, not by vertex object identity: the generator record may
instantiate the same physical point more than once, so two vertex objects at
the same point are the same node as far as selection is concerned.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

# Generator status code for final-state (stable) particles.
STABLE_STATUS = 1

Point = tuple[float, float, float]


@dataclass(eq=False)
class Particle:
    """A single particle in an event.

    Attributes:
        barcode: Unique particle identifier within an event. Used only for
                 identity (deduplication), never for ordering.
        pdg_id: PDG Monte Carlo particle ID. The sign distinguishes particle
                from antiparticle.
        status: Generator status code. ``STABLE_STATUS`` (1) = final state.
        px, py, pz: Three-momentum components in GeV.
        mass: Invariant mass in GeV.
        production_vertex: Vertex where the particle was created. ``None`` for
                           beam/initial particles.
        end_vertex: Vertex where the particle decayed. ``None`` for particles
                    still present at the end of the record.
    """

    barcode: int
    pdg_id: int
    status: int
    px: float = 0.0
    py: float = 0.0
    pz: float = 0.0
    mass: float = 0.0
    production_vertex: Optional[Vertex] = field(default=None, repr=False)
    end_vertex: Optional[Vertex] = field(default=None, repr=False)

    @property
    def p(self) -> float:
        """Momentum magnitude."""
        return math.sqrt(self.px**2 + self.py**2 + self.pz**2)

    @property
    def pt(self) -> float:
        """Transverse momentum."""
        return math.sqrt(self.px**2 + self.py**2)

    @property
    def energy(self) -> float:
        return math.sqrt(self.p**2 + self.mass**2)

    @property
    def is_final(self) -> bool:
        return self.status == STABLE_STATUS

    def to_dict(self) -> dict:
        """Flat dictionary view, vertices replaced by their barcodes."""
        return {
            "barcode": self.barcode,
            "pdg_id": self.pdg_id,
            "status": self.status,
            "px": self.px,
            "py": self.py,
            "pz": self.pz,
            "mass": self.mass,
            "production_vertex": self.production_vertex.barcode if self.production_vertex else 0,
            "end_vertex": self.end_vertex.barcode if self.end_vertex else 0,
        }


@dataclass(eq=False)
class Vertex:
    """An interaction or decay point.

    Attributes:
        barcode: Vertex identifier (negative integer by HepMC convention).
        x, y, z, t: Spacetime position of the vertex (mm, mm/c).
        incoming: Particles ending at this vertex.
        outgoing: Particles produced at this vertex.
    """

    barcode: int = 0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    t: float = 0.0
    incoming: list[Particle] = field(default_factory=list, repr=False)
    outgoing: list[Particle] = field(default_factory=list, repr=False)

    @property
    def point(self) -> Point:
        """Spatial position, the key used to match "daughter of" relations."""
        return (self.x, self.y, self.z)

    @property
    def position(self) -> tuple[float, float, float, float]:
        return (self.x, self.y, self.z, self.t)


@dataclass
class Event:
    """A single generated event.

    The position index is built once, at construction. The event must not be
    mutated afterwards; build a new one instead (see ``EventBuilder``).

    Attributes:
        event_number: Sequential number assigned by the generator.
        particles: All particles, in generation order.
        vertices: All vertices, in generation order.
    """

    event_number: int = 0
    particles: list[Particle] = field(default_factory=list)
    vertices: list[Vertex] = field(default_factory=list)
    _produced_at: dict[Point, tuple[Particle, ...]] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        index: dict[Point, list[Particle]] = {}
        for p in self.particles:
            if p.production_vertex is not None:
                index.setdefault(p.production_vertex.point, []).append(p)
        self._produced_at = {k: tuple(v) for k, v in index.items()}

    def produced_at(self, point: Point) -> tuple[Particle, ...]:
        """Particles whose production vertex lies at ``point``."""
        return self._produced_at.get(point, ())

    @property
    def n_particles(self) -> int:
        return len(self.particles)

    @property
    def final_particles(self) -> list[Particle]:
        return [p for p in self.particles if p.is_final]

    @property
    def n_final(self) -> int:
        return len(self.final_particles)

    def particles_with(self, pdg_ids: Iterable[int]) -> Iterator[Particle]:
        """Particles whose |pdg_id| is one of ``pdg_ids``."""
        wanted = {abs(i) for i in pdg_ids}
        return (p for p in self.particles if abs(p.pdg_id) in wanted)


class EventBuilder:
    """Assemble an ``Event`` particle by particle.

    Barcodes are assigned in insertion order (particles from 1 upwards,
    vertices from -1 downwards) and vertex ``incoming``/``outgoing`` lists are
    kept in sync with the particles' vertex references.
    """

    def __init__(self) -> None:
        self._particles: list[Particle] = []
        self._vertices: list[Vertex] = []

    def add_vertex(self, x: float = 0.0, y: float = 0.0, z: float = 0.0, t: float = 0.0) -> Vertex:
        v = Vertex(barcode=-(len(self._vertices) + 1), x=x, y=y, z=z, t=t)
        self._vertices.append(v)
        return v

    def add_particle(
        self,
        pdg_id: int,
        status: int = STABLE_STATUS,
        px: float = 0.0,
        py: float = 0.0,
        pz: float = 0.0,
        mass: float = 0.0,
        *,
        production: Optional[Vertex] = None,
        end: Optional[Vertex] = None,
    ) -> Particle:
        p = Particle(
            barcode=len(self._particles) + 1,
            pdg_id=pdg_id,
            status=status,
            px=px,
            py=py,
            pz=pz,
            mass=mass,
            production_vertex=production,
            end_vertex=end,
        )
        if production is not None:
            production.outgoing.append(p)
        if end is not None:
            end.incoming.append(p)
        self._particles.append(p)
        return p

    def build(self, event_number: int = 0) -> Event:
        return Event(
            event_number=event_number,
            particles=list(self._particles),
            vertices=list(self._vertices),
        )

"""Identity-keyed particle sets.

Used for both the exclusion set and the charged-track set of the inclusive
selection. Membership is decided by particle barcode only, so a track reached
through two sibling decay chains is stored once.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from .models import Particle


class TrackSet:
    """Insertion-ordered set of particles keyed by barcode."""

    def __init__(self, particles: Iterable[Particle] = ()) -> None:
        self._by_barcode: dict[int, Particle] = {}
        self.update(particles)

    def add(self, particle: Particle) -> bool:
        """Add ``particle``; return False if its barcode was already present."""
        if particle.barcode in self._by_barcode:
            return False
        self._by_barcode[particle.barcode] = particle
        return True

    def update(self, particles: Iterable[Particle]) -> None:
        for p in particles:
            self.add(p)

    def isdisjoint(self, other: TrackSet) -> bool:
        return self._by_barcode.keys().isdisjoint(other._by_barcode.keys())

    @property
    def barcodes(self) -> frozenset[int]:
        return frozenset(self._by_barcode)

    def __contains__(self, particle: object) -> bool:
        return isinstance(particle, Particle) and particle.barcode in self._by_barcode

    def __iter__(self) -> Iterator[Particle]:
        return iter(self._by_barcode.values())

    def __len__(self) -> int:
        return len(self._by_barcode)

    def __repr__(self) -> str:
        return f"TrackSet(barcodes={sorted(self._by_barcode)})"

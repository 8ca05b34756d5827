"""Decay-graph traversal helpers."""

from __future__ import annotations

from typing import Iterator

from .models import Event, Particle, Point
from .tracks import TrackSet

# |PDG ID| of species that leave a charged track: pi, K, p, e, mu.
CHARGED_TRACK_SPECIES = frozenset({211, 321, 2212, 11, 13})


def is_charged_track_species(pdg_id: int) -> bool:
    return abs(pdg_id) in CHARGED_TRACK_SPECIES


def daughters_of(event: Event, point: Point) -> Iterator[Particle]:
    """Yield the particles of ``event`` produced at vertex position ``point``.

    A point that matches no vertex simply yields nothing.
    """
    yield from event.produced_at(point)


def daughters(event: Event, particle: Particle) -> Iterator[Particle]:
    """Yield the direct decay products of ``particle``."""
    if particle.end_vertex is None:
        return iter(())
    return daughters_of(event, particle.end_vertex.point)


def collect_charged_tracks(
    event: Event,
    parent: Particle,
    exclude: TrackSet,
    *,
    depth: int = 3,
) -> TrackSet:
    """Charged tracks descending from ``parent``, at most ``depth`` generations down.

    Each branch is walked until it yields a track: a descendant that is a
    charged-track species is collected and its own products are not
    inspected. Particles in ``exclude`` are skipped together with their
    descendants.
    """
    tracks = TrackSet()
    _walk(event, parent, exclude, tracks, depth)
    return tracks


def _walk(event: Event, parent: Particle, exclude: TrackSet, tracks: TrackSet, depth: int) -> None:
    if depth <= 0:
        return
    for d in daughters(event, parent):
        if d in exclude:
            continue
        if is_charged_track_species(d.pdg_id):
            tracks.add(d)
        else:
            _walk(event, d, exclude, tracks, depth - 1)

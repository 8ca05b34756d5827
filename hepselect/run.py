"""
Run driver.

Pulls events from the generator until the admission policy has accumulated
the requested number of units, handing every admitted event to the writer.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict

from . import pdg
from .collaborators import EventSink, EventSource, SourceExhausted
from .models import Event, Particle
from .policies import AdmissionPolicy

logger = logging.getLogger(__name__)


@dataclass
class RunReport:
    """Counters and timing of one selection run."""

    policy: str
    description: str
    target: int
    total_generated: int = 0
    admitted_total: int = 0
    n_written: int = 0
    elapsed: float = 0.0
    exhausted: bool = False
    policy_summary: Dict[str, Any] = field(default_factory=dict)

    @property
    def rate(self) -> float:
        """Admitted units per second of wall time."""
        if self.elapsed <= 0:
            return 0.0
        return self.admitted_total / self.elapsed

    @property
    def complete(self) -> bool:
        return self.admitted_total >= self.target

    def __str__(self) -> str:
        lines = [
            f"{self.admitted_total} {self.description} have been generated "
            f"({self.total_generated} total).",
            f"Elapsed time: {self.elapsed:.3f} s ({self.rate:.3f} events / s)",
        ]
        if self.exhausted:
            lines.append(f"Event source exhausted before reaching the target of {self.target}")
        hist = self.policy_summary.get("stable_multiplicity")
        for key, value in self.policy_summary.items():
            if key == "stable_multiplicity":
                continue
            lines.append(f"{key}: {value}")
        if hist:
            for n_stable, count in hist.items():
                share = 100.0 * count / self.total_generated if self.total_generated else 0.0
                lines.append(f"{n_stable:>4}{count:>4}({share:.2f}%)")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "policy": self.policy,
            "target": self.target,
            "total_generated": self.total_generated,
            "admitted_total": self.admitted_total,
            "n_written": self.n_written,
            "elapsed": self.elapsed,
            "rate": self.rate,
            "exhausted": self.exhausted,
            "policy_summary": dict(self.policy_summary),
        }


def run_selection(
    source: EventSource,
    policy: AdmissionPolicy,
    sink: EventSink,
    target: int,
    *,
    progress_every: int = 100,
    clock: Callable[[], float] = time.perf_counter,
) -> RunReport:
    """Generate events until ``policy`` has admitted ``target`` units.

    Args:
        source: Generator collaborator. ``None`` results are retried and not
                counted.
        policy: Admission policy deciding on each generated event.
        sink: Writer collaborator. Receives each admitted event together with
              the admitted total after that event, which is its 1-based
              sequence number.
        target: Number of admitted units to reach. The final total may exceed
                it by the excess of the last increment.
        progress_every: Log progress whenever the admitted total crosses a
                        multiple of this value.
        clock: Time source, in seconds.

    Returns:
        A RunReport with the counters, timing and the policy's side tallies.
    """
    if progress_every <= 0:
        raise ValueError("progress_every must be > 0")

    description = policy.describe()
    report = RunReport(policy=policy.name, description=description, target=target)
    logger.info("Selecting %d %s with policy '%s'", target, description, policy.name)

    start = clock()
    last_lap = start
    last_lap_total = 0

    try:
        while report.admitted_total < target:
            try:
                event = source.next_event()
            except SourceExhausted as e:
                logger.warning("%s; stopping at %d of %d", e, report.admitted_total, target)
                report.exhausted = True
                break
            if event is None:
                continue

            report.total_generated += 1
            decision = policy.decide(event)
            if decision.increment <= 0:
                continue

            previous = report.admitted_total
            report.admitted_total += decision.increment
            sink.write(event, report.admitted_total)
            report.n_written += 1
            logger.debug(
                "Event %d admitted (+%d, sequence number %d)",
                event.event_number,
                decision.increment,
                report.admitted_total,
            )
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("%s", event_listing(event))

            if report.admitted_total // progress_every > previous // progress_every:
                now = clock()
                lap = now - last_lap
                lap_rate = (report.admitted_total - last_lap_total) / lap if lap > 0 else 0.0
                logger.info(
                    "%d %s have been generated (%d total). Current rate: %.3f ev / s",
                    report.admitted_total,
                    description,
                    report.total_generated,
                    lap_rate,
                )
                last_lap = now
                last_lap_total = report.admitted_total
    finally:
        sink.finish()

    report.elapsed = clock() - start
    report.policy_summary = policy.summary()
    logger.info("%s", report)
    return report


def _particle_lines(p: Particle) -> list[str]:
    label = pdg.name(p.pdg_id)
    lines = [
        f"Particle {p.barcode}: {p.pdg_id}"
        + (f" ({label})" if label != str(p.pdg_id) else "")
        + f" status {p.status}",
        f"\tP4: (Px = {p.px:.12g}, Py = {p.py:.12g}, Pz = {p.pz:.12g}, Mass = {p.mass:.12g})",
    ]
    sv, ev = p.production_vertex, p.end_vertex
    if sv is not None:
        lines.append(f"\tProduction vertex: (X = {sv.x:.12g}, Y = {sv.y:.12g}, Z = {sv.z:.12g})")
    else:
        lines.append("\tProduction vertex is not valid")
    if ev is not None:
        lines.append(f"\tDecay vertex: (X = {ev.x:.12g}, Y = {ev.y:.12g}, Z = {ev.z:.12g})")
    else:
        lines.append("\tDecay vertex is not valid")
    if sv is not None and ev is not None:
        lines.append(f"\tFlight distance: {math.dist(sv.point, ev.point):.12g} mm")
    return lines


def event_listing(event: Event) -> str:
    """Particle-by-particle dump of an event, for debug logs."""
    lines = [
        f"Event {event.event_number}: {len(event.particles)} particles, "
        f"{len(event.vertices)} vertices"
    ]
    for p in event.particles:
        lines.extend(_particle_lines(p))
    return "\n".join(lines)

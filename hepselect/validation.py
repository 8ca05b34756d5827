"""
Consistency checks for event graphs.

Selection never fails on a malformed graph (missing links just mean empty
daughter lists), but a broken record usually means a broken generator
interface, so these checks report:
- Duplicate particle barcodes
- Vertex references to vertices that are not part of the event
- Decay products whose production point differs from the parent's end point
- Unknown PDG IDs
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from . import pdg as pdg_module
from .models import Event


@dataclass
class GraphIssue:
    """A single problem found in an event graph."""

    level: str  # "error", "warning"
    event_number: int
    barcode: Optional[int]  # None for event-level issues
    message: str

    def __str__(self) -> str:
        loc = f"event {self.event_number}"
        if self.barcode is not None:
            loc += f", particle {self.barcode}"
        return f"[{self.level.upper()}] {loc}: {self.message}"

    def to_dict(self) -> dict:
        return {
            "level": self.level,
            "event_number": self.event_number,
            "barcode": self.barcode,
            "message": self.message,
        }


@dataclass
class GraphReport:
    issues: list[GraphIssue] = field(default_factory=list)

    @property
    def n_errors(self) -> int:
        return sum(1 for i in self.issues if i.level == "error")

    @property
    def n_warnings(self) -> int:
        return sum(1 for i in self.issues if i.level == "warning")

    @property
    def is_valid(self) -> bool:
        return self.n_errors == 0

    def __str__(self) -> str:
        lines = [f"Graph check: {self.n_errors} errors, {self.n_warnings} warnings"]
        for issue in self.issues[:50]:
            lines.append(f"  {issue}")
        if len(self.issues) > 50:
            lines.append(f"  ... and {len(self.issues) - 50} more")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "n_errors": self.n_errors,
            "n_warnings": self.n_warnings,
            "is_valid": self.is_valid,
            "issues": [i.to_dict() for i in self.issues],
        }


def validate_event(event: Event, *, check_pdg: bool = True) -> list[GraphIssue]:
    issues: list[GraphIssue] = []
    evt = event.event_number
    points = {v.point for v in event.vertices}

    seen: set[int] = set()
    for p in event.particles:
        if p.barcode in seen:
            issues.append(GraphIssue("error", evt, p.barcode, "Duplicate particle barcode"))
        seen.add(p.barcode)

    for p in event.particles:
        if p.production_vertex is not None and p.production_vertex.point not in points:
            issues.append(GraphIssue(
                "warning", evt, p.barcode,
                f"Production vertex {p.production_vertex.barcode} is not part of the event"
            ))
        if p.end_vertex is None:
            continue
        if p.end_vertex.point not in points:
            issues.append(GraphIssue(
                "warning", evt, p.barcode,
                f"End vertex {p.end_vertex.barcode} is not part of the event"
            ))
        for d in p.end_vertex.outgoing:
            if d.production_vertex is None or d.production_vertex.point != p.end_vertex.point:
                issues.append(GraphIssue(
                    "error", evt, d.barcode,
                    f"Decay product of particle {p.barcode} is not produced at its end vertex"
                ))

    if check_pdg:
        for p in event.particles:
            if not pdg_module.is_valid_pdg_id(p.pdg_id):
                issues.append(GraphIssue("warning", evt, p.barcode, f"Unknown/invalid PDG ID: {p.pdg_id}"))

    return issues


def validate(events: Iterable[Event], *, check_pdg: bool = True, max_events: int = -1) -> GraphReport:
    report = GraphReport()
    for i, event in enumerate(events):
        if max_events >= 0 and i >= max_events:
            break
        report.issues.extend(validate_event(event, check_pdg=check_pdg))
    return report

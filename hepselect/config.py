"""Run configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

from .collaborators import EventSink, EventSource
from .registry import available_policies, make_policy
from .run import RunReport, run_selection


class ConfigError(ValueError):
    pass


@dataclass
class RunConfig:
    """Settings of one selection run.

    Attributes:
        policy: Registered admission policy name (see ``available_policies``).
        policy_options: Keyword arguments for the policy constructor.
        target: Number of admitted units to collect.
        progress_every: Progress is logged each time the admitted total
                        crosses a multiple of this value.
    """

    policy: str = "all"
    policy_options: Dict[str, Any] = field(default_factory=dict)
    target: int = 0
    progress_every: int = 100

    def __post_init__(self) -> None:
        if self.target < 0:
            raise ConfigError("target must be >= 0")
        if self.progress_every <= 0:
            raise ConfigError("progress_every must be > 0")
        if self.policy not in available_policies():
            raise ConfigError(
                f"Unknown policy: {self.policy}. Available: {', '.join(available_policies())}"
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RunConfig:
        known = {"policy", "policy_options", "target", "progress_every"}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        try:
            return cls(
                policy=str(data.get("policy", "all")),
                policy_options=dict(data.get("policy_options") or {}),
                target=int(data.get("target", 0)),
                progress_every=int(data.get("progress_every", 100)),
            )
        except (TypeError, ValueError) as e:
            if isinstance(e, ConfigError):
                raise
            raise ConfigError(str(e)) from e

    def to_dict(self) -> dict:
        return {
            "policy": self.policy,
            "policy_options": dict(self.policy_options),
            "target": self.target,
            "progress_every": self.progress_every,
        }

    def build_policy(self):
        try:
            return make_policy(self.policy, **self.policy_options)
        except ValueError as e:
            raise ConfigError(str(e)) from e


def run_from_config(config: RunConfig, source: EventSource, sink: EventSink) -> RunReport:
    return run_selection(
        source,
        config.build_policy(),
        sink,
        config.target,
        progress_every=config.progress_every,
    )

from __future__ import annotations

import logging

import pytest

import hepselect
from hepselect.collaborators import IterableSource, RecordingSink
from hepselect.config import ConfigError, RunConfig, run_from_config
from hepselect.policies import InclusiveSignalPolicy, KeySpeciesPolicy
from hepselect.registry import available_policies, make_policy, register_policy


def test_builtin_policies_are_registered():
    names = available_policies()
    for name in ("all", "stable-multiplicity", "soft-pair", "key-species", "inclusive-signal"):
        assert name in names


def test_make_policy_passes_options():
    policy = make_policy("inclusive-signal", b_species=[511, 531], exclude_signal_hadrons=True)
    assert isinstance(policy, InclusiveSignalPolicy)
    assert policy.b_species == frozenset({511, 531})
    assert policy.exclude_signal_hadrons


def test_make_policy_errors():
    with pytest.raises(ValueError, match="Unknown policy"):
        make_policy("no-such-policy")
    with pytest.raises(ValueError, match="Bad options"):
        make_policy("key-species", colour="blue")


def test_register_custom_policy():
    register_policy("b-plus", lambda: KeySpeciesPolicy(521))
    assert "b-plus" in available_policies()
    assert make_policy("b-plus").key_species == 521


def test_config_round_trip():
    data = {
        "policy": "key-species",
        "policy_options": {"key_species": 531},
        "target": 10,
        "progress_every": 5,
    }
    cfg = RunConfig.from_dict(data)
    assert cfg.to_dict() == data
    assert cfg.build_policy().key_species == 531


@pytest.mark.parametrize(
    "data",
    [
        {"policy": "nope", "target": 1},
        {"target": -1},
        {"target": "many"},
        {"target": 1, "progress_every": 0},
        {"target": 1, "output": "file.root"},
    ],
)
def test_config_errors(data):
    with pytest.raises(ConfigError):
        RunConfig.from_dict(data)


def test_bad_policy_options_surface_as_config_error():
    cfg = RunConfig(policy="stable-multiplicity", policy_options={"max_stable": -2}, target=1)
    with pytest.raises(ConfigError):
        cfg.build_policy()


def test_run_from_config(make_stable_event):
    cfg = RunConfig.from_dict(
        {"policy": "stable-multiplicity", "policy_options": {"max_stable": 4}, "target": 2}
    )
    events = [make_stable_event(n, event_number=i) for i, n in enumerate([6, 4, 2, 1], start=1)]
    sink = RecordingSink()
    report = run_from_config(cfg, IterableSource(events), sink)

    assert report.admitted_total == 2
    assert report.total_generated == 3
    assert [r.event_number for r in sink.records] == [2, 3]


def test_package_exports():
    assert hepselect.__version__
    assert hepselect.run_selection is not None
    assert "inclusive-signal" in hepselect.available_policies()


class _EntryPoint:
    def __init__(self, name, target):
        self.name = name
        self._target = target

    def load(self):
        return self._target


def _broken_plugin():
    raise RuntimeError("boom")


def test_policies_load_from_entry_points(monkeypatch, caplog):
    from hepselect import registry

    eps = [
        _EntryPoint("bad", _broken_plugin),
        _EntryPoint("good", lambda: ("bs-production", lambda: KeySpeciesPolicy(531))),
    ]

    def fake_entry_points(group):
        assert group == "hepselect.policies"
        return eps

    monkeypatch.setattr(registry, "_REGISTRY", dict(registry._REGISTRY))
    monkeypatch.setattr(registry, "_PLUGINS_LOADED", False)
    monkeypatch.setattr(registry.metadata, "entry_points", fake_entry_points)

    with caplog.at_level(logging.WARNING, logger="hepselect.registry"):
        names = available_policies()

    assert "bs-production" in names
    assert make_policy("bs-production").key_species == 531
    assert "Skipping policy plugin bad: boom" in caplog.text

"""Shared fixtures: manifest directories and a fake npm."""

import json

import pytest

from npm_responses import NO_MATCH_PAYLOAD, completed, write_manifest


@pytest.fixture
def honkit_project(tmp_path):
    """A project depending on honkit with a send override."""
    write_manifest(
        tmp_path,
        {
            "name": "honkit-example",
            "version": "1.0.0",
            "dependencies": {"honkit": "6.0.3"},
            "overrides": {"send": "0.19.1"},
        },
    )
    (tmp_path / "package-lock.json").write_text("{}", encoding="utf-8")
    return tmp_path


@pytest.fixture
def unused_project(tmp_path):
    """Same as honkit_project plus a trim override that nothing uses."""
    write_manifest(
        tmp_path,
        {
            "name": "unused-example",
            "version": "1.0.0",
            "dependencies": {"honkit": "6.0.3"},
            "overrides": {"send": "0.19.1", "trim": "0.0.3"},
        },
    )
    return tmp_path


@pytest.fixture
def fake_npm():
    """Return a factory for subprocess.run replacements answering npm explain.

    ``installed`` maps a package name to its explain records; asking for any
    other name fails the whole call the way npm does.
    """

    def factory(installed):
        calls = []

        def run(cmd, **kwargs):
            calls.append(list(cmd))
            names = [arg for arg in cmd[2:] if arg != "--json"]
            if any(name not in installed for name in names):
                return completed(json.dumps(NO_MATCH_PAYLOAD), returncode=1)
            records = [record for name in names for record in installed[name]]
            return completed(json.dumps(records))

        run.calls = calls
        return run

    return factory

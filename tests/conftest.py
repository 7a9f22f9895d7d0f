"""Shared fixtures for hulud-guard tests."""

import json

import pytest

from hulud_guard.database import load_database

DATABASE_DATA = {
    "packageNames": ["left-pad", "evil-pkg", "@scope/bad-lib", "name-only-pkg"],
    "packageVersions": {
        "left-pad": ["1.2.3"],
        "evil-pkg": ["3.3.3", "3.4.0"],
        "@scope/bad-lib": ["0.2.5"],
    },
}


@pytest.fixture
def database_data():
    """Raw database document."""
    return json.loads(json.dumps(DATABASE_DATA))


@pytest.fixture
def database(database_data):
    """Loaded malicious package database."""
    return load_database(database_data)


@pytest.fixture
def database_file(tmp_path, database_data):
    """Malicious package database written to a JSON file."""
    path = tmp_path / "malicious.json"
    path.write_text(json.dumps(database_data))
    return path


def write_package_json(directory, dependencies=None, **sections):
    """Write a package.json with the given dependency sections."""
    directory.mkdir(parents=True, exist_ok=True)
    data = {"name": directory.name, "version": "1.0.0"}
    if dependencies is not None:
        data["dependencies"] = dependencies
    data.update(sections)
    path = directory / "package.json"
    path.write_text(json.dumps(data, indent=2))
    return path


@pytest.fixture
def make_package_json():
    """Factory that writes package.json files."""
    return write_package_json

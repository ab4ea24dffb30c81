"""Conference manifest loading."""

import re

import pytest

from anthology_papers.config import DEFAULT_MANIFEST
from anthology_papers.core.manifest import flatten_volumes, load_conferences, select_conferences
from anthology_papers.core.models import Conference
from anthology_papers.errors import ManifestError


def test_load_and_flatten(write_manifest):
    path = write_manifest(
        "- id: acl\n"
        "  name: ACL\n"
        "  description: Annual Meeting\n"
        "  volumes: [P/P90, P/P91]\n"
        "- id: eacl\n"
        "  volumes:\n"
        "    - E/E91\n"
        "    - P/P91\n"
    )

    conferences = load_conferences(path)

    assert conferences == [
        Conference(id="acl", name="ACL", description="Annual Meeting", volumes=("P/P90", "P/P91")),
        Conference(id="eacl", volumes=("E/E91", "P/P91")),
    ]
    assert flatten_volumes(conferences) == ["P/P90", "P/P91", "E/E91", "P/P91"]


@pytest.mark.parametrize("text", [
    "- id: acl\n  volumes: [P/P90\n",
    "id: acl\nvolumes: [P/P90]\n",
    "- just a string\n",
    "- name: no id\n  volumes: []\n",
    "- id: acl\n",
])
def test_malformed_manifest(write_manifest, text):
    with pytest.raises(ManifestError):
        load_conferences(write_manifest(text))


def test_missing_manifest(tmp_path):
    with pytest.raises(ManifestError):
        load_conferences(tmp_path / "nope.yaml")


def test_select_conferences():
    conferences = [Conference(id="acl", volumes=("P/P90",)), Conference(id="eacl", volumes=("E/E91",))]

    assert select_conferences(conferences) == conferences
    assert select_conferences(conferences, ["eacl"]) == conferences[1:]
    with pytest.raises(ManifestError, match="coling"):
        select_conferences(conferences, ["coling"])


def test_shipped_manifest_volume_ids():
    conferences = load_conferences(DEFAULT_MANIFEST)
    volumes = flatten_volumes(conferences)

    assert "P/P95" in volumes
    assert {conf.id for conf in conferences} >= {"acl", "naacl", "eacl"}
    assert all(re.fullmatch(r"[A-Z]/[A-Z]\d{2}", v) for v in volumes)

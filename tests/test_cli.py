"""Command line entry point."""

import json

import pytest

from anthology_papers import main
from anthology_papers.config import ANTHOLOGY_ENV
from anthology_papers.core import base_crawler

from conftest import BASE, INDEX_HTML, FakeSessionManager, volume_url


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(main, "setup_logging", lambda *args, **kwargs: None)


@pytest.fixture
def fake_anthology(monkeypatch):
    manager = FakeSessionManager({
        volume_url("P/P95"): INDEX_HTML.encode("utf-8"),
        f"{BASE}/P/P95/P95-1001.pdf": b"%PDF-1001",
        f"{BASE}/P/P95/P95-1001.bib": b"@inproceedings{P95-1001}",
        f"{BASE}/P/P95/P95-1002.pdf": b"%PDF-1002",
    })
    monkeypatch.setattr(base_crawler, "SessionManager", lambda: manager)
    return manager


@pytest.fixture
def manifest(write_manifest):
    return str(write_manifest("- {id: acl, name: ACL, volumes: [P/P95]}\n"))


def test_no_command_prints_help(capsys):
    assert main.cli([]) == 1
    assert "download" in capsys.readouterr().out


def test_parse_file_to_stdout(tmp_path, capsys):
    html_file = tmp_path / "index.html"
    html_file.write_text(INDEX_HTML, encoding="utf-8")

    assert main.cli(["parse", "P/P95", str(html_file)]) == 0

    entries = json.loads(capsys.readouterr().out)
    assert [e["title"] for e in entries] == ["A Title", "NA", "Second Paper"]
    assert entries[0]["pdf"] == {"url": f"{BASE}/P/P95/P95-1001.pdf", "filename": "P95-1001.pdf"}


def test_parse_latin1_file(tmp_path, capsys):
    html_file = tmp_path / "index.html"
    html_file.write_bytes(b"<html><body><h1>S</h1><p><b>G\xf6del</b></p></body></html>")

    assert main.cli(["parse", "P/P95", str(html_file)]) == 0

    entry, = json.loads(capsys.readouterr().out)
    assert entry["author"] == "G\ufffddel"


def test_parse_without_container_fails(tmp_path):
    html_file = tmp_path / "index.html"
    html_file.write_text("<p>nothing</p>", encoding="utf-8")

    assert main.cli(["parse", "P/P95", str(html_file)]) == 1


def test_download_without_root_fails_before_any_work(monkeypatch, manifest, fake_anthology):
    monkeypatch.delenv(ANTHOLOGY_ENV, raising=False)

    assert main.cli(["download", "--manifest", manifest]) == 1
    assert fake_anthology.calls == []


def test_download_mirrors_everything(tmp_path, manifest, fake_anthology):
    root = tmp_path / "mirror"

    assert main.cli(["download", "--root", str(root), "--manifest", manifest]) == 0

    volume_dir = root / "P" / "P95"
    assert (volume_dir / "index.html.json").exists()
    assert (volume_dir / "P95-1001.bib").read_bytes() == b"@inproceedings{P95-1001}"
    assert (volume_dir / "P95-1002.pdf").read_bytes() == b"%PDF-1002"


def test_download_reports_failed_files(tmp_path, manifest, fake_anthology):
    del fake_anthology.routes[f"{BASE}/P/P95/P95-1002.pdf"]
    root = tmp_path / "mirror"

    assert main.cli(["download", "--root", str(root), "--manifest", manifest]) == 1

    assert (root / "P" / "P95" / "P95-1001.pdf").exists()
    assert not (root / "P" / "P95" / "P95-1002.pdf").exists()


def test_index_only_fetches_listings(monkeypatch, tmp_path, manifest, fake_anthology):
    monkeypatch.setenv(ANTHOLOGY_ENV, str(tmp_path / "mirror"))

    assert main.cli(["index", "--manifest", manifest]) == 0

    assert fake_anthology.calls == [volume_url("P/P95")]
    assert (tmp_path / "mirror" / "P" / "P95" / "index.html.json").exists()


def test_status(tmp_path, manifest, fake_anthology, capsys):
    root = tmp_path / "mirror"
    main.cli(["download", "--root", str(root), "--manifest", manifest, "--kinds", "pdf"])
    capsys.readouterr()

    assert main.cli(["status", "--root", str(root), "--manifest", manifest]) == 0

    out = capsys.readouterr().out
    assert "ACL (acl)" in out
    assert "P/P95: index ✓  listing ✓  2 pdf  0 bib" in out

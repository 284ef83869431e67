from __future__ import annotations

import json

import pytest

from html2jsonld import cli

HTML = """
<div itemscope itemtype="http://schema.org/Person">
  <span itemprop="name">Ada</span>
</div>
"""


@pytest.fixture
def page(tmp_path):
    path = tmp_path / "page.html"
    path.write_text(HTML, encoding="utf-8")
    return path


def test_file_command_prints_jsonld(page, capsys):
    code = cli.main(["file", str(page), "--url", "https://www.example.com/", "--no-images"])
    out = capsys.readouterr().out
    assert code == 0
    assert json.loads(out) == {
        "@context": "http://schema.org",
        "@type": "Person",
        "name": "Ada",
    }


def test_file_command_writes_out(page, tmp_path, capsys):
    out_path = tmp_path / "out" / "page.jsonld"
    code = cli.main(
        ["file", str(page), "--url", "https://www.example.com/", "--out", str(out_path)]
    )
    assert code == 0
    assert json.loads(out_path.read_text(encoding="utf-8"))["name"] == "Ada"
    assert capsys.readouterr().out.strip() == str(out_path)


def test_no_markup(tmp_path, capsys):
    path = tmp_path / "plain.html"
    path.write_text("<p>nothing</p>", encoding="utf-8")
    assert cli.main(["file", str(path), "--url", "https://www.example.com/"]) == 1
    assert "No structured markup" in capsys.readouterr().err


def test_missing_file(tmp_path, capsys):
    code = cli.main(["file", str(tmp_path / "nope.html"), "--url", "https://www.example.com/"])
    assert code == 2
    assert capsys.readouterr().err


def test_invalid_bounds(page, capsys):
    code = cli.main(["file", str(page), "--url", "https://x.example/", "--timeout", "0"])
    assert code == 2
    assert "fetch_timeout_s" in capsys.readouterr().err


def test_url_command_reports_fetch_failure(monkeypatch, capsys):
    def failing(source, *, config, session):
        raise RuntimeError(f"Failed to fetch {source}: down")

    monkeypatch.setattr(cli, "jsonld_from_url", failing)
    assert cli.main(["url", "https://www.example.com/"]) == 2
    assert "down" in capsys.readouterr().err


def test_file_command_allow_file_images(tmp_path, capsys):
    image = tmp_path / "ada.gif"
    image.write_bytes(b"GIF89a" + b"\x00" * 16)
    path = tmp_path / "page.html"
    path.write_text(
        '<script type="application/ld+json">'
        '{"@context": "https://schema.org", "@type": "Person", "image": "%s"}'
        "</script>" % image.as_uri(),
        encoding="utf-8",
    )
    base = ["file", str(path), "--url", "https://www.example.com/"]

    assert cli.main(base) == 0
    assert json.loads(capsys.readouterr().out)["image"] == image.as_uri()

    assert cli.main(base + ["--allow-file-images"]) == 0
    assert json.loads(capsys.readouterr().out)["image"].startswith("data:image/gif;base64,")

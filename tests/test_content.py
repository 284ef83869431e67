from __future__ import annotations

import base64

from html2jsonld.content import has_structured_markup, sniff_image_mime

from .conftest import GIF_BYTES, JPEG_BYTES, PNG_BYTES


def _b64(body: bytes) -> str:
    return base64.b64encode(body).decode("ascii")


def test_sniff_known_signatures():
    assert sniff_image_mime(_b64(PNG_BYTES)) == "image/png"
    assert sniff_image_mime(_b64(JPEG_BYTES)) == "image/jpg"
    assert sniff_image_mime(_b64(GIF_BYTES)) == "image/gif"
    assert sniff_image_mime(_b64(b"GIF87a" + b"\x00" * 8)) == "image/gif"


def test_sniff_unknown():
    assert sniff_image_mime(_b64(b"<svg xmlns='http://www.w3.org/2000/svg'/>")) is None
    assert sniff_image_mime("") is None


class TestHasStructuredMarkup:
    def test_jsonld_script(self):
        html = '<html><head><script type="application/ld+json">{}</script></head></html>'
        assert has_structured_markup(html)

    def test_microdata(self):
        html = '<div itemscope itemtype="http://schema.org/Person"></div>'
        assert has_structured_markup(html)

    def test_rdfa(self):
        html = '<div vocab="http://schema.org/" typeof="Person"></div>'
        assert has_structured_markup(html)

    def test_plain_page(self):
        html = "<html><body><p>Nothing to see; the word itemscope is just text.</p></body></html>"
        assert not has_structured_markup(html)

    def test_other_script_types(self):
        html = '<script type="text/javascript">var ld = "ld+json";</script>'
        assert not has_structured_markup(html)

"""EPUB 생성 테스트

컨테이너 구조, mimetype 규칙, spine 순서, 이스케이프, 식별자, EbookLib 재판독 검증
"""

import io
import random
import re
import zipfile
import xml.etree.ElementTree as ET
import pytest
from novel_splitter.config.loader import EPUBConfig
from novel_splitter.stages.chapter import Chapter
from novel_splitter.stages.epub_builder import build_epub, new_identifier
from novel_splitter.stages.epub_inspector import inspect_epub
from novel_splitter.utils.errors import InputError, PackagingError

OPF = "{http://www.idpf.org/2007/opf}"
DC = "{http://purl.org/dc/elements/1.1/}"
NCX = "{http://www.daisy.org/z3986/2005/ncx/}"
XHTML = "{http://www.w3.org/1999/xhtml}"

UUID_RE = re.compile(r'^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$')


def _chapters():
    return [
        Chapter.from_content("preamble", "前言文字\n"),
        Chapter.from_content("第一章 开端", "第一章 开端\n内容A\n"),
        Chapter.from_content("第二章 A & B <C>", "第二章 A & B <C>\nx < y && z\n"),
    ]


def _open(output):
    return zipfile.ZipFile(io.BytesIO(output.data))


def test_mimetype_is_first_and_stored():
    """mimetype: 첫 항목, 무압축, 내용 고정"""
    output = build_epub("测试小说.txt", _chapters())

    with _open(output) as zf:
        first = zf.infolist()[0]
        assert first.filename == "mimetype"
        assert first.compress_type == zipfile.ZIP_STORED
        assert zf.read("mimetype") == b"application/epub+zip"

    print("✅ mimetype test passed!")


def test_container_members_in_order():
    output = build_epub("测试小说.txt", _chapters())

    assert output.name == "测试小说.epub"
    assert output.media_type == "application/epub+zip"
    with _open(output) as zf:
        assert zf.namelist() == [
            "mimetype",
            "META-INF/container.xml",
            "OEBPS/content.opf",
            "OEBPS/chapter_1.xhtml",
            "OEBPS/chapter_2.xhtml",
            "OEBPS/chapter_3.xhtml",
            "OEBPS/toc.ncx",
        ]
        container = ET.fromstring(zf.read("META-INF/container.xml"))
        rootfile = container.find(".//{urn:oasis:names:tc:opendocument:xmlns:container}rootfile")
        assert rootfile.get("full-path") == "OEBPS/content.opf"


def test_opf_manifest_spine_and_metadata():
    output = build_epub("测试小说.txt", _chapters(), EPUBConfig(language="zh-TW", creator="工具"))

    with _open(output) as zf:
        opf = ET.fromstring(zf.read("OEBPS/content.opf"))

    spine = opf.find(f"{OPF}spine")
    assert spine.get("toc") == "ncx"
    assert [ref.get("idref") for ref in spine.findall(f"{OPF}itemref")] == ["chapter_1", "chapter_2", "chapter_3"]

    hrefs = [item.get("href") for item in opf.find(f"{OPF}manifest")]
    assert hrefs == ["chapter_1.xhtml", "chapter_2.xhtml", "chapter_3.xhtml", "toc.ncx"]

    metadata = opf.find(f"{OPF}metadata")
    assert metadata.find(f"{DC}title").text == "测试小说"
    assert metadata.find(f"{DC}language").text == "zh-TW"
    assert metadata.find(f"{DC}creator").text == "工具"
    identifier = metadata.find(f"{DC}identifier").text
    assert identifier.startswith("urn:uuid:")
    assert UUID_RE.match(identifier[len("urn:uuid:"):])


def test_ncx_nav_points():
    chapters = _chapters()
    output = build_epub("测试小说.txt", chapters)

    with _open(output) as zf:
        ncx = ET.fromstring(zf.read("OEBPS/toc.ncx"))

    nav_points = ncx.findall(f"{NCX}navMap/{NCX}navPoint")
    assert [p.get("playOrder") for p in nav_points] == ["1", "2", "3"]
    assert [p.find(f"{NCX}content").get("src") for p in nav_points] == [
        "chapter_1.xhtml", "chapter_2.xhtml", "chapter_3.xhtml"
    ]
    assert [p.find(f"{NCX}navLabel/{NCX}text").text for p in nav_points] == [ch.title for ch in chapters]

    uid = ncx.find(f"{NCX}head/{NCX}meta[@name='dtb:uid']").get("content")
    assert UUID_RE.match(uid[len("urn:uuid:"):])


def test_chapter_page_is_escaped_and_well_formed():
    """XML 특수 문자는 이스케이프, 줄바꿈은 <br/>"""
    output = build_epub("测试小说.txt", _chapters())

    with _open(output) as zf:
        raw = zf.read("OEBPS/chapter_3.xhtml").decode("utf-8")

    assert "x &lt; y &amp;&amp; z<br/>" in raw
    page = ET.fromstring(raw.encode("utf-8"))
    assert page.find(f"{XHTML}head/{XHTML}title").text == "第二章 A & B <C>"
    assert page.find(f"{XHTML}body/{XHTML}h2").text == "第二章 A & B <C>"
    assert len(page.findall(f"{XHTML}body/{XHTML}div/{XHTML}br")) == 2


def test_identifiers_with_seeded_rng():
    """같은 시드 → 같은 식별자, NCX dtb:uid 는 책 식별자와 동일"""
    assert new_identifier(random.Random(7)) == new_identifier(random.Random(7))
    assert UUID_RE.match(new_identifier())

    first = build_epub("a.txt", _chapters(), rng=random.Random(42))
    second = build_epub("a.txt", _chapters(), rng=random.Random(42))
    with _open(first) as a, _open(second) as b:
        assert a.read("OEBPS/toc.ncx") == b.read("OEBPS/toc.ncx")

        opf_id = ET.fromstring(a.read("OEBPS/content.opf")).find(f"{OPF}metadata/{DC}identifier").text
        other_id = ET.fromstring(b.read("OEBPS/content.opf")).find(f"{OPF}metadata/{DC}identifier").text
        ncx_id = ET.fromstring(a.read("OEBPS/toc.ncx")).find(f"{NCX}head/{NCX}meta[@name='dtb:uid']").get("content")
        assert opf_id == other_id == ncx_id


def test_empty_chapters_rejected():
    with pytest.raises(PackagingError):
        build_epub("空.txt", [])


def test_does_not_mutate_chapters():
    chapters = _chapters()
    snapshot = list(chapters)

    build_epub("测试小说.txt", chapters)

    assert chapters == snapshot


def test_ebooklib_reads_generated_epub(tmp_path):
    """EbookLib 으로 다시 읽었을 때 제목/목차/spine 이 일치"""
    chapters = _chapters()
    path = tmp_path / "测试小说.epub"
    path.write_bytes(build_epub("测试小说.txt", chapters).data)

    summary = inspect_epub(path)

    assert summary.title == "测试小说"
    assert summary.language == "zh-CN"
    assert summary.identifier.startswith("urn:uuid:")
    assert summary.chapter_titles == [ch.title for ch in chapters]
    assert summary.spine_ids == ["chapter_1", "chapter_2", "chapter_3"]


def test_inspect_missing_file(tmp_path):
    with pytest.raises(InputError):
        inspect_epub(tmp_path / "none.epub")

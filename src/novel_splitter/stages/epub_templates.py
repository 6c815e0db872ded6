"""EPUB 챕터 본문 템플릿

챕터 XHTML 의 <body> 조각 생성. 문서 틀과 OPF/NCX 는 EbookLib 이 만든다.
제목과 본문은 모두 XML 이스케이프한다.
"""

import html
import re

# XML 1.0 에서 허용되지 않는 제어 문자 (\t \n \r 제외)
INVALID_XML_CHARS = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f]')


def xml_safe(value: str) -> str:
    """XML 에 넣을 수 없는 제어 문자 제거"""
    return INVALID_XML_CHARS.sub('', value)


def xml_text(value: str) -> str:
    """텍스트/속성 값 이스케이프 (& < > " ')"""
    return html.escape(xml_safe(value), quote=True)


def chapter_file_name(index: int) -> str:
    """1-based 챕터 파일명"""
    return f"chapter_{index}.xhtml"


def create_chapter_body(title: str, content: str) -> str:
    """챕터 본문 (줄바꿈 → <br/>)"""
    body_html = xml_text(content).replace("\n", "<br/>\n")
    return f"<h2>{xml_text(title)}</h2>\n<div>{body_html}</div>\n"

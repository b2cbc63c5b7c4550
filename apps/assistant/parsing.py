"""
Parsers for the assistant's line-oriented response formats.

    • point one            -> parse_summary
    tag1, tag2、tag3        -> parse_tags
    SEO_TITLE: ...         -> parse_seo
    ---SUMMARY--- / ---TAGS--- / ---SEO---  -> parse_complete
"""

import re
from typing import Dict, List

MAX_SUMMARY_POINTS = 3
MAX_TAGS = 7
MAX_KEYWORDS = 7
SEO_TITLE_MAX = 60
SEO_DESCRIPTION_MAX = 160

_BULLET_PREFIX = re.compile(r'^[•\-*]\s*')
_TAGS_PREFIX = re.compile(r'^\s*(?:टैग्स|टैग|tags?)\s*:\s*', re.IGNORECASE)
# ASCII comma, full-width comma, ideographic comma
_LIST_SPLIT = re.compile(r'[,，、]')

_SEO_TITLE = re.compile(r'SEO_TITLE:\s*(.+)', re.IGNORECASE)
_META_DESCRIPTION = re.compile(r'META_DESCRIPTION:\s*(.+)', re.IGNORECASE)
_KEYWORDS = re.compile(r'KEYWORDS:\s*(.+)', re.IGNORECASE)

_SUMMARY_SECTION = re.compile(r'---SUMMARY---\s*\n(.*?)(?=---TAGS---|\Z)', re.DOTALL)
_TAGS_SECTION = re.compile(r'---TAGS---\s*\n(.*?)(?=---SEO---|\Z)', re.DOTALL)
_SEO_SECTION = re.compile(r'---SEO---\s*\n(.*)\Z', re.DOTALL)


def _strip_brackets(value: str) -> str:
    value = value.strip()
    if value.startswith('[') and value.endswith(']'):
        value = value[1:-1].strip()
    return value


def _split_list(value: str) -> List[str]:
    return [item.strip() for item in _LIST_SPLIT.split(value) if item.strip()]


def parse_summary(response: str) -> List[str]:
    """Bullet lines (•, -, *) with the marker removed; first three only."""
    points = []
    for line in response.splitlines():
        line = line.strip()
        if not line.startswith(('•', '-', '*')):
            continue
        point = _BULLET_PREFIX.sub('', line).strip()
        if point:
            points.append(point)
    return points[:MAX_SUMMARY_POINTS]


def parse_tags(response: str) -> List[str]:
    """Comma-separated tags with an optional "Tags:" prefix; first seven only."""
    cleaned = _TAGS_PREFIX.sub('', response.strip())
    return _split_list(cleaned.replace('\n', ','))[:MAX_TAGS]


def parse_seo(response: str) -> Dict[str, object]:
    title = _SEO_TITLE.search(response)
    description = _META_DESCRIPTION.search(response)
    keywords = _KEYWORDS.search(response)

    return {
        'title': _strip_brackets(title.group(1))[:SEO_TITLE_MAX] if title else '',
        'meta_description': _strip_brackets(description.group(1))[:SEO_DESCRIPTION_MAX] if description else '',
        'keywords': _split_list(_strip_brackets(keywords.group(1)))[:MAX_KEYWORDS] if keywords else [],
    }


def parse_complete(response: str) -> Dict[str, object]:
    """Split a sectioned response; a missing section yields its empty value."""
    summary = _SUMMARY_SECTION.search(response)
    tags = _TAGS_SECTION.search(response)
    seo = _SEO_SECTION.search(response)

    return {
        'summary': parse_summary(summary.group(1)) if summary else [],
        'tags': parse_tags(tags.group(1)) if tags else [],
        'seo': parse_seo(seo.group(1)) if seo else {'title': '', 'meta_description': '', 'keywords': []},
    }

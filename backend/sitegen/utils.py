"""
Markup helpers for edit application and the live preview.

Page markup is treated as semi-structured text: everything here is regex
matching, not parsing. Callers go through EditApplicator so a tree-based
implementation can be swapped in later.
"""

import re
from typing import Dict, Iterable, List, Optional

from sitegen.models import ElementEdit, GeneratedSite

EDIT_ID_ATTR = "data-edit-id"
NAV_TARGET_ATTR = "data-nav-target"
EDITABLE_MARKER = 'data-editable="true"'

HOME_PAGE = "index"
HOME_ALIASES = {"", "home", HOME_PAGE}

_EDIT_ID = rf"""\b{EDIT_ID_ATTR}=(["'])((?:(?!\1).)*)\1"""
_EDIT_ID_PATTERN = re.compile(_EDIT_ID)
_UNMARKED_EDIT_ID_PATTERN = re.compile(_EDIT_ID + r"(?!\s+data-editable=)")
_NAV_TARGET_PATTERN = re.compile(
    rf"""\b{NAV_TARGET_ATTR}=(["'])((?:(?!\1).)*)\1"""
)


def _edited_element_pattern(element_id: str) -> re.Pattern:
    # open tag carrying the id, plain text, matching close tag
    return re.compile(
        rf"""(<([A-Za-z][\w.:-]*)\b[^>]*?\b{EDIT_ID_ATTR}=(["']){re.escape(element_id)}\3[^>]*>)"""
        rf"""([^<]*)(</\2\s*>)"""
    )


class EditApplicator:
    """Merges stored element edits into page markup"""

    def apply_edits(self, markup: str, edits: Iterable[ElementEdit]) -> str:
        raise NotImplementedError


class RegexEditApplicator(EditApplicator):
    def apply_edits(self, markup: str, edits: Iterable[ElementEdit]) -> str:
        """Replace the inner text of every element carrying an edited id.

        Every occurrence of an id is replaced. Edits without content are
        skipped (their styles are applied at render time). Unmatched ids
        leave the markup unchanged.
        """
        result = markup
        for edit in edits:
            if not edit.content:
                continue
            content = edit.content
            result = _edited_element_pattern(edit.element_id).sub(
                lambda match: f"{match.group(1)}{content}{match.group(5)}", result
            )
        return result


def apply_edits(markup: str, edits: Iterable[ElementEdit]) -> str:
    return RegexEditApplicator().apply_edits(markup, edits)


def inline_styles(edits: Iterable[ElementEdit]) -> Dict[str, dict]:
    """Per-element style overrides, keyed by element id"""
    return {edit.element_id: dict(edit.styles) for edit in edits if edit.styles}


def make_elements_editable(markup: str) -> str:
    """Mark every editable element for hover/click affordances"""
    return _UNMARKED_EDIT_ID_PATTERN.sub(
        lambda match: f"{match.group(0)} {EDITABLE_MARKER}", markup
    )


def find_edit_ids(markup: str) -> List[str]:
    return _unique(match.group(2) for match in _EDIT_ID_PATTERN.finditer(markup))


def find_nav_targets(markup: str) -> List[str]:
    return _unique(match.group(2) for match in _NAV_TARGET_PATTERN.finditer(markup))


def _unique(values: Iterable[str]) -> List[str]:
    seen = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


def resolve_page_key(target: Optional[str], pages: Iterable[str]) -> Optional[str]:
    """Map a navigation target to a stored page key, or None if there is no such page"""
    key = (target or "").strip().strip("/").lower()
    if key in HOME_ALIASES:
        key = HOME_PAGE
    by_lower = {page.lower(): page for page in pages}
    return by_lower.get(key)


def page_label(page_key: str) -> str:
    if page_key == HOME_PAGE:
        return "Home"
    return page_key[:1].upper() + page_key[1:]


def parse_style_text(text: str) -> Dict[str, str]:
    """Parse 'property: value' lines from the edit form into a style mapping"""
    styles = {}
    for line in text.splitlines():
        prop, sep, value = line.partition(":")
        prop, value = prop.strip(), value.strip()
        if sep and prop and value:
            styles[prop] = value
    return styles


def build_preview(
    site: GeneratedSite,
    page_key: str,
    edits: List[ElementEdit],
    applicator: EditApplicator,
) -> dict:
    """Everything the preview renderer needs to show one page"""
    markup = applicator.apply_edits(site.pages[page_key], edits)
    return {
        "page": page_key,
        "label": page_label(page_key),
        "pages": [
            {"key": key, "label": page_label(key)} for key in site.pages.keys()
        ],
        "content": make_elements_editable(markup),
        "editableIds": find_edit_ids(markup),
        "styles": site.styles,
        "inlineStyles": inline_styles(edits),
        "navigation": {
            target: resolve_page_key(target, site.pages.keys())
            for target in find_nav_targets(markup)
        },
    }

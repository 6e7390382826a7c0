"""Page-side scripts and selector helpers for content extraction."""

from __future__ import annotations

from typing import Optional

DEFAULT_SELECTOR = "body"
DEFAULT_IGNORE_SELECTOR = (
    'script, style, nav, .hidden, .hide, [class*="menu"], .navbar, .nav, '
    '.sidebar, .aside, .modal, [class*="sidebar"]'
)

# Selectors beginning with "/" are XPath expressions, anything else is CSS.
EXTRACT_CONTENT_SCRIPT = """
({ selector, ignoreSelector }) => {
    let root = null;
    if (selector.startsWith("/")) {
        const result = document.evaluate(
            selector, document, null, XPathResult.FIRST_ORDERED_NODE_TYPE, null
        );
        root = result.singleNodeValue;
    } else {
        root = document.querySelector(selector);
    }
    if (!root || !(root instanceof HTMLElement)) {
        return "";
    }
    if (ignoreSelector) {
        root.querySelectorAll(ignoreSelector).forEach((el) => el.remove());
    }
    return root.innerText || root.textContent || "";
}
"""


def is_xpath(selector: str) -> bool:
    return selector.startswith("/")


def to_playwright_selector(selector: str) -> str:
    """Prefix XPath expressions so Playwright does not parse them as CSS."""
    if is_xpath(selector):
        return f"xpath={selector}"
    return selector


def resolve_selectors(
    selector: Optional[str], ignore_selector: Optional[str]
) -> tuple[str, str]:
    return selector or DEFAULT_SELECTOR, (
        DEFAULT_IGNORE_SELECTOR if ignore_selector is None else ignore_selector
    )

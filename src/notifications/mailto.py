"""``mailto:`` deep links, the universal notification fallback."""

from urllib.parse import quote


def build_mailto_link(to: str, subject: str, body: str) -> str:
    return f"mailto:{to}?subject={quote(subject, safe='')}&body={quote(body, safe='')}"

import re

from pydantic import BaseModel

_TITLE = re.compile(r'"TITLE"\s*:\s*"([^"]+)"')
_TEXT = re.compile(r'"TEXT"\s*:\s*"([^"]+)"')


class MenuItem(BaseModel):
    title: str
    url: str


def parse_menu_list(text: str) -> list[MenuItem]:
    """
    Pair each ``"TITLE": "..."`` line with the next ``"TEXT": "<url>"`` line.

    A TEXT line without a pending title is skipped. Duplicate URLs keep their
    first occurrence.
    """
    items: list[MenuItem] = []
    seen: set[str] = set()
    title = None
    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        title_match = _TITLE.search(line)
        if title_match:
            title = title_match.group(1).strip()
            continue
        text_match = _TEXT.search(line)
        if text_match and title:
            url = text_match.group(1).strip()
            if url not in seen:
                seen.add(url)
                items.append(MenuItem(title=title, url=url))
            title = None
    return items


def load_menu_list(path: str) -> list[MenuItem]:
    with open(path, encoding="utf-8") as fh:
        return parse_menu_list(fh.read())

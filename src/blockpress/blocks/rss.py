"""RSS/Atom feed block."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from collections.abc import Callable
from dataclasses import dataclass

import requests

from blockpress.block_engine import BlockInstance, RendererDescriptor, ResolvedSettings
from blockpress.templating import TemplateEngine

logger = logging.getLogger(__name__)

RSS_BLOCK_TYPE = "blockpress.block.rss"
RSS_TEMPLATE = "blockpress/rss"
RSS_TEMPLATE_SOURCE = (
    "{{ title }}\n"
    "{% for item in items %}- {{ item.title }} <{{ item.link }}>\n{% endfor %}"
)

RSS_DEFAULTS = {
    "url": False,
    "title": "Feed items",
    "max_items": 10,
    "timeout": 5.0,
    "template": RSS_TEMPLATE,
    "ttl": 0,
}

_ATOM = "{http://www.w3.org/2005/Atom}"
USER_AGENT = "blockpress-rss/0.1"


@dataclass(frozen=True)
class FeedItem:
    """One entry of a feed."""

    title: str
    link: str
    summary: str = ""


def _text(element: ET.Element | None) -> str:
    if element is None or element.text is None:
        return ""
    return element.text.strip()


def parse_feed(document: str) -> tuple[FeedItem, ...]:
    """Extract items from an RSS 2.0 or Atom document."""
    try:
        root = ET.fromstring(document)
    except ET.ParseError as exc:
        msg = f"feed is not valid XML: {exc}."
        raise ValueError(msg) from exc

    items: list[FeedItem] = []
    for item in root.iter("item"):
        items.append(
            FeedItem(
                title=_text(item.find("title")),
                link=_text(item.find("link")),
                summary=_text(item.find("description")),
            )
        )
    for entry in root.iter(f"{_ATOM}entry"):
        link = entry.find(f"{_ATOM}link")
        items.append(
            FeedItem(
                title=_text(entry.find(f"{_ATOM}title")),
                link=link.get("href", "") if link is not None else "",
                summary=_text(entry.find(f"{_ATOM}summary")),
            )
        )
    return tuple(items)


def fetch_feed(url: str, timeout: float) -> str:
    """Download a feed document."""
    response = requests.get(url, timeout=timeout, headers={"User-Agent": USER_AGENT})
    response.raise_for_status()
    return response.text


@dataclass(frozen=True)
class RssBlockRenderer:
    """Fetch a feed and list its newest items."""

    engine: TemplateEngine
    fetch: Callable[[str, float], str] = fetch_feed

    def execute(self, instance: BlockInstance, settings: ResolvedSettings) -> str:
        url = settings.get("url")
        items: tuple[FeedItem, ...] = ()
        if url:
            max_items = int(settings["max_items"])
            logger.debug("fetching feed %s for block %s", url, instance.id)
            items = parse_feed(self.fetch(str(url), float(settings["timeout"])))[:max_items]

        context = {**settings, "items": items}
        return self.engine.render(str(settings["template"]), context).strip()


def rss_block_descriptor(
    engine: TemplateEngine,
    *,
    fetch: Callable[[str, float], str] = fetch_feed,
) -> RendererDescriptor:
    return RendererDescriptor(
        block_type=RSS_BLOCK_TYPE,
        title="RSS feed",
        description="Latest items of a remote RSS or Atom feed.",
        execute=RssBlockRenderer(engine, fetch).execute,
        defaults=RSS_DEFAULTS,
        aliases=("rss",),
    )

import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Optional

from ..schemas.feed_schemas import Channel, FeedItem

RSS_CONTENT_TYPE = 'application/rss+xml'


def _rfc822(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return format_datetime(dt.astimezone(timezone.utc))


def _text_element(parent: ET.Element, tag: str, text: Optional[str]) -> None:
    if text is None:
        return
    ET.SubElement(parent, tag).text = text


def _item_element(parent: ET.Element, item: FeedItem) -> None:
    element = ET.SubElement(parent, 'item')
    _text_element(element, 'title', item.title)
    _text_element(element, 'link', item.link)
    _text_element(element, 'description', item.description)
    for category in item.categories:
        _text_element(element, 'category', category)
    guid = ET.SubElement(
        element, 'guid', isPermaLink='true' if item.guid_is_permalink else 'false'
    )
    guid.text = item.guid


def render_rss(channel: Channel) -> bytes:
    """
    Serialise a channel as an RSS 2.0 document.

    :param channel: Channel and its items.
    :return: UTF-8 encoded XML, indented by two spaces.
    """
    rss = ET.Element('rss', version='2.0')
    element = ET.SubElement(rss, 'channel')

    _text_element(element, 'title', channel.title)
    _text_element(element, 'link', channel.link)
    # description is mandatory in RSS 2.0, even if empty
    _text_element(element, 'description', channel.description or '')
    if channel.last_build_date is not None:
        _text_element(element, 'lastBuildDate', _rfc822(channel.last_build_date))
    _text_element(element, 'generator', channel.generator)
    _text_element(element, 'docs', channel.docs)
    if channel.ttl is not None:
        _text_element(element, 'ttl', str(channel.ttl))

    for item in channel.items:
        _item_element(element, item)

    ET.indent(rss, space='  ')
    return ET.tostring(rss, encoding='utf-8', xml_declaration=True)

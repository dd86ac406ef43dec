"""Persistence of the informes feed as an RSS 2.0 document."""

import os
import stat
import tempfile
import xml.etree.ElementTree as ET
from email.utils import format_datetime
from pathlib import Path

from .errors import FeedNotFoundError, MalformedFeedError, StorageError
from .logging_config import create_execution_logger
from .models import Channel, Item

RSS_VERSION = "2.0"
INDENT = "    "


class FeedStore:
    """Reads and writes the persisted feed file."""

    def __init__(self, path: str | os.PathLike, execution_id: str | None = None):
        """Initialize the FeedStore.

        Args:
            path: Location of the RSS document
            execution_id: Execution ID for logging context
        """
        self.path = Path(path)
        self.logger = create_execution_logger("feed_store", execution_id)

    def load(self) -> list[Item]:
        """Read the persisted items in document order.

        Channel metadata is not returned; it is rewritten from configuration
        on every save.

        Raises:
            FeedNotFoundError: If the feed file does not exist
            MalformedFeedError: If the file exists but is not a valid feed
        """
        try:
            tree = ET.parse(self.path)
        except FileNotFoundError as e:
            self.logger.info("No persisted feed found", feed_path=str(self.path))
            raise FeedNotFoundError(f"Feed not found: {self.path}") from e
        except ET.ParseError as e:
            self.logger.error(
                f"Persisted feed is not well-formed XML: {e}",
                feed_path=str(self.path),
                error=str(e),
            )
            raise MalformedFeedError(f"Invalid XML in {self.path}: {e}") from e
        except OSError as e:
            raise MalformedFeedError(f"Cannot read {self.path}: {e}") from e

        items = self._parse_items(tree.getroot())
        self.logger.info(
            "Loaded persisted feed", feed_path=str(self.path), items_count=len(items)
        )
        return items

    def _parse_items(self, root: ET.Element) -> list[Item]:
        if root.tag != "rss":
            raise MalformedFeedError(
                f"Expected <rss> root in {self.path}, found <{root.tag}>"
            )
        channel = root.find("channel")
        if channel is None:
            raise MalformedFeedError(f"Missing <channel> in {self.path}")

        items = []
        for position, element in enumerate(channel.findall("item"), start=1):
            title = element.findtext("title", default="")
            identifier = element.findtext("guid", default="")
            if not title or not identifier:
                raise MalformedFeedError(
                    f"Item {position} in {self.path} has no title or guid"
                )
            items.append(
                Item(
                    title=title,
                    description=element.findtext("description", default=""),
                    link=element.findtext("link", default=""),
                    identifier=identifier,
                )
            )
        return items

    def save(self, items: list[Item], channel: Channel) -> None:
        """Overwrite the feed with the channel block and the full item list.

        The document is written next to the target and moved into place, so
        readers see either the previous feed or the new one.

        Raises:
            StorageError: If the document cannot be written
        """
        tree = ET.ElementTree(build_document(items, channel))
        ET.indent(tree, space=INDENT)

        directory = self.path.parent
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "wb", dir=directory, prefix=f".{self.path.name}.", suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tree.write(tmp, encoding="utf-8", xml_declaration=True)
                tmp.write(b"\n")
                tmp.flush()
                os.fsync(tmp.fileno())
            os.chmod(tmp_name, self._target_mode())
            os.replace(tmp_name, self.path)
        except OSError as e:
            self.logger.error(
                f"Failed to write feed: {e}", feed_path=str(self.path), error=str(e)
            )
            raise StorageError(f"Failed to write feed {self.path}: {e}") from e
        finally:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        self.logger.info(
            "Feed written", feed_path=str(self.path), items_count=len(items)
        )

    def _target_mode(self) -> int:
        """Permissions for the new document: the current file's, else 0666 minus umask."""
        try:
            return stat.S_IMODE(os.stat(self.path).st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask


def build_document(items: list[Item], channel: Channel) -> ET.Element:
    """Build the ``<rss>`` element for a channel and its items."""
    root = ET.Element("rss", version=RSS_VERSION)
    channel_el = ET.SubElement(root, "channel")
    ET.SubElement(channel_el, "title").text = channel.title
    ET.SubElement(channel_el, "link").text = channel.link
    ET.SubElement(channel_el, "description").text = channel.description
    if channel.last_build_date is not None:
        ET.SubElement(channel_el, "lastBuildDate").text = format_datetime(
            channel.last_build_date
        )

    for item in items:
        item_el = ET.SubElement(channel_el, "item")
        ET.SubElement(item_el, "title").text = item.title
        ET.SubElement(item_el, "link").text = item.link
        ET.SubElement(item_el, "description").text = item.description
        ET.SubElement(item_el, "guid", isPermaLink="false").text = item.identifier
    return root

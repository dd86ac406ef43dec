"""Informe page scraping for the feed builder."""

import requests
from bs4 import BeautifulSoup

from .errors import FetchError
from .logging_config import create_execution_logger
from .models import DEFAULT_SOURCE_URL, Item
from .normalize import normalize_pairs

INFORME_SELECTOR = ".conteudo .container .divInforme"


class InformeScraper:
    """Fetches the informe page and extracts candidate items."""

    def __init__(
        self,
        source_url: str = DEFAULT_SOURCE_URL,
        timeout: int = 30,
        execution_id: str | None = None,
    ):
        """Initialize InformeScraper.

        Args:
            source_url: Page listing the informes
            timeout: HTTP request timeout in seconds
            execution_id: Execution ID for logging context
        """
        self.source_url = source_url
        self.timeout = timeout
        self.logger = create_execution_logger("scraper", execution_id)
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": "Informes-RSS/1.0"})

    def fetch(self) -> list[Item]:
        """Download the page and return the normalized candidate items.

        Raises:
            FetchError: If the page cannot be downloaded
        """
        html = self.download()
        pairs = self.extract_pairs(html)
        items = normalize_pairs(pairs, link=self.source_url)
        self.logger.info(
            f"Extracted {len(items)} informes",
            source_url=self.source_url,
            raw_entries=len(pairs),
            items_count=len(items),
        )
        return items

    def download(self) -> str:
        """Return the page body as text.

        Raises:
            FetchError: On transport failure or a non-success status
        """
        self.logger.info("Downloading informe page", source_url=self.source_url)
        try:
            response = self.session.get(self.source_url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            self.logger.error(
                f"Failed to download {self.source_url}: {e}",
                source_url=self.source_url,
                error=str(e),
            )
            raise FetchError(f"Failed to download {self.source_url}: {e}") from e

        self.logger.info(
            "Page downloaded successfully",
            source_url=self.source_url,
            status_code=response.status_code,
            content_length=len(response.content),
        )
        return response.text

    def extract_pairs(self, html: str) -> list[tuple[str, str]]:
        """Extract raw (title, description) pairs from the page markup.

        The title is the text of the ``<p>`` elements inside an informe block;
        the description is the whole block text. Nothing is trimmed here.
        """
        soup = BeautifulSoup(html, "html.parser")
        pairs = []
        for block in soup.select(INFORME_SELECTOR):
            title = "".join(p.get_text() for p in block.find_all("p"))
            pairs.append((title, block.get_text()))
        return pairs

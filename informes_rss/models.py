"""Data models for the informes RSS feed."""

from dataclasses import dataclass, field
from datetime import datetime

DEFAULT_SOURCE_URL = "https://www.nfe.fazenda.gov.br/portal/informe.aspx?ehCTG=false"


@dataclass
class Item:
    """Represents a single informe entry in the feed."""

    title: str
    description: str
    link: str
    identifier: str = ""


@dataclass
class Channel:
    """Static channel metadata written at the top of the feed."""

    title: str = "Informes do Sefaz - NFe"
    link: str = DEFAULT_SOURCE_URL
    description: str = "Estatísticas da NF-e"
    last_build_date: datetime | None = None


@dataclass
class ReconcileResult:
    """Outcome of merging a scraped snapshot into the persisted feed."""

    items: list[Item]
    changed_titles: dict[str, str] = field(default_factory=dict)  # title -> description
    identifiers: dict[str, str] = field(default_factory=dict)  # title -> stored id
    rejected_titles: list[str] = field(default_factory=list)
    bootstrap: bool = False

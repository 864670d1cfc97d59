from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CatalogVersion:
    id: int
    title: str
    language: str
    description: str


@dataclass(frozen=True)
class CatalogOutline:
    id: int
    title: str


# versions and outlines published as static assets
DEFAULT_VERSIONS: tuple[CatalogVersion, ...] = (
    CatalogVersion(9, "LLV 352", "English", "Lawful Literal Version, Accountable Brothers' Standard Version of 2019-2025"),
    CatalogVersion(5, "LLV 287", "English", "Lawful Literal Version, Accountable Brothers' Standard Version of 2019-2023"),
    CatalogVersion(6, "Westminster Leningrad Codex", "English", "WLC - Westminster Leningrad Codex"),
    CatalogVersion(4, "American Standard Version (ASV)", "English", "American Standard Version of 1901"),
    CatalogVersion(-1, "LLV 352 (DEV.1)", "English", "Lawful Literal Version, Accountable Brothers' Standard Version of 2019-2025"),
    CatalogVersion(-2, "LLV 352 (DEV.2)", "English", "Lawful Literal Version, Accountable Brothers' Standard Version of 2019-2025"),
)

DEFAULT_OUTLINES: tuple[CatalogOutline, ...] = (
    CatalogOutline(11, "LLV, AD2025/V1"),
    CatalogOutline(1, "Langton, AD1227"),
)


def find_catalog_version(version_id: int | str) -> Optional[CatalogVersion]:
    for version in DEFAULT_VERSIONS:
        if str(version.id) == str(version_id):
            return version
    return None


def find_catalog_outline(outline_id: int | str) -> Optional[CatalogOutline]:
    for outline in DEFAULT_OUTLINES:
        if str(outline.id) == str(outline_id):
            return outline
    return None

from __future__ import annotations

from typing import Optional

import structlog
from pydantic import BaseModel, Field

from bible_reader.content.catalog import find_catalog_outline, find_catalog_version
from bible_reader.content.outcome import Outcome
from bible_reader.core.config import get_settings

logger = structlog.get_logger()


class ResolvedUrls(BaseModel):
    version_url: Optional[str] = Field(default=None, serialization_alias="versionUrl")
    outline_url: Optional[str] = Field(default=None, serialization_alias="outlineUrl")


def resolve_urls(
    version_id: Optional[str],
    outline_id: Optional[str],
    base_url: Optional[str] = None,
    check_catalog: bool = False,
) -> Outcome[ResolvedUrls]:
    """Map version/outline identifiers to their static asset URLs.

    With ``check_catalog`` an identifier missing from the published catalog
    is reported as not found instead of being resolved blindly.
    """
    if not version_id and not outline_id:
        return Outcome.missing("Missing version or outline parameter")

    if check_catalog:
        if version_id and find_catalog_version(version_id) is None:
            return Outcome.not_found(f"Unknown version: {version_id}")
        if outline_id and find_catalog_outline(outline_id) is None:
            return Outcome.not_found(f"Unknown outline: {outline_id}")

    base = (base_url if base_url is not None else get_settings().asset_base_url).rstrip("/")
    urls = ResolvedUrls(
        version_url=f"{base}/bibles/{version_id}.txt" if version_id else None,
        outline_url=f"{base}/outlines/{outline_id}.json" if outline_id else None,
    )
    logger.debug("urls_resolved", version_url=urls.version_url, outline_url=urls.outline_url)
    return Outcome.success(urls)

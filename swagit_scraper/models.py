"""Pydantic models for crawler configuration and scraped video records."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, HttpUrl


class CrawlerOptions(BaseModel):
    """Configuration for a crawl of one archive.

    Only the scheme, host and port of ``archive_address`` are used; the
    crawler discards any path or query when building the archive root.

    Attributes:
        archive_address: Any URL on the archive site.
        timeout: Per-request timeout in seconds. None disables the timeout.
        user_agent: User-Agent header sent with every request.
        headers: Extra headers sent with every request.
    """

    archive_address: HttpUrl = Field(..., alias="archiveAddress")
    timeout: float | None = Field(30.0, gt=0)
    user_agent: str | None = Field(None, alias="userAgent")
    headers: dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True)

    def request_headers(self) -> dict[str, str]:
        """Headers for the request manager, with the User-Agent merged in."""
        headers = dict(self.headers)
        if self.user_agent:
            headers["User-Agent"] = self.user_agent
        return headers


class Video(BaseModel):
    """A single video entry from a section's listing page."""

    name: str = Field(..., description="Link text of the video entry")
    slug: str = Field(..., description="Path after the /play/ route")
    address: str = Field(..., description="Absolute URL of the video page")
    date: datetime | None = Field(
        None, description="Listed date, None when it could not be parsed"
    )

    model_config = ConfigDict(frozen=True)

"""Traversal of public video-meeting archives.

An archive is walked top-down and on demand: the Crawler resolves the archive
root, the Archive lists its sections, and each Section fetches listing pages
into Video records.
"""

from swagit_scraper.archive import Archive, Section, SectionCollection
from swagit_scraper.crawler import Crawler, resolve_archive
from swagit_scraper.models import CrawlerOptions, Video

__all__ = [
    "Archive",
    "Crawler",
    "CrawlerOptions",
    "Section",
    "SectionCollection",
    "Video",
    "resolve_archive",
]

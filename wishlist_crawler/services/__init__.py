"""Crawl pipeline stages."""

from wishlist_crawler.services.pipeline import CrawlPipeline, run_crawl
from wishlist_crawler.services.spam_filter import SpamFilter

__all__ = [
    "CrawlPipeline",
    "run_crawl",
    "SpamFilter",
]

"""
Crawl models package.
"""
from app.features.crawl.models.project import Project
from app.features.crawl.models.crawl_job import CrawlJob, CrawlJobStatus
from app.features.crawl.models.page import Page
from app.features.crawl.models.page_score import PageScore
from app.features.crawl.models.issue import Issue

__all__ = ["Project", "CrawlJob", "CrawlJobStatus", "Page", "PageScore", "Issue"]

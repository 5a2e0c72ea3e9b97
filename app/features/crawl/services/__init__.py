"""
Crawl Services

Flow of a crawl job through the pipeline:

1. ingest_service.ingest_batch - one crawler batch per call: pages stored,
   every page rule-scored, job counters and status advanced in a single
   transaction
2. workers.tasks.score_content_quality - deferred model judgment of the
   batch's pages (content_quality feature)
3. workers.tasks.enrich_job - after the final batch, analytics pulled from
   the project's integrations (enrichment feature)

ingest_service.rescore_job re-runs step 1's scoring over stored pages
without re-crawling. job_state holds the allowed status transitions.
"""

"""
Browser-automation sources (Playwright).

Each scraper runs the ScrapeState machine in scrapers.orchestrator and
keeps its DOM rules as plain functions over page HTML.
"""

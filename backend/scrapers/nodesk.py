"""
NoDesk scraper

Listing: https://nodesk.co/remote-jobs/design/ (Algolia hits, infinite scroll)
Detail:  two hops. The NoDesk job page only links out, so the first hop
         finds the outbound apply link and the second reads the description
         from the real ATS page (Greenhouse, Lever, Ashby, ...).
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional
from urllib.parse import urlparse

from scrapers.dom import extract_description, find_external_apply_link, node_text, parse_html
from scrapers.orchestrator import PAGE_ERRORS, ScrapeOrchestrator, ScrapeState
from sources.enums import JobSource
from sources.types import NormalizedJob
from utils.salary import parse_salary_text
from utils.skills import build_skills
from utils.text import parse_experience_level, parse_job_type

BASE_URL = "https://nodesk.co"
OWN_DOMAIN = "nodesk.co"
LISTING_URL = f"{BASE_URL}/remote-jobs/design/"

SCROLL_COUNT = 3
SCROLL_DELAY_SECONDS = 1.5
NAVIGATION_TIMEOUT_SECONDS = 30.0
HITS_TIMEOUT_SECONDS = 10.0
INTERMEDIATE_TIMEOUT_SECONDS = 10.0
ATS_TIMEOUT_SECONDS = 15.0
ATS_SETTLE_SECONDS = 1.0

HIT_SELECTOR = '.ais-Hits-item'

# Common ATS description containers, most specific first
ATS_SELECTORS = [
    '#content',
    '.job-description',
    '[class*="job-description"]',
    '[class*="description"]',
    '.posting-description',
    '[data-qa="job-description"]',
    'article',
    'main',
    '.content',
]

_SALARY_RE = re.compile(r'\$[\d,]+[kK]?\s*[–-]\s*\$[\d,]+[kK]?')
_JOB_TYPE_RE = re.compile(r'Full-Time|Part-Time|Contract|Freelance|Internship', re.IGNORECASE)


@dataclass
class NodeskListing:
    title: str
    url: str
    company: str
    location: str = "Remote"
    salary: Optional[str] = None
    job_type: Optional[str] = None
    tags: List[str] = field(default_factory=list)


@dataclass
class NodeskDetail:
    apply_url: str
    description: str = ""


def parse_hits(html: str) -> List[NodeskListing]:
    """Listings from the rendered Algolia hits; sponsored collection links are dropped"""
    soup = parse_html(html)
    listings: List[NodeskListing] = []

    for item in soup.select(HIT_SELECTOR):
        title_link = item.select_one('h2 a')
        company_link = item.select_one('h3 a')
        if title_link is None or company_link is None:
            continue

        title = node_text(title_link)
        url = title_link.get('href')
        if not url or '/collections/' in url or '/new/' in url:
            continue
        # Category tiles look like "Design Jobs / Remote"
        if not title or ('Jobs' in title and '/' in title):
            continue

        all_text = item.get_text(' ', strip=True)
        salary = _SALARY_RE.search(all_text)
        job_type = _JOB_TYPE_RE.search(all_text)
        location = node_text(item.select_one('h5 a') or item.select_one('h5'))
        tags = [
            node_text(tag) for tag in item.select('a[href*="/remote-jobs/"]')
            if 1 < len(node_text(tag)) < 30
        ]

        listings.append(NodeskListing(
            title=title,
            url=url,
            company=node_text(company_link),
            location=location or "Remote",
            salary=salary.group(0) if salary else None,
            job_type=job_type.group(0) if job_type else None,
            tags=tags,
        ))

    return listings


class NodeskScraper(ScrapeOrchestrator):
    SOURCE = JobSource.NODESK
    DETAIL_CAP = 30
    DETAIL_DELAY_SECONDS = 0.5

    async def collect_listings(self, page) -> List[NodeskListing]:
        self.enter(ScrapeState.NAVIGATE)
        await self.goto(page, LISTING_URL, NAVIGATION_TIMEOUT_SECONDS, wait_until='networkidle')
        await page.wait_for_selector(HIT_SELECTOR, timeout=self.timeout_ms(HITS_TIMEOUT_SECONDS))

        self.enter(ScrapeState.PAGINATE)
        for _ in range(SCROLL_COUNT):
            self.ensure_budget()
            await page.evaluate('window.scrollTo(0, document.body.scrollHeight)')
            await self.pause(SCROLL_DELAY_SECONDS)

        self.enter(ScrapeState.EXTRACT)
        listings = parse_hits(await page.content())
        self.log.log_info(f"Extracted {len(listings)} raw jobs")
        return listings

    async def fetch_detail(self, page, listing: NodeskListing) -> NodeskDetail:
        # Hop 1: NoDesk page -> outbound apply link
        html = await self.goto(page, self.absolute_url(listing), INTERMEDIATE_TIMEOUT_SECONDS)
        external_url = find_external_apply_link(html, OWN_DOMAIN)
        if not external_url:
            return NodeskDetail(apply_url=self.absolute_url(listing))

        # Hop 2: the ATS page; a failure here still keeps the real apply URL
        detail = NodeskDetail(apply_url=external_url)
        try:
            self.ensure_budget()
            await page.goto(
                external_url,
                wait_until='domcontentloaded',
                timeout=self.timeout_ms(ATS_TIMEOUT_SECONDS),
            )
            await self.pause(ATS_SETTLE_SECONDS)
            detail.description = extract_description(await page.content(), ATS_SELECTORS)
        except PAGE_ERRORS as e:
            self.log.log_warning(f"Could not fetch description from {external_url}: {e}")
        return detail

    @staticmethod
    def absolute_url(listing: NodeskListing) -> str:
        if listing.url.startswith('http'):
            return listing.url
        return f"{BASE_URL}{listing.url}"

    def normalize(self, listing: NodeskListing, detail: Optional[NodeskDetail] = None) -> NormalizedJob:
        salary = parse_salary_text(listing.salary)
        slug = [part for part in urlparse(listing.url).path.split('/') if part]
        upstream_id = slug[-1] if slug else '-'.join(listing.title.lower().split())
        description = detail.description if detail else ""
        fallback = f"{listing.title} at {listing.company}. {', '.join(listing.tags)}"

        return self.build_job(
            upstream_id=upstream_id,
            title=listing.title,
            company=listing.company,
            location=listing.location,
            apply_url=detail.apply_url if detail else self.absolute_url(listing),
            description=description or fallback,
            salary_min=salary.min,
            salary_max=salary.max,
            salary_text=salary.text,
            job_type=parse_job_type(listing.job_type),
            experience_level=parse_experience_level(listing.title),
            skills=build_skills(description, listing.tags),
        )

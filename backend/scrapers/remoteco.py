"""
Remote.co scraper

Listing: https://remote.co/remote-jobs/design/ then ?page=N
Detail:  https://remote.co/job-details/<slug>  (single hop, description on page)

Listing cards are anchors to /job-details/; the title is the last <div>
inside the anchor, the card container (anchor -> closest div -> two
parents up) holds the company <h3> and a <li> list of metadata.
"""

from dataclasses import dataclass
from typing import List, Optional

from bs4 import Tag

from scrapers.dom import extract_description, node_text, parse_html
from scrapers.orchestrator import ScrapeOrchestrator, ScrapeState
from sources.enums import JobSource
from sources.types import NormalizedJob
from utils.salary import parse_salary_text
from utils.skills import build_skills
from utils.text import parse_experience_level, parse_job_type

BASE_URL = "https://remote.co"
LISTING_URL = f"{BASE_URL}/remote-jobs/design/"

MAX_PAGES = 2
PAGE_DELAY_SECONDS = 2.0
NAVIGATION_TIMEOUT_SECONDS = 30.0
DETAIL_TIMEOUT_SECONDS = 20.0

DETAIL_SELECTORS = [
    '.job-description',
    '[class*="job-detail"]',
    '[class*="description"]',
    'article',
    'main',
]

# Badge text that can sit in the title slot of a card
_NOT_A_TITLE = {'New!', 'Today', 'Yesterday'}
_JOB_TYPE_LABELS = {'Employee', 'Freelance', 'Temporary'}


@dataclass
class RemoteCoListing:
    title: str
    url: str
    company: str = ""
    location: str = "Remote"
    salary: Optional[str] = None
    job_type: str = ""
    remote_type: str = ""


def listing_page_url(page_number: int) -> str:
    if page_number <= 1:
        return LISTING_URL
    return f"{LISTING_URL}?page={page_number}"


def _card_container(link: Tag) -> Optional[Tag]:
    container = link.find_parent('div')
    for _ in range(2):
        if container is None:
            return None
        container = container.parent
    return container


def parse_listing_page(html: str) -> List[RemoteCoListing]:
    """Job cards on one listing page, in page order, one per detail URL"""
    soup = parse_html(html)
    listings: List[RemoteCoListing] = []
    seen = set()

    for link in soup.select('a[href*="/job-details/"]'):
        href = link.get('href')
        if not href or href in seen:
            continue
        seen.add(href)

        title = node_text(link.select_one('div:last-of-type') or link)
        if not title or title in _NOT_A_TITLE or 'days ago' in title:
            continue

        container = _card_container(link)
        if container is None:
            continue

        listing = RemoteCoListing(
            title=title,
            url=href,
            company=node_text(container.find('h3')),
        )

        for item in container.find_all('li'):
            text = node_text(item)
            if 'Remote Work' in text:
                listing.remote_type = text
            elif 'Time' in text or text in _JOB_TYPE_LABELS:
                if not listing.job_type:
                    listing.job_type = text
            elif '$' in text and ('nnually' in text or 'ourly' in text):
                listing.salary = text

        location = node_text(container.select_one('div[class*="Remote"]'))
        if location:
            listing.location = location

        listings.append(listing)

    return listings


class RemoteCoScraper(ScrapeOrchestrator):
    SOURCE = JobSource.REMOTECO
    DETAIL_CAP = 20
    DETAIL_DELAY_SECONDS = 1.0

    async def collect_listings(self, page) -> List[RemoteCoListing]:
        listings: List[RemoteCoListing] = []

        for page_number in range(1, MAX_PAGES + 1):
            if page_number > 1:
                self.enter(ScrapeState.PAGINATE)
                await self.pause(PAGE_DELAY_SECONDS)

            self.enter(ScrapeState.NAVIGATE)
            url = listing_page_url(page_number)
            await self.goto(page, url, NAVIGATION_TIMEOUT_SECONDS, wait_until='networkidle')
            # Cards render client-side after network idle
            await self.pause(PAGE_DELAY_SECONDS)

            self.enter(ScrapeState.EXTRACT)
            page_listings = parse_listing_page(await page.content())
            self.log.log_info(f"Page {page_number}: found {len(page_listings)} jobs")
            listings.extend(page_listings)

        return listings

    async def fetch_detail(self, page, listing: RemoteCoListing) -> str:
        html = await self.goto(page, self.absolute_url(listing), DETAIL_TIMEOUT_SECONDS)
        return extract_description(html, DETAIL_SELECTORS)

    @staticmethod
    def absolute_url(listing: RemoteCoListing) -> str:
        if listing.url.startswith('http'):
            return listing.url
        return f"{BASE_URL}{listing.url}"

    def normalize(self, listing: RemoteCoListing, detail: Optional[str] = None) -> NormalizedJob:
        salary = parse_salary_text(listing.salary)
        slug = [part for part in listing.url.split('/') if part]
        upstream_id = slug[-1] if slug else '-'.join(listing.title.split())
        description = detail or (
            f"{listing.title} at {listing.company}. "
            f"{listing.remote_type or 'Remote'}. {listing.job_type or 'Full-Time'}."
        )

        return self.build_job(
            upstream_id=upstream_id,
            title=listing.title,
            company=listing.company,
            location=listing.location,
            apply_url=self.absolute_url(listing),
            description=description,
            salary_min=salary.min,
            salary_max=salary.max,
            salary_text=salary.text,
            job_type=parse_job_type(listing.job_type),
            experience_level=parse_experience_level(listing.title),
            skills=build_skills(detail),
        )

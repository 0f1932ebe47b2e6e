"""
Source registry

Maps source names to adapter classes and source groups to ordered lists of
sources. Used by the cron routes, the scheduled worker and the CLI.

Example:
    adapter = get_source('himalayas', config, deadline)
    jobs = await adapter.fetch()

    for name in get_group_sources('ats'):
        ...
"""

from typing import Dict, List, Type

from scrapers.nodesk import NodeskScraper
from scrapers.orchestrator import ScrapeOrchestrator
from scrapers.remoteco import RemoteCoScraper
from sources.adzuna import AdzunaSource
from sources.arbeitnow import ArbeitnowSource
from sources.ashby import AshbySource
from sources.base_source import BaseJobSource
from sources.config import SourceConfig
from sources.enums import JobSource, SourceGroup
from sources.greenhouse import GreenhouseSource
from sources.himalayas import HimalayasSource
from sources.indeed import IndeedSource
from sources.jobicy import JobicySource
from sources.jsearch import JSearchSource
from sources.lever import LeverSource
from sources.remoteok import RemoteOKSource
from sources.remotive import RemotiveSource
from sources.ycombinator import YCombinatorSource
from utils.deadline import Deadline

SOURCE_REGISTRY: Dict[JobSource, Type[BaseJobSource] | Type[ScrapeOrchestrator]] = {
    JobSource.REMOTIVE: RemotiveSource,
    JobSource.REMOTEOK: RemoteOKSource,
    JobSource.ARBEITNOW: ArbeitnowSource,
    JobSource.HIMALAYAS: HimalayasSource,
    JobSource.JOBICY: JobicySource,
    JobSource.YCOMBINATOR: YCombinatorSource,
    JobSource.JSEARCH: JSearchSource,
    JobSource.ADZUNA: AdzunaSource,
    JobSource.INDEED: IndeedSource,
    JobSource.GREENHOUSE: GreenhouseSource,
    JobSource.LEVER: LeverSource,
    JobSource.ASHBY: AshbySource,
    JobSource.REMOTECO: RemoteCoScraper,
    JobSource.NODESK: NodeskScraper,
}

# Sources in each group run sequentially, in this order
SOURCE_GROUPS: Dict[SourceGroup, List[JobSource]] = {
    SourceGroup.AGGREGATORS: [
        JobSource.REMOTIVE,
        JobSource.REMOTEOK,
        JobSource.ARBEITNOW,
        JobSource.HIMALAYAS,
        JobSource.JOBICY,
        JobSource.YCOMBINATOR,
    ],
    SourceGroup.SEARCH: [
        JobSource.JSEARCH,
        JobSource.ADZUNA,
    ],
    SourceGroup.ATS: [
        JobSource.GREENHOUSE,
        JobSource.LEVER,
        JobSource.ASHBY,
    ],
    SourceGroup.SCRAPERS: [
        JobSource.REMOTECO,
        JobSource.NODESK,
    ],
}

SCRAPER_SOURCES = SOURCE_GROUPS[SourceGroup.SCRAPERS]


def list_sources() -> List[str]:
    return [source.value for source in SOURCE_REGISTRY]


def list_groups() -> List[str]:
    return [group.value for group in SOURCE_GROUPS]


def parse_source(name: str) -> JobSource:
    """
    Raises:
        ValueError: If name is not a registered source
    """
    try:
        return JobSource((name or '').strip().lower())
    except ValueError:
        raise ValueError(
            f"Unknown source '{name}'. Available: {', '.join(list_sources())}"
        ) from None


def parse_group(name: str) -> SourceGroup:
    """
    Raises:
        ValueError: If name is not a source group
    """
    try:
        return SourceGroup((name or '').strip().lower())
    except ValueError:
        raise ValueError(
            f"Unknown group '{name}'. Available: {', '.join(list_groups())}"
        ) from None


def get_group_sources(group: SourceGroup | str) -> List[JobSource]:
    return list(SOURCE_GROUPS[parse_group(group)])


def get_source(name: JobSource | str, config: SourceConfig, deadline: Deadline, **options):
    """
    Instantiate the adapter for a source.

    Args:
        name: Source name or JobSource
        config: Per-invocation SourceConfig
        deadline: Invocation budget
        **options: Adapter-specific options (Indeed region/query_types,
                   ATS boards, scraper mode/browser_factory)

    Raises:
        ValueError: If name is not a registered source
    """
    source = parse_source(name)
    return SOURCE_REGISTRY[source](config, deadline, **options)

"""
Source and group enums

Defines every upstream the pipeline can ingest from.
This is in a separate file to avoid circular imports between registry and sources.
"""

from enum import Enum


class JobSource(str, Enum):
    """
    Supported job sources

    Values double as the prefix of NormalizedJob.id and the `source` column.
    """
    REMOTIVE = "remotive"
    REMOTEOK = "remoteok"
    ARBEITNOW = "arbeitnow"
    HIMALAYAS = "himalayas"
    JOBICY = "jobicy"
    YCOMBINATOR = "ycombinator"
    JSEARCH = "jsearch"
    ADZUNA = "adzuna"
    INDEED = "indeed"
    GREENHOUSE = "greenhouse"
    LEVER = "lever"
    ASHBY = "ashby"
    REMOTECO = "remoteco"
    NODESK = "nodesk"


class SourceGroup(str, Enum):
    """Named batches of sources that one trigger call runs sequentially"""
    AGGREGATORS = "aggregators"
    SEARCH = "search"
    ATS = "ats"
    SCRAPERS = "scrapers"


class ScrapeMode(str, Enum):
    """FULL visits every detail page (within caps), QUICK keeps listing data only"""
    FULL = "full"
    QUICK = "quick"


class IndeedRegion(str, Enum):
    US = "us"
    PH = "ph"
    CA = "ca"
    GB = "gb"
    AU = "au"
    IN = "in"
    SG = "sg"
    ID = "id"


class IndeedQueryType(str, Enum):
    UI = "ui"
    UX = "ux"
    PRODUCT = "product"
    GRAPHIC = "graphic"

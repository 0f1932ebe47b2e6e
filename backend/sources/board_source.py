"""
Shared walk over per-company ATS boards (Greenhouse, Lever, Ashby).

Boards are fetched one after another with a fixed delay; a board that
fails (404 after a company switched ATS, timeout, bad JSON) costs only
itself.
"""

from abc import abstractmethod
from typing import Any, AsyncIterator, List, Optional

from sources.base_source import BaseJobSource, TRANSIENT_ERRORS
from sources.companies import CompanyBoard
from sources.config import SourceConfig
from sources.errors import MalformedPayload
from sources.types import NormalizedJob
from utils.deadline import Deadline


class BoardSource(BaseJobSource):
    """
    Base for ATS adapters

    Concrete boards define:
    1. DEFAULT_BOARDS: companies polled when no override is given
    2. board_url(board): feed URL for one company
    3. board_items(data): raw posting list out of the feed response
    4. parse_posting(item): typed posting (raises MalformedPayload)
    5. normalize(board, posting): NormalizedJob
    """

    DEFAULT_BOARDS: List[CompanyBoard] = []

    def __init__(
        self,
        config: SourceConfig,
        deadline: Deadline,
        boards: Optional[List[CompanyBoard]] = None,
    ):
        super().__init__(config, deadline)
        self.boards = list(boards) if boards is not None else list(self.DEFAULT_BOARDS)

    @abstractmethod
    def board_url(self, board: CompanyBoard) -> str:
        ...

    @abstractmethod
    def board_items(self, data: Any) -> List[Any]:
        ...

    @abstractmethod
    def parse_posting(self, item: Any) -> Any:
        ...

    @abstractmethod
    def normalize(self, board: CompanyBoard, posting: Any) -> NormalizedJob:
        ...

    async def _iter_jobs(self) -> AsyncIterator[NormalizedJob]:
        for index, board in enumerate(self.boards):
            if index > 0:
                await self.throttle()

            try:
                data = await self.get_json(self.board_url(board))
            except TRANSIENT_ERRORS as e:
                self.record_failure(f"Board {board.slug}", e)
                continue

            for item in self.board_items(data):
                try:
                    posting = self.parse_posting(item)
                except MalformedPayload as e:
                    self.record_failure(f"Posting on {board.slug}", e)
                    continue

                if not self.mark_seen(f"{board.slug}-{posting.id}"):
                    continue
                if not self.classify(posting.title):
                    continue

                job = self.try_normalize(f"Posting {posting.id} on {board.slug}", self.normalize, board, posting)
                if job:
                    yield job

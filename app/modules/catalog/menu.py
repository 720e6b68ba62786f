"""
Catalog mega-menu: published courses and challenges, loaded once per menu.
"""

import asyncio
import logging
from typing import List, Optional, Protocol

from app.core.cancellation import CancellationToken
from app.modules.catalog.schemas import CatalogMenuResponse, Course, SavedChallenge

logger = logging.getLogger(__name__)

FEATURED_COUNT = 2
MORE_LIMIT = 5
COMING_SOON_BELOW = 3


class CatalogReader(Protocol):
    def fetch_published_courses(self) -> List[Course]:
        ...

    def fetch_published_challenges(self) -> List[SavedChallenge]:
        ...


class CatalogMenu:
    def __init__(self, catalog: CatalogReader, token: Optional[CancellationToken] = None):
        self.courses: List[Course] = []
        self.challenges: List[SavedChallenge] = []
        self.loading = False
        self.loaded = False
        self._catalog = catalog
        self._token = token or CancellationToken()

    async def load(self) -> None:
        """Fetch courses and challenges concurrently. Subsequent calls are no-ops."""
        if self.loaded or self.loading or self._token.cancelled:
            return
        self.loading = True
        courses, challenges = await asyncio.gather(
            asyncio.to_thread(self._catalog.fetch_published_courses),
            asyncio.to_thread(self._catalog.fetch_published_challenges),
        )
        if self._token.cancelled:
            self.loading = False
            logger.debug("Catalog menu disposed before load finished; dropping results")
            return
        self.loading = False
        self.courses = courses or []
        self.challenges = challenges or []
        self.loaded = True

    @property
    def featured_courses(self) -> List[Course]:
        return self.courses[:FEATURED_COUNT]

    @property
    def more_courses(self) -> List[Course]:
        return self.courses[FEATURED_COUNT:MORE_LIMIT]

    @property
    def coming_soon(self) -> bool:
        return len(self.courses) < COMING_SOON_BELOW

    def to_response(self) -> CatalogMenuResponse:
        return CatalogMenuResponse(
            featured_courses=self.featured_courses,
            more_courses=self.more_courses,
            coming_soon=self.coming_soon,
            challenges=self.challenges,
        )

    def dispose(self) -> None:
        self._token.cancel()

from collections import Counter

import structlog

from moments.core.core import Service
from moments.core.modules.moment.models import Moment, MomentCreate, MomentFilter, MomentList, MomentStatus, MomentUpdate, TagCount
from moments.core.store import Condition, Record, RecordQuery
from moments.errors import ValidationError

logger = structlog.get_logger(__name__)

BATCH_SIZE = 100
FAVORITED_LIMIT = 50


class MomentService(Service):
    """Moments stored as records in the document store."""

    async def list_moments(self, page_size: int = 10, cursor: str | None = None, moment_filter: MomentFilter | None = None) -> MomentList:
        """Get one page of moments, newest first, optionally filtered."""
        conditions = moment_filter.to_conditions() if moment_filter else []
        page = await self.core.store.query(RecordQuery(conditions=conditions, page_size=page_size, cursor=cursor))
        return MomentList(
            moments=[Moment.from_record(record) for record in page.records],
            total=page.total,
            has_more=page.has_more,
            next_cursor=page.next_cursor,
        )

    async def get_moment(self, moment_id: str) -> Moment:
        return Moment.from_record(await self.core.store.get(moment_id))

    async def create_moment(self, data: MomentCreate) -> Moment:
        record = await self.core.store.create(data.to_properties())
        logger.debug("moment_created", moment_id=record.id, tags=data.tags)
        return Moment.from_record(record)

    async def update_moment(self, moment_id: str, data: MomentUpdate) -> Moment:
        properties = data.to_properties()
        if not properties:
            return await self.get_moment(moment_id)
        record = await self.core.store.update(moment_id, properties)
        logger.debug("moment_updated", moment_id=moment_id, fields=sorted(properties))
        return Moment.from_record(record)

    async def delete_moment(self, moment_id: str) -> None:
        """Archive the moment; archived moments disappear from every listing."""
        await self.core.store.archive(moment_id)
        logger.debug("moment_archived", moment_id=moment_id)

    async def toggle_favorite(self, moment_id: str) -> Moment:
        moment = await self.get_moment(moment_id)
        record = await self.core.store.update(moment_id, {"favorited": not moment.favorited})
        return Moment.from_record(record)

    async def search_moments(self, query: str) -> list[Moment]:
        """Find moments whose title contains the query, case-insensitively."""
        if not query.strip():
            raise ValidationError("Search query is required")
        return await self._find_all(MomentFilter(search=query).to_conditions())

    async def get_moments_by_status(self, status: MomentStatus) -> list[Moment]:
        return await self._find_all(MomentFilter(status=status).to_conditions())

    async def get_moments_by_tag(self, tag: str) -> list[Moment]:
        return await self._find_all(MomentFilter(tag=tag).to_conditions())

    async def get_favorited_moments(self) -> list[Moment]:
        result = await self.list_moments(FAVORITED_LIMIT, moment_filter=MomentFilter(favorited=True))
        return result.moments

    async def get_tags(self) -> list[TagCount]:
        """Count how many live moments carry each tag, most used first."""
        counts: Counter[str] = Counter()
        for record in await self._query_all([]):
            counts.update(set(record.properties.get("tags", [])))
        return [TagCount(name=name, count=count) for name, count in sorted(counts.items(), key=lambda item: (-item[1], item[0]))]

    async def _find_all(self, conditions: list[Condition]) -> list[Moment]:
        return [Moment.from_record(record) for record in await self._query_all(conditions)]

    async def _query_all(self, conditions: list[Condition]) -> list[Record]:
        """Walk every page of a query."""
        records: list[Record] = []
        cursor: str | None = None
        while True:
            page = await self.core.store.query(RecordQuery(conditions=conditions, page_size=BATCH_SIZE, cursor=cursor))
            records.extend(page.records)
            if not page.has_more:
                return records
            cursor = page.next_cursor

"""
Report Store

Holds the live SalesReport behind load/save/reset:
- RedisReportStore: JSON payload under a single Redis key
- MemoryReportStore: process-local, for development and tests

A missing or structurally invalid stored value reads as absent, and every
loaded report has its derived fields recomputed before it is handed out.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Optional

import structlog
from pydantic import ValidationError
from redis.asyncio import ConnectionPool, Redis

from salesdash.config import Settings, get_settings
from salesdash.reports.defaults import default_report
from salesdash.reports.models import SalesReport
from salesdash.transformation.aggregation import recompute_report

logger = structlog.get_logger(__name__)

# Global Redis connection
_redis_pool: Optional[ConnectionPool] = None
_redis_client: Optional[Redis] = None


async def init_redis(settings: Optional[Settings] = None) -> Redis:
    """Initialize Redis connection pool"""
    global _redis_pool, _redis_client

    if _redis_client is not None:
        return _redis_client

    settings = settings or get_settings()
    _redis_pool = ConnectionPool.from_url(
        settings.redis.get_url(),
        max_connections=settings.redis.max_connections,
        socket_timeout=settings.redis.socket_timeout,
        decode_responses=True,
    )
    _redis_client = Redis(connection_pool=_redis_pool)

    try:
        await _redis_client.ping()
        logger.info("Redis connection established")
    except Exception as e:
        logger.error(f"Redis connection failed: {e}")
        raise

    return _redis_client


async def close_redis() -> None:
    """Close Redis connection pool"""
    global _redis_pool, _redis_client

    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None

    if _redis_pool:
        await _redis_pool.disconnect()
        _redis_pool = None

    logger.info("Redis connection closed")


def parse_stored_report(raw: Optional[Any]) -> Optional[SalesReport]:
    """
    Turn a stored payload into a consistent report.

    Accepts a JSON string or an already-decoded mapping. Returns None when
    the payload is absent or lacks a non-empty branches list or a website.
    """
    if raw is None:
        return None

    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Stored report is not valid JSON", error=str(e))
            return None

    if not isinstance(raw, dict):
        logger.warning("Stored report is not an object", type=type(raw).__name__)
        return None

    branches = raw.get("branches")
    if not isinstance(branches, list) or not branches or not raw.get("website"):
        logger.warning("Stored report is missing branches or website")
        return None

    try:
        report = SalesReport.model_validate(raw)
    except ValidationError as e:
        logger.warning("Stored report failed schema validation", errors=e.error_count())
        return None

    return recompute_report(report)


class ReportStore(ABC):
    """Owner of the live report"""

    @abstractmethod
    async def load(self) -> Optional[SalesReport]:
        """Stored report, or None when absent or invalid"""

    @abstractmethod
    async def save(self, report: SalesReport) -> None:
        """Replace the stored report"""

    @abstractmethod
    async def clear(self) -> None:
        """Remove the stored report"""

    @abstractmethod
    async def ping(self) -> bool:
        """Whether the backing store is reachable"""

    async def current(self) -> SalesReport:
        """Stored report, falling back to the default dataset"""
        report = await self.load()
        return report if report is not None else default_report()

    async def reset(self) -> SalesReport:
        """Drop the stored report and return the default dataset"""
        await self.clear()
        logger.info("Report store reset to default dataset")
        return default_report()


class RedisReportStore(ReportStore):
    """
    Report store backed by a single Redis key.

    Example:
        store = RedisReportStore(await init_redis())
        await store.save(report)
        report = await store.current()
    """

    def __init__(self, client: Redis, key: str = "dashboard_data"):
        self.client = client
        self.key = key

    async def load(self) -> Optional[SalesReport]:
        raw = await self.client.get(self.key)
        return parse_stored_report(raw)

    async def save(self, report: SalesReport) -> None:
        await self.client.set(self.key, json.dumps(report.to_payload(), ensure_ascii=False))
        logger.info("Report saved", key=self.key, branches=len(report.branches))

    async def clear(self) -> None:
        await self.client.delete(self.key)

    async def ping(self) -> bool:
        return bool(await self.client.ping())


class MemoryReportStore(ReportStore):
    """Process-local report store keeping the serialized payload"""

    def __init__(self, initial: Optional[SalesReport] = None):
        self._payload: Optional[str] = None
        if initial is not None:
            self._payload = json.dumps(initial.to_payload(), ensure_ascii=False)

    @property
    def raw(self) -> Optional[str]:
        return self._payload

    async def load(self) -> Optional[SalesReport]:
        return parse_stored_report(self._payload)

    async def save(self, report: SalesReport) -> None:
        self._payload = json.dumps(report.to_payload(), ensure_ascii=False)
        logger.info("Report saved", backend="memory", branches=len(report.branches))

    async def clear(self) -> None:
        self._payload = None

    async def ping(self) -> bool:
        return True


async def create_store(settings: Optional[Settings] = None) -> ReportStore:
    """Build the store selected by configuration"""
    settings = settings or get_settings()

    if settings.store.backend == "memory":
        return MemoryReportStore()

    client = await init_redis(settings)
    return RedisReportStore(client, key=settings.store.report_key)

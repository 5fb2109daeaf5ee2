from __future__ import annotations

from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from storepulse.core.config import settings

_engine: Optional[AsyncEngine] = None
_SessionLocal: Optional[async_sessionmaker[AsyncSession]] = None

_ASYNC_SCHEME = "postgresql+asyncpg://"
_SYNC_SCHEMES = ("postgres://", "postgresql://", "postgresql+psycopg2://", "postgresql+psycopg://")


def ensure_async_url(url: str) -> str:
	"""Rewrite a PostgreSQL URL to use the asyncpg driver.

	Handles provider formats such as ``postgres://`` and psycopg URLs.
	Anything else is returned unchanged.
	"""
	if url.startswith(_ASYNC_SCHEME):
		return url
	for scheme in _SYNC_SCHEMES:
		if url.startswith(scheme):
			return _ASYNC_SCHEME + url[len(scheme):]
	return url


def init_engine_and_session() -> None:
	global _engine, _SessionLocal
	if _engine is not None:
		return
	if not settings.DATABASE_URL:
		raise RuntimeError("DATABASE_URL is not configured. Set it in the environment or .env file.")
	_engine = create_async_engine(ensure_async_url(settings.DATABASE_URL), pool_pre_ping=True, future=True)
	_SessionLocal = async_sessionmaker(bind=_engine, expire_on_commit=False)


async def dispose_engine() -> None:
	global _engine, _SessionLocal
	if _engine is None:
		return
	await _engine.dispose()
	_engine = None
	_SessionLocal = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
	if _SessionLocal is None:
		init_engine_and_session()
	assert _SessionLocal is not None
	async with _SessionLocal() as session:
		yield session

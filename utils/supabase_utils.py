# 📦 utils/supabase_utils.py

import asyncio

import structlog

log = structlog.get_logger()


class ProfileFetchError(Exception):
    """Data store failed after all retries."""


async def execute_with_retry(query, retries=3, delay=0.5):
    """Run a built supabase query off the event loop, retrying with exponential backoff."""
    for attempt in range(retries):
        try:
            # supabase-py's execute() is blocking I/O
            return await asyncio.to_thread(query.execute)
        except Exception as e:
            log.warning("Supabase query failed", attempt=attempt + 1, error=str(e))
            if attempt < retries - 1:
                await asyncio.sleep(delay * (2 ** attempt))  # Exponential backoff
            else:
                raise ProfileFetchError("Supabase query failed after retries") from e

"""
Database connection management.

Provides the Supabase client singleton used by the customer, sales and
template stores.
"""

from supabase import create_client, Client
from functools import lru_cache
import structlog

from config.settings import settings
from exceptions import DatabaseError

logger = structlog.get_logger(__name__)


@lru_cache()
def get_supabase_client() -> Client:
    """
    Get the cached Supabase client.

    Call get_supabase_client.cache_clear() to reconnect.

    Raises:
        DatabaseError: If the client cannot be created
    """
    logger.info(
        "connecting_to_supabase",
        url=settings.supabase_url[:30] + "..."  # Partial URL only
    )

    try:
        client = create_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        logger.error(
            "supabase_connection_failed",
            error=str(e),
            error_type=type(e).__name__
        )
        raise DatabaseError("connect", str(e)) from e

    logger.info("supabase_connected")
    return client


def check_connection() -> dict:
    """
    Count customers and sales to prove the database answers.

    Returns:
        {"status": "healthy", "customers_count", "sales_count"} or
        {"status": "unhealthy", "error"}
    """
    try:
        client = get_supabase_client()
        customers = client.table("customers").select("id", count="exact").limit(1).execute()
        sales = client.table("sales").select("id", count="exact").limit(1).execute()
    except Exception as e:
        return {"status": "unhealthy", "error": str(e)}

    return {
        "status": "healthy",
        "customers_count": customers.count,
        "sales_count": sales.count
    }

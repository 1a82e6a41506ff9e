"""Supabase client for the path cache and station registry."""

import logging
from functools import lru_cache
from supabase import create_client, Client
from ..config import settings


@lru_cache()
def get_supabase_client() -> Client | None:
    """Get cached Supabase client instance.

    Returns:
        Supabase Client instance if configured, None otherwise.
        Note: This does not test the connection - actual queries may fail with network errors.
    """
    if not settings.supabase_url or not settings.supabase_key:
        logging.debug("Supabase credentials not configured (missing URL or key)")
        return None

    try:
        return create_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        logging.error(f"Failed to create Supabase client: {e}")
        return None


# Expected tables:
#
# create table path_results (
#     source_x double precision not null,
#     source_y double precision not null,
#     target_x double precision not null,
#     target_y double precision not null,
#     duration_seconds integer not null,
#     weighted boolean not null,
#     strategy text not null,
#     primary key (source_x, source_y, target_x, target_y)
# );
#
# create table weighted_stations (
#     name text primary key,
#     x double precision not null,
#     y double precision not null
# );

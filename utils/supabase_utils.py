import time

import structlog

log = structlog.get_logger()


class PersistenceError(Exception):
    """A Supabase write or read failed after all retries."""


def _with_retry(operation, action, retries=3, delay=1):
    last_error = None
    for attempt in range(retries):
        try:
            return operation()
        except Exception as e:
            last_error = e
            log.warning(f"Supabase {action} failed (attempt {attempt+1})", error=str(e))
        if attempt < retries - 1:
            time.sleep(delay * (2 ** attempt))  # Exponential backoff
    raise PersistenceError(f"Supabase {action} failed after retries") from last_error


def insert_with_retry(table, data, retries=3, delay=1):
    return _with_retry(lambda: table.insert(data).execute(), "insert", retries, delay)


def upsert_with_retry(table, data, on_conflict, retries=3, delay=1):
    return _with_retry(lambda: table.upsert(data, on_conflict=on_conflict).execute(), "upsert", retries, delay)

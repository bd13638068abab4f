# storefront/utils/retry.py
import functools

import redis
from sqlalchemy.exc import OperationalError, TimeoutError as PoolTimeoutError
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from storefront.domain.errors import StorageUnavailable
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

TRANSIENT_DB_ERRORS = (OperationalError, PoolTimeoutError)


def _rollback(args):
    # pierwszy argument to serwis z sesja self.db
    db = getattr(args[0], "db", None) if args else None
    if db is not None:
        db.rollback()


def _rollback_before_retry(retry_state):
    _rollback(retry_state.args)
    logger.warning(
        f"Blad bazy w {retry_state.fn.__name__}, ponawiam: {retry_state.outcome.exception()}"
    )


def storage_retry():
    """
    Jedna powtorka bez backoffu dla przejsciowych bledow bazy,
    potem StorageUnavailable.
    """

    def decorator(func):
        retrying = retry(
            reraise=True,
            stop=stop_after_attempt(2),
            retry=retry_if_exception_type(TRANSIENT_DB_ERRORS),
            before_sleep=_rollback_before_retry,
        )(func)

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return retrying(*args, **kwargs)
            except TRANSIENT_DB_ERRORS as e:
                _rollback(args)
                logger.error(f"Baza niedostepna w {func.__name__}: {e}")
                raise StorageUnavailable("Baza danych jest chwilowo niedostepna") from e

        return wrapper

    return decorator


def redis_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(redis.RedisError),
    )

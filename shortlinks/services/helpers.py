import functools
import logging
from typing import TypeVar, Any
from collections.abc import Callable

from shortlinks.dao.exceptions import DataStoreError
from shortlinks.exceptions import InternalError


__all__ = []

logger = logging.getLogger(__name__)

F = TypeVar('F', bound=Callable[..., Any])


def translate_store_errors[F](method: F) -> F:
    """Wrap service methods to turn data store faults into InternalError

    The original DataStoreError is logged (with traceback) before translation,
    so faults stay visible server-side while clients only see a generic error.

    Example:
        >>> @translate_store_errors
        ... def get_by_id(self, record_id):
        ...     return self.dao.get(record_id)
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except DataStoreError as e:
            logger.exception(
                'Data store failure in %s.%s().',
                type(self).__name__,
                method.__name__,
                extra={'reason': str(e), 'error': e.__class__.__name__},
            )
            raise InternalError() from e

    return wrapper

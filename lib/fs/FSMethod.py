"""
lib/fs/FSMethod.py

Purpose:
Decorator applied to every public VirtualFileSystem operation. It logs failures and makes sure nothing but AgentFSError subclasses escapes.

Place in Architecture:
The error-mapping boundary of the filesystem facade.

Interface:

	FSMethod(func): wrap func. AgentFSErrors propagate unchanged (ENOENT at debug level, the rest at info); raw SQLAlchemy / Redis exceptions become DatabaseError.

TODOs/FIXMEs:
None.
"""

import errno
import logging
import functools

import redis
import sqlalchemy

from ..Errors import AgentFSError, DatabaseError

logger = logging.getLogger(__name__)


def FSMethod(func):
	@functools.wraps(func)
	def wrapper(*a, **kw):
		try:
			return func(*a, **kw)
		except AgentFSError as e:
			if (e.errno == errno.ENOENT):
				logger.debug(f"Failed {func.__name__}: {e}", exc_info=True)
			else:
				logger.info(f"Failed {func.__name__}: {e}", exc_info=True)
			raise
		except (sqlalchemy.exc.SQLAlchemyError, redis.exceptions.RedisError) as e:
			logger.warning(f"Unexpected store failure in {func.__name__}", exc_info=True)
			raise DatabaseError(f"{func.__name__} failed: {e}") from e

	return wrapper

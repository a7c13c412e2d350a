"""
lib/db/RiverDatabase.py

Purpose:
Implements the Database collaborator with SQLAlchemy for rows and Redis for the flat key/value namespace.

Place in Architecture:
Selected by db.Connect when a Redis URL is configured. Filesystem metadata and the tool-call log stay relational; small opaque blobs (KV store values) go to Redis where reads and writes are fast.

Interface:

	RiverDatabase(url="sqlite://", redis_url=None, redis_client=None, echo=False, name=None): connect both stores. Pass redis_client to reuse an existing client.
	Execute(command, params=None), Transaction(): inherited from SqlDatabase.
	Put / Get / Delete / Exists / Scan: flat namespace over Redis.
	EscapeGlob(prefix): escape Redis glob characters for literal prefix matching.

TODOs/FIXMEs:

	Redis writes are not part of SQL transactions. Nothing in AgentFS needs both in one unit today.
"""

import logging

import redis

from ..Errors import DatabaseError
from .SqlDatabase import SqlDatabase

logger = logging.getLogger(__name__)

GLOB_SPECIALS = '\\*?[]'


def EscapeGlob(prefix):
	return ''.join('\\' + char if char in GLOB_SPECIALS else char for char in prefix)


# Reading and writing small values needs to be fast, so these live in Redis instead of SQL.
class RiverDatabase(SqlDatabase):
	def __init__(this, url="sqlite://", redis_url=None, redis_client=None, echo=False, name=None):
		super().__init__(url, echo=echo, name=name)

		if (redis_client is None):
			if (not redis_url):
				raise DatabaseError("RiverDatabase requires a redis_url or a redis_client")
			try:
				redis_client = redis.Redis.from_url(redis_url)
			except (redis.exceptions.RedisError, ValueError) as e:
				raise DatabaseError(f"cannot connect to {redis_url}: {e}")

		this.redis = redis_client


	def Put(this, key, value):
		try:
			this.redis.set(key, bytes(value))
		except redis.exceptions.RedisError as e:
			logger.error(f"Error setting value for {key}: {e}")
			raise DatabaseError(f"redis SET failed for {key}: {e}")

	def Get(this, key):
		try:
			ret = this.redis.get(key)
		except redis.exceptions.RedisError as e:
			logger.error(f"Error getting value for {key}: {e}")
			raise DatabaseError(f"redis GET failed for {key}: {e}")
		if (ret is None):
			return None
		return bytes(ret)

	def Delete(this, key):
		try:
			this.redis.delete(key)
		except redis.exceptions.RedisError as e:
			logger.error(f"Error deleting {key}: {e}")
			raise DatabaseError(f"redis DEL failed for {key}: {e}")

	def Exists(this, key):
		try:
			return bool(this.redis.exists(key))
		except redis.exceptions.RedisError as e:
			logger.error(f"Error checking {key}: {e}")
			raise DatabaseError(f"redis EXISTS failed for {key}: {e}")

	def Scan(this, prefix):
		try:
			keys = this.redis.scan_iter(match=EscapeGlob(prefix) + '*')
			return {key.decode('utf-8') if isinstance(key, bytes) else key for key in keys}
		except redis.exceptions.RedisError as e:
			logger.error(f"Error scanning {prefix}: {e}")
			raise DatabaseError(f"redis SCAN failed for {prefix}: {e}")


	def Close(this):
		try:
			this.redis.close()
		except redis.exceptions.RedisError as e:
			logger.warning(f"Error closing redis connection: {e}")
		super().Close()

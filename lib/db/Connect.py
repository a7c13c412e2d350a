"""
lib/db/Connect.py

Purpose:
Chooses and builds the Database variant for a configuration.

Place in Architecture:
Called by AgentFS.From(). Callers receive a Database and never name the concrete class.

Interface:

	Connect(config): RiverDatabase when config.redis_url is set, SqlDatabase otherwise.

TODOs/FIXMEs:
None.
"""

from .SqlDatabase import SqlDatabase
from .RiverDatabase import RiverDatabase


def Connect(config):
	if (config.redis_url):
		return RiverDatabase(config.database_url, redis_url=config.redis_url, echo=config.sql_echo)
	return SqlDatabase(config.database_url, echo=config.sql_echo)

"""
lib/AgentFS.py

Purpose:
The handle an agent holds: a virtual filesystem, a key-value store and a tool-call recorder, all persisted in one Database.

Place in Architecture:
The top of the library. It builds the Database (via db.Connect) when given a configuration, then wires VirtualFileSystem, KvStore and ToolRecorder onto it. Everything below is reachable from here.

Interface:

	AgentFS(db, agent_id="agent", mount_path="/agent", config=None): wrap an existing Database.
	AgentFS.From(config): build from an AgentFSConfig (connects the store, optionally sets up logging).
	AgentFS.Sqlite(path, agent_id="agent", mount_path="/agent"): the common case of one SQLite file.
	AgentFS.Postgres(url, ...) / AgentFS.MySQL(url, ...): a server database; url is a SQLAlchemy URL, a bare "host/db" style URL gets the default driver.
	fs, kv, tools: the three facilities.
	Close(): release the store. AgentFS is also a context manager.

TODOs/FIXMEs:
None.
"""

import logging

from .Errors import ConfigurationError
from .Config import AgentFSConfig
from .Utils import SetupLogging
from .db import Connect
from .fs import VirtualFileSystem
from .kv import KvStore
from .tools import ToolRecorder

logger = logging.getLogger(__name__)


# All state lives in the Database; an AgentFS holds only references to it.
# NOTE: it is illegal to change this.config after construction.
class AgentFS(object):
	def __init__(this, db, agent_id="agent", mount_path="/agent", config=None):
		if (config is None):
			config = AgentFSConfig(agent_id=agent_id, mount_path=mount_path)
		this.config = config.ValidateArgs()

		this.db = db
		this.agent_id = this.config.agent_id

		this.fs = VirtualFileSystem(
			db,
			mount_path=this.config.mount_path,
			strict_sandbox=this.config.strict_sandbox,
			chunk_size=this.config.chunk_size,
			max_symlink_depth=this.config.max_symlink_depth,
			uid=this.config.default_uid,
			gid=this.config.default_gid,
		)
		this.kv = KvStore(db, this.agent_id)
		this.tools = ToolRecorder(db, this.agent_id)

		logger.info(f"AgentFS for {this.agent_id} mounted at {this.config.mount_path} on {db.name}.")


	@classmethod
	def From(cls, config):
		config.ValidateArgs()
		if (config.log_level):
			SetupLogging(config.log_level)
		return cls(Connect(config), config=config)


	@classmethod
	def Sqlite(cls, path, agent_id="agent", mount_path="/agent"):
		return cls.From(AgentFSConfig(
			agent_id=agent_id,
			mount_path=mount_path,
			database_url=f"sqlite:///{path}",
		))


	@classmethod
	def Postgres(cls, url, agent_id="agent", mount_path="/agent"):
		return cls.Server(url, "postgresql", ("postgres", "postgresql"), agent_id, mount_path)

	@classmethod
	def MySQL(cls, url, agent_id="agent", mount_path="/agent"):
		return cls.Server(url, "mysql+pymysql", ("mysql",), agent_id, mount_path)

	# "postgres://user@host/db" and scheme-less "user@host/db" get driverScheme; a URL that names its driver ("mysql+mysqldb://...") keeps it.
	@classmethod
	def Server(cls, url, driverScheme, families, agent_id, mount_path):
		scheme, separator, rest = url.partition("://")
		if (not separator):
			rest = url
		elif (scheme.split('+')[0] not in families):
			raise ConfigurationError(f"not a {families[0]} URL: {url}")
		elif ('+' in scheme):
			driverScheme = scheme
		return cls.From(AgentFSConfig(
			agent_id=agent_id,
			mount_path=mount_path,
			database_url=f"{driverScheme}://{rest}",
		))


	def Close(this):
		this.db.Close()


	def __enter__(this):
		return this

	def __exit__(this, *exc):
		this.Close()
		return False


	def __repr__(this):
		return f"<AgentFS {this.agent_id} on {this.db!r}>"

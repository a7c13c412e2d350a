"""
lib/db/Database.py

Purpose:
Defines the data-store collaborator AgentFS is built on: something that executes SQL commands with bound parameters and returns rows, groups commands into transactions, and exposes a flat key/value namespace for small opaque blobs.

Place in Architecture:
The only seam between AgentFS and persistence. The filesystem, KV store and tool recorder depend on this interface alone; concrete variants (SqlDatabase, RiverDatabase) are chosen at construction by db.Connect.

Interface:

	Execute(command, params=None): run one command, RETURNS a list of column -> value dicts ([] when the command yields no rows).
	Insert(table, values): insert one row, RETURNS the first primary key column of the new row (the generated id), taken from that same statement.
	Modify(command, params=None): run an UPDATE or DELETE, RETURNS the number of rows it matched.
	Quote(identifier): RETURNS identifier quoted for this store's SQL dialect, where the dialect needs it.
	Transaction(): context manager; every Execute on this thread inside it commits or rolls back as a unit. Nested calls join the outer transaction.
	Put(key, value) / Get(key) / Delete(key) / Exists(key) / Scan(prefix): flat namespace.
	Close(): release connections.

TODOs/FIXMEs:
None.
"""

import abc


# All untrusted values must be passed through `params` and referenced as :name in `command`.
# Implementations raise DatabaseError (or ConstraintViolation) for store failures; nothing else should escape.
class Database(abc.ABC):
	def __init__(this, name="Database"):
		this.name = name

	@abc.abstractmethod
	def Execute(this, command, params=None):
		raise NotImplementedError

	@abc.abstractmethod
	def Transaction(this):
		raise NotImplementedError

	@abc.abstractmethod
	def Insert(this, table, values):
		raise NotImplementedError

	@abc.abstractmethod
	def Modify(this, command, params=None):
		raise NotImplementedError

	@abc.abstractmethod
	def Quote(this, identifier):
		raise NotImplementedError

	@abc.abstractmethod
	def Put(this, key, value):
		raise NotImplementedError

	@abc.abstractmethod
	def Get(this, key):
		raise NotImplementedError

	@abc.abstractmethod
	def Delete(this, key):
		raise NotImplementedError

	@abc.abstractmethod
	def Exists(this, key):
		raise NotImplementedError

	@abc.abstractmethod
	def Scan(this, prefix):
		raise NotImplementedError

	def Close(this):
		pass

	def __enter__(this):
		return this

	def __exit__(this, *exc):
		this.Close()

	def __repr__(this):
		return f"<{this.__class__.__name__} {this.name}>"

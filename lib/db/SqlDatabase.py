"""
lib/db/SqlDatabase.py

Purpose:
Implements the Database collaborator on a single SQLAlchemy engine. Rows and the flat key/value namespace (the kv_store table) live in the same database.

Place in Architecture:
The default backend, selected by db.Connect when no Redis URL is configured. RiverDatabase extends it and moves the flat namespace to Redis.

Interface:

	SqlDatabase(url="sqlite://", echo=False, engine=None, name=None): create (or adopt) an engine and make sure the schema exists.
	Execute(command, params=None), Transaction(), Insert(table, values), Modify(command, params=None), Quote(identifier): see Database.
	Translated(command): map SQLAlchemy failures inside the block to ConstraintViolation / DatabaseError.
	Put / Get / Delete / Exists / Scan: flat namespace over kv_store.
	CreateEngine(url, echo=False): engine factory with the SQLite specifics applied.
	EscapeLike(prefix): escape LIKE wildcards for literal prefix matching.

TODOs/FIXMEs:
None.
"""

import logging
import threading
import contextlib

import sqlalchemy
from sqlalchemy.pool import StaticPool

from ..Errors import DatabaseError, ConstraintViolation
from .Database import Database
from .Models import Base, CreateSchema

logger = logging.getLogger(__name__)

# Not a backslash: MySQL would read '\' in the ESCAPE clause as an unterminated string.
LIKE_ESCAPE = '!'


def EscapeLike(prefix):
	return prefix.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2).replace('%', LIKE_ESCAPE + '%').replace('_', LIKE_ESCAPE + '_')


# SQLite connections are shared across threads; in-memory databases must also share one connection or every checkout would see an empty database.
def CreateEngine(url, echo=False):
	url = sqlalchemy.engine.make_url(url)
	kwargs = {'echo': echo}
	if (url.get_backend_name() == 'sqlite'):
		kwargs['connect_args'] = {'check_same_thread': False}
		if (url.database in (None, '', ':memory:')):
			kwargs['poolclass'] = StaticPool
	return sqlalchemy.create_engine(url, **kwargs)


class SqlDatabase(Database):
	def __init__(this, url="sqlite://", echo=False, engine=None, name=None):
		if (engine is None):
			try:
				engine = CreateEngine(url, echo)
			except (sqlalchemy.exc.SQLAlchemyError, ValueError, ImportError) as e:
				raise DatabaseError(f"cannot create engine for {url}: {e}")

		super().__init__(name or engine.url.render_as_string(hide_password=True))
		this.engine = engine

		# The connection of the transaction open on the current thread, if any.
		this.local = threading.local()

		# SQLite has a single writer, so we serialize all access ourselves instead of waiting on "database is locked".
		this.lock = threading.RLock() if engine.dialect.name == 'sqlite' else None

		try:
			CreateSchema(this.engine)
		except sqlalchemy.exc.SQLAlchemyError as e:
			logger.error(f"Error creating schema in {this.name}: {e}")
			raise DatabaseError(f"cannot create schema in {this.name}: {e}")

		logger.info(f"Connected to {this.name} ({engine.dialect.name}).")


	@contextlib.contextmanager
	def Serialized(this):
		if (this.lock is None):
			yield
		else:
			with this.lock:
				yield


	@contextlib.contextmanager
	def Transaction(this):
		connection = getattr(this.local, 'connection', None)
		if (connection is not None):
			yield connection
			return

		with this.Serialized():
			try:
				with this.engine.begin() as connection:
					this.local.connection = connection
					try:
						yield connection
					finally:
						this.local.connection = None

			# Only failures while beginning or committing reach here; Translated() covers everything else.
			except sqlalchemy.exc.IntegrityError as e:
				raise ConstraintViolation(f"constraint violated: {e.orig}")
			except sqlalchemy.exc.SQLAlchemyError as e:
				logger.error(f"Error committing transaction on {this.name}: {e}")
				raise DatabaseError(f"transaction failed: {e}")


	def Execute(this, command, params=None):
		with this.Transaction() as connection:
			with this.Translated(command):
				result = connection.execute(sqlalchemy.text(command), params or {})
				if (not result.returns_rows):
					return []
				return [dict(row) for row in result.mappings()]


	# RETURNS the first primary key column of the new row. It comes from the INSERT itself: RETURNING where the dialect has it, the cursor's lastrowid elsewhere (MySQL).
	def Insert(this, table, values):
		if (table not in Base.metadata.tables):
			raise DatabaseError(f"no such table: {table}")

		statement = sqlalchemy.insert(Base.metadata.tables[table]).values(**values)
		with this.Transaction() as connection:
			with this.Translated(f"INSERT INTO {table}"):
				result = connection.execute(statement)
				return result.inserted_primary_key[0]


	def Modify(this, command, params=None):
		with this.Transaction() as connection:
			with this.Translated(command):
				return connection.execute(sqlalchemy.text(command), params or {}).rowcount


	def Quote(this, identifier):
		return this.engine.dialect.identifier_preparer.quote(identifier)


	@contextlib.contextmanager
	def Translated(this, command):
		try:
			yield
		except sqlalchemy.exc.IntegrityError as e:
			logger.debug(f"Constraint violated by {command!r}: {e.orig}")
			raise ConstraintViolation(f"constraint violated: {e.orig}")
		except sqlalchemy.exc.SQLAlchemyError as e:
			logger.error(f"Error executing {command!r}: {e}")
			raise DatabaseError(f"command failed: {e}")


	# "key" is reserved on MySQL, so the column name goes through Quote().
	def Put(this, key, value):
		with this.Transaction():
			this.Execute(f"DELETE FROM kv_store WHERE {this.Quote('key')} = :key", {'key': key})
			this.Insert('kv_store', {'key': key, 'value': bytes(value)})

	def Get(this, key):
		rows = this.Execute(f"SELECT value FROM kv_store WHERE {this.Quote('key')} = :key", {'key': key})
		if (not rows):
			return None
		return bytes(rows[0]['value'])

	def Delete(this, key):
		this.Modify(f"DELETE FROM kv_store WHERE {this.Quote('key')} = :key", {'key': key})

	def Exists(this, key):
		rows = this.Execute(f"SELECT COUNT(*) AS count FROM kv_store WHERE {this.Quote('key')} = :key", {'key': key})
		return int(rows[0]['count']) > 0

	# LIKE is case-insensitive on some engines (SQLite), so re-check the prefix exactly.
	def Scan(this, prefix):
		column = this.Quote('key')
		rows = this.Execute(
			f"SELECT {column} AS k FROM kv_store WHERE {column} LIKE :pattern ESCAPE '{LIKE_ESCAPE}'",
			{'pattern': EscapeLike(prefix) + '%'}
		)
		return {row['k'] for row in rows if row['k'].startswith(prefix)}


	def Close(this):
		this.engine.dispose()
		logger.info(f"Disconnected from {this.name}.")

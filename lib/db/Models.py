"""
lib/db/Models.py

Purpose:
Defines the SQLAlchemy ORM models (and therefore the tables) backing AgentFS: inodes, dentries, file data chunks, symlink targets, the flat key/value namespace and the tool-call audit log.

Place in Architecture:
Used by the SqlDatabase family to create the schema. The filesystem, KV store and tool recorder address these tables through bound SQL commands; the column names below are what those commands rely on.

Interface:

	Base: declarative base whose metadata holds every table.
	InodeModel (fs_inode), DentryModel (fs_dentry), DataModel (fs_data), SymlinkModel (fs_symlink), KvModel (kv_store), ToolCallModel (tool_calls).
	CreateSchema(engine): create any missing tables.

TODOs/FIXMEs:
None.
"""

import sqlalchemy as sql
import sqlalchemy.orm as orm
from sqlalchemy.dialects import mysql

Base = orm.declarative_base()

# SQLite only aliases the rowid (and so only honours AUTOINCREMENT) for INTEGER PRIMARY KEY.
Id = sql.BigInteger().with_variant(sql.Integer(), "sqlite")

# MySQL's BLOB and TEXT hold at most 65535 bytes, one short of a default chunk.
Blob = sql.LargeBinary().with_variant(mysql.LONGBLOB(), "mysql")
LongText = sql.Text().with_variant(mysql.LONGTEXT(), "mysql")

# MySQL compares strings case-insensitively by default; names and keys here are case-sensitive.
# Its utf8mb4 index limit (3072 bytes) also caps an indexed VARCHAR at 768 characters.
def BinaryString(length, mysqlLength=None):
	return sql.String(length).with_variant(mysql.VARCHAR(mysqlLength or length, charset='utf8mb4', collation='utf8mb4_bin'), "mysql")


# Inodes store the metadata of one filesystem object, independent of any name.
# Ids come from an autoincrementing key and are never reused, even after the row is deleted.
class InodeModel(Base):
	__tablename__ = 'fs_inode'
	__table_args__ = {'sqlite_autoincrement': True}

	id = sql.Column(Id, primary_key=True, autoincrement=True)
	mode = sql.Column(sql.Integer, nullable=False) # File type bits | permission bits.
	uid = sql.Column(sql.Integer, nullable=False, default=0)
	gid = sql.Column(sql.Integer, nullable=False, default=0)
	size = sql.Column(sql.BigInteger, nullable=False, default=0)
	atime = sql.Column(sql.BigInteger, nullable=False, default=0)
	mtime = sql.Column(sql.BigInteger, nullable=False, default=0)
	ctime = sql.Column(sql.BigInteger, nullable=False, default=0)

	def __repr__(this):
		return f"<Inode {this.id} ({oct(this.mode or 0)})>"


# A dentry binds a name under a parent directory to an inode.
# The unique constraint is what lets concurrent creators of the same path have at most one winner.
class DentryModel(Base):
	__tablename__ = 'fs_dentry'
	__table_args__ = (
		sql.UniqueConstraint('parent_ino', 'name', name='uq_fs_dentry_parent_name'),
		sql.Index('ix_fs_dentry_ino', 'ino'),
	)

	id = sql.Column(Id, primary_key=True, autoincrement=True)
	name = sql.Column(BinaryString(255), nullable=False)
	parent_ino = sql.Column(sql.BigInteger, nullable=False)
	ino = sql.Column(sql.BigInteger, nullable=False)

	def __repr__(this):
		return f"<Dentry {this.parent_ino}/{this.name} -> {this.ino}>"


# File contents, split into chunks ordered by byte offset.
class DataModel(Base):
	__tablename__ = 'fs_data'

	ino = sql.Column(sql.BigInteger, primary_key=True, autoincrement=False)
	offset = sql.Column(sql.BigInteger, primary_key=True, autoincrement=False)
	data = sql.Column(Blob, nullable=False)


# One literal target per symlink inode. The primary key makes it write-once.
class SymlinkModel(Base):
	__tablename__ = 'fs_symlink'

	ino = sql.Column(sql.BigInteger, primary_key=True, autoincrement=False)
	target = sql.Column(sql.Text, nullable=False)


# Flat key/value namespace for SqlDatabase. RiverDatabase keeps these in Redis instead.
class KvModel(Base):
	__tablename__ = 'kv_store'

	key = sql.Column(BinaryString(1024, 768), primary_key=True)
	value = sql.Column(Blob, nullable=False)


class ToolCallModel(Base):
	__tablename__ = 'tool_calls'
	__table_args__ = (
		sql.Index('ix_tool_calls_agent_name', 'agent_id', 'name'),
		{'sqlite_autoincrement': True},
	)

	id = sql.Column(Id, primary_key=True, autoincrement=True)
	agent_id = sql.Column(sql.String(255), nullable=False)
	name = sql.Column(sql.String(255), nullable=False)
	parameters = sql.Column(LongText) # JSON
	result = sql.Column(LongText) # JSON
	error = sql.Column(LongText)
	status = sql.Column(sql.String(16), nullable=False) # See ToolCallStatus.
	started_at = sql.Column(sql.Double, nullable=False)
	completed_at = sql.Column(sql.Double)
	duration_ms = sql.Column(sql.BigInteger)

	def __repr__(this):
		return f"<ToolCall {this.name} ({this.id}) {this.status}>"


def CreateSchema(engine):
	Base.metadata.create_all(engine)

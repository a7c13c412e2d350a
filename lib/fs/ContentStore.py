"""
lib/fs/ContentStore.py

Purpose:
Stores and retrieves regular-file bytes and symlink target strings, keyed by inode id.

Place in Architecture:
Below the VirtualFileSystem facade. File data is kept in fixed-size chunks in fs_data, ordered by byte offset, so whole-file reads are a single ordered query and ranged reads remain possible later.

Interface:

	ContentStore(db, chunk_size=DEFAULT_CHUNK_SIZE): bind to a Database.
	Write(id, data): replace the whole content of id.
	Read(id): RETURNS the content of id (b"" if nothing is stored).
	Delete(id): drop all chunks of id.
	WriteTarget(id, target): store a symlink target. Write-once.
	ReadTarget(id): RETURNS the target string or None.
	DeleteTarget(id): drop the target of id.

TODOs/FIXMEs:
None.
"""

import logging

from ..Errors import InvalidPath, ConstraintViolation

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 65536


class ContentStore(object):
	def __init__(this, db, chunk_size=DEFAULT_CHUNK_SIZE):
		if (chunk_size <= 0):
			raise ValueError("chunk_size must be positive")
		this.db = db
		this.chunk_size = chunk_size


	# Old content is discarded first; there are no partial writes.
	# An empty file has no chunks at all.
	def Write(this, id, data):
		data = bytes(data)
		with this.db.Transaction():
			this.Delete(id)
			for offset in range(0, len(data), this.chunk_size):
				this.db.Insert('fs_data', {'ino': id, 'offset': offset, 'data': data[offset:offset + this.chunk_size]})
		logger.debug(f"Wrote {len(data)} bytes to inode {id}.")


	def Read(this, id):
		rows = this.db.Execute(
			f"SELECT data FROM fs_data WHERE ino = :ino ORDER BY {this.db.Quote('offset')}",
			{'ino': id}
		)
		return b"".join(bytes(row['data']) for row in rows)


	def Delete(this, id):
		this.db.Execute("DELETE FROM fs_data WHERE ino = :ino", {'ino': id})


	def WriteTarget(this, id, target):
		try:
			this.db.Execute(
				"INSERT INTO fs_symlink (ino, target) VALUES (:ino, :target)",
				{'ino': id, 'target': target}
			)
		except ConstraintViolation:
			raise InvalidPath(f"symlink target of inode {id} is already set")


	def ReadTarget(this, id):
		rows = this.db.Execute("SELECT target FROM fs_symlink WHERE ino = :ino", {'ino': id})
		if (not rows):
			return None
		return rows[0]['target']


	def DeleteTarget(this, id):
		this.db.Execute("DELETE FROM fs_symlink WHERE ino = :ino", {'ino': id})

"""
lib/fs/InodeStore.py

Purpose:
CRUD for inode metadata rows and the link counts derived from dentries.

Place in Architecture:
Below the VirtualFileSystem facade, beside NamingTree and ContentStore. It never looks at names; it only knows inode ids.

Interface:

	InodeStore(db, uid=0, gid=0): bind to a Database. uid / gid are recorded on new inodes.
	EnsureRoot(): create the root directory inode if it does not exist yet.
	Create(mode, size=0, uid=None, gid=None): RETURNS the new id.
	Get(id): RETURNS the fs_inode row (dict) or None.
	Update(id, **fields): mutate only the supplied fields. The file-type bits of mode may not change.
	Touch(id, when=None): set mtime and ctime.
	Delete(id): drop the row.
	LinkCount(id): number of dentries referencing id.

TODOs/FIXMEs:
None.
"""

import stat
import logging

from ..Errors import DatabaseError
from ..Utils import Now
from .Stats import ROOT_INO, DEFAULT_DIR_MODE

logger = logging.getLogger(__name__)

# Columns Update() may touch. The id and the type bits of mode are fixed at creation.
MUTABLE_FIELDS = ['mode', 'uid', 'gid', 'size', 'atime', 'mtime', 'ctime']


class InodeStore(object):
	def __init__(this, db, uid=0, gid=0):
		this.db = db
		this.uid = uid
		this.gid = gid


	# The root is always the first row ever inserted, which is what gives it id 1 on every engine.
	# Running this against a database whose first inode is something else is an error.
	def EnsureRoot(this):
		with this.db.Transaction():
			if (this.Get(ROOT_INO) is not None):
				return ROOT_INO

			rows = this.db.Execute("SELECT COUNT(*) AS count FROM fs_inode")
			if (int(rows[0]['count'])):
				raise DatabaseError(f"fs_inode has rows but no root inode {ROOT_INO}")

			id = this.Create(DEFAULT_DIR_MODE)
			if (id != ROOT_INO):
				raise DatabaseError(f"root inode was allocated id {id} instead of {ROOT_INO}")

			logger.info(f"Created root inode {ROOT_INO}.")
			return id


	# The id comes back from the INSERT itself, never from a separate "last id" query.
	def Create(this, mode, size=0, uid=None, gid=None):
		now = Now()
		id = int(this.db.Insert('fs_inode', {
			'mode': mode,
			'uid': this.uid if uid is None else uid,
			'gid': this.gid if gid is None else gid,
			'size': size,
			'atime': now,
			'mtime': now,
			'ctime': now,
		}))
		logger.debug(f"Inode {id} created (mode {oct(mode)}).")
		return id


	def Get(this, id):
		rows = this.db.Execute(
			"SELECT id, mode, uid, gid, size, atime, mtime, ctime FROM fs_inode WHERE id = :id",
			{'id': id}
		)
		if (not rows):
			return None
		return rows[0]


	def Update(this, id, **fields):
		unknown = set(fields) - set(MUTABLE_FIELDS)
		if (unknown):
			raise ValueError(f"cannot update inode fields: {', '.join(sorted(unknown))}")
		if (not fields):
			return

		# Column names come from MUTABLE_FIELDS only; values are always bound.
		assignments = ", ".join(f"{name} = :{name}" for name in MUTABLE_FIELDS if name in fields)
		params = dict(fields)
		params['id'] = id

		with this.db.Transaction():
			if ('mode' in fields):
				row = this.Get(id)
				if (row is not None and stat.S_IFMT(int(fields['mode'])) != stat.S_IFMT(int(row['mode']))):
					raise ValueError(f"cannot change the file type of inode {id}")
			this.db.Execute(f"UPDATE fs_inode SET {assignments} WHERE id = :id", params)


	def Touch(this, id, when=None):
		if (when is None):
			when = Now()
		this.Update(id, mtime=when, ctime=when)


	def Delete(this, id):
		this.db.Execute("DELETE FROM fs_inode WHERE id = :id", {'id': id})
		logger.debug(f"Inode {id} deleted.")


	def LinkCount(this, id):
		rows = this.db.Execute("SELECT COUNT(*) AS count FROM fs_dentry WHERE ino = :id", {'id': id})
		return int(rows[0]['count'])

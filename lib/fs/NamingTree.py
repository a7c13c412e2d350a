"""
lib/fs/NamingTree.py

Purpose:
Resolves canonical upaths to inode ids by walking dentries one level at a time, and creates / removes the bindings themselves.

Place in Architecture:
The store has no native hierarchy; this is where one is reconstructed from flat fs_dentry rows. Used by the VirtualFileSystem facade and by SymlinkResolver.

Interface:

	NamingTree(db): bind to a Database.
	Resolve(upath): RETURNS the inode id for a canonical upath, or None if any segment is missing.
	Lookup(parentId, name): RETURNS the id bound to name under parentId, or None.
	Bind(parentId, name, inodeId): insert one dentry. Raises PathExists if name is taken.
	Unbind(parentId, name): delete one dentry. RETURNS True if one was removed.
	Children(inodeId): RETURNS sorted names directly under inodeId.
	CountChildren(inodeId): RETURNS the number of dentries under inodeId.

TODOs/FIXMEs:

	Resolution costs one round trip per segment and nothing is cached. Agent workspaces are shallow, so this has not mattered yet.
"""

import logging

from ..Errors import PathExists, ConstraintViolation
from ..Upath import Split
from .Stats import ROOT_INO

logger = logging.getLogger(__name__)


class NamingTree(object):
	def __init__(this, db):
		this.db = db


	# Start at the root and follow one dentry per segment.
	# Symlinks are not followed here; see SymlinkResolver.
	def Resolve(this, upath):
		current = ROOT_INO
		for segment in Split(upath):
			current = this.Lookup(current, segment)
			if (current is None):
				logger.debug(f"Could not resolve {upath}: no entry '{segment}'.")
				return None
		return current


	def Lookup(this, parentId, name):
		rows = this.db.Execute(
			"SELECT ino FROM fs_dentry WHERE parent_ino = :parent AND name = :name",
			{'parent': parentId, 'name': name}
		)
		if (not rows):
			return None
		return int(rows[0]['ino'])


	# The unique (parent_ino, name) constraint is what decides races between creators.
	def Bind(this, parentId, name, inodeId):
		try:
			this.db.Execute(
				"INSERT INTO fs_dentry (name, parent_ino, ino) VALUES (:name, :parent, :ino)",
				{'name': name, 'parent': parentId, 'ino': inodeId}
			)
		except ConstraintViolation:
			raise PathExists(f"'{name}' already exists in directory {parentId}")
		logger.debug(f"Bound {parentId}/{name} -> {inodeId}.")


	def Unbind(this, parentId, name):
		removed = this.db.Modify(
			"DELETE FROM fs_dentry WHERE parent_ino = :parent AND name = :name",
			{'parent': parentId, 'name': name}
		) > 0
		if (removed):
			logger.debug(f"Unbound {parentId}/{name}.")
		return removed


	# Sorted here rather than in SQL so the order does not depend on the engine's collation.
	def Children(this, inodeId):
		rows = this.db.Execute(
			"SELECT name FROM fs_dentry WHERE parent_ino = :parent",
			{'parent': inodeId}
		)
		return sorted(row['name'] for row in rows)


	def CountChildren(this, inodeId):
		rows = this.db.Execute(
			"SELECT COUNT(*) AS count FROM fs_dentry WHERE parent_ino = :parent",
			{'parent': inodeId}
		)
		return int(rows[0]['count'])

"""
lib/fs/FileSystem.py

Purpose:
The VirtualFileSystem facade: a POSIX-like hierarchy (files, directories, symlinks) built from the flat fs_* tables.

Place in Architecture:
What AgentFS.fs points at. Every operation sandboxes its path through PathResolver, then composes NamingTree, InodeStore, ContentStore and SymlinkResolver. Each mutation runs inside one Database.Transaction(), so a failed step leaves nothing half-built behind.

Interface:

	VirtualFileSystem(db, mount_path="/agent", ...): bind to a Database and make sure the root inode exists.
	write_file(path, data): create or replace a regular file.
	read_file(path): RETURNS bytes, following symlinks, or None.
	exists(path): RETURNS whether the dentry chain resolves.
	readdir(path): RETURNS sorted child names, or None.
	mkdir(path): create one directory.
	remove(path): unbind a file, symlink or empty directory; purge the inode once nothing names it.
	stat(path) / lstat(path): RETURN Stats (following / not following symlinks), or None.
	symlink(target, linkPath): create a symlink storing target verbatim.
	readlink(path): RETURNS the stored target, or None.

TODOs/FIXMEs:
None.
"""

import errno
import logging

from ..Errors import FileNotFound, DirectoryNotFound, PathExists, InvalidPath
from ..Upath import PathResolver, ParentOf, BaseName, ROOT
from .Stats import Stats, ROOT_INO, DEFAULT_FILE_MODE, DEFAULT_DIR_MODE, DEFAULT_SYMLINK_MODE, IsDirectoryMode, IsSymlinkMode
from .NamingTree import NamingTree
from .InodeStore import InodeStore
from .ContentStore import ContentStore, DEFAULT_CHUNK_SIZE
from .SymlinkResolver import SymlinkResolver, MAX_SYMLINK_DEPTH
from .FSMethod import FSMethod

logger = logging.getLogger(__name__)


class VirtualFileSystem(object):
	def __init__(this,
		db,
		mount_path="/agent",
		strict_sandbox=False,
		chunk_size=DEFAULT_CHUNK_SIZE,
		max_symlink_depth=MAX_SYMLINK_DEPTH,
		uid=0,
		gid=0
	):
		this.db = db
		this.mount_path = mount_path
		this.resolver = PathResolver(mount_path, strict_sandbox)
		this.tree = NamingTree(db)
		this.inodes = InodeStore(db, uid, gid)
		this.content = ContentStore(db, chunk_size)
		this.symlinks = SymlinkResolver(this.tree, this.inodes, this.content, mount_path, max_symlink_depth)

		this.inodes.EnsureRoot()


	def __repr__(this):
		return f"<VirtualFileSystem {this.mount_path} on {this.db!r}>"


	######## Helpers ########

	# RETURNS the id of the directory that holds upath.
	def GetParent(this, upath):
		parentPath = ParentOf(upath)
		parentId = this.tree.Resolve(parentPath)
		if (parentId is None):
			raise DirectoryNotFound(f"parent directory does not exist: {parentPath}")

		row = this.inodes.Get(parentId)
		if (row is None or not IsDirectoryMode(int(row['mode']))):
			raise InvalidPath(errno.ENOTDIR, f"not a directory: {parentPath}")
		return parentId


	def Link(this, parentId, upath, id):
		try:
			this.tree.Bind(parentId, BaseName(upath), id)
		except PathExists:
			raise PathExists(f"path already exists: {upath}")
		this.inodes.Touch(parentId)


	# Where a write to an existing entry lands: the entry itself, or the file its symlink chain ends at.
	def GetWriteTarget(this, upath, id):
		row = this.inodes.Get(id)
		if (row is None):
			raise FileNotFound(f"no inode behind {upath}")
		if (IsSymlinkMode(int(row['mode']))):
			found = this.symlinks.Follow(upath)
			if (found is None):
				raise FileNotFound(f"dangling symbolic link: {upath}")
			id, row = found

		if (IsDirectoryMode(int(row['mode']))):
			raise InvalidPath(errno.EISDIR, f"is a directory: {upath}")
		return id


	def GetStats(this, id, row):
		return Stats.FromRow(row, this.inodes.LinkCount(id))


	######## Operations ########

	# str data is stored as its UTF-8 encoding.
	@FSMethod
	def write_file(this, path, data):
		upath = this.resolver(path)
		if (upath == ROOT):
			raise InvalidPath(errno.EISDIR, "cannot write to the root directory")

		if (isinstance(data, str)):
			data = data.encode('utf-8')
		data = bytes(data)

		with this.db.Transaction():
			parentId = this.GetParent(upath)
			id = this.tree.Lookup(parentId, BaseName(upath))
			if (id is None):
				id = this.inodes.Create(DEFAULT_FILE_MODE, size=len(data))
				this.Link(parentId, upath, id)
				logger.info(f"Created file {upath} (inode {id}).")
			else:
				id = this.GetWriteTarget(upath, id)

			this.content.Write(id, data)
			this.inodes.Update(id, size=len(data))
			this.inodes.Touch(id)

		logger.debug(f"Wrote {len(data)} bytes to {upath}.")


	@FSMethod
	def read_file(this, path):
		upath = this.resolver(path)
		found = this.symlinks.Follow(upath)
		if (found is None):
			return None

		id, row = found
		if (IsDirectoryMode(int(row['mode']))):
			raise InvalidPath(errno.EISDIR, f"is a directory: {upath}")
		return this.content.Read(id)


	@FSMethod
	def exists(this, path):
		return this.tree.Resolve(this.resolver(path)) is not None


	@FSMethod
	def readdir(this, path):
		id = this.tree.Resolve(this.resolver(path))
		if (id is None):
			return None
		return this.tree.Children(id)


	@FSMethod
	def mkdir(this, path):
		upath = this.resolver(path)
		if (upath == ROOT):
			raise PathExists("the root directory always exists")

		with this.db.Transaction():
			parentId = this.GetParent(upath)
			if (this.tree.Lookup(parentId, BaseName(upath)) is not None):
				raise PathExists(f"path already exists: {upath}")

			id = this.inodes.Create(DEFAULT_DIR_MODE)
			this.Link(parentId, upath, id)

		logger.info(f"Created directory {upath} (inode {id}).")


	@FSMethod
	def remove(this, path):
		upath = this.resolver(path)
		if (upath == ROOT):
			raise InvalidPath(errno.EPERM, "cannot remove the root directory")

		name = BaseName(upath)
		with this.db.Transaction():
			parentId = this.tree.Resolve(ParentOf(upath))
			id = None if parentId is None else this.tree.Lookup(parentId, name)
			if (id is None):
				raise FileNotFound(f"no such file or directory: {upath}")

			if (this.tree.CountChildren(id)):
				raise InvalidPath(errno.ENOTEMPTY, f"directory not empty: {upath}")

			if (not this.tree.Unbind(parentId, name)):
				raise FileNotFound(f"no such file or directory: {upath}")
			this.inodes.Touch(parentId)

			if (id != ROOT_INO and this.inodes.LinkCount(id) == 0):
				this.content.Delete(id)
				this.content.DeleteTarget(id)
				this.inodes.Delete(id)
				logger.debug(f"Purged inode {id}.")

		logger.info(f"Removed {upath}.")


	@FSMethod
	def stat(this, path):
		found = this.symlinks.Follow(this.resolver(path))
		if (found is None):
			return None
		return this.GetStats(*found)


	@FSMethod
	def lstat(this, path):
		id = this.tree.Resolve(this.resolver(path))
		if (id is None):
			return None

		row = this.inodes.Get(id)
		if (row is None):
			return None
		return this.GetStats(id, row)


	@FSMethod
	def symlink(this, target, linkPath):
		if (not isinstance(target, str) or not target):
			raise InvalidPath(f"symlink target must be a non-empty string: {target!r}")

		upath = this.resolver(linkPath)
		if (upath == ROOT):
			raise PathExists("the root directory always exists")

		with this.db.Transaction():
			parentId = this.GetParent(upath)
			if (this.tree.Lookup(parentId, BaseName(upath)) is not None):
				raise PathExists(f"path already exists: {upath}")

			id = this.inodes.Create(DEFAULT_SYMLINK_MODE, size=len(target.encode('utf-8')))
			this.content.WriteTarget(id, target)
			this.Link(parentId, upath, id)

		logger.info(f"Created symlink {upath} -> {target} (inode {id}).")


	@FSMethod
	def readlink(this, path):
		upath = this.resolver(path)
		id = this.tree.Resolve(upath)
		if (id is None):
			return None

		row = this.inodes.Get(id)
		if (row is None or not IsSymlinkMode(int(row['mode']))):
			raise InvalidPath(f"not a symbolic link: {upath}")
		return this.content.ReadTarget(id)

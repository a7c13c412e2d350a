"""
lib/fs/SymlinkResolver.py

Purpose:
Follows symbolic links from a canonical upath to the inode they finally denote, with a bound on the number of hops.

Place in Architecture:
Interposed by VirtualFileSystem on the read-through operations (read_file, stat, writes through a link). lstat and readlink never come here.

Interface:

	SymlinkResolver(tree, inodes, content, mount="/", max_depth=MAX_SYMLINK_DEPTH): bind to the stores.
	Follow(upath): RETURNS (id, row) of the first non-symlink inode reached, or None if any hop is missing. Raises InvalidPath (ELOOP) when more than max_depth hops would be needed.
	NextPath(upath, target): RETURNS the canonical path a link at upath with the given target points to.

TODOs/FIXMEs:
None.
"""

import errno
import logging

from ..Errors import InvalidPath
from ..Upath import Normalize, Sandbox, ParentOf, Join
from .Stats import IsSymlinkMode

logger = logging.getLogger(__name__)

MAX_SYMLINK_DEPTH = 40


class SymlinkResolver(object):
	def __init__(this, tree, inodes, content, mount="/", max_depth=MAX_SYMLINK_DEPTH):
		this.tree = tree
		this.inodes = inodes
		this.content = content
		this.mount = mount
		this.max_depth = max_depth


	# At most max_depth links are followed per lookup.
	def Follow(this, upath):
		current = upath
		hops = 0
		while (True):
			id = this.tree.Resolve(current)
			if (id is None):
				return None

			row = this.inodes.Get(id)
			if (row is None):
				return None

			if (not IsSymlinkMode(int(row['mode']))):
				return id, row

			if (hops >= this.max_depth):
				raise InvalidPath(errno.ELOOP, f"too many levels of symbolic links: {upath}")

			target = this.content.ReadTarget(id)
			if (target is None):
				raise InvalidPath(f"symlink {current} has no target")

			current = this.NextPath(current, target)
			hops += 1
			logger.debug(f"Following symlink to {current} (hop {hops}).")


	# Absolute targets are read inside the same mount as caller paths are; relative ones are taken from the link's directory.
	# So with mount "/agent" a target of "/agent/data" reaches internal "/data", the entry write_file("/agent/data") made, and never an internal "/agent/data".
	def NextPath(this, upath, target):
		if (target.startswith('/')):
			return Sandbox(this.mount, target)
		return Normalize(Join(ParentOf(upath), target))

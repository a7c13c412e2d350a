"""
lib/fs/Stats.py

Purpose:
File-type bits, default modes, and the Stats record returned by stat() / lstat().

Place in Architecture:
Shared by InodeStore (modes of new inodes), SymlinkResolver (is this a link?) and VirtualFileSystem (building results).

Interface:

	ROOT_INO: id of the root directory inode.
	DEFAULT_FILE_MODE, DEFAULT_DIR_MODE, DEFAULT_SYMLINK_MODE.
	IsFileMode(mode), IsDirectoryMode(mode), IsSymlinkMode(mode).
	Stats: ino, mode, nlink, uid, gid, size, atime, mtime, ctime plus is_file / is_directory / is_symlink.

TODOs/FIXMEs:
None.
"""

import stat
from dataclasses import dataclass

ROOT_INO = 1

DEFAULT_FILE_MODE = stat.S_IFREG | 0o644
DEFAULT_DIR_MODE = stat.S_IFDIR | 0o755
DEFAULT_SYMLINK_MODE = stat.S_IFLNK | 0o777


def IsFileMode(mode):
	return stat.S_ISREG(mode)

def IsDirectoryMode(mode):
	return stat.S_ISDIR(mode)

def IsSymlinkMode(mode):
	return stat.S_ISLNK(mode)


@dataclass(frozen=True)
class Stats:
	ino: int
	mode: int
	nlink: int
	uid: int
	gid: int
	size: int
	atime: int
	mtime: int
	ctime: int

	@property
	def is_file(this):
		return IsFileMode(this.mode)

	@property
	def is_directory(this):
		return IsDirectoryMode(this.mode)

	@property
	def is_symlink(this):
		return IsSymlinkMode(this.mode)

	@property
	def permissions(this):
		return stat.S_IMODE(this.mode)

	# Build from an fs_inode row plus a freshly counted nlink.
	@classmethod
	def FromRow(cls, row, nlink):
		return cls(
			ino=int(row['id']),
			mode=int(row['mode']),
			nlink=int(nlink),
			uid=int(row['uid']),
			gid=int(row['gid']),
			size=int(row['size']),
			atime=int(row['atime']),
			mtime=int(row['mtime']),
			ctime=int(row['ctime']),
		)

"""
lib/Errors.py

Purpose:
Defines the exceptions raised by AgentFS. Each one is an IOError carrying an errno, so callers can either catch the specific class or branch on `.errno` the way FUSE-style code does.

Place in Architecture:
Imported by every layer. The store layer raises DatabaseError / ConstraintViolation, the filesystem layer raises the path errors, and the tool recorder raises the tool-call errors.

Interface:

	AgentFSError(errno, message): base class.
	FileNotFound, DirectoryNotFound, PathExists, InvalidPath, PathTraversal: filesystem errors.
	DatabaseError, ConstraintViolation: store failures.
	SerializationError: malformed or unencodable JSON payloads.
	ConfigurationError: invalid AgentFSConfig values.
	ToolCallNotFound, InvalidTransition: tool-call audit errors.

TODOs/FIXMEs:
None.
"""

import errno


class AgentFSError(IOError):
	defaultErrno = errno.EIO

	# Accepts either (message) or (errno, message), mirroring IOError(errno.ENOENT, "no such file").
	def __init__(this, *args):
		if (len(args) == 1):
			args = (this.defaultErrno, args[0])
		elif (not len(args)):
			args = (this.defaultErrno, this.__class__.__name__)
		super().__init__(*args)


class FileNotFound(AgentFSError):
	defaultErrno = errno.ENOENT

class DirectoryNotFound(AgentFSError):
	defaultErrno = errno.ENOENT

class PathExists(AgentFSError):
	defaultErrno = errno.EEXIST

# Covers writing/removing root, non-empty directories, non-symlink readlink and symlink loops.
# Pass a more specific errno (ENOTEMPTY, ELOOP, ...) where one applies.
class InvalidPath(AgentFSError):
	defaultErrno = errno.EINVAL

class PathTraversal(AgentFSError):
	defaultErrno = errno.EACCES


class DatabaseError(AgentFSError):
	defaultErrno = errno.EIO

# A uniqueness or primary key constraint rejected a write.
class ConstraintViolation(DatabaseError):
	defaultErrno = errno.EEXIST


class SerializationError(AgentFSError):
	defaultErrno = errno.EINVAL

class ConfigurationError(AgentFSError):
	defaultErrno = errno.EINVAL


class ToolCallNotFound(AgentFSError):
	defaultErrno = errno.ENOENT

class InvalidTransition(AgentFSError):
	defaultErrno = errno.EALREADY

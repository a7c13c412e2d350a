"""
lib/Upath.py

Purpose:
Normalizes caller-supplied path strings into canonical upaths and sandboxes them beneath a mount root.

Place in Architecture:
The first step of every VirtualFileSystem operation. Nothing below this layer ever sees a path containing "." or "..", a doubled separator, or a mount prefix.

Interface:

	Normalize(path, strict=False): canonical form of path ("/" for empty). With strict, ".." above the root raises PathTraversal.
	Sandbox(mount, path, strict=False): strip the mount prefix (if present) and normalize the rest.
	Split(upath), Join(parent, name), ParentOf(upath), BaseName(upath): helpers on canonical upaths.
	PathResolver(mount, strict=False): binds Sandbox to one mount root.

TODOs/FIXMEs:
None.
"""

import os

from .Errors import PathTraversal, InvalidPath

SEPARATOR = "/"
ROOT = "/"


# Canonical paths begin with exactly one separator and never contain "." or "..".
# ".." pops one segment and never underflows; when strict, underflowing raises instead.
def Normalize(path, strict=False):
	segments = []
	for segment in path.split(SEPARATOR):
		if (not segment or segment == '.'):
			continue
		if (segment == '..'):
			if (segments):
				segments.pop()
			elif (strict):
				raise PathTraversal(f"path escapes the mount root: {path}")
			continue
		segments.append(segment)

	if (not segments):
		return ROOT
	return SEPARATOR + SEPARATOR.join(segments)


# Interpret path relative to the mount.
# "/agent/foo" and "/foo" both become "/foo" when mount is "/agent".
# Since normalization only ever looks at the stripped string, the result can never denote anything above the mount root.
def Sandbox(mount, path, strict=False):
	prefix = mount.rstrip(SEPARATOR)
	if (prefix and path == prefix):
		remainder = ROOT
	elif (prefix and path.startswith(prefix + SEPARATOR)):
		remainder = path[len(prefix):]
	else:
		remainder = path
	return Normalize(remainder, strict)


def Split(upath):
	return [segment for segment in upath.split(SEPARATOR) if segment]


def Join(parent, name):
	if (parent == ROOT):
		return ROOT + name
	return parent + SEPARATOR + name


def ParentOf(upath):
	segments = Split(upath)
	if (len(segments) <= 1):
		return ROOT
	return SEPARATOR + SEPARATOR.join(segments[:-1])


def BaseName(upath):
	segments = Split(upath)
	if (not segments):
		return ""
	return segments[-1]


class PathResolver(object):
	def __init__(this, mount="/", strict=False):
		this.mount = mount
		this.strict = strict

	def __call__(this, path):
		if (isinstance(path, os.PathLike)):
			path = os.fspath(path)
		if (not isinstance(path, str)):
			raise InvalidPath(f"path must be a string, not {type(path).__name__}")
		return Sandbox(this.mount, path, this.strict)

	def __repr__(this):
		return f"<PathResolver {this.mount} (strict={this.strict})>"

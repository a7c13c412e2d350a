import pytest

from StandardTestFixture import StandardTestFixture

from libagentfs import PathTraversal, InvalidPath
from libagentfs.Upath import Normalize, Sandbox, ParentOf, BaseName, Join, Split, PathResolver


class TestNormalize(StandardTestFixture):

	def test_collapses_dots_and_separators(this):
		this.assert_equal(Normalize("/a//b/./c/../d"), "/a/b/d")

	def test_empty_is_root(this):
		this.assert_equal(Normalize(""), "/")
		this.assert_equal(Normalize("///"), "/")
		this.assert_equal(Normalize("."), "/")

	def test_relative_becomes_absolute(this):
		this.assert_equal(Normalize("a/b"), "/a/b")

	@pytest.mark.parametrize("path", ["/a//b/./c/../d", "../x/./y", "/", "a/b/../../..", "/a/b/"])
	def test_idempotent(this, path):
		once = Normalize(path)
		this.assert_equal(Normalize(once), once)

	def test_dotdot_never_underflows(this):
		this.assert_equal(Normalize("/../../.."), "/")
		this.assert_equal(Normalize("/a/../../b"), "/b")

	def test_strict_rejects_underflow(this):
		this.assert_raises(PathTraversal, Normalize, "/a/../../b", True)
		this.assert_equal(Normalize("/a/b/../c", True), "/a/c")


class TestSandbox(StandardTestFixture):

	def test_strips_mount_prefix(this):
		this.assert_equal(Sandbox("/agent", "/agent/notes/todo.txt"), "/notes/todo.txt")
		this.assert_equal(Sandbox("/agent", "/agent"), "/")
		this.assert_equal(Sandbox("/agent", "/agent/"), "/")

	def test_other_paths_are_relative_to_mount(this):
		this.assert_equal(Sandbox("/agent", "/notes"), "/notes")
		this.assert_equal(Sandbox("/agent", "notes"), "/notes")

	def test_prefix_must_end_at_separator(this):
		this.assert_equal(Sandbox("/agent", "/agentx/file"), "/agentx/file")

	def test_traversal_is_clamped(this):
		this.assert_equal(Sandbox("/agent", "/../../../etc/passwd"), "/etc/passwd")
		this.assert_equal(Sandbox("/agent", "/agent/../../etc/passwd"), "/etc/passwd")

	def test_strict_traversal_raises(this):
		this.assert_raises(PathTraversal, Sandbox, "/agent", "/../../../etc/passwd", True)

	def test_root_mount(this):
		this.assert_equal(Sandbox("/", "/a/b"), "/a/b")


class TestPathHelpers(StandardTestFixture):

	def test_parent_and_basename(this):
		this.assert_equal(ParentOf("/a/b/c"), "/a/b")
		this.assert_equal(ParentOf("/a"), "/")
		this.assert_equal(ParentOf("/"), "/")
		this.assert_equal(BaseName("/a/b/c"), "c")
		this.assert_equal(BaseName("/"), "")

	def test_join_and_split(this):
		this.assert_equal(Join("/", "a"), "/a")
		this.assert_equal(Join("/a", "b"), "/a/b")
		this.assert_equal(Split("/a/b"), ["a", "b"])
		this.assert_equal(Split("/"), [])

	def test_resolver(this):
		resolve = PathResolver("/agent")
		this.assert_equal(resolve("/agent/x/../y"), "/y")

	def test_resolver_rejects_non_strings(this):
		resolve = PathResolver("/agent")
		this.assert_raises(InvalidPath, resolve, 42)
		this.assert_raises(InvalidPath, resolve, None)

	def test_resolver_accepts_pathlike(this):
		from pathlib import PurePosixPath
		resolve = PathResolver("/agent")
		this.assert_equal(resolve(PurePosixPath("/agent/a/b")), "/a/b")

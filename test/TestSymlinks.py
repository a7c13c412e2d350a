import errno

import pytest

from StandardTestFixture import StandardTestFixture

from libagentfs import FileNotFound, PathExists, InvalidPath


class TestSymlinks(StandardTestFixture):

	def test_link_to_file(this):
		this.fs.write_file("/target.txt", b"payload")
		this.fs.symlink("/target.txt", "/link")

		assert this.fs.lstat("/link").is_symlink
		assert this.fs.stat("/link").is_file
		this.assert_equal(this.fs.stat("/link").ino, this.fs.stat("/target.txt").ino)
		this.assert_equal(this.fs.readlink("/link"), "/target.txt")
		this.assert_equal(this.fs.read_file("/link"), b"payload")

	def test_link_mode_and_size(this):
		this.fs.symlink("some/where", "/link")
		st = this.fs.lstat("/link")
		this.assert_equal(st.permissions, 0o777)
		this.assert_equal(st.size, len("some/where"))
		this.assert_equal(st.nlink, 1)

	def test_link_to_directory(this):
		this.fs.mkdir("/d")
		this.fs.symlink("/d", "/dl")
		assert this.fs.stat("/dl").is_directory
		assert this.fs.lstat("/dl").is_symlink

	def test_target_is_not_validated(this):
		this.fs.symlink("/does/not/exist", "/dangling")
		assert this.fs.exists("/dangling")
		this.assert_equal(this.fs.readlink("/dangling"), "/does/not/exist")
		assert this.fs.stat("/dangling") is None
		assert this.fs.read_file("/dangling") is None

	def test_target_is_stored_verbatim(this):
		this.fs.symlink("../x/./y", "/link")
		this.assert_equal(this.fs.readlink("/link"), "../x/./y")

	def test_relative_target(this):
		this.fs.mkdir("/a")
		this.fs.mkdir("/a/b")
		this.fs.write_file("/a/file", b"rel")
		this.fs.symlink("../file", "/a/b/link")
		this.assert_equal(this.fs.read_file("/a/b/link"), b"rel")

	def test_absolute_target_stays_in_mount(this):
		this.fs.write_file("/passwd", b"inside")
		this.fs.symlink("/../../passwd", "/link")
		this.assert_equal(this.fs.read_file("/link"), b"inside")
		this.fs.symlink("/agent/passwd", "/mounted")
		this.assert_equal(this.fs.read_file("/mounted"), b"inside")

	def test_absolute_target_with_mount_prefix(this):
		this.fs.write_file("/agent/data", b"mounted")
		this.fs.mkdir("/agent/agent")
		this.fs.write_file("/agent/agent/data", b"nested")
		this.fs.symlink("/agent/data", "/l")
		this.assert_equal(this.fs.read_file("/l"), b"mounted")
		this.assert_equal(this.fs.read_file("/agent/l"), b"mounted")
		this.assert_equal(this.fs.readlink("/l"), "/agent/data")

	def test_chain(this):
		this.fs.write_file("/end", b"end")
		previous = "/end"
		for i in range(10):
			this.fs.symlink(previous, f"/l{i}")
			previous = f"/l{i}"
		this.assert_equal(this.fs.read_file(previous), b"end")

	def test_chain_too_long(this):
		this.fs.write_file("/end", b"end")
		previous = "/end"
		for i in range(41):
			this.fs.symlink(previous, f"/l{i}")
			previous = f"/l{i}"

		with pytest.raises(InvalidPath) as e:
			this.fs.read_file(previous)
		this.assert_equal(e.value.errno, errno.ELOOP)
		this.assert_raises(InvalidPath, this.fs.stat, previous)

		# 40 hops is still fine.
		this.assert_equal(this.fs.read_file("/l39"), b"end")

	def test_cycle(this):
		this.fs.symlink("/b", "/a")
		this.fs.symlink("/a", "/b")
		with pytest.raises(InvalidPath) as e:
			this.fs.read_file("/a")
		this.assert_equal(e.value.errno, errno.ELOOP)
		this.assert_raises(InvalidPath, this.fs.stat, "/b")
		assert this.fs.lstat("/a").is_symlink

	def test_readlink_of_non_link(this):
		this.fs.write_file("/f", b"")
		this.assert_raises(InvalidPath, this.fs.readlink, "/f")
		this.assert_raises(InvalidPath, this.fs.readlink, "/")

	def test_existing_link_path(this):
		this.fs.write_file("/f", b"")
		this.assert_raises(PathExists, this.fs.symlink, "/x", "/f")

	def test_bad_targets(this):
		this.assert_raises(InvalidPath, this.fs.symlink, "", "/link")
		this.assert_raises(InvalidPath, this.fs.symlink, None, "/link")
		assert not this.fs.exists("/link")

	def test_write_through_link(this):
		this.fs.write_file("/target", b"old")
		this.fs.symlink("/target", "/link")
		this.fs.write_file("/link", b"new")
		this.assert_equal(this.fs.read_file("/target"), b"new")
		assert this.fs.lstat("/link").is_symlink

	def test_write_through_dangling_link(this):
		this.fs.symlink("/missing", "/link")
		this.assert_raises(FileNotFound, this.fs.write_file, "/link", b"x")

	def test_remove_link_keeps_target(this):
		this.fs.write_file("/target", b"t")
		this.fs.symlink("/target", "/link")
		this.fs.remove("/link")
		assert not this.fs.exists("/link")
		this.assert_equal(this.fs.read_file("/target"), b"t")

	def test_remove_purges_target_string(this):
		this.fs.symlink("/x", "/link")
		ino = this.fs.lstat("/link").ino
		this.fs.remove("/link")
		assert this.fs.content.ReadTarget(ino) is None


class TestSymlinkDepth(StandardTestFixture):

	def setup_method(this, method):
		super().setup_method(method)
		this.agent.Close()

		from libagentfs import AgentFS, AgentFSConfig
		this.agent = AgentFS.From(AgentFSConfig(
			agent_id="test-agent",
			database_url=f"sqlite:///{this.db_file}",
			max_symlink_depth=2,
		))
		this.fs = this.agent.fs

	def test_configured_bound(this):
		this.fs.write_file("/end", b"end")
		this.fs.symlink("/end", "/l1")
		this.fs.symlink("/l1", "/l2")
		this.fs.symlink("/l2", "/l3")
		this.assert_equal(this.fs.read_file("/l1"), b"end")
		this.assert_raises(InvalidPath, this.fs.read_file, "/l3")

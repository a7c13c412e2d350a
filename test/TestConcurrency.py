import threading

from StandardTestFixture import StandardTestFixture

from libagentfs import PathExists, InvalidTransition

THREADS = 8


def RunTogether(target, count=THREADS):
	barrier = threading.Barrier(count)
	outcomes = []
	lock = threading.Lock()

	def run(i):
		barrier.wait()
		try:
			target(i)
			outcome = "ok"
		except Exception as e:
			outcome = e
		with lock:
			outcomes.append(outcome)

	threads = [threading.Thread(target=run, args=(i,)) for i in range(count)]
	for thread in threads:
		thread.start()
	for thread in threads:
		thread.join()
	return outcomes


class TestConcurrency(StandardTestFixture):

	def test_mkdir_has_one_winner(this):
		outcomes = RunTogether(lambda i: this.fs.mkdir("/contested"))
		this.assert_equal(outcomes.count("ok"), 1)
		assert all(isinstance(outcome, PathExists) for outcome in outcomes if outcome != "ok")

		# Root plus the one directory; losers left nothing behind.
		this.assert_equal(this.fs.db.Execute("SELECT COUNT(*) AS count FROM fs_inode")[0]['count'], 2)
		this.assert_equal(this.fs.stat("/contested").nlink, 1)

	def test_symlink_has_one_winner(this):
		outcomes = RunTogether(lambda i: this.fs.symlink(f"/target{i}", "/link"))
		this.assert_equal(outcomes.count("ok"), 1)
		this.assert_equal(this.fs.db.Execute("SELECT COUNT(*) AS count FROM fs_symlink")[0]['count'], 1)

	def test_concurrent_writes_to_one_file(this):
		outcomes = RunTogether(lambda i: this.fs.write_file("/shared", bytes([i]) * 100))
		this.assert_equal(outcomes, ["ok"] * THREADS)
		data = this.fs.read_file("/shared")
		this.assert_equal(len(data), 100)
		this.assert_equal(len(set(data)), 1)
		this.assert_equal(this.fs.readdir("/"), ["shared"])

	def test_unrelated_writes(this):
		outcomes = RunTogether(lambda i: this.fs.write_file(f"/file{i}", str(i)))
		this.assert_equal(outcomes, ["ok"] * THREADS)
		this.assert_equal(len(this.fs.readdir("/")), THREADS)
		for i in range(THREADS):
			this.assert_equal(this.fs.read_file(f"/file{i}"), str(i).encode())

	def test_tool_completion_has_one_winner(this):
		id = this.tools.start("race")
		outcomes = RunTogether(lambda i: this.tools.success(id, i) if i % 2 else this.tools.error(id, str(i)))
		this.assert_equal(outcomes.count("ok"), 1)
		assert all(isinstance(outcome, InvalidTransition) for outcome in outcomes if outcome != "ok")

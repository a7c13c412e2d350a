import logging
import pytest
import tempfile
import shutil
import os

from libagentfs import AgentFS

class StandardTestFixture(object):

	@staticmethod
	def assert_equal(a, b, msg=""):
		assert a == b, msg


	@staticmethod
	def assert_raises(exc, func, *a, **kw):
		with pytest.raises(exc):
			func(*a, **kw)


	# Pytest skips classes with __init__ methods.
	# That's dumb.
	# It seems like the best we can do atm is add our members as class members which should be re-instantiated before every test.
	@classmethod
	def setup_class(cls):
		cls.Constructor()

	
	# Also supply destructor.
	@classmethod
	def teardown_class(cls):
		cls.Destructor()


	@classmethod # this is a lie.
	def Constructor(this):
		logging.debug(f"Constructing {this.__name__}")
		this.tempdir = tempfile.mkdtemp()

	
	@classmethod # this is a lie.
	def Destructor(this):
		logging.debug(f"Destructing {this.__name__}")
		shutil.rmtree(this.tempdir)


	# Every test gets a fresh database file, so nothing leaks between tests.
	def setup_method(this, method):
		this.db_file = os.path.join(this.tempdir, f"{method.__name__}.db")
		this.agent = AgentFS.Sqlite(this.db_file, agent_id="test-agent")
		this.fs = this.agent.fs
		this.kv = this.agent.kv
		this.tools = this.agent.tools


	def teardown_method(this, method):
		this.agent.Close()

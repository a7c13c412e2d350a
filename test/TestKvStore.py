import fakeredis

from StandardTestFixture import StandardTestFixture

from libagentfs import KvStore, RiverDatabase, SerializationError


class TestKvStore(StandardTestFixture):

	def test_set_get(this):
		this.kv.set("name", b"value")
		this.assert_equal(this.kv.get("name"), b"value")
		assert this.kv.exists("name")

	def test_str_values(this):
		this.kv.set("greeting", "hé")
		this.assert_equal(this.kv.get("greeting"), "hé".encode('utf-8'))

	def test_missing(this):
		assert this.kv.get("missing") is None
		assert not this.kv.exists("missing")

	def test_delete(this):
		this.kv.set("k", b"v")
		this.kv.delete("k")
		assert not this.kv.exists("k")
		this.kv.delete("k")

	def test_keys_are_namespaced(this):
		this.kv.set("k", b"v")
		this.assert_equal(this.agent.db.Get("kv:test-agent:k"), b"v")

	def test_scan(this):
		for key in ["notes:2", "notes:1", "todo", "notes"]:
			this.kv.set(key, b"")
		this.assert_equal(this.kv.scan("notes:"), ["notes:1", "notes:2"])
		this.assert_equal(this.kv.scan(), ["notes", "notes:1", "notes:2", "todo"])

	def test_namespaces_are_isolated(this):
		other = KvStore(this.agent.db, "other-agent")
		this.kv.set("shared", b"mine")
		other.set("shared", b"theirs")
		other.set("private", b"x")

		this.assert_equal(this.kv.get("shared"), b"mine")
		this.assert_equal(other.get("shared"), b"theirs")
		assert not this.kv.exists("private")
		this.assert_equal(this.kv.scan(), ["shared"])

	def test_namespace_cannot_contain_separator(this):
		this.assert_raises(ValueError, KvStore, this.agent.db, "test-agent:x")

	def test_json(this):
		value = {'a': [1, 2, 3], 'b': None, 'c': "text"}
		this.kv.set_json("config", value)
		this.assert_equal(this.kv.get_json("config"), value)
		assert this.kv.get_json("missing") is None

	def test_bad_json(this):
		this.kv.set("broken", b"{not json")
		this.assert_raises(SerializationError, this.kv.get_json, "broken")
		this.kv.set("raw", b"\xff\xfe")
		this.assert_raises(SerializationError, this.kv.get_json, "raw")
		this.assert_raises(SerializationError, this.kv.set_json, "obj", object())

	def test_needs_namespace(this):
		this.assert_raises(ValueError, KvStore, this.agent.db, "")


class TestKvStoreOnRedis(StandardTestFixture):

	def test_round_trip(this):
		db = RiverDatabase("sqlite://", redis_client=fakeredis.FakeRedis())
		kv = KvStore(db, "agent")
		kv.set("a:1", b"x")
		kv.set("a:2", b"y")
		kv.set("b", b"z")
		this.assert_equal(kv.get("a:1"), b"x")
		this.assert_equal(kv.scan("a:"), ["a:1", "a:2"])
		kv.delete("a:1")
		this.assert_equal(kv.scan("a:"), ["a:2"])
		db.Close()

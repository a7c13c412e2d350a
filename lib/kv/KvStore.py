"""
lib/kv/KvStore.py

Purpose:
A namespaced key-value store for small opaque values (agent memory, scratch state, settings).

Place in Architecture:
What AgentFS.kv points at. It is only key prefixing over the Database flat namespace: keys are stored as "kv:{namespace}:{key}", so the same backend (kv_store table or Redis) serves any number of agents without them seeing each other.

Interface:

	KvStore(db, namespace): bind to a Database.
	set(key, value) / get(key) / delete(key) / exists(key): single-key access.
	scan(prefix=""): RETURNS the sorted keys (without the namespace) beginning with prefix.
	set_json(key, obj) / get_json(key): JSON-encoded values.

TODOs/FIXMEs:
None.
"""

import logging

from ..Utils import JsonDump, JsonLoad

logger = logging.getLogger(__name__)

KEY_PREFIX = "kv"
KEY_SEPARATOR = ":"


class KvStore(object):
	def __init__(this, db, namespace):
		if (not namespace):
			raise ValueError("a KvStore needs a namespace")

		# Otherwise one namespace could be a prefix of another's keys.
		if (KEY_SEPARATOR in namespace):
			raise ValueError(f"namespace may not contain '{KEY_SEPARATOR}': {namespace}")
		this.db = db
		this.namespace = namespace
		this.prefix = f"{KEY_PREFIX}{KEY_SEPARATOR}{namespace}{KEY_SEPARATOR}"


	def __repr__(this):
		return f"<KvStore {this.namespace} on {this.db!r}>"


	def StorageKey(this, key):
		return this.prefix + key


	def set(this, key, value):
		if (isinstance(value, str)):
			value = value.encode('utf-8')
		this.db.Put(this.StorageKey(key), bytes(value))
		logger.debug(f"Set {key} in {this.namespace}.")

	def get(this, key):
		return this.db.Get(this.StorageKey(key))

	def delete(this, key):
		this.db.Delete(this.StorageKey(key))

	def exists(this, key):
		return this.db.Exists(this.StorageKey(key))

	def scan(this, prefix=""):
		keys = this.db.Scan(this.StorageKey(prefix))
		return sorted(key[len(this.prefix):] for key in keys)


	def set_json(this, key, obj):
		this.set(key, JsonDump(obj).encode('utf-8'))

	# Missing keys come back as None, same as get().
	# JsonLoad decodes the raw bytes itself, so undecodable values are a SerializationError too.
	def get_json(this, key):
		return JsonLoad(this.get(key))

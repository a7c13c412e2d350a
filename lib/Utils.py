"""
lib/Utils.py

Purpose:
Small helpers shared across AgentFS: the clock, JSON encoding that raises AgentFS errors, size / boolean parsing for configuration values, and console logging setup.

Place in Architecture:
Leaf module; used by the filesystem, the tool recorder, the KV store and the configuration layer.

Interface:

	Now(): current Unix time in whole seconds (inode timestamps).
	PreciseNow(): current Unix time as a float (tool-call timestamps).
	JsonDump(obj) / JsonLoad(text): JSON round trip raising SerializationError.
	parse_size(size_str): "64KiB" -> 65536.
	parse_bool(value): "yes" / "0" / True -> bool.
	SetupLogging(level, logger="libagentfs"): attach a console handler.

TODOs/FIXMEs:
None.
"""

import re
import json
import time
import logging

from .Errors import SerializationError, ConfigurationError


def Now():
	return int(time.time())

def PreciseNow():
	return time.time()


# None passes through so optional columns stay NULL.
def JsonDump(obj):
	if (obj is None):
		return None
	try:
		return json.dumps(obj)
	except (TypeError, ValueError) as e:
		raise SerializationError(f"cannot encode value as JSON: {e}")


# Accepts str or UTF-8 bytes. UnicodeDecodeError is a ValueError, so bad bytes land here as well.
def JsonLoad(text):
	if (text is None):
		return None
	try:
		return json.loads(text)
	except (TypeError, ValueError) as e:
		raise SerializationError(f"invalid JSON payload: {e}")


def parse_size(size_str):
	if (isinstance(size_str, int)):
		return size_str

	multipliers = {
		't': 1000**4,
		'g': 1000**3,
		'm': 1000**2,
		'k': 1000**1,
		'tb': 1000**4,
		'gb': 1000**3,
		'mb': 1000**2,
		'kb': 1000**1,
		'tib': 1024**4,
		'gib': 1024**3,
		'mib': 1024**2,
		'kib': 1024**1,
	}
	size_re = re.compile(r'^\s*(\d+)\s*(%s)?\s*$' % ("|".join(list(multipliers.keys())),),
						 re.I)

	m = size_re.match(str(size_str))
	if not m:
		raise ValueError("not a valid size specifier")

	size = int(m.group(1))
	multiplier = m.group(2)
	if multiplier is not None:
		try:
			size *= multipliers[multiplier.lower()]
		except KeyError:
			raise ValueError("invalid size multiplier")

	return size


def parse_bool(value):
	if (isinstance(value, bool)):
		return value
	if (isinstance(value, int)):
		return value != 0

	lowered = str(value).strip().lower()
	if (lowered in ('1', 'true', 'yes', 'on')):
		return True
	if (lowered in ('0', 'false', 'no', 'off', '')):
		return False
	raise ConfigurationError(f"not a boolean: {value!r}")


# Console logging for whoever embeds the library. Calling it again only changes the level.
def SetupLogging(level, logger="libagentfs"):
	logger = logging.getLogger(logger)

	if (isinstance(level, str)):
		numericLevel = logging.getLevelName(level.upper())
		if (not isinstance(numericLevel, int)):
			raise ConfigurationError(f"unknown log level: {level}")
		level = numericLevel

	if (not any(getattr(handler, '_agentfs', False) for handler in logger.handlers)):
		handler = logging.StreamHandler()
		handler.setFormatter(logging.Formatter(fmt="%(asctime)s agentfs[%(process)d]: %(levelname)s: %(message)s"))
		handler._agentfs = True
		logger.addHandler(handler)

	logger.setLevel(level)
	return logger

"""
lib/Config.py

Purpose:
Holds the options an AgentFS instance is built from, validates them, and loads them from YAML files or the environment.

Place in Architecture:
Consumed by AgentFS.From() and by db.Connect(). Everything else receives plain, already-validated values.

Interface:

	AgentFSConfig(...): dataclass of options with defaults.
	ValidateArgs(): coerce and check every option. RETURNS *this.
	AgentFSConfig.Load(path, **overrides): read a YAML mapping.
	AgentFSConfig.FromEnvironment(environ=None, prefix="AGENTFS_", base=None): overlay AGENTFS_* variables.

TODOs/FIXMEs:
None.
"""

import os
import logging
import dataclasses
from dataclasses import dataclass
from typing import Optional

import yaml

from .Errors import ConfigurationError
from .Utils import parse_size, parse_bool

logger = logging.getLogger(__name__)


@dataclass
class AgentFSConfig:
	agent_id: str = "agent"
	mount_path: str = "/agent"
	database_url: str = "sqlite:///agentfs.db"
	redis_url: Optional[str] = None
	chunk_size: object = "64KiB" # Size of each fs_data row. parse_size() strings or ints.
	max_symlink_depth: int = 40
	strict_sandbox: bool = False # Reject ".." above the mount root instead of clamping.
	default_uid: int = 0
	default_gid: int = 0
	sql_echo: bool = False
	log_level: Optional[str] = None # Only set up console logging when asked.

	# Coerce string values (from YAML or the environment) and make sure everything is usable.
	# NOTE: it is illegal to change the config once an AgentFS has been built from it.
	def ValidateArgs(this):
		if (not this.agent_id or not str(this.agent_id).strip()):
			raise ConfigurationError("agent_id must not be empty")
		this.agent_id = str(this.agent_id).strip()
		if (':' in this.agent_id):
			raise ConfigurationError(f"agent_id may not contain ':': {this.agent_id}")

		if (not str(this.mount_path).startswith('/')):
			raise ConfigurationError(f"mount_path must be absolute: {this.mount_path}")

		if (not this.database_url):
			raise ConfigurationError("database_url must not be empty")

		if (this.redis_url is not None and not str(this.redis_url).strip()):
			this.redis_url = None

		try:
			this.chunk_size = parse_size(this.chunk_size)
		except ValueError:
			raise ConfigurationError(f"chunk_size {this.chunk_size} is not a valid size specifier")
		if (this.chunk_size <= 0):
			raise ConfigurationError("chunk_size must be positive")

		for name in ['max_symlink_depth', 'default_uid', 'default_gid']:
			try:
				setattr(this, name, int(getattr(this, name)))
			except (TypeError, ValueError):
				raise ConfigurationError(f"{name} {getattr(this, name)!r} is not an integer")
		if (this.max_symlink_depth < 1):
			raise ConfigurationError("max_symlink_depth must be at least 1")

		this.strict_sandbox = parse_bool(this.strict_sandbox)
		this.sql_echo = parse_bool(this.sql_echo)
		return this

	@classmethod
	def Fields(cls):
		return [field.name for field in dataclasses.fields(cls)]

	@classmethod
	def Load(cls, path, **overrides):
		try:
			with open(path, encoding="utf-8") as file:
				data = yaml.safe_load(file) or {}
		except OSError as e:
			raise ConfigurationError(f"cannot read {path}: {e}")
		except yaml.YAMLError as e:
			raise ConfigurationError(f"invalid YAML in {path}: {e}")

		if (not isinstance(data, dict)):
			raise ConfigurationError(f"{path} must contain a mapping")

		unknown = set(data) - set(cls.Fields())
		if (unknown):
			raise ConfigurationError(f"unknown options in {path}: {', '.join(sorted(unknown))}")

		data.update(overrides)
		logger.debug(f"Loaded configuration from {path}")
		return cls(**data).ValidateArgs()

	# Environment variables take precedence over whatever `base` holds.
	@classmethod
	def FromEnvironment(cls, environ=None, prefix="AGENTFS_", base=None):
		if (environ is None):
			environ = os.environ

		values = dataclasses.asdict(base) if base is not None else {}
		for name in cls.Fields():
			key = prefix + name.upper()
			if (key in environ):
				values[name] = environ[key]

		return cls(**values).ValidateArgs()

from .Errors import *
from .Upath import Normalize, Sandbox, PathResolver
from .Utils import SetupLogging
from .Config import AgentFSConfig
from .db import Database, SqlDatabase, RiverDatabase, Connect
from .fs import VirtualFileSystem, Stats
from .kv import KvStore
from .tools import ToolRecorder, ToolCall, ToolCallStats, ToolCallStatus
from .AgentFS import AgentFS

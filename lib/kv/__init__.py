from .KvStore import KvStore

from .Stats import Stats, ROOT_INO
from .FSMethod import FSMethod
from .FileSystem import VirtualFileSystem

from .Database import Database
from .SqlDatabase import SqlDatabase
from .RiverDatabase import RiverDatabase
from .Connect import Connect

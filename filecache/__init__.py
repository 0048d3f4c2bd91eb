from filecache.bins import construct, get_store, reset_stores
from filecache.constants import PERMANENT, TEMPORARY
from filecache.keys import normalize
from filecache.store import CacheStore

__all__ = [
    "CacheStore",
    "PERMANENT",
    "TEMPORARY",
    "construct",
    "get_store",
    "normalize",
    "reset_stores",
]

import base64
import hashlib
import re

from filecache.constants import HOSTILE_CHARS, MAX_IDENTIFIER_LENGTH, SUBSTITUTE

SAFE_RE = re.compile(r"[a-zA-Z0-9_-]+")
_HOSTILE_TABLE = str.maketrans({c: SUBSTITUTE for c in HOSTILE_CHARS})


def hash_cid(cid: str) -> str:
    """Fixed-length (43 chars) URL-safe base64 SHA-256 of the cid, without padding."""
    digest = hashlib.sha256(cid.encode("utf-8", errors="surrogatepass")).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


def is_safe(identifier: str) -> bool:
    return bool(SAFE_RE.fullmatch(identifier)) and len(identifier) <= MAX_IDENTIFIER_LENGTH


def normalize(cid: str) -> str:
    """Maps a cid to a filesystem-safe identifier.

    Hostile characters are replaced with "-"; anything that still is not a
    plain [a-zA-Z0-9_-]+ name (or is too long for a filename) falls back to
    hash_cid() of the original cid. Different cids may map to one identifier.
    """
    candidate = (cid or "").translate(_HOSTILE_TABLE)
    if is_safe(candidate):
        return candidate
    return hash_cid(cid or "")

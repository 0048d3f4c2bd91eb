PERMANENT = 0  # never reaped by garbage collection
TEMPORARY = -1  # reaped on the next garbage collection

EXPIRE_SUFFIX = ".expire"

# Characters replaced before a cid touches the filesystem
HOSTILE_CHARS = "/\\%:.=?@ \t\r\n"
SUBSTITUTE = "-"

# Longer identifiers are hashed; keeps payload + marker names under NAME_MAX
MAX_IDENTIFIER_LENGTH = 200

TMP_PREFIX = "."
TMP_SUFFIX = ".tmp"

from __future__ import annotations

SENTINEL = b"\\end"
DEFAULT_FRAME_CAPACITY = 500

# Scan order matters: the first token matching at a lookahead offset wins.
KNOWN_EXTENSIONS = ("java", "txt", "tex", "cpp", "py", "c")
VALID_EXTENSIONS = frozenset(KNOWN_EXTENSIONS)
EXTENSION_LOOKAHEAD = 4

EXIT_COMMAND = "exit"
SEND_COMMAND = "send file"
SELECT_PREFIX = "select file "

PREFIXED_MAGIC = b"\x00PF1"
HEADER_FORMAT = "!4sHI"  # magic, tag_len, payload_len

LISTEN_BACKLOG = 10

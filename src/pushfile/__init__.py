"""pushfile: push one file at a time to a server over TCP.

The package keeps the wire pieces apart from the session state machines:
- pure helpers for sanitizing payloads, deriving file names and parsing commands
- a frame codec that speaks the sentinel-terminated wire form (and an optional
  length-prefixed one)
- blocking client and server sessions that drive the codec over a socket
"""

__all__ = []

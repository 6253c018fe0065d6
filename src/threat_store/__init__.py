"""
Threat Store - Git-backed threat model storage

Versioned storage for threat model JSON documents: one directory per model,
one commit per write, history and point-in-time reads served from git.
"""

__version__ = "0.1.0"

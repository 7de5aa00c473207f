"""Standalone installer builder for Node.js applications.

Builds a self-contained Ubuntu installer archive:
- Bundled Node.js runtime (no system Node required)
- Prebuilt application output
- Generated launcher, install/uninstall scripts and systemd unit
- Step-driven, logged, resumable on failure
"""

__all__ = []

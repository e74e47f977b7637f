"""ISO chooser menu for installer chain-boot.

Core design goals:
- Resolve the newest image per SimpleStreams catalog before any UI is shown
- Fail fast: one bad catalog aborts the whole menu
- A menu styled after the Subiquity installer
- Output that /bin/sh can source
"""

__all__ = []

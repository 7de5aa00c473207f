from __future__ import annotations

import shlex
from typing import Sequence


class BuildError(RuntimeError):
    """Fail-fast build failure; the message is shown to the user as-is."""


class CommandError(BuildError):
    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        msg = f"Command failed ({returncode}): {shlex.join(self.argv)}"
        if stderr.strip():
            msg += f"\n{stderr.strip()}"
        super().__init__(msg)

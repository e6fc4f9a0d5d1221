"""LocalLauncher: run each review as a detached child process on this host.

Suited to a single VM or a development machine: every review gets its own
interpreter, so sessions share no in-process state, and the webhook request
returns as soon as the child has been spawned.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from typing import TYPE_CHECKING

from prbot_core.errors import DispatchError

from prbot_dispatch.launchers.base import BaseLauncher

if TYPE_CHECKING:
    from prbot_dispatch.models import TaskParams

logger = logging.getLogger(__name__)


class LocalLauncher(BaseLauncher):
    def __init__(self, config_path: str | None = None, command: list[str] | None = None):
        self._command = command or [sys.executable, "-m", "prbot_cli"]
        self._config_path = config_path

    def launch(self, params: TaskParams) -> str:
        argv = list(self._command)
        if self._config_path:
            argv += ["--config", self._config_path]
        argv.append("review")
        try:
            proc = subprocess.Popen(
                argv,
                env={**os.environ, **params.to_env()},
                stdin=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            raise DispatchError(f"Could not start review process: {e}") from e

        logger.info("Spawned review process %d for %s/%s#%d", proc.pid, params.owner, params.repo, params.pr_number)
        return str(proc.pid)

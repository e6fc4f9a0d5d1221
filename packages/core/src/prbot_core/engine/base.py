"""Base engine adapter implementing the Template Method pattern.

Every engine shares the same invocation algorithm:
    invoke() → _build_prompt()
             → _build_command()        ← only this differs per engine
             → _run()                  (subprocess, hard timeout)
             → _parse()                (JSON extraction + schema validation)

Subclasses implement the command line for the real invocation and for the
liveness probe. Everything else lives here so the timeout and validation
rules are defined once.
"""

from __future__ import annotations

import json
import logging
import os
import signal
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from pydantic import ValidationError

from prbot_core.models import ReviewResult

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 25 * 60  # seconds
_PROBE_TIMEOUT = 30


@dataclass
class EngineRunResult:
    success: bool
    result: Optional[ReviewResult] = None
    error: Optional[str] = None
    raw_output: Optional[str] = None
    error_kind: Optional[str] = None  # "spawn" | "timeout" | "exit_status" | "no_json" | "validation"


def _kill_process_group(proc: subprocess.Popen) -> None:
    # The engine spawns its own tools (git, shells); kill the whole session.
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except (AttributeError, OSError):
        proc.kill()


def extract_json_object(output: str) -> dict | None:
    """Return the first JSON object in ``output`` that has both status and findings.

    The engine tends to surround its answer with prose or markdown fences, so
    every ``{`` is tried as the start of an object until one decodes into a
    dict carrying the two required keys.
    """
    decoder = json.JSONDecoder()
    start = output.find("{")
    while start != -1:
        try:
            obj, _ = decoder.raw_decode(output, start)
        except json.JSONDecodeError:
            obj = None
        if isinstance(obj, dict) and "status" in obj and "findings" in obj:
            return obj
        start = output.find("{", start + 1)
    return None


class BaseEngine(ABC):
    TIMEOUT: int = DEFAULT_TIMEOUT

    def __init__(self, timeout: int | None = None, env: dict[str, str] | None = None):
        self.timeout = timeout or self.TIMEOUT
        self.extra_env = env or {}

    # ------------------------------------------------------------------ #
    # Public interface                                                     #
    # ------------------------------------------------------------------ #

    def invoke(
        self,
        workspace_path: str,
        pr_number: int,
        base_branch: str,
        head_branch: str,
        timeout: int | None = None,
    ) -> EngineRunResult:
        """Run the engine once inside ``workspace_path`` and validate its answer."""
        prompt = self._build_prompt(pr_number, base_branch, head_branch)
        command = self._build_command(prompt)
        limit = timeout or self.timeout

        logger.info("Invoking engine for PR #%d (timeout %ds)", pr_number, limit)
        try:
            proc = subprocess.Popen(
                command,
                cwd=workspace_path,
                env={**os.environ, **self.extra_env},
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                start_new_session=True,
            )
        except OSError as e:
            return EngineRunResult(success=False, error=f"Failed to spawn engine: {e}", error_kind="spawn")

        try:
            stdout, stderr = proc.communicate(timeout=limit)
        except subprocess.TimeoutExpired:
            _kill_process_group(proc)
            stdout, _ = proc.communicate()
            logger.warning("Engine timed out after %ds; process killed", limit)
            return EngineRunResult(
                success=False,
                error=f"Review timed out after {limit} seconds",
                raw_output=stdout,
                error_kind="timeout",
            )

        if proc.returncode != 0:
            return EngineRunResult(
                success=False,
                error=f"Engine exited with code {proc.returncode}: {stderr.strip()}",
                raw_output=stdout,
                error_kind="exit_status",
            )

        return self._parse(stdout)

    def is_available(self) -> bool:
        """Return True if the engine executable answers a trivial invocation."""
        try:
            result = subprocess.run(
                self._build_probe_command(),
                capture_output=True,
                text=True,
                timeout=_PROBE_TIMEOUT,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning("Engine liveness probe failed: %s", e)
            return False
        return result.returncode == 0

    # ------------------------------------------------------------------ #
    # Abstract: implement in each engine                                   #
    # ------------------------------------------------------------------ #

    @abstractmethod
    def _build_command(self, prompt: str) -> list[str]:
        """Return the argv that runs one review with ``prompt``."""

    @abstractmethod
    def _build_probe_command(self) -> list[str]:
        """Return the argv of a cheap command that exits 0 when the engine works."""

    # ------------------------------------------------------------------ #
    # Shared implementations                                               #
    # ------------------------------------------------------------------ #

    def _build_prompt(self, pr_number: int, base_branch: str, head_branch: str) -> str:
        return f"""Review the changes in this pull request.

Context:
- PR number: #{pr_number}
- Base branch: {base_branch}
- Head branch: {head_branch}

First, run "git diff {base_branch}...{head_branch}" to see the changes.
Then analyze the changes and output the structured JSON review result.

Output exactly one JSON object of this shape and nothing else:

{{
  "status": "completed" | "skipped" | "failed",
  "summary": "<one paragraph>",
  "findings": [
    {{
      "severity": "critical" | "high" | "medium" | "low",
      "category": "security" | "performance" | "logic" | "error-handling" | "type-safety" | "maintainability",
      "confidence": "high" | "medium" | "low",
      "file": "<path relative to the repository root>",
      "line": <first line in the new file>,
      "endLine": <last line, optional>,
      "title": "<short title>",
      "description": "<what is wrong and why it matters>",
      "suggestion": "<replacement code, optional>",
      "severityReason": "<why this severity>",
      "references": ["<url>", "..."],
      "hash": "<any string>"
    }}
  ],
  "metadata": {{
    "headCommit": "<sha>",
    "filesReviewed": <int>,
    "skippedFiles": ["<path>", "..."],
    "reviewDurationMs": <int>
  }},
  "error": "<only when status is failed>"
}}

Remember:
- Filter out stylistic nitpicks
- Be thorough but focused on real issues"""

    def _parse(self, output: str) -> EngineRunResult:
        payload = extract_json_object(output)
        if payload is None:
            return EngineRunResult(
                success=False,
                error="Could not find JSON in engine output",
                raw_output=output,
                error_kind="no_json",
            )
        try:
            result = ReviewResult.model_validate(payload)
        except ValidationError as e:
            logger.warning("%s: engine JSON failed validation: %s", self.__class__.__name__, e)
            return EngineRunResult(
                success=False,
                error=f"Engine JSON failed validation: {e}",
                raw_output=output,
                error_kind="validation",
            )
        return EngineRunResult(success=True, result=result, raw_output=output)

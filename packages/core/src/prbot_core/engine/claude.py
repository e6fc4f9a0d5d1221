from __future__ import annotations

from prbot_core.engine.base import BaseEngine


class ClaudeCliEngine(BaseEngine):
    COMMAND = "claude"
    MODEL = "claude-sonnet-4-20250514"

    def __init__(
        self,
        command: str | None = None,
        model: str | None = None,
        timeout: int | None = None,
        api_key: str | None = None,
    ):
        self.command = command or self.COMMAND
        self.model = model or self.MODEL
        env = {"ANTHROPIC_MODEL": self.model}
        if api_key:
            env["ANTHROPIC_API_KEY"] = api_key
        super().__init__(timeout=timeout, env=env)

    def _build_command(self, prompt: str) -> list[str]:
        # Runs unattended in a throwaway checkout, so permission prompts are disabled.
        return [self.command, "--print", "--dangerously-skip-permissions", "--model", self.model, prompt]

    def _build_probe_command(self) -> list[str]:
        return [self.command, "--version"]


def build_engine(config: dict) -> ClaudeCliEngine:
    return ClaudeCliEngine(
        command=config.get("engine_command"),
        model=config.get("engine_model"),
        timeout=config.get("engine_timeout_seconds"),
        api_key=config.get("anthropic_api_key"),
    )

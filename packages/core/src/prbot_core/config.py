import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "max_files_threshold": 100,
    "retry_on_error": True,
    "engine_command": "claude",
    "engine_model": "claude-sonnet-4-20250514",
    "engine_timeout_seconds": 25 * 60,
    "trigger_command": "/ai-review",
    "bot_login": None,  # e.g. "prbot[bot]"; None = ignore review_requested events
    "launcher": "local",  # "local" | "ecs"
    "ecs_cluster": None,
    "ecs_task_definition": None,
    "ecs_subnets": [],
    "ecs_security_groups": [],
    "ecs_container_name": "reviewer",
    "workspace_root": None,  # None = system temp dir
}

# Environment variables that override file settings: name → (key, parser).
_ENV_OVERRIDES = {
    "MAX_FILES_THRESHOLD": ("max_files_threshold", int),
    "RETRY_ON_ERROR": ("retry_on_error", lambda v: v.strip().lower() != "false"),
    "ENGINE_TIMEOUT_SECONDS": ("engine_timeout_seconds", int),
    "ENGINE_COMMAND": ("engine_command", str),
    "BOT_LOGIN": ("bot_login", str),
    "PRBOT_LAUNCHER": ("launcher", str),
    "ECS_CLUSTER": ("ecs_cluster", str),
    "ECS_TASK_DEFINITION": ("ecs_task_definition", str),
    "ECS_SUBNETS": ("ecs_subnets", lambda v: [s.strip() for s in v.split(",") if s.strip()]),
    "ECS_SECURITY_GROUPS": ("ecs_security_groups", lambda v: [s.strip() for s in v.split(",") if s.strip()]),
    "ECS_CONTAINER_NAME": ("ecs_container_name", str),
}


def load_config(config_path: str = ".prbot.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .prbot.yml in the current directory
      3. Environment variables (see _ENV_OVERRIDES)
      4. CLI argument overrides

    The CLI calls this once per process and passes the resulting dict to every
    component; nothing caches it at module level.
    """
    config = {
        **DEFAULT_CONFIG,
        "ecs_subnets": list(DEFAULT_CONFIG["ecs_subnets"]),
        "ecs_security_groups": list(DEFAULT_CONFIG["ecs_security_groups"]),
    }

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    for env_name, (key, parse) in _ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            config[key] = parse(value)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    # Secrets are only ever read from the environment.
    config["webhook_secret"] = os.environ.get("WEBHOOK_SECRET")
    config["github_app_id"] = os.environ.get("GITHUB_APP_ID")
    config["github_app_private_key"] = _load_private_key()
    config["anthropic_api_key"] = os.environ.get("ANTHROPIC_API_KEY")

    return config


def _load_private_key() -> Optional[str]:
    key = os.environ.get("GITHUB_APP_PRIVATE_KEY")
    if key:
        return key
    key_path = os.environ.get("GITHUB_APP_PRIVATE_KEY_PATH")
    if key_path:
        p = Path(key_path)
        if not p.exists():
            raise FileNotFoundError(f"GitHub App private key not found: {key_path}")
        return p.read_text()
    return None

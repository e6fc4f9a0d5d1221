from __future__ import annotations

from prbot_dispatch.launchers.base import BaseLauncher


def build_launcher(config: dict, config_path: str | None = None) -> BaseLauncher:
    """Instantiate the configured launcher.

    launcher: local → LocalLauncher (default)
    launcher: ecs   → EcsLauncher (requires ecs_cluster and ecs_task_definition)
    """
    kind = config.get("launcher", "local")

    if kind == "ecs":
        from prbot_dispatch.launchers.ecs import EcsLauncher

        if not config.get("ecs_cluster") or not config.get("ecs_task_definition"):
            raise ValueError("The ECS launcher requires ecs_cluster and ecs_task_definition.")
        return EcsLauncher(
            cluster=config["ecs_cluster"],
            task_definition=config["ecs_task_definition"],
            subnets=config.get("ecs_subnets") or [],
            security_groups=config.get("ecs_security_groups") or [],
            container_name=config.get("ecs_container_name") or "reviewer",
        )

    if kind == "local":
        from prbot_dispatch.launchers.local import LocalLauncher

        return LocalLauncher(config_path=config_path)

    raise ValueError(f"Unknown launcher: {kind!r}. Choose 'local' or 'ecs'.")

"""EcsLauncher: run each review as a Fargate task.

The task image runs ``prbot review``; the four addressing variables are the
only per-review input and are passed as container environment overrides.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from prbot_core.errors import DispatchError

from prbot_dispatch.launchers.base import BaseLauncher

if TYPE_CHECKING:
    from prbot_dispatch.models import TaskParams

logger = logging.getLogger(__name__)


class EcsLauncher(BaseLauncher):
    def __init__(
        self,
        cluster: str,
        task_definition: str,
        subnets: list[str],
        security_groups: list[str],
        container_name: str,
        client=None,
    ):
        if client is None:
            try:
                import boto3
            except ImportError:
                raise ImportError(
                    "The 'boto3' package is required for the ECS launcher. " "Install it with: pip install 'prbot[aws]'"
                )
            client = boto3.client("ecs")
        self._client = client
        self._cluster = cluster
        self._task_definition = task_definition
        self._subnets = subnets
        self._security_groups = security_groups
        self._container_name = container_name

    def launch(self, params: TaskParams) -> str:
        try:
            response = self._client.run_task(
                cluster=self._cluster,
                taskDefinition=self._task_definition,
                launchType="FARGATE",
                count=1,
                networkConfiguration={
                    "awsvpcConfiguration": {
                        "subnets": self._subnets,
                        "securityGroups": self._security_groups,
                        "assignPublicIp": "ENABLED",
                    }
                },
                overrides={
                    "containerOverrides": [
                        {
                            "name": self._container_name,
                            "environment": [{"name": k, "value": v} for k, v in params.to_env().items()],
                        }
                    ]
                },
            )
        except Exception as e:
            # botocore raises ClientError/BotoCoreError; both mean nothing was started.
            raise DispatchError(f"ECS run_task failed: {e}") from e

        failures = response.get("failures") or []
        tasks = response.get("tasks") or []
        if failures or not tasks:
            reasons = ", ".join(f.get("reason", "unknown") for f in failures) or "no task started"
            raise DispatchError(f"ECS run_task failed: {reasons}")

        task_arn = tasks[0].get("taskArn", "")
        logger.info("Spawned ECS task %s for %s/%s#%d", task_arn, params.owner, params.repo, params.pr_number)
        return task_arn

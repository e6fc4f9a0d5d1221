"""Abstract launcher interface.

A launcher starts one isolated review task and returns without waiting for
it. The webhook handler depends on BaseLauncher, not on a concrete backend,
so the receiver works the same whether reviews run as local processes or as
ECS tasks.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from prbot_dispatch.models import TaskParams


class BaseLauncher(ABC):
    """Hands a review off to an isolated unit of execution.

    Implementations must raise DispatchError when the task could not be
    started and must never retry on their own: the session owns retries.
    """

    @abstractmethod
    def launch(self, params: TaskParams) -> str:
        """Start a review task and return an identifier for it."""

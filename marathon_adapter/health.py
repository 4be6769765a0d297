import logging
from typing import List

from marathon_adapter.applications import ApplicationManager
from marathon_adapter.errors import NotFoundError
from marathon_adapter.models import AppRef, Application


def evaluate_health(application: Application) -> bool:
    """Reduce an application snapshot to a single health verdict.

    An application without declared health checks, or without tasks, is
    healthy. Otherwise a single result with ``alive`` false on any task makes
    the whole application unhealthy; tasks that have no results yet do not.
    """
    if not application.healthChecks:
        return True
    if not application.tasks:
        return True
    for task in application.tasks:
        for result in task.healthCheckResults or []:
            if not result.alive:
                return False
    return True


def unhealthy_tasks(application: Application) -> List[str]:
    if not application.healthChecks:
        return []
    return [
        task.id or "<unknown>"
        for task in application.tasks or []
        if any(not result.alive for result in task.healthCheckResults or [])
    ]


class HealthEvaluator:
    def __init__(self, manager: ApplicationManager) -> None:
        self.manager = manager
        self._logger = logging.getLogger("marathon.health")

    def is_healthy(self, app: AppRef) -> bool:
        app_id = self.manager.resolve_app_id(app)
        if not self.manager.has_application(app_id):
            raise NotFoundError(f"application {app_id} does not exist")
        application = self.manager.get_application(app_id)
        healthy = evaluate_health(application)
        if healthy:
            self._logger.debug("marathon.health app_id=%s healthy=true", app_id)
        else:
            self._logger.warning(
                "marathon.health app_id=%s healthy=false unhealthy_tasks=%s",
                app_id,
                ",".join(unhealthy_tasks(application)),
            )
        return healthy

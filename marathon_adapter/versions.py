import logging
from typing import TYPE_CHECKING, Union

from marathon_adapter.errors import InvalidArgumentError, NotFoundError, TransportError
from marathon_adapter.models import AppRef, Application, ApplicationVersion, ApplicationVersions, Deployment, decode
from marathon_adapter.paths import app_version_path, app_versions_path

if TYPE_CHECKING:
    from marathon_adapter.applications import ApplicationManager


VersionRef = Union[str, ApplicationVersion]


def version_label(version: VersionRef) -> str:
    label = version.version if isinstance(version, ApplicationVersion) else version
    if not isinstance(label, str) or not label.strip():
        raise InvalidArgumentError("version label is required")
    return label.strip()


class VersionRegistry:
    """Read-through access to an application's configuration history.

    Nothing is cached: every call lists the history again. Version switches go
    through the lifecycle manager so they share its logging and error path.
    """

    def __init__(self, manager: "ApplicationManager") -> None:
        self.manager = manager
        self._logger = logging.getLogger("marathon.versions")

    def list_versions(self, app: AppRef) -> ApplicationVersions:
        app_id = self.manager.resolve_app_id(app)
        try:
            payload = self.manager.transport.get(app_versions_path(app_id), operation="list_versions")
        except TransportError as exc:
            if exc.status_code == 404:
                raise NotFoundError(f"application {app_id} does not exist") from exc
            raise
        return decode(ApplicationVersions, payload, "list_versions")

    def has_version(self, app: AppRef, version: VersionRef) -> bool:
        label = version_label(version)
        return label in self.list_versions(app).versions

    def get_version(self, app: AppRef, version: VersionRef) -> Application:
        app_id = self.manager.resolve_app_id(app)
        label = version_label(version)
        try:
            payload = self.manager.transport.get(app_version_path(app_id, label), operation="get_version")
        except TransportError as exc:
            if exc.status_code == 404:
                raise NotFoundError(f"application {app_id} has no version {label}") from exc
            raise
        return decode(Application, payload, "get_version")

    def change_version(self, app: AppRef, version: VersionRef) -> Deployment:
        return self.manager.change_version(app, version)

    def rollback(self, app: AppRef, steps: int = 1) -> Deployment:
        """Switch to the configuration ``steps`` entries back in the history.

        The history is most-recent-first, so ``versions[0]`` is the running
        configuration and ``versions[steps]`` the target.
        """
        if isinstance(steps, bool) or not isinstance(steps, int) or steps < 1:
            raise InvalidArgumentError("rollback steps must be a positive integer")
        app_id = self.manager.resolve_app_id(app)
        versions = self.list_versions(app_id).versions
        if len(versions) <= steps:
            raise NotFoundError(
                f"application {app_id} has {len(versions)} recorded versions, cannot go back {steps}"
            )
        target = versions[steps]
        self._logger.info("marathon.rollback app_id=%s steps=%s target_version=%s", app_id, steps, target)
        return self.change_version(app_id, target)

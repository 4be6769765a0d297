import logging
from typing import List

from marathon_adapter.errors import AlreadyExistsError, InvalidArgumentError, NotFoundError, TransportError
from marathon_adapter.models import (
    AppRef,
    Application,
    ApplicationEnvelope,
    Applications,
    ApplicationVersion,
    ApplicationVersions,
    Deployment,
    decode,
    to_wire,
)
from marathon_adapter.paths import app_path, app_restart_path, apps_path
from marathon_adapter.versions import VersionRef, VersionRegistry, version_label


class ApplicationManager:
    """Lifecycle operations for Marathon applications.

    Mutating calls are guarded by an existence check that is a separate
    round-trip from the mutation itself. The check only fails fast: another
    client can create or delete the application between the two calls, in
    which case the orchestrator's rejection of the mutation is raised as
    TransportError and is the authoritative outcome.
    """

    def __init__(self, transport) -> None:
        self.transport = transport
        self.versions = VersionRegistry(self)
        self._logger = logging.getLogger("marathon.adapter")

    @staticmethod
    def resolve_app_id(app: AppRef) -> str:
        app_id = app.id if isinstance(app, Application) else app
        if not isinstance(app_id, str) or not app_id.strip():
            raise InvalidArgumentError("application id is required")
        return app_id

    def applications(self) -> Applications:
        payload = self.transport.get(apps_path(), operation="list_applications")
        return decode(Applications, payload, "list_applications")

    def list_applications(self) -> List[str]:
        return [application.id for application in self.applications().apps]

    def has_application(self, app_id: str) -> bool:
        if not isinstance(app_id, str) or not app_id:
            raise InvalidArgumentError("application id is required")
        self._logger.debug("marathon.exists app_id=%s", app_id)
        found = app_id in self.list_applications()
        self._logger.debug("marathon.exists app_id=%s found=%s", app_id, found)
        return found

    def get_application(self, app: AppRef) -> Application:
        app_id = self.resolve_app_id(app)
        try:
            payload = self.transport.get(app_path(app_id), operation="get_application")
        except TransportError as exc:
            if exc.status_code == 404:
                raise NotFoundError(f"application {app_id} does not exist") from exc
            raise
        return decode(ApplicationEnvelope, payload, "get_application").app

    def create_application(self, application: Application) -> bool:
        if not isinstance(application, Application):
            raise InvalidArgumentError("an application descriptor is required to create an application")
        app_id = self.resolve_app_id(application)
        if self.has_application(app_id):
            raise AlreadyExistsError(f"application {app_id} already exists in marathon, update it instead")
        self.transport.post(apps_path(), body=to_wire(application), operation="create_application")
        self._logger.info("marathon.create app_id=%s instances=%s", app_id, application.instances)
        return True

    def delete_application(self, app: AppRef) -> bool:
        app_id = self._require_existing(app)
        self.transport.delete(app_path(app_id), operation="delete_application")
        self._logger.info("marathon.delete app_id=%s", app_id)
        return True

    def scale_application(self, app: AppRef, instances: int, force: bool = False) -> Deployment:
        if isinstance(instances, bool) or not isinstance(instances, int) or instances < 0:
            raise InvalidArgumentError(f"instances must be a non-negative integer, got {instances!r}")
        app_id = self._require_existing(app)
        payload = self.transport.put(
            app_path(app_id),
            body={"instances": instances},
            params={"force": "true"} if force else None,
            operation="scale_application",
        )
        deployment = decode(Deployment, payload, "scale_application")
        self._logger.info(
            "marathon.scale app_id=%s instances=%s force=%s deployment_id=%s",
            app_id,
            instances,
            force,
            deployment.deploymentId,
        )
        return deployment

    def restart_application(self, app: AppRef, force: bool = False) -> Deployment:
        app_id = self._require_existing(app)
        payload = self.transport.post(
            app_restart_path(app_id),
            params={"force": "true" if force else "false"},
            operation="restart_application",
        )
        deployment = decode(Deployment, payload, "restart_application")
        self._logger.info(
            "marathon.restart app_id=%s force=%s deployment_id=%s", app_id, force, deployment.deploymentId
        )
        return deployment

    def change_version(self, app: AppRef, version: VersionRef) -> Deployment:
        app_id = self.resolve_app_id(app)
        label = version_label(version)
        self._logger.debug("marathon.change_version app_id=%s version=%s", app_id, label)
        try:
            payload = self.transport.put(
                app_path(app_id),
                body=to_wire(ApplicationVersion(version=label)),
                operation="change_version",
            )
        except TransportError as exc:
            self._logger.warning(
                "marathon.change_version app_id=%s version=%s outcome=FAILED error=%s", app_id, label, exc
            )
            raise
        return decode(Deployment, payload, "change_version")

    def list_versions(self, app: AppRef) -> ApplicationVersions:
        return self.versions.list_versions(app)

    def has_version(self, app: AppRef, version: VersionRef) -> bool:
        return self.versions.has_version(app, version)

    def _require_existing(self, app: AppRef) -> str:
        app_id = self.resolve_app_id(app)
        if not self.has_application(app_id):
            raise NotFoundError(f"application {app_id} does not exist")
        return app_id

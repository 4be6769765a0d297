from urllib.parse import quote

from marathon_adapter.errors import InvalidArgumentError


APPS_PATH = "/apps"


def normalize_app_id(app_id: str) -> str:
    if not isinstance(app_id, str) or not app_id.strip("/ "):
        raise InvalidArgumentError("application id is required")
    return app_id.strip().strip("/")


def apps_path() -> str:
    return APPS_PATH


def app_path(app_id: str) -> str:
    # Group ids keep their slashes: /group/app -> /apps/group/app
    return f"{APPS_PATH}/{quote(normalize_app_id(app_id), safe='/')}"


def app_versions_path(app_id: str) -> str:
    return f"{app_path(app_id)}/versions"


def app_version_path(app_id: str, version: str) -> str:
    if not isinstance(version, str) or not version.strip():
        raise InvalidArgumentError("version label is required")
    return f"{app_versions_path(app_id)}/{quote(version.strip(), safe='')}"


def app_restart_path(app_id: str) -> str:
    return f"{app_path(app_id)}/restart"

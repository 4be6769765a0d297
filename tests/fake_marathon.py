from __future__ import annotations

from typing import Optional
from urllib.parse import unquote

from marathon_adapter.errors import TransportError


class FakeMarathon:
    """In-memory stand-in for MarathonTransport that records every call."""

    def __init__(self) -> None:
        self.apps: dict[str, dict] = {}
        self.versions: dict[str, list[str]] = {}
        self.version_configs: dict[tuple[str, str], dict] = {}
        self.calls: list[dict] = []
        self._deployments = 0
        self._fail_next: Optional[TransportError] = None
        self.closed = False

    def add_app(self, app_id: str, versions: Optional[list[str]] = None, **fields) -> dict:
        app = {"id": app_id, **fields}
        self.apps[app_id] = app
        if versions is not None:
            self.versions[app_id] = list(versions)
        return app

    def fail_next(self, error: TransportError) -> None:
        self._fail_next = error

    def requests(self, method: str) -> list[dict]:
        return [call for call in self.calls if call["method"] == method]

    def get(self, path: str, params: Optional[dict] = None, operation: str = "get"):
        self._record("GET", path, None, params, operation)
        if path == "/apps":
            return {"apps": [dict(app) for app in self.apps.values()]}
        remainder = path[len("/apps/") :]
        if remainder.endswith("/versions"):
            app = self._lookup(remainder[: -len("/versions")])
            return {"versions": list(self.versions.get(app["id"], []))}
        if "/versions/" in remainder:
            app_key, label = remainder.split("/versions/", 1)
            label = unquote(label)
            app = self._lookup(app_key)
            config = self.version_configs.get((app["id"], label))
            if config is None:
                raise TransportError(f"Marathon HTTP 404: version {label} not found", status_code=404)
            return dict(config)
        return {"app": dict(self._lookup(remainder))}

    def post(self, path: str, body: Optional[dict] = None, params: Optional[dict] = None, operation: str = "post"):
        self._record("POST", path, body, params, operation)
        if path == "/apps":
            if body["id"] in self.apps:
                raise TransportError(
                    f"Marathon HTTP 409: An app with id [{body['id']}] already exists.", status_code=409
                )
            self.apps[body["id"]] = dict(body)
            return dict(body)
        if path.endswith("/restart"):
            self._lookup(path[len("/apps/") : -len("/restart")])
            return self._deployment()
        raise AssertionError(f"unexpected POST {path}")

    def put(self, path: str, body: Optional[dict] = None, params: Optional[dict] = None, operation: str = "put"):
        self._record("PUT", path, body, params, operation)
        app = self._lookup(path[len("/apps/") :])
        if "version" in body:
            if body["version"] not in self.versions.get(app["id"], []):
                raise TransportError(
                    f"Marathon HTTP 404: Version {body['version']} of app {app['id']} does not exist",
                    status_code=404,
                )
            app["version"] = body["version"]
        if "instances" in body:
            app["instances"] = body["instances"]
        return self._deployment()

    def delete(self, path: str, params: Optional[dict] = None, operation: str = "delete"):
        self._record("DELETE", path, None, params, operation)
        app = self._lookup(path[len("/apps/") :])
        del self.apps[app["id"]]
        return self._deployment()

    def close(self) -> None:
        self.closed = True

    def _record(self, method: str, path: str, body, params, operation: str) -> None:
        self.calls.append({"method": method, "path": path, "body": body, "params": params, "operation": operation})
        if self._fail_next is not None:
            error, self._fail_next = self._fail_next, None
            raise error

    def _lookup(self, key: str) -> dict:
        for app_id, app in self.apps.items():
            if app_id.strip("/") == key:
                return app
        raise TransportError(f"Marathon HTTP 404: App '/{key}' does not exist", status_code=404)

    def _deployment(self) -> dict:
        self._deployments += 1
        return {"deploymentId": f"deploy-{self._deployments}", "version": "2026-10-18T09:00:00.000Z"}

from typing import Any, Dict, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from marathon_adapter.errors import TransportError


class PortMapping(BaseModel):
    containerPort: Optional[int] = None
    hostPort: Optional[int] = None
    servicePort: Optional[int] = None
    protocol: Optional[str] = None


class DockerParameter(BaseModel):
    key: str
    value: str


class Docker(BaseModel):
    image: str
    network: Optional[str] = None
    portMappings: Optional[List[PortMapping]] = None
    privileged: Optional[bool] = None
    parameters: Optional[List[DockerParameter]] = None


class Volume(BaseModel):
    containerPath: str
    hostPath: Optional[str] = None
    mode: Optional[str] = None


class Container(BaseModel):
    type: Optional[str] = None
    docker: Optional[Docker] = None
    volumes: Optional[List[Volume]] = None


class HealthCheck(BaseModel):
    protocol: Optional[str] = None
    path: Optional[str] = None
    portIndex: Optional[int] = None
    command: Optional[Dict[str, str]] = None
    gracePeriodSeconds: Optional[int] = None
    intervalSeconds: Optional[int] = None
    timeoutSeconds: Optional[int] = None
    maxConsecutiveFailures: Optional[int] = None


class HealthCheckResult(BaseModel):
    # A result that omits "alive" counts as failing.
    alive: bool = False
    taskId: Optional[str] = None
    consecutiveFailures: Optional[int] = None
    firstSuccess: Optional[str] = None
    lastSuccess: Optional[str] = None
    lastFailure: Optional[str] = None


class Task(BaseModel):
    id: Optional[str] = None
    appId: Optional[str] = None
    host: Optional[str] = None
    ports: Optional[List[int]] = None
    stagedAt: Optional[str] = None
    startedAt: Optional[str] = None
    version: Optional[str] = None
    healthCheckResults: Optional[List[HealthCheckResult]] = None


class Application(BaseModel):
    id: str = ""
    cmd: Optional[str] = None
    constraints: Optional[List[List[str]]] = None
    container: Optional[Container] = None
    cpus: Optional[float] = None
    env: Optional[Dict[str, str]] = None
    executor: Optional[str] = None
    healthChecks: Optional[List[HealthCheck]] = None
    instances: Optional[int] = None
    mem: Optional[float] = None
    tasks: Optional[List[Task]] = None
    ports: Optional[List[int]] = None
    requirePorts: Optional[bool] = None
    backoffFactor: Optional[float] = None
    tasksRunning: Optional[int] = None
    tasksStaged: Optional[int] = None
    uris: Optional[List[str]] = None
    version: Optional[str] = None


class Applications(BaseModel):
    apps: List[Application] = []


class ApplicationEnvelope(BaseModel):
    app: Application


class ApplicationVersions(BaseModel):
    versions: List[str] = []


class ApplicationVersion(BaseModel):
    version: str


class Deployment(BaseModel):
    deploymentId: str
    version: Optional[str] = None


ModelT = TypeVar("ModelT", bound=BaseModel)


def to_wire(model: BaseModel) -> Dict[str, Any]:
    """Dump a model in the orchestrator's wire shape.

    Unset fields, empty lists and empty mappings are left out rather than sent
    as null; falsy scalars that were set explicitly (``instances=0``,
    ``requirePorts=False``) are kept.
    """
    return _prune(model.model_dump(exclude_none=True))


def _prune(value: Any) -> Any:
    if isinstance(value, dict):
        pruned = {}
        for key, item in value.items():
            item = _prune(item)
            if isinstance(item, (dict, list)) and not item:
                continue
            pruned[key] = item
        return pruned
    if isinstance(value, list):
        return [_prune(item) for item in value]
    return value


def decode(model: Type[ModelT], payload: Any, operation: str) -> ModelT:
    if not isinstance(payload, dict):
        raise TransportError(f"Marathon {operation} returned an unexpected body: expected a JSON object")
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        fields = ",".join(".".join(str(part) for part in error["loc"]) for error in exc.errors()[:5])
        raise TransportError(f"Marathon {operation} returned an undecodable body: invalid fields {fields}") from exc


AppRef = Union[str, Application]

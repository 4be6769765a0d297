from typing import Optional

from marathon_adapter.applications import ApplicationManager
from marathon_adapter.config import Settings
from marathon_adapter.health import HealthEvaluator
from marathon_adapter.observability import get_request_id
from marathon_adapter.transport import MarathonTransport


class MarathonClient:
    def __init__(self, transport) -> None:
        self.transport = transport
        self.applications = ApplicationManager(transport)
        self.versions = self.applications.versions
        self.health = HealthEvaluator(self.applications)

    def close(self) -> None:
        close = getattr(self.transport, "close", None)
        if close:
            close()

    def __enter__(self) -> "MarathonClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def build_client(settings: Optional[Settings] = None) -> MarathonClient:
    settings = settings or Settings()
    transport = MarathonTransport(
        settings.base_url,
        api_prefix=settings.api_prefix,
        request_timeout_seconds=settings.request_timeout_seconds,
        header_name=settings.header_name,
        header_value=settings.header_value,
        request_id_provider=get_request_id,
    )
    return MarathonClient(transport)

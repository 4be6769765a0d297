import json
import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

import requests

from marathon_adapter.errors import TransportError
from marathon_adapter.observability import log_event
from marathon_adapter.redaction import redact_text, redact_url


class MarathonTransport:
    """JSON request/response exchange with the Marathon REST API.

    Paths are relative to ``base_url`` + ``api_prefix`` (``/apps/web`` becomes
    ``http://marathon:8080/v2/apps/web``). Every failure, whether no response,
    a non-2xx status or an undecodable body, is raised as TransportError with a
    redacted message. Nothing is retried here.
    """

    def __init__(
        self,
        base_url: str = "",
        api_prefix: str = "/v2",
        request_timeout_seconds: Optional[float] = None,
        header_name: str = "",
        header_value: str = "",
        request_id_provider: Optional[Callable[[], str]] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url
        self.api_prefix = "/" + api_prefix.strip("/") if api_prefix and api_prefix.strip("/") else ""
        self.request_timeout_seconds = request_timeout_seconds
        self.header_name = header_name.strip() if header_name else ""
        self.header_value = header_value
        self.request_id_provider = request_id_provider
        self.session = session or requests.Session()
        self._logger = logging.getLogger("marathon.transport")

    def get(self, path: str, params: Optional[dict] = None, operation: str = "get") -> Any:
        payload, _, _ = self._request_json("GET", path, params=params, operation=operation)
        return payload

    def post(
        self,
        path: str,
        body: Optional[dict] = None,
        params: Optional[dict] = None,
        operation: str = "post",
    ) -> Any:
        payload, _, _ = self._request_json("POST", path, body, params, operation)
        return payload

    def put(
        self,
        path: str,
        body: Optional[dict] = None,
        params: Optional[dict] = None,
        operation: str = "put",
    ) -> Any:
        payload, _, _ = self._request_json("PUT", path, body, params, operation)
        return payload

    def delete(self, path: str, params: Optional[dict] = None, operation: str = "delete") -> Any:
        payload, _, _ = self._request_json("DELETE", path, params=params, operation=operation)
        return payload

    def close(self) -> None:
        self.session.close()

    def url_for(self, path: str) -> str:
        if not self.base_url:
            raise TransportError("Marathon base URL is required")
        return f"{self.base_url.rstrip('/')}{self.api_prefix}/{path.lstrip('/')}"

    def _request_json(
        self,
        method: str,
        path: str,
        body: Optional[dict] = None,
        params: Optional[dict] = None,
        operation: str = "request",
    ) -> Tuple[Any, int, Dict[str, str]]:
        url = self.url_for(path)
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        header_configured = bool(self.header_name and self.header_value)
        if header_configured:
            headers[self.header_name] = self.header_value
        request_id = self.request_id_provider() if self.request_id_provider else ""
        if request_id:
            headers["X-Request-Id"] = request_id
        log_event("marathon_call_started", request_id=request_id or None, operation=operation, target=redact_url(url))
        start = time.monotonic()
        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=body,
                headers=headers,
                timeout=self.request_timeout_seconds,
            )
        except requests.RequestException as exc:
            latency_ms = (time.monotonic() - start) * 1000
            message = redact_text(f"Marathon connection failed: {exc}")
            self._log_failure(method, url, operation, request_id, latency_ms, "error", message, header_configured)
            raise TransportError(message) from exc

        latency_ms = (time.monotonic() - start) * 1000
        status_code = response.status_code
        response_headers = dict(response.headers.items())
        text = response.text or ""
        if not 200 <= status_code < 300:
            correlation_id = self._extract_correlation_id(response_headers)
            snippet = self._safe_snippet(self._error_detail(text))
            message = f"Marathon HTTP {status_code}: {snippet}" if snippet else f"Marathon HTTP {status_code}"
            if correlation_id:
                message = f"{message}; requestId={correlation_id}"
            message = redact_text(message)
            self._log_failure(method, url, operation, request_id, latency_ms, status_code, message, header_configured)
            raise TransportError(message, status_code=status_code, request_id=correlation_id)

        log_event(
            "marathon_call_succeeded",
            request_id=request_id or None,
            operation=operation,
            target=redact_url(url),
            outcome="SUCCESS",
            duration_ms=round(latency_ms, 1),
            status_code=status_code,
        )
        self._logger.info(
            "marathon.request method=%s url=%s status=%s latency_ms=%.1f custom_header=%s",
            method,
            redact_url(url),
            status_code,
            latency_ms,
            "configured" if header_configured else "none",
        )
        if not text.strip():
            return {}, status_code, response_headers
        try:
            return json.loads(text), status_code, response_headers
        except json.JSONDecodeError as exc:
            raise TransportError(
                f"Marathon {operation} returned an undecodable body (HTTP {status_code})",
                status_code=status_code,
            ) from exc

    def _log_failure(
        self,
        method: str,
        url: str,
        operation: str,
        request_id: str,
        latency_ms: float,
        status: object,
        message: str,
        header_configured: bool,
    ) -> None:
        log_event(
            "marathon_call_failed",
            request_id=request_id or None,
            operation=operation,
            target=redact_url(url),
            outcome="FAILED",
            duration_ms=round(latency_ms, 1),
            status_code=status if isinstance(status, int) else None,
            error=message,
        )
        self._logger.warning(
            "marathon.request method=%s url=%s status=%s latency_ms=%.1f custom_header=%s error=%s",
            method,
            redact_url(url),
            status,
            latency_ms,
            "configured" if header_configured else "none",
            message,
        )

    @staticmethod
    def _error_detail(text: str) -> str:
        # Marathon reports errors as {"message": ..., "details": [...]}.
        try:
            payload = json.loads(text)
        except ValueError:
            return text
        if isinstance(payload, dict) and isinstance(payload.get("message"), str):
            return payload["message"]
        return text

    @staticmethod
    def _safe_snippet(value: str, limit: int = 240) -> str:
        if not value:
            return ""
        text = value.replace("\n", " ").replace("\r", " ")
        if len(text) <= limit:
            return text
        return text[:limit].rstrip() + "..."

    @staticmethod
    def _extract_correlation_id(headers: Dict[str, str]) -> Optional[str]:
        for key in ["X-Request-Id", "X-Request-ID", "X-Marathon-Request-Id"]:
            value = headers.get(key)
            if value:
                return str(value)
        return None

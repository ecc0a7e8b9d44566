"""Unit тесты для services/task/dispatch_notifier.py."""

import json

import httpx
import pytest
from prometheus_client import REGISTRY

from task_lifecycle.core.config import DispatchSettings
from task_lifecycle.services.task import GitHubDispatchNotifier, NullDispatchNotifier

DISPATCH_URL = "https://api.github.com/repos/acme/worker/dispatches"


def _dispatch_count(outcome: str) -> float:
    return REGISTRY.get_sample_value("task_dispatch_total", {"outcome": outcome}) or 0.0


def _notifier(handler, token: str | None = "gh-token") -> GitHubDispatchNotifier:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GitHubDispatchNotifier(client, DispatchSettings(url=DISPATCH_URL, token=token))


class TestGitHubDispatchNotifier:
    """Тесты для GitHubDispatchNotifier."""

    @pytest.mark.asyncio
    async def test_request_format(self) -> None:
        """URL, заголовки и тело repository_dispatch."""
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(204)

        notifier = _notifier(handler)
        await notifier.notify("task-123")
        await notifier.client.aclose()

        assert len(requests) == 1
        request = requests[0]
        assert request.method == "POST"
        assert str(request.url) == DISPATCH_URL
        assert request.headers["Authorization"] == "token gh-token"
        assert request.headers["Accept"] == "application/vnd.github+json"
        assert request.headers["User-Agent"]
        assert json.loads(request.content) == {
            "event_type": "process-task",
            "client_payload": {"taskId": "task-123"},
        }

    @pytest.mark.asyncio
    async def test_no_token_no_authorization(self) -> None:
        """Без токена заголовок Authorization не отправляется."""
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(204)

        notifier = _notifier(handler, token=None)
        await notifier.notify("task-123")
        await notifier.client.aclose()

        assert "Authorization" not in requests[0].headers

    @pytest.mark.asyncio
    async def test_accepted(self) -> None:
        """204 учитывается как accepted."""
        before = _dispatch_count("accepted")
        notifier = _notifier(lambda request: httpx.Response(204))

        await notifier.notify("task-123")
        await notifier.client.aclose()

        assert _dispatch_count("accepted") == before + 1

    @pytest.mark.asyncio
    async def test_rejected_does_not_raise(self) -> None:
        """Не-204 ответ логируется и учитывается как rejected."""
        before = _dispatch_count("rejected")
        notifier = _notifier(lambda request: httpx.Response(422, text="Invalid event_type"))

        await notifier.notify("task-123")
        await notifier.client.aclose()

        assert _dispatch_count("rejected") == before + 1

    @pytest.mark.asyncio
    async def test_transport_error_does_not_raise(self) -> None:
        """Сетевая ошибка не выходит за пределы notify."""
        before = _dispatch_count("error")

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        notifier = _notifier(handler)
        await notifier.notify("task-123")
        await notifier.client.aclose()

        assert _dispatch_count("error") == before + 1


class TestNullDispatchNotifier:
    """Тесты для NullDispatchNotifier."""

    @pytest.mark.asyncio
    async def test_notify_is_noop(self) -> None:
        """Null notifier ничего не отправляет и не падает."""
        await NullDispatchNotifier().notify("task-123")


class TestDispatchSettings:
    """Тесты для DispatchSettings.enabled."""

    def test_disabled_without_url(self) -> None:
        """Без url dispatch отключён."""
        assert DispatchSettings().enabled is False

    def test_enabled_with_url(self) -> None:
        """С url dispatch включён."""
        assert DispatchSettings(url=DISPATCH_URL).enabled is True

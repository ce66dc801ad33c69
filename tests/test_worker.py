import os

import pytest

from classifier import worker as worker_module
from classifier.errors import ConfigurationError
from common.config import Settings


def test_build_registry_returns_registry_when_configuration_is_valid(settings):
    registry = worker_module.build_registry(settings)

    assert registry.list_available() == {"openai"}
    assert registry.selected_provider == "openai"


def test_build_registry_fails_fast_without_providers(mocker):
    mocker.patch.dict(os.environ, {}, clear=True)

    with pytest.raises(ConfigurationError) as exc:
        worker_module.build_registry(Settings())

    assert "No LLM providers are configured" in exc.value.errors


def test_main_exits_before_connecting_on_invalid_configuration(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("LMSTUDIO_BASE_URL", raising=False)
    monkeypatch.setenv("LLM_PROVIDER", "lmstudio")

    connect_calls = []

    async def fake_connect(settings):
        connect_calls.append(settings)

    monkeypatch.setattr(worker_module, "configure_logging", lambda settings: None)
    monkeypatch.setattr(worker_module, "connect_client", fake_connect)

    with pytest.raises(SystemExit) as exc:
        worker_module.main()

    assert exc.value.code == 1
    assert connect_calls == []


def test_main_exits_on_malformed_settings(monkeypatch):
    monkeypatch.setenv("LLM_PROVIDER", "unknown")
    monkeypatch.setattr(worker_module, "configure_logging", lambda settings: None)

    with pytest.raises(SystemExit) as exc:
        worker_module.main()

    assert exc.value.code == 1


def test_main_runs_worker_with_shared_classifier(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "test_api_key")
    monkeypatch.setenv("LLM_PROVIDER", "openai")
    monkeypatch.setenv("TEMPORAL_TASK_QUEUE", "moderation")

    created = {}

    class DummyWorker:
        def __init__(self, client, *, task_queue, workflows, activities):
            created.update(
                client=client,
                task_queue=task_queue,
                workflows=workflows,
                activities=activities,
            )

        async def run(self):
            created["ran"] = True

    async def fake_connect(settings):
        return "client"

    monkeypatch.setattr(worker_module, "configure_logging", lambda settings: None)
    monkeypatch.setattr(worker_module, "connect_client", fake_connect)
    monkeypatch.setattr(worker_module, "Worker", DummyWorker)

    worker_module.main()

    assert created["ran"] is True
    assert created["client"] == "client"
    assert created["task_queue"] == "moderation"
    assert created["workflows"] == worker_module.WORKFLOWS
    assert len(created["activities"]) == 1

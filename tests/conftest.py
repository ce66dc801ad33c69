"""
Pytest configuration.

Why this exists:

The project uses a ``src/`` layout (package code lives in ``src/classifier``
and ``src/common``). Normally, developers run tests after installing the
package (e.g. ``pip install -e .``).

On some macOS/Python 3.13 setups, editable installs in dot-prefixed virtualenv
folders (like ``.venv``) can result in the generated ``.pth`` file being marked
as hidden, and Python's ``site`` module will skip hidden ``.pth`` files. When
that happens, ``import classifier`` fails even though the source tree is
present.

This file makes tests robust in that scenario by adding ``src/`` to ``sys.path``
only when the package cannot be imported normally.
"""

from __future__ import annotations

import sys
from pathlib import Path


def _ensure_src_on_path() -> None:
    try:
        import classifier  # noqa: F401
        return
    except ModuleNotFoundError:
        pass

    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    sys.path.insert(0, str(src_dir))


_ensure_src_on_path()

import json  # noqa: E402
import os  # noqa: E402
from types import SimpleNamespace  # noqa: E402

import pytest  # noqa: E402

from common.config import Settings  # noqa: E402


@pytest.fixture
def settings(mocker):
    """Settings with only the hosted OpenAI provider configured."""
    mocker.patch.dict(
        os.environ,
        {"OPENAI_API_KEY": "test_api_key"},
        clear=True,
    )
    return Settings()


@pytest.fixture
def lmstudio_settings(mocker):
    """Settings selecting a local OpenAI-compatible endpoint."""
    mocker.patch.dict(
        os.environ,
        {
            "LLM_PROVIDER": "lmstudio",
            "LMSTUDIO_BASE_URL": "http://localhost:1234/v1",
            "DEFAULT_MODEL": "local-model",
        },
        clear=True,
    )
    return Settings()


@pytest.fixture
def text_response():
    """Build a chat completion carrying plain text content."""

    def build(content: str, model: str = "local-model"):
        message = SimpleNamespace(content=content, refusal=None, parsed=None)
        return SimpleNamespace(model=model, choices=[SimpleNamespace(message=message)])

    return build


@pytest.fixture
def parsed_response():
    """Build a structured-output chat completion around a parsed object."""

    def build(parsed, model: str = "gpt-4o-mini-2024-07-18", refusal: str | None = None):
        content = None
        if parsed is not None:
            content = json.dumps(parsed.model_dump(by_alias=True))
        message = SimpleNamespace(content=content, refusal=refusal, parsed=parsed)
        return SimpleNamespace(model=model, choices=[SimpleNamespace(message=message)])

    return build


@pytest.fixture
def fake_client(mocker):
    """An AsyncOpenAI stand-in with counted ``create`` and ``parse`` calls."""
    client = mocker.MagicMock()
    client.chat.completions.create = mocker.AsyncMock()
    client.chat.completions.parse = mocker.AsyncMock()
    client.close = mocker.AsyncMock()
    return client

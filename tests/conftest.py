from __future__ import annotations

from pathlib import Path

import pytest

from archyra.tooling.config import ArchyraSettings, reset_settings_cache
from archyra.tooling.registry import ComponentRegistry, default_registry, parse_component

LOADING_DOTS = {
    "id": "loading-dots",
    "name": "LoadingDots",
    "category": "loading",
    "description": "Bouncing dots.",
    "dependencies": ["framer-motion"],
    "props": [
        {"name": "size", "type": "'sm' | 'md' | 'lg'", "required": False, "description": "Dot size", "default": "'md'"},
    ],
    "usage": "<LoadingDots size=\"md\" />",
    "source": "export default function LoadingDots() { return null; }",
    "vanilla": {
        "html": "<div class=\"loading-dots\"></div>",
        "css": ".loading-dots { display: flex; }",
        "usage": "<div class=\"loading-dots\"></div>",
    },
}

PULSE_CIRCLE = {
    "id": "pulse-circle",
    "name": "PulseCircle",
    "category": "loading",
    "description": "Pulsing circle.",
    "dependencies": ["framer-motion", "lucide-react"],
    "props": [],
    "usage": "<PulseCircle />",
    "source": "export default function PulseCircle() { return null; }",
}

CHAT_TYPING = {
    "id": "chat-typing",
    "name": "ChatTyping",
    "category": "chat",
    "description": "Typing indicator.",
    "dependencies": [],
    "usage": "<ChatTyping />",
    "source": "export default function ChatTyping() { return null; }",
    "vanilla": {
        "html": "<div class=\"chat-typing\"></div>",
        "css": ".chat-typing { display: flex; }",
        "js": "console.log('typing');",
        "usage": "<div class=\"chat-typing\"></div>",
    },
}


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch):
    config_dir = tmp_path_factory.mktemp("archyra-config")
    monkeypatch.setenv("ARCHYRA_CONFIG", str(config_dir / "missing.toml"))
    monkeypatch.delenv("ARCHYRA_LOG_LEVEL", raising=False)
    reset_settings_cache()
    default_registry.cache_clear()
    yield
    reset_settings_cache()
    default_registry.cache_clear()


@pytest.fixture
def sample_registry() -> ComponentRegistry:
    return ComponentRegistry(parse_component(raw) for raw in (LOADING_DOTS, PULSE_CIRCLE, CHAT_TYPING))


@pytest.fixture
def settings() -> ArchyraSettings:
    return ArchyraSettings()


@pytest.fixture
def fake_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    return home


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"

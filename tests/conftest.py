"""Pytest configuration for resolver chain tests."""

import pytest

from resolver_chain.cache import ResolutionCache
from resolver_chain.cache import StaticModuleGraph


def source(path: str) -> dict:
    return {"type": "sourceFile", "filePath": path}


@pytest.fixture
def app_cache_data() -> dict:
    """
    Resolution cache for a small app, platform "ios", default options.

    Import chain:
    - /app/index.js imports ./src/App -> /app/src/App.tsx
    - /app/src/App.tsx imports ./screens -> /app/src/screens/index.ts
    - /app/src/screens/index.ts imports ./Home -> /app/src/screens/Home.tsx
    """
    return {
        "{}": {
            "/app/index.js": {
                "./src/App": {"ios": source("/app/src/App.tsx")},
            },
            "/app/src/App.tsx": {
                "./screens": {"ios": source("/app/src/screens/index.ts")},
            },
            "/app/src/screens/index.ts": {
                "./Home": {"ios": source("/app/src/screens/Home.tsx")},
            },
        }
    }


@pytest.fixture
def app_graph(app_cache_data) -> StaticModuleGraph:
    return StaticModuleGraph(ResolutionCache(app_cache_data))


@pytest.fixture(autouse=True)
def clean_tracer_env(monkeypatch):
    """Keep tracer settings environment variables out of tests."""
    monkeypatch.delenv("RESOLVER_CHAIN_TRACE_DEPTH", raising=False)
    monkeypatch.delenv("RESOLVER_CHAIN_TRACE_MAX_NODES", raising=False)

"""Unit tests for the model registry."""
import asyncio

import pytest
from hypothesis import given
from hypothesis import strategies as st

from chatsync.api import ApiStatusError, TransportError
from chatsync.state import ModelRegistry
from chatsync.state.models import ModelInfo, ModelListing

from conftest import FakeChatBackend


class TestModelRegistryLoad:
    """Tests for loading the model list."""

    @pytest.mark.asyncio
    async def test_load_success(self, backend):
        registry = ModelRegistry(backend)

        listing = await registry.load()

        assert listing.healthy
        assert registry.provider == "openai"
        assert [m.name for m in registry.models] == ["gpt-x", "gpt-mini"]
        assert registry.current_selection() == "gpt-x"

    @pytest.mark.asyncio
    async def test_initial_selection_is_first_flagged(self, backend):
        """Test that only the first model flagged selected is kept."""
        backend.models = ModelListing(
            provider="mixed",
            healthy=True,
            models=[
                ModelInfo(name="a"),
                ModelInfo(name="b", selected=True),
                ModelInfo(name="c", selected=True),
            ],
        )
        registry = ModelRegistry(backend)

        await registry.load()

        assert registry.current_selection() == "b"
        assert [m.name for m in registry.models if m.selected] == ["b"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [ApiStatusError(503, "down"), TransportError("refused")])
    async def test_load_failure_degrades(self, backend, error):
        """Test that a failed listing marks the registry unhealthy without raising."""
        registry = ModelRegistry(backend)
        await registry.load()
        backend.errors["list_models"] = error

        listing = await registry.load()

        assert not listing.healthy
        assert not registry.healthy
        assert registry.models == []
        assert registry.current_selection() is None

    @pytest.mark.asyncio
    async def test_failure_is_logged(self, backend):
        traces = []
        registry = ModelRegistry(backend)
        registry.set_debug_callback(lambda *args: traces.append(args))
        backend.errors["list_models"] = TransportError("refused")

        await registry.load()

        assert any(level == "warning" and component == "Models" for level, component, _ in traces)


class TestModelRegistrySelect:
    """Tests for model selection."""

    @pytest.mark.asyncio
    async def test_select_known_model(self, backend):
        registry = ModelRegistry(backend)
        await registry.load()

        registry.select("gpt-mini")

        assert registry.current_selection() == "gpt-mini"
        assert {m.name: m.selected for m in registry.models} == {"gpt-x": False, "gpt-mini": True}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["", None, "no-such-model", "GPT-X"])
    async def test_unknown_name_clears_selection(self, backend, name):
        """Test that unknown names (and the 'Auto' choice) mean no selection."""
        registry = ModelRegistry(backend)
        await registry.load()

        registry.select(name)

        assert registry.current_selection() is None
        assert not any(m.selected for m in registry.models)

    @given(st.lists(st.sampled_from(["gpt-x", "gpt-mini", "", "other"]), max_size=20))
    def test_at_most_one_selected(self, names: list[str]):
        """Property test: any sequence of selections leaves at most one model selected."""
        registry = ModelRegistry(FakeChatBackend())
        asyncio.run(registry.load())

        for name in names:
            registry.select(name)
            selected = [m.name for m in registry.models if m.selected]
            assert len(selected) <= 1
            assert selected == ([registry.current_selection()] if registry.current_selection() else [])

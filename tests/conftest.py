"""ABOUTME: Pytest configuration and shared fixtures for selection registry tests.

Provides in-memory sessions, fake legacy searchers and resolvers so that
select-all can be tested without a real search engine or index service.
"""

import pytest
from unittest.mock import MagicMock

from selection import InMemorySession, SelectionContext, SelectionRegistry, SelectionSettings
from selection.errors import ResolveResult
from selection.search import BulkUuidResolver, LegacySearchManager, Searcher, UuidSelector


class FakeSearcher(Searcher, UuidSelector):
    """Legacy searcher returning a fixed UUID list."""

    def __init__(self, uuids):
        self.uuids = list(uuids)
        self.requests = []

    def search(self, request):
        self.requests.append(request)

    def get_all_uuids(self, max_hits):
        return self.uuids[:max_hits]


class PlainSearcher(Searcher):
    """Legacy searcher without the UUID listing capability."""

    def search(self, request):
        pass


class FakeSearchManager(LegacySearchManager):
    """Hands out FakeSearchers over a fixed UUID list."""

    def __init__(self, uuids):
        self.uuids = list(uuids)
        self.searchers = []

    def new_searcher(self):
        searcher = FakeSearcher(self.uuids)
        self.searchers.append(searcher)
        return searcher


class StaticResolver(BulkUuidResolver):
    """Resolver returning a canned ResolveResult and recording its calls."""

    def __init__(self, result):
        self.result = result
        self.calls = []

    @property
    def name(self):
        return "static"

    def resolve(self, context, max_hits):
        self.calls.append((context, max_hits))
        return self.result


@pytest.fixture
def session():
    """Fixture providing an empty in-memory session."""
    return InMemorySession("test-session")


@pytest.fixture
def registry(session):
    """Fixture providing the session's selection registry."""
    return SelectionRegistry.get_or_create(session)


@pytest.fixture
def settings():
    """Fixture providing settings independent of the environment."""
    return SelectionSettings(
        selection_max_records="1000",
        selection_backend="last-query",
        selection_search_timeout=5.0,
    )


@pytest.fixture
def make_context(session, settings):
    """Fixture building a SelectionContext around a resolver."""
    def _make(resolver=None, **overrides):
        ctx_settings = settings.model_copy(update=overrides) if overrides else settings
        return SelectionContext(session=session, resolver=resolver, settings=ctx_settings)
    return _make


@pytest.fixture
def uuids_5000():
    """Fixture providing 5000 ordered UUID-like keys."""
    return [f"uuid-{i:05d}" for i in range(5000)]


@pytest.fixture
def failing_resolver():
    """Fixture providing a resolver reporting a backend failure."""
    return StaticResolver(ResolveResult.failure("backend_unavailable", "index down"))


@pytest.fixture
def raising_resolver():
    """Fixture providing a resolver that breaks its contract and raises."""
    resolver = MagicMock(spec=BulkUuidResolver)
    resolver.name = "raising"
    resolver.resolve.side_effect = RuntimeError("boom")
    return resolver

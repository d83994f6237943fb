"""ABOUTME: Tests for the selection registry update actions and reads.

Covers the five update actions, no-op handling, blank-key purging, namespace
isolation, snapshot reads and registry lifecycle on the session.
"""

import pytest

from selection import SELECTION_METADATA, SelectionAction, SelectionRegistry
from selection.errors import ResolveResult
from selection.registry import update_result, update_selection
from selection.search import LastQueryResolver
from selection.session import SELECTED_RESULT

from conftest import FakeSearchManager, StaticResolver


class TestRegistryLifecycle:
    """Tests for registry creation on the session."""

    def test_get_or_create_attaches_registry(self, session):
        """Test first access stores a registry on the session."""
        registry = SelectionRegistry.get_or_create(session)
        assert session.get_property(SELECTED_RESULT) is registry

    def test_get_or_create_returns_same_instance(self, session):
        """Test repeated access returns the stored registry."""
        first = SelectionRegistry.get_or_create(session)
        second = SelectionRegistry.get_or_create(session)
        assert first is second

    def test_metadata_namespace_precreated(self, registry):
        """Test a fresh registry already has the metadata namespace."""
        assert SELECTION_METADATA in registry.namespaces
        assert registry.size(SELECTION_METADATA) == 0

    def test_context_exposes_session_registry(self, make_context, registry):
        """Test SelectionContext resolves the same registry."""
        assert make_context().registry is registry


class TestAddRemove:
    """Tests for add and remove actions."""

    def test_add_returns_size(self, registry):
        """Test add inserts keys and returns the new size."""
        count = registry.apply_action("metadata", "add", ["a", "b"])
        assert count == 2
        assert registry.get_selection("metadata") == {"a", "b"}

    def test_add_is_idempotent(self, registry):
        """Test repeating add with the same keys changes nothing."""
        registry.apply_action("metadata", SelectionAction.ADD, ["a", "b"])
        count = registry.apply_action("metadata", SelectionAction.ADD, ["a", "b"])
        assert count == 2

    def test_add_keeps_existing_keys(self, registry):
        """Test add leaves previously selected keys in place."""
        registry.apply_action("metadata", "add", ["a"])
        registry.apply_action("metadata", "add", ["b"])
        assert registry.get_selection("metadata") == {"a", "b"}

    def test_remove_keys(self, registry):
        """Test remove drops the given keys."""
        registry.apply_action("metadata", "add", ["a", "b", "c"])
        count = registry.apply_action("metadata", "remove", ["a", "c"])
        assert count == 1
        assert registry.get_selection("metadata") == {"b"}

    def test_remove_absent_key_is_noop(self, registry):
        """Test removing a key that is not selected is ignored."""
        registry.apply_action("metadata", "add", ["a"])
        count = registry.apply_action("metadata", "remove", ["zzz"])
        assert count == 1

    def test_add_empty_keys_is_noop(self, registry):
        """Test add without keys returns the current size."""
        registry.apply_action("metadata", "add", ["a"])
        assert registry.apply_action("metadata", "add", []) == 1

    @pytest.mark.parametrize("action", ["add", "clear-add"])
    def test_single_string_key_not_split(self, registry, action):
        """Test a bare string is one key, not a sequence of characters."""
        assert registry.apply_action("metadata", action, "abc") == 1
        assert registry.get_selection("metadata") == {"abc"}

    def test_remove_single_string_key(self, registry):
        """Test remove with a bare string drops that key only."""
        registry.apply_action("metadata", "add", ["abc", "a", "b", "c"])
        assert registry.apply_action("metadata", "remove", "abc") == 3
        assert "abc" not in registry.get_selection("metadata")

    def test_remove_empty_keys_is_noop(self, registry):
        """Test remove without keys returns the current size."""
        registry.apply_action("metadata", "add", ["a"])
        assert registry.apply_action("metadata", "remove", []) == 1


class TestClearActions:
    """Tests for clear-add, remove-all and explicit clears."""

    def test_clear_and_add_replaces_content(self, registry):
        """Test clear-add leaves exactly the new keys."""
        registry.apply_action("metadata", "add", ["x", "y"])
        count = registry.apply_action("metadata", "clear-add", ["z"])
        assert count == 1
        assert registry.get_selection("metadata") == {"z"}

    def test_clear_and_add_without_keys_is_noop(self, registry):
        """Test clear-add without keys keeps the selection."""
        registry.apply_action("metadata", "add", ["x", "y"])
        assert registry.apply_action("metadata", "clear-add", []) == 2

    def test_remove_all_clears(self, registry):
        """Test remove-all empties the namespace."""
        registry.apply_action("metadata", "add", ["x", "y"])
        assert registry.apply_action("metadata", "remove-all") == 0
        assert registry.get_selection("metadata") == frozenset()

    def test_clear_single_namespace(self, registry):
        """Test clear affects only the named namespace."""
        registry.apply_action("metadata", "add", ["a"])
        registry.apply_action("users", "add", ["u1"])
        registry.clear("metadata")
        assert registry.size("metadata") == 0
        assert registry.size("users") == 1

    def test_clear_all(self, registry):
        """Test clear_all empties every namespace but keeps them."""
        registry.apply_action("metadata", "add", ["a"])
        registry.apply_action("users", "add", ["u1"])
        registry.clear_all()
        assert registry.size("metadata") == 0
        assert registry.size("users") == 0
        assert "users" in registry.namespaces


class TestNoopAndBlankKeys:
    """Tests for unknown actions and blank key purging."""

    @pytest.mark.parametrize("action", ["status", "bogus", None, 42])
    def test_unknown_action_returns_size(self, registry, action):
        """Test unrecognized actions report the size without changes."""
        registry.apply_action("metadata", "add", ["a", "b"])
        assert registry.apply_action("metadata", action, ["c"]) == 2
        assert registry.get_selection("metadata") == {"a", "b"}

    @pytest.mark.parametrize("action", ["add", "clear-add"])
    def test_blank_keys_purged(self, registry, action):
        """Test None and empty keys never remain selected."""
        count = registry.apply_action("metadata", action, ["a", None, "", "b"])
        assert count == 2
        assert registry.get_selection("metadata") == {"a", "b"}

    def test_whitespace_key_is_kept(self, registry):
        """Test whitespace-only keys are opaque identifiers, not blanks."""
        assert registry.apply_action("metadata", "add", [" "]) == 1
        assert registry.get_selection("metadata") == {" "}

    def test_only_blank_keys(self, registry):
        """Test a batch of hollow keys leaves the selection empty."""
        assert registry.apply_action("metadata", "add", [None, ""]) == 0

    def test_add_all_selection_purges_blank(self, registry):
        """Test bulk add reports change and drops blanks."""
        assert registry.add_all_selection("metadata", ["a", None]) is True
        assert registry.add_all_selection("metadata", ["a"]) is False
        assert registry.get_selection("metadata") == {"a"}

    def test_add_selection_single(self, registry):
        """Test single add reports whether the key was new."""
        assert registry.add_selection("metadata", "a") is True
        assert registry.add_selection("metadata", "a") is False
        assert registry.add_selection("metadata", "") is False


class TestNamespaces:
    """Tests for namespace isolation and reads."""

    def test_namespace_isolation(self, registry):
        """Test updating one namespace never touches another."""
        registry.apply_action("metadata", "add", ["a", "b"])
        registry.apply_action("users", "add", ["a"])
        registry.apply_action("users", "remove-all")
        assert registry.get_selection("metadata") == {"a", "b"}

    def test_unknown_namespace_reads_empty(self, registry):
        """Test reading a never-touched namespace returns an empty set."""
        assert registry.get_selection("nonexistent") == frozenset()
        assert registry.size("nonexistent") == 0

    def test_size_matches_selection(self, registry):
        """Test returned counts match the stored selection size."""
        steps = [("add", ["a", "b", "c"]), ("remove", ["b"]), ("add", ["d"]), ("clear-add", ["e", "f"])]
        for action, keys in steps:
            count = registry.apply_action("metadata", action, keys)
            assert count == len(registry.get_selection("metadata"))

    def test_get_selection_is_snapshot(self, registry):
        """Test the returned selection is a detached copy."""
        registry.apply_action("metadata", "add", ["a"])
        snapshot = registry.get_selection("metadata")
        registry.apply_action("metadata", "add", ["b"])

        assert isinstance(snapshot, frozenset)
        assert snapshot == {"a"}
        assert registry.get_selection("metadata") == {"a", "b"}


class TestAddAll:
    """Tests for add-all through the registry."""

    def test_add_all_bounded_by_max_hits(self, registry, make_context, uuids_5000):
        """Test 5000 matches with max 1000 keep the first 1000."""
        context = make_context(StaticResolver(ResolveResult.success(uuids_5000)))
        count = registry.apply_action("metadata", "add-all", query="any", context=context)

        assert count == 1000
        assert registry.get_selection("metadata") == set(uuids_5000[:1000])

    def test_add_all_replaces_previous(self, registry, make_context):
        """Test add-all clears the prior selection first."""
        registry.apply_action("metadata", "add", ["old"])
        context = make_context(StaticResolver(ResolveResult.success(["n1", "n2"])))
        assert registry.apply_action("metadata", "add-all", context=context) == 2
        assert "old" not in registry.get_selection("metadata")

    def test_add_all_failure_degrades_to_empty(self, registry, make_context, failing_resolver):
        """Test a failing backend leaves the namespace cleared."""
        registry.apply_action("metadata", "add", ["old"])
        count = registry.apply_action("metadata", "add-all", context=make_context(failing_resolver))
        assert count == 0
        assert registry.get_selection("metadata") == frozenset()

    def test_add_all_raising_resolver_degrades_to_empty(self, registry, make_context, raising_resolver):
        """Test a resolver exception is contained."""
        count = registry.apply_action("metadata", "add-all", context=make_context(raising_resolver))
        assert count == 0

    def test_add_all_without_context(self, registry):
        """Test add-all with no backend selects nothing."""
        registry.apply_action("metadata", "add", ["old"])
        assert registry.apply_action("metadata", "add-all") == 0

    def test_add_all_uses_configured_max(self, registry, make_context, uuids_5000):
        """Test the max records setting bounds add-all."""
        context = make_context(StaticResolver(ResolveResult.success(uuids_5000)), selection_max_records="25")
        assert registry.apply_action("metadata", "add-all", context=context) == 25

    def test_add_all_bad_max_falls_back(self, registry, make_context, uuids_5000):
        """Test an unparseable max records setting uses the default bound."""
        context = make_context(StaticResolver(ResolveResult.success(uuids_5000)), selection_max_records="lots")
        assert registry.apply_action("metadata", "add-all", context=context) == 1000

    def test_add_all_passes_query(self, registry, make_context):
        """Test the explicit query reaches the resolver."""
        resolver = StaticResolver(ResolveResult.success([]))
        registry.apply_action("metadata", "add-all", query="roads", context=make_context(resolver))
        search_context, max_hits = resolver.calls[0]
        assert search_context.query == "roads"
        assert max_hits == 1000

    def test_add_all_with_last_query_resolver(self, registry, make_context, session):
        """Test add-all end to end through the legacy resolver."""
        session.set_property("search.request", {"any": "rivers"})
        manager = FakeSearchManager(["r1", "r2", "r3"])
        count = registry.apply_action("metadata", "add-all", context=make_context(LastQueryResolver(manager)))
        assert count == 3


class TestRequestEntryPoints:
    """Tests for update_selection and update_result."""

    def test_update_selection_from_params(self, make_context):
        """Test raw request parameters are applied to the session registry."""
        context = make_context()
        count = update_selection("metadata", {"id": ["a", "b"], "selected": "add"}, context)
        assert count == 2
        assert context.registry.get_selection("metadata") == {"a", "b"}

    def test_update_selection_single_id(self, make_context):
        """Test a single id parameter is accepted."""
        assert update_selection("metadata", {"id": "a", "selected": "add"}, make_context()) == 1

    def test_update_selection_status(self, make_context):
        """Test the status action only reports the count."""
        context = make_context()
        update_selection("metadata", {"id": ["a"], "selected": "add"}, context)
        assert update_selection("metadata", {"selected": "status"}, context) == 1

    def test_update_result_marks_items(self, session):
        """Test update_result flags records against the session selection."""
        SelectionRegistry.get_or_create(session).apply_action("metadata", "add", ["b"])
        batch = update_result(session, [{"uuid": "a"}, {"uuid": "b"}])
        assert [item["selected"] for item in batch.items] == [False, True]
        assert batch.selected_count == 1

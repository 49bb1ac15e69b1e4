"""
Unit tests for composing the DerivedObject from builtin and custom groups.
"""

from unittest.mock import MagicMock

import pandas as pd
import pytest

from chainderive.availability import AvailabilityRule
from chainderive.bundle import (
    DerivedObject,
    availability_report,
    compose_derives,
    get_available_derives,
    inject_functions,
)
from chainderive.lazy import LazyGroup


def factory_returning(value):
    return MagicMock(side_effect=lambda caller_id, context: value)


@pytest.fixture
def rules():
    return {
        "society": AvailabilityRule(["society"]),
        "staking": AvailabilityRule(["staking"]),
        "council": AvailabilityRule(["council"], use_instance_detection=True),
    }


@pytest.fixture
def registry():
    return {
        "society": {"info": factory_returning("society-info")},
        "staking": {"validators": factory_returning("validators")},
        "council": {"members": factory_returning("council-members")},
        "chain": {"best_number": factory_returning("best")},
    }


class TestInjectFunctions:
    """Test class for filtering one registry into lazy groups."""

    def test_only_included_groups(self, mock_context_factory, registry, rules):
        context = mock_context_factory({"society"})
        derives = inject_functions("api-1", context, registry, rules)
        assert set(derives) == {"society", "chain"}
        assert all(isinstance(group, LazyGroup) for group in derives.values())

    def test_no_factory_invoked(self, mock_context_factory, registry, rules):
        inject_functions("api-1", mock_context_factory({"society", "staking"}), registry, rules)
        for methods in registry.values():
            for factory in methods.values():
                factory.assert_not_called()


class TestComposeDerives:
    """Test class for compose_derives."""

    @pytest.mark.parametrize(
        "query_keys, instances, expected",
        [
            (set(), {}, {"chain"}),
            ({"society"}, {}, {"society", "chain"}),
            ({"staking", "council"}, {}, {"staking", "council", "chain"}),
            ({"council2"}, {"council": ["council2"]}, {"council", "chain"}),
        ],
    )
    def test_exactly_included_groups(
        self, mock_context_factory, registry, rules, query_keys, instances, expected
    ):
        context = mock_context_factory(query_keys, instances=instances)
        derived = compose_derives(registry, {}, "api-1", context, rules)
        assert set(derived) == expected

    def test_custom_group_overrides_builtin(self, mock_context_factory, registry, rules):
        custom_info = factory_returning("custom")
        context = mock_context_factory({"staking"})
        custom = {"staking": {"mine": custom_info}}

        derived = compose_derives(registry, custom, "api-1", context, rules)

        assert set(derived.staking) == {"mine"}
        assert derived.staking.mine == "custom"
        assert "validators" not in derived.staking
        registry["staking"]["validators"].assert_not_called()

    def test_custom_groups_subject_to_rules(self, mock_context_factory, registry, rules):
        custom = {"society": {"info": factory_returning("x")}, "extra": {"m": factory_returning("y")}}
        derived = compose_derives(registry, custom, "api-1", mock_context_factory(set()), rules)
        assert "society" not in derived
        assert derived.extra.m == "y"

    def test_merge_completeness(self, mock_context_factory, registry, rules):
        custom = {"extra": {"m": factory_returning("y")}}
        derived = compose_derives(registry, custom, "api-1", mock_context_factory({"society"}), rules)
        assert set(derived) == {"society", "chain", "extra"}

    def test_empty_inputs(self, mock_context_factory):
        derived = compose_derives({}, None, "api-1", mock_context_factory(set()), {})
        assert isinstance(derived, DerivedObject)
        assert len(derived) == 0

    def test_empty_group_skipped(self, mock_context_factory, registry, rules):
        sections = dict(registry, empty={})
        derived = compose_derives(sections, {}, "api-1", mock_context_factory(set()), rules)
        assert "empty" not in derived
        assert set(derived) == {"chain"}

    def test_colliding_group_and_method_names(self, mock_context_factory):
        keys, name, member = (
            factory_returning("keys"),
            factory_returning("name"),
            factory_returning("m"),
        )
        custom = {"staking": {"keys": keys, "name": name}, "items": {"m": member}}
        derived = compose_derives({}, custom, "api-1", mock_context_factory({"staking"}), {})
        assert derived.staking.keys == "keys"
        assert derived.staking.name == "name"
        assert derived.items.m == "m"
        assert derived["items"] is derived.items
        keys.assert_called_once()
        name.assert_called_once()
        member.assert_called_once()

    def test_society_scenario(self, mock_context_factory):
        """Society is hidden on a chain without it and built once on a chain with it."""
        bound = MagicMock(name="society_info")
        info = MagicMock(return_value=bound)
        sections = {"society": {"info": info}}
        rules = {"society": AvailabilityRule(["society"])}

        without = compose_derives(sections, {}, "api-1", mock_context_factory({"staking"}), rules)
        assert "society" not in without

        context = mock_context_factory({"society"})
        derived = compose_derives(sections, {}, "api-1", context, rules)
        reads = [derived.society.info, derived.society.info, derived["society"]["info"]]
        info.assert_called_once_with("api-1", context)
        assert all(read is bound for read in reads)

    def test_each_compose_has_its_own_cache(self, mock_context_factory):
        info = MagicMock(side_effect=lambda caller_id, context: object())
        context = mock_context_factory(set())
        first = compose_derives({"g": {"info": info}}, {}, "api-1", context, {})
        second = compose_derives({"g": {"info": info}}, {}, "api-2", context, {})
        assert first.g.info is not second.g.info
        assert info.call_count == 2


class TestDerivedObject:
    """Test class for the DerivedObject namespace."""

    def test_attribute_and_item_access(self):
        group = LazyGroup("society", {}, 1, None)
        derived = DerivedObject({"society": group})
        assert derived.society is group
        assert derived["society"] is group
        assert "society" in dir(derived)

    def test_missing_group_attribute_error_suggests(self):
        derived = DerivedObject({"society": LazyGroup("society", {}, 1, None)})
        with pytest.raises(AttributeError, match="Did you mean"):
            derived.socity

    def test_missing_group_key_error(self):
        derived = DerivedObject({})
        with pytest.raises(KeyError, match="No options are available"):
            derived["society"]

    def test_read_only(self):
        derived = DerivedObject({"society": LazyGroup("society", {}, 1, None)})
        with pytest.raises(TypeError):
            derived["society"] = None

    @pytest.mark.parametrize("group", ["items", "keys", "values", "get"])
    def test_group_named_like_mapping_method(self, group):
        lazy = LazyGroup(group, {}, 1, None)
        derived = DerivedObject({group: lazy})
        assert getattr(derived, group) is lazy
        assert group in dir(derived)

    def test_repr(self):
        derived = DerivedObject({"b": LazyGroup("b", {}, 1, None), "a": LazyGroup("a", {}, 1, None)})
        assert repr(derived) == "DerivedObject(groups=['a', 'b'])"


class TestGetAvailableDerives:
    """Test class for the client-facing entry point over the builtin registry."""

    def test_builtin_groups_filtered_by_chain(self, chain_context):
        derived = get_available_derives("api-1", chain_context)
        assert {"accounts", "society", "council", "elections", "parachains"} <= set(derived)
        assert "contracts" not in derived

    def test_custom_groups_validated(self, chain_context):
        with pytest.raises(TypeError):
            get_available_derives("api-1", chain_context, custom={"g": {"m": 1}})

    def test_custom_rules_replace_defaults(self, chain_context):
        rules = {"society": AvailabilityRule([])}
        derived = get_available_derives("api-1", chain_context, rules=rules)
        assert "society" not in derived
        assert "contracts" in derived

    def test_empty_custom_group_rejected(self, chain_context):
        with pytest.raises(ValueError, match="at least one method"):
            get_available_derives("api-1", chain_context, custom={"mine": {}})

    @pytest.mark.parametrize(
        "rules",
        [
            {"society": {"required_keys": ["society"]}},
            {"society": ["society"]},
            [("society", AvailabilityRule(["society"]))],
        ],
    )
    def test_malformed_rules_rejected(self, chain_context, rules):
        with pytest.raises(TypeError):
            get_available_derives("api-1", chain_context, rules=rules)


class TestAvailabilityReport:
    """Test class for the availability DataFrame."""

    def test_report_columns_and_values(self, mock_context_factory, registry, rules):
        report = availability_report(mock_context_factory({"society"}), registry, rules)
        assert isinstance(report, pd.DataFrame)
        assert list(report.columns) == [
            "group",
            "methods",
            "required_keys",
            "instance_detection",
            "included",
        ]
        assert list(report["group"]) == ["chain", "council", "society", "staking"]
        by_group = report.set_index("group")
        assert bool(by_group.loc["society", "included"])
        assert not bool(by_group.loc["staking", "included"])
        assert bool(by_group.loc["council", "instance_detection"])
        assert by_group.loc["chain", "required_keys"] == []

    def test_report_defaults_to_builtin(self, chain_context):
        report = availability_report(chain_context)
        included = dict(zip(report["group"], report["included"]))
        assert included["society"]
        assert not included["contracts"]

"""Tests for override application."""

import pytest

from devfile_parser.codes import ErrorCode
from devfile_parser.kernel.errors import OverrideError
from devfile_parser.kernel.model import OverrideSet, WorkspaceContent
from devfile_parser.kernel.overrides import apply_overrides, merge_named_lists, strategic_merge
from helpers import container, exec_command


def content():
    return WorkspaceContent.model_validate({
        "components": [
            container(
                "tools",
                image="quay.io/tools:1",
                memoryLimit="512Mi",
                env=[{"name": "A", "value": "1"}, {"name": "B", "value": "2"}],
            ),
            {"name": "cache", "volume": {"size": "1Gi"}},
        ],
        "commands": [exec_command("build", "tools", "make")],
        "projects": [{"name": "web", "git": {"remotes": {"origin": "https://g/web.git"}}}],
    })


def test_override_replaces_only_named_elements():
    """Test that the result differs from the input only at overridden elements."""
    base = content()
    overrides = OverrideSet.model_validate({
        "components": [{"name": "tools", "container": {"image": "quay.io/tools:2"}}],
    })

    result = apply_overrides(base, overrides)
    wire, base_wire = result.to_wire(), base.to_wire()

    assert wire["components"][0]["container"]["image"] == "quay.io/tools:2"
    assert wire["components"][0]["container"]["memoryLimit"] == "512Mi"
    assert wire["components"][1] == base_wire["components"][1]
    assert wire["commands"] == base_wire["commands"]
    assert wire["projects"] == base_wire["projects"]


def test_override_does_not_mutate_input():
    """Test that applying overrides leaves the input content untouched."""
    base = content()
    before = base.to_wire()
    apply_overrides(base, OverrideSet.model_validate({
        "components": [{"name": "tools", "container": {"image": "other"}}],
        "commands": [{"id": "build", "$patch": "delete"}],
    }))
    assert base.to_wire() == before


def test_unmatched_override_key_fails():
    """Test that an override naming a missing element fails and names it."""
    overrides = OverrideSet.model_validate({
        "components": [{"name": "tools", "container": {"image": "x"}}],
        "commands": [{"id": "no-such-command", "exec": {"commandLine": "true"}}],
    })
    with pytest.raises(OverrideError, match="no-such-command") as exc_info:
        apply_overrides(content(), overrides)
    assert exc_info.value.element == "no-such-command"
    assert exc_info.value.code == ErrorCode.OVERRIDE_TARGET_MISSING


def test_delete_directive_removes_element():
    """Test that $patch: delete removes the element."""
    overrides = OverrideSet.model_validate({"components": {"cache": {"$patch": "delete"}}})
    result = apply_overrides(content(), overrides)
    assert [c.name for c in result.components] == ["tools"]


def test_named_lists_merge_by_name():
    """Test that env entries merge by name and new entries are appended."""
    overrides = OverrideSet.model_validate({
        "components": [{
            "name": "tools",
            "container": {"env": [{"name": "B", "value": "changed"}, {"name": "C", "value": "3"}]},
        }],
    })
    env = apply_overrides(content(), overrides).components[0].variant.env
    assert [(e.name, e.value) for e in env] == [("A", "1"), ("B", "changed"), ("C", "3")]


def test_null_removes_field():
    """Test that a null value in a patch removes the field."""
    overrides = OverrideSet.model_validate({
        "components": [{"name": "tools", "container": {"memoryLimit": None}}],
    })
    result = apply_overrides(content(), overrides)
    assert result.components[0].variant.memory_limit is None


def test_changing_kind_fails():
    """Test that an override may not turn a container into a volume."""
    overrides = OverrideSet.model_validate({"components": [{"name": "tools", "volume": {"size": "2Gi"}}]})
    with pytest.raises(OverrideError, match="changes its kind") as exc_info:
        apply_overrides(content(), overrides)
    assert exc_info.value.code == ErrorCode.OVERRIDE_INVALID


def test_invalid_result_fails():
    """Test that a patch producing an invalid element is an override error."""
    overrides = OverrideSet.model_validate({
        "components": [{"name": "tools", "container": {"image": None}}],
    })
    with pytest.raises(OverrideError, match="invalid content"):
        apply_overrides(content(), overrides)


def test_no_overrides_returns_equal_copy():
    """Test that missing or empty overrides return an equal, distinct copy."""
    base = content()
    for overrides in (None, OverrideSet()):
        result = apply_overrides(base, overrides)
        assert result.to_wire() == base.to_wire()
        assert result is not base


def test_strategic_merge_helpers():
    """Test the merge helpers directly."""
    assert strategic_merge({"a": {"b": 1}}, {"a": {"c": 2}}) == {"a": {"b": 1, "c": 2}}
    assert strategic_merge({"args": ["a"]}, {"args": ["b"]}) == {"args": ["b"]}
    assert merge_named_lists(
        [{"name": "x", "v": 1}, {"name": "y"}],
        [{"name": "y", "$patch": "delete"}],
    ) == [{"name": "x", "v": 1}]


def test_nested_directives_not_copied():
    """Test that "$patch" inside a nested object never reaches the output."""
    overrides = OverrideSet.model_validate({
        "components": [{
            "name": "tools",
            "container": {"$patch": "delete", "image": "quay.io/tools:2"},
        }],
        "projects": [{"name": "web", "git": {"checkoutFrom": {"$patch": "merge", "revision": "main"}}}],
    })

    wire = apply_overrides(content(), overrides).to_wire()

    tools = wire["components"][0]["container"]
    assert tools["image"] == "quay.io/tools:2"
    assert "$patch" not in tools
    assert wire["projects"][0]["git"]["checkoutFrom"] == {"revision": "main"}


def test_new_named_list_items_drop_nested_directives():
    """Test that items added to a named list are cleaned at every depth."""
    merged = merge_named_lists(
        [{"name": "x"}],
        [{"name": "y", "$patch": "merge", "meta": {"$patch": "replace", "v": 1}}],
    )
    assert merged == [{"name": "x"}, {"name": "y", "meta": {"v": 1}}]

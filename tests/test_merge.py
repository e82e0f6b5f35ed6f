"""Tests for merging parent, plugin and local content."""

import pytest

from devfile_parser.kernel.errors import MergeError
from devfile_parser.kernel.merge import merge_workspace_content
from devfile_parser.kernel.model import WorkspaceContent
from helpers import container, exec_command


def wc(components=(), commands=(), projects=()):
    return WorkspaceContent.model_validate({
        "components": list(components),
        "commands": list(commands),
        "projects": list(projects),
    })


def test_merge_order_parent_plugins_local():
    """Test that merged elements are ordered parent, plugins, local."""
    merged = merge_workspace_content(
        wc([container("c")]),
        wc([container("a")]),
        [wc([container("b1")]), wc([container("b2")])],
    )
    assert [c.name for c in merged.components] == ["a", "b1", "b2", "c"]


def test_identical_duplicates_kept_once():
    """Test that the same element defined identically in two layers is not an error."""
    merged = merge_workspace_content(
        wc([container("shared", image="x")], commands=[exec_command("build", "shared")]),
        wc([container("shared", image="x")], commands=[exec_command("build", "shared")]),
    )
    assert [c.name for c in merged.components] == ["shared"]
    assert [c.id for c in merged.commands] == ["build"]


@pytest.mark.parametrize("section,local,inherited", [
    (
        "component",
        wc([container("x", image="local")]),
        wc([container("x", image="parent")]),
    ),
    (
        "command",
        wc(commands=[exec_command("build", "tools", "make local")]),
        wc(commands=[exec_command("build", "tools", "make parent")]),
    ),
    (
        "project",
        wc(projects=[{"name": "web", "clonePath": "local"}]),
        wc(projects=[{"name": "web", "clonePath": "parent"}]),
    ),
])
def test_conflicting_duplicates_fail_for_every_section(section, local, inherited):
    """Test that a conflicting collision fails the merge in every section."""
    with pytest.raises(MergeError) as exc_info:
        merge_workspace_content(local, inherited)
    error = exc_info.value
    assert error.section == section
    assert error.layers == ["parent", "local"]


def test_conflict_between_plugins_names_plugins():
    """Test that conflicts between two plugins name both plugin layers."""
    with pytest.raises(MergeError, match="plugin 'java' and plugin 'node'"):
        merge_workspace_content(
            wc(),
            None,
            [wc([container("tools", image="java")]), wc([container("tools", image="node")])],
            plugin_labels=["plugin 'java'", "plugin 'node'"],
        )


def test_merge_without_inherited_content():
    """Test that merging local content alone returns equal content."""
    local = wc([container("c")], commands=[exec_command("run", "c")])
    merged = merge_workspace_content(local)
    assert merged.to_wire() == local.to_wire()

"""Builders for devfile test documents in wire form."""

from typing import Dict, Optional

import yaml


def devfile(
    components=None,
    commands=None,
    projects=None,
    parent: Optional[Dict] = None,
    api_version: str = "2.2.0",
    name: str = "sample",
) -> Dict:
    """Build a devfile dict in wire form."""
    data = {"apiVersion": api_version, "metadata": {"name": name}}
    if parent is not None:
        data["parent"] = parent
    data["components"] = components or []
    data["commands"] = commands or []
    data["projects"] = projects or []
    return data


def container(name: str, image: str = "busybox", **fields) -> Dict:
    """A container component in wire form."""
    return {"name": name, "container": {"image": image, **fields}}


def plugin(name: str, uri: str, overrides: Optional[Dict] = None) -> Dict:
    """A plugin component in wire form."""
    body = {"uri": uri}
    if overrides is not None:
        body["overrides"] = overrides
    return {"name": name, "plugin": body}


def exec_command(id: str, component: str, command_line: str = "make") -> Dict:
    """An exec command in wire form."""
    return {"id": id, "exec": {"component": component, "commandLine": command_line}}


def to_yaml(data: Dict) -> bytes:
    return yaml.safe_dump(data, sort_keys=False).encode("utf-8")

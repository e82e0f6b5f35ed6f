"""Pydantic models for devfile documents.

Components, commands and project sources are closed tagged unions. On the
wire the variant is given by which sub-object is present
(``{"name": "tools", "container": {...}}``); in memory it is lifted into a
single ``variant``/``source`` field discriminated by ``kind``, so every site
that interprets an element matches on a fixed set of classes instead of
probing optional fields.
"""

from typing import Any, Annotated, ClassVar, Dict, Iterator, List, Literal, Optional, Tuple, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_serializer,
    model_validator,
)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError


class DevfileModel(BaseModel):
    """Base model: camelCase on the wire, unknown devfile fields preserved."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


def _lift_variant(data: Any, keys: Tuple[str, ...], target: str, owner: str, required: bool) -> Any:
    """Move the single present variant sub-object under ``target`` with a ``kind`` tag."""
    if not isinstance(data, dict) or target in data:
        return data
    present = [k for k in keys if data.get(k) is not None]
    label = data.get("name") or data.get("id") or "<unnamed>"
    if len(present) > 1:
        raise ValueError(f"{owner} '{label}' must declare exactly one of {list(keys)}, got {present}")
    if not present:
        if required:
            raise ValueError(f"{owner} '{label}' must declare one of {list(keys)}")
        return data
    key = present[0]
    body = data[key]
    if not isinstance(body, dict):
        raise ValueError(f"{owner} '{label}': '{key}' must be an object")
    lifted = {k: v for k, v in data.items() if k != key}
    lifted[target] = {**body, "kind": key}
    return lifted


def _lower_variant(data: Dict[str, Any], target: str) -> Dict[str, Any]:
    """Inverse of _lift_variant for serialized output."""
    body = data.pop(target, None)
    if isinstance(body, dict):
        body = dict(body)
        kind = body.pop("kind")
        data[kind] = body
    return data


# ---------------------------------------------------------------------------
# References and overrides
# ---------------------------------------------------------------------------

class OverrideSet(DevfileModel):
    """Patches for inherited content, keyed by element id.

    Each patch is a partial wire-form element. ``"$patch": "delete"`` removes
    the element; otherwise the patch is merged onto it. Sections may also be
    written as a mapping ``{<id>: <patch>}``.
    """

    KEY_FIELDS: ClassVar[Dict[str, str]] = {"components": "name", "commands": "id", "projects": "name"}

    components: List[Dict[str, Any]] = Field(default_factory=list)
    commands: List[Dict[str, Any]] = Field(default_factory=list)
    projects: List[Dict[str, Any]] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="before")
    @classmethod
    def _mapping_sections(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        normalized = dict(data)
        for section, key_field in cls.KEY_FIELDS.items():
            value = normalized.get(section)
            if isinstance(value, dict):
                normalized[section] = [{key_field: key, **(patch or {})} for key, patch in value.items()]
        return normalized

    @model_validator(mode="after")
    def _check_keys(self) -> "OverrideSet":
        for section, key_field in self.KEY_FIELDS.items():
            seen = set()
            for patch in getattr(self, section):
                key = patch.get(key_field)
                if not isinstance(key, str) or not key:
                    raise ValueError(f"every {section} override must name its target by '{key_field}'")
                if key in seen:
                    raise ValueError(f"duplicate {section} override for '{key}'")
                seen.add(key)
        return self

    @property
    def is_empty(self) -> bool:
        return not (self.components or self.commands or self.projects)

    def patches(self, section: str) -> Dict[str, Dict[str, Any]]:
        """Return the patches of ``section`` keyed by target id, in declaration order."""
        key_field = self.KEY_FIELDS[section]
        return {patch[key_field]: patch for patch in getattr(self, section)}


class Reference(DevfileModel):
    """A reference to another devfile, optionally with overrides."""
    uri: str = ""
    overrides: Optional[OverrideSet] = None

    @property
    def is_set(self) -> bool:
        """True if the reference points at a document to fetch."""
        return bool(self.uri)


# ---------------------------------------------------------------------------
# Components
# ---------------------------------------------------------------------------

class EnvVar(DevfileModel):
    name: str
    value: str = ""


class Endpoint(DevfileModel):
    name: str
    target_port: int
    exposure: Optional[str] = None
    protocol: Optional[str] = None
    path: Optional[str] = None
    secure: Optional[bool] = None


class VolumeMount(DevfileModel):
    name: str
    path: Optional[str] = None


class ContainerComponent(DevfileModel):
    kind: Literal["container"] = "container"
    image: str
    command: Optional[List[str]] = None
    args: Optional[List[str]] = None
    env: Optional[List[EnvVar]] = None
    endpoints: Optional[List[Endpoint]] = None
    volume_mounts: Optional[List[VolumeMount]] = None
    memory_limit: Optional[str] = None
    memory_request: Optional[str] = None
    cpu_limit: Optional[str] = None
    cpu_request: Optional[str] = None
    mount_sources: Optional[bool] = None
    source_mapping: Optional[str] = None
    dedicated_pod: Optional[bool] = None


class PluginComponent(Reference):
    """A component that expands into the content of another devfile."""
    kind: Literal["plugin"] = "plugin"


class VolumeComponent(DevfileModel):
    kind: Literal["volume"] = "volume"
    size: Optional[str] = None
    ephemeral: Optional[bool] = None


class KubernetesComponent(DevfileModel):
    kind: Literal["kubernetes"] = "kubernetes"
    uri: Optional[str] = None
    inlined: Optional[str] = None
    endpoints: Optional[List[Endpoint]] = None


class OpenshiftComponent(DevfileModel):
    kind: Literal["openshift"] = "openshift"
    uri: Optional[str] = None
    inlined: Optional[str] = None
    endpoints: Optional[List[Endpoint]] = None


class DockerfileImage(DevfileModel):
    uri: Optional[str] = None
    build_context: Optional[str] = None
    root_required: Optional[bool] = None
    args: Optional[List[str]] = None


class ImageComponent(DevfileModel):
    kind: Literal["image"] = "image"
    image_name: str
    dockerfile: Optional[DockerfileImage] = None
    auto_build: Optional[bool] = None


ComponentVariant = Annotated[
    Union[
        ContainerComponent,
        PluginComponent,
        VolumeComponent,
        KubernetesComponent,
        OpenshiftComponent,
        ImageComponent,
    ],
    Field(discriminator="kind"),
]

COMPONENT_KINDS: Tuple[str, ...] = ("container", "plugin", "volume", "kubernetes", "openshift", "image")


class Component(DevfileModel):
    """A named workspace component of exactly one kind."""
    name: str
    attributes: Optional[Dict[str, Any]] = None
    variant: ComponentVariant

    @model_validator(mode="before")
    @classmethod
    def _lift(cls, data: Any) -> Any:
        return _lift_variant(data, COMPONENT_KINDS, "variant", "component", required=True)

    @model_serializer(mode="wrap")
    def _to_wire(self, handler):
        return _lower_variant(handler(self), "variant")

    @property
    def kind(self) -> str:
        return self.variant.kind


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

class CommandGroup(DevfileModel):
    kind: str  # build | run | test | debug | deploy
    is_default: Optional[bool] = None


class ExecCommand(DevfileModel):
    kind: Literal["exec"] = "exec"
    command_line: str
    component: str
    working_dir: Optional[str] = None
    env: Optional[List[EnvVar]] = None
    hot_reload_capable: Optional[bool] = None
    label: Optional[str] = None
    group: Optional[CommandGroup] = None


class ApplyCommand(DevfileModel):
    kind: Literal["apply"] = "apply"
    component: str
    label: Optional[str] = None
    group: Optional[CommandGroup] = None


class CompositeCommand(DevfileModel):
    kind: Literal["composite"] = "composite"
    commands: List[str] = Field(default_factory=list)
    parallel: Optional[bool] = None
    label: Optional[str] = None
    group: Optional[CommandGroup] = None


CommandVariant = Annotated[
    Union[ExecCommand, ApplyCommand, CompositeCommand],
    Field(discriminator="kind"),
]

COMMAND_KINDS: Tuple[str, ...] = ("exec", "apply", "composite")


class Command(DevfileModel):
    """A named workspace command of exactly one kind."""
    id: str
    attributes: Optional[Dict[str, Any]] = None
    variant: CommandVariant

    @model_validator(mode="before")
    @classmethod
    def _lift(cls, data: Any) -> Any:
        return _lift_variant(data, COMMAND_KINDS, "variant", "command", required=True)

    @model_serializer(mode="wrap")
    def _to_wire(self, handler):
        return _lower_variant(handler(self), "variant")

    @property
    def kind(self) -> str:
        return self.variant.kind


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------

class CheckoutFrom(DevfileModel):
    revision: Optional[str] = None
    remote: Optional[str] = None


class GitSource(DevfileModel):
    kind: Literal["git"] = "git"
    remotes: Dict[str, str] = Field(default_factory=dict)
    checkout_from: Optional[CheckoutFrom] = None


class ZipSource(DevfileModel):
    kind: Literal["zip"] = "zip"
    location: Optional[str] = None


class CustomSource(DevfileModel):
    kind: Literal["custom"] = "custom"
    project_source_class: str
    embedded_resource: Any = None


ProjectSource = Annotated[
    Union[GitSource, ZipSource, CustomSource],
    Field(discriminator="kind"),
]

PROJECT_SOURCE_KINDS: Tuple[str, ...] = ("git", "zip", "custom")


class Project(DevfileModel):
    """A project cloned into the workspace."""
    name: str
    clone_path: Optional[str] = None
    attributes: Optional[Dict[str, Any]] = None
    source: Optional[ProjectSource] = None

    @model_validator(mode="before")
    @classmethod
    def _lift(cls, data: Any) -> Any:
        return _lift_variant(data, PROJECT_SOURCE_KINDS, "source", "project", required=False)

    @model_serializer(mode="wrap")
    def _to_wire(self, handler):
        return _lower_variant(handler(self), "source")


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

# pydantic error type raised for repeated names and ids
DUPLICATE_ERROR_TYPE = "duplicate_id"


def _check_unique(items: List[Any], attr: str, label: str) -> None:
    seen = set()
    duplicates = set()
    for item in items:
        key = getattr(item, attr)
        if key in seen:
            duplicates.add(key)
        seen.add(key)
    if duplicates:
        raise PydanticCustomError(
            DUPLICATE_ERROR_TYPE,
            "Duplicate {label} not allowed: {duplicates}",
            {"label": label, "duplicates": str(sorted(duplicates))},
        )


WIRE_DUMP_OPTIONS: Dict[str, Any] = {"by_alias": True, "exclude_none": True, "mode": "json"}

# section name -> identity attribute
SECTION_KEYS: Dict[str, str] = {"components": "name", "commands": "id", "projects": "name"}


class WorkspaceContent(DevfileModel):
    """The mergeable part of a devfile: components, commands and projects."""
    components: List[Component] = Field(default_factory=list)
    commands: List[Command] = Field(default_factory=list)
    projects: List[Project] = Field(default_factory=list)

    def sections(self) -> Iterator[Tuple[str, str, List[Any]]]:
        """Yield ``(section, key attribute, elements)`` for each section."""
        for section, key_attr in SECTION_KEYS.items():
            yield section, key_attr, getattr(self, section)

    def without_plugins(self) -> "WorkspaceContent":
        """Return a copy with plugin components removed."""
        return self.model_copy(
            update={"components": [c for c in self.components if not isinstance(c.variant, PluginComponent)]}
        )

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(**WIRE_DUMP_OPTIONS)


class Metadata(DevfileModel):
    name: Optional[str] = None
    version: Optional[str] = None
    display_name: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    attributes: Optional[Dict[str, Any]] = None


class Document(DevfileModel):
    """A decoded devfile."""
    api_version: str = Field(
        validation_alias=AliasChoices("apiVersion", "schemaVersion", "api_version"),
        serialization_alias="apiVersion",
    )
    metadata: Optional[Metadata] = None
    parent: Optional[Reference] = None
    components: List[Component] = Field(default_factory=list)
    commands: List[Command] = Field(default_factory=list)
    projects: List[Project] = Field(default_factory=list)

    @field_validator("components")
    @classmethod
    def _unique_components(cls, v: List[Component]) -> List[Component]:
        _check_unique(v, "name", "component names")
        return v

    @field_validator("commands")
    @classmethod
    def _unique_commands(cls, v: List[Command]) -> List[Command]:
        _check_unique(v, "id", "command ids")
        return v

    @field_validator("projects")
    @classmethod
    def _unique_projects(cls, v: List[Project]) -> List[Project]:
        _check_unique(v, "name", "project names")
        return v

    def workspace_content(self) -> WorkspaceContent:
        """Extract the mergeable content of this document."""
        return WorkspaceContent(
            components=list(self.components),
            commands=list(self.commands),
            projects=list(self.projects),
        )

    def with_workspace_content(self, content: WorkspaceContent) -> "Document":
        """Return a copy holding ``content`` and no parent reference."""
        return self.model_copy(
            update={
                "parent": None,
                "components": list(content.components),
                "commands": list(content.commands),
                "projects": list(content.projects),
            }
        )

    @property
    def plugin_components(self) -> List[Component]:
        return [c for c in self.components if isinstance(c.variant, PluginComponent)]

    @property
    def is_flat(self) -> bool:
        """True if the document has no parent and no plugin components."""
        return self.parent is None and not self.plugin_components

    def get_component(self, name: str) -> Component | None:
        """Get component by name."""
        for c in self.components:
            if c.name == name:
                return c
        return None

    def components_of(self, kind: str) -> List[Component]:
        """Get components of the given kind (e.g. ``"container"``), in order."""
        if kind not in COMPONENT_KINDS:
            raise ValueError(f"Unknown component kind: {kind}")
        return [c for c in self.components if c.kind == kind]

    def get_components(self, options=None) -> List[Component]:
        """Get components whose attributes match ``options.filter``."""
        from .filters import filter_elements
        return filter_elements(self.components, options)

    def get_commands(self, options=None) -> List[Command]:
        """Get commands whose attributes match ``options.filter``."""
        from .filters import filter_elements
        return filter_elements(self.commands, options)

    def get_projects(self, options=None) -> List[Project]:
        """Get projects whose attributes match ``options.filter``."""
        from .filters import filter_elements
        return filter_elements(self.projects, options)

    def to_wire(self) -> Dict[str, Any]:
        """Serialize to the devfile wire form (camelCase keys, variant tags restored)."""
        return self.model_dump(**WIRE_DUMP_OPTIONS)

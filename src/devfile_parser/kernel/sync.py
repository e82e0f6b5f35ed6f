"""Source sync folders for project containers.

Projects are synced under ``$PROJECTS_ROOT``; a project's ``clonePath`` must
stay inside it.
"""

import posixpath
from typing import List, Optional, Sequence

from .errors import DevfileValidationError
from .model import Project

DEFAULT_SOURCE_MOUNT = "/projects"
ENV_PROJECTS_ROOT = "PROJECTS_ROOT"
ENV_PROJECT_SOURCE = "PROJECT_SOURCE"


def validate_clone_path(project: Project) -> None:
    """Raise DevfileValidationError if ``project.clone_path`` escapes the projects root."""
    clone_path = project.clone_path
    if not clone_path:
        return
    if clone_path.startswith("/"):
        raise DevfileValidationError(
            f"the clonePath {clone_path} in the devfile project {project.name} must be a relative path",
            element=project.name,
        )
    if ".." in clone_path:
        raise DevfileValidationError(
            f"the clonePath {clone_path} in the devfile project {project.name} cannot escape the value "
            f"defined by ${ENV_PROJECTS_ROOT}. Please avoid using \"..\" in clonePath",
            element=project.name,
        )


def validate_clone_paths(projects: Sequence[Project]) -> None:
    """Check every project, reporting the first offender."""
    for project in projects:
        validate_clone_path(project)


def sync_root_folder(source_mapping: Optional[str] = None) -> str:
    """Return the projects root: the container's sourceMapping or the default mount."""
    return source_mapping or DEFAULT_SOURCE_MOUNT


def sync_folder(source_root: str, projects: List[Project]) -> str:
    """Return the folder the first project's source is synced to.

    No projects: the source root itself. Otherwise ``<root>/<clonePath>`` if
    the first project sets one, else ``<root>/<project name>``.
    """
    if not projects:
        return source_root
    project = projects[0]
    if project.clone_path:
        validate_clone_path(project)
        return posixpath.join(source_root, posixpath.normpath(project.clone_path))
    return posixpath.join(source_root, project.name)


def project_env(source_mapping: Optional[str], projects: List[Project]) -> dict:
    """Environment for a container that mounts sources."""
    root = sync_root_folder(source_mapping)
    return {ENV_PROJECTS_ROOT: root, ENV_PROJECT_SOURCE: sync_folder(root, projects)}

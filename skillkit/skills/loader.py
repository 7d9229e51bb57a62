"""Progressive loading of skill tiers for a single task.

Each indexed package moves through

    unloaded -> metadata_resident -> body_loaded (-> resource loaded)*

Transitions only move forward and never skip a tier. Loading a tier that
is already resident is a no-op. Eviction is left to the host.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

from skillkit.skills.errors import NoSuchPackageError, NoSuchResourceError, ResourceNotFoundError
from skillkit.skills.models import LoadTier, SkillMetadata, SkillPackage
from skillkit.skills.resources import normalize_resource_path, resolve_resource
from skillkit.utils import get_logger

if TYPE_CHECKING:
    from skillkit.skills.index import SkillRegistry

logger = get_logger(__name__)


class TaskContext(BaseModel):
    """What the host knows about the current task or turn."""
    text: str = ""
    skills: list[str] = Field(default_factory=list)  # explicitly requested skill names
    attributes: dict[str, Any] = Field(default_factory=dict)


SkillMatcher = Callable[[TaskContext, SkillMetadata], bool]


def explicit_matcher(task: TaskContext, metadata: SkillMetadata) -> bool:
    """Trigger only skills the host asked for by name."""
    return metadata.name in task.skills


def mention_matcher(task: TaskContext, metadata: SkillMetadata) -> bool:
    """Trigger on explicit request or when the skill name appears in the task text."""
    if explicit_matcher(task, metadata):
        return True
    pattern = rf"(?<![\w-]){re.escape(metadata.name)}(?![\w-])"
    return re.search(pattern, task.text, re.IGNORECASE) is not None


class PackageStage(str, Enum):
    UNLOADED = "unloaded"
    METADATA_RESIDENT = "metadata_resident"
    BODY_LOADED = "body_loaded"


@dataclass(frozen=True)
class Transition:
    """One tier advance applied by the loader."""

    package: str
    tier: LoadTier
    path: str | None = None


@dataclass
class PackageState:
    """Residency of one package within the current task."""

    name: str
    stage: PackageStage = PackageStage.UNLOADED
    body: str | None = None
    resources: dict[str, bytes] = field(default_factory=dict)
    source: SkillPackage | None = field(default=None, repr=False)  # indexed package the tiers came from

    @property
    def tier(self) -> LoadTier | None:
        if self.resources:
            return LoadTier.RESOURCE
        if self.stage is PackageStage.BODY_LOADED:
            return LoadTier.BODY
        if self.stage is PackageStage.METADATA_RESIDENT:
            return LoadTier.METADATA
        return None


class ProgressiveLoader:
    """Decide which tiers of which skills are resident for a task.

    Example:
        >>> loader = ProgressiveLoader(registry)
        >>> loader.activate(TaskContext(text="add a spring-boot actuator"))
        [Transition(package='spring-boot', tier=<LoadTier.METADATA: 'metadata'>, path=None), ...]
        >>> loader.load_resource("spring-boot", "references/spring-boot-4.md")
    """

    def __init__(
        self,
        registry: "SkillRegistry",
        matcher: SkillMatcher = mention_matcher,
        max_resource_bytes: int | None = None,
    ):
        self.registry = registry
        self.matcher = matcher
        self.max_resource_bytes = max_resource_bytes
        self._states: dict[str, PackageState] = {}
        self._transitions: list[Transition] = []

    def activate(self, task: TaskContext) -> list[Transition]:
        """Advance tiers for a task and return the transitions applied.

        Every indexed skill becomes metadata-resident; skills whose metadata
        matches the task get their body loaded. State left over for skills
        that a rebuild removed is dropped first.
        """
        applied: list[Transition] = []
        index = self.registry.index
        for name in [name for name in self._states if name not in index]:
            logger.debug("Dropping state for unindexed skill '%s'", name)
            del self._states[name]

        for package in index:
            applied.extend(self._ensure_metadata(package))

        for package in index:
            if self.matcher(task, package.metadata):
                applied.extend(self._ensure_body(package))

        if applied:
            logger.debug(
                "Activated skill tiers",
                extra={"transitions": [(t.package, t.tier.value) for t in applied]},
            )
        return applied

    def load_body(self, name: str) -> str:
        """Load a skill's instructions, passing through the metadata tier."""
        package = self._package(name)
        self._ensure_metadata(package)
        self._ensure_body(package)
        return self._states[name].body or ""

    def load_resource(self, name: str, path: str) -> bytes:
        """Load one bundled file of a skill, passing through earlier tiers.

        Raises:
            NoSuchPackageError: ``name`` is not indexed.
            NoSuchResourceError: the file does not exist.
            PathEscapeError: ``path`` leaves the skill directory.
        """
        package = self._package(name)
        self._ensure_metadata(package)
        self._ensure_body(package)

        state = self._states[name]
        key = normalize_resource_path(path)
        if key in state.resources:
            return state.resources[key]

        try:
            content = resolve_resource(package, key, max_bytes=self.max_resource_bytes)
        except ResourceNotFoundError as e:
            raise NoSuchResourceError(str(e)) from e

        state.resources[key] = content
        self._record(Transition(name, LoadTier.RESOURCE, key))
        return content

    def tier_of(self, name: str) -> LoadTier | None:
        state = self._states.get(name)
        return state.tier if state else None

    def state(self, name: str) -> PackageState | None:
        return self._states.get(name)

    def resident_resources(self, name: str) -> list[str]:
        state = self._states.get(name)
        return sorted(state.resources) if state else []

    @property
    def transitions(self) -> list[Transition]:
        """Every transition applied since the last reset."""
        return list(self._transitions)

    # Eviction is host-driven; nothing below is called by the loader itself.

    def evict(self, name: str) -> None:
        """Return a package to the unloaded state."""
        self._states.pop(name, None)

    def evict_resource(self, name: str, path: str) -> None:
        state = self._states.get(name)
        if state is not None:
            state.resources.pop(normalize_resource_path(path), None)

    def reset(self) -> None:
        """Forget all residency, e.g. when a new task starts."""
        self._states.clear()
        self._transitions.clear()

    def format_metadata_prompt(self) -> str:
        """Render the always-resident metadata tier for a system prompt.

        Returns:
            Markdown list of skills, or an empty string if none are indexed.
        """
        index = self.registry.index
        if not len(index):
            return ""

        lines = [
            "## Available Skills",
            "The following skills are available. Load a skill's full "
            "instructions before using it.\n",
        ]
        for meta in sorted(index.list(), key=lambda m: m.name):
            lines.append(f"- **{meta.name}**: {meta.description}")
        return "\n".join(lines)

    def _package(self, name: str) -> SkillPackage:
        package = self.registry.index.lookup(name)
        if package is None:
            raise NoSuchPackageError(name)
        return package

    def _ensure_metadata(self, package: SkillPackage) -> list[Transition]:
        state = self._states.get(package.name)
        if state is None or state.source is not package:
            # First sight of the package, or a rebuild replaced it.
            state = PackageState(package.name, source=package)
            self._states[package.name] = state
        if state.stage is not PackageStage.UNLOADED:
            return []
        state.stage = PackageStage.METADATA_RESIDENT
        return [self._record(Transition(package.name, LoadTier.METADATA))]

    def _ensure_body(self, package: SkillPackage) -> list[Transition]:
        state = self._states[package.name]
        if state.stage is PackageStage.BODY_LOADED:
            return []
        state.body = package.read_body()
        state.stage = PackageStage.BODY_LOADED
        return [self._record(Transition(package.name, LoadTier.BODY))]

    def _record(self, transition: Transition) -> Transition:
        self._transitions.append(transition)
        return transition

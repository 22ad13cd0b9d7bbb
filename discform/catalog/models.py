"""Pydantic models for the stage catalog."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from discform.core.models import GROUPS_PER_STAGE, DiscFactor, Stage


class Item(BaseModel):
    """A rankable adjective or phrase, tagged with its scoring factor."""

    text: str
    factor: str

    model_config = ConfigDict(frozen=True)


class Group(BaseModel):
    """One forced-ranking question: a fixed, ordered set of items."""

    group_number: int = Field(ge=1, le=GROUPS_PER_STAGE)
    items: tuple[Item, ...]

    model_config = ConfigDict(frozen=True)

    def get_item(self, text: str) -> Item | None:
        """Get an item by its text."""
        for item in self.items:
            if item.text == text:
                return item
        return None


class StageInfo(BaseModel):
    """Header shown to the candidate for a stage."""

    stage: Stage
    number: int
    title: str
    instruction: str

    model_config = ConfigDict(frozen=True)

    @property
    def total_groups(self) -> int:
        return GROUPS_PER_STAGE

    @property
    def max_rank(self) -> int:
        return self.stage.max_rank


class ProfileSpec(BaseModel):
    """Descriptive sheet for a primary DISC profile."""

    factor: DiscFactor
    name: str
    description: str
    full_description: str
    strengths: tuple[str, ...]
    challenges: tuple[str, ...]
    ideal_environment: str

    model_config = ConfigDict(frozen=True)


class Catalog(BaseModel):
    """Complete stage catalog.

    Natural and Adapted stages rank the same adjective groups; the Values
    stage ranks the phrase groups.
    """

    type: Literal["stage_catalog"]
    catalog_id: str
    version: str
    locale: str | None = None
    stages: tuple[StageInfo, ...]
    disc_groups: tuple[Group, ...]
    values_groups: tuple[Group, ...]
    profiles: tuple[ProfileSpec, ...]

    model_config = ConfigDict(frozen=True)

    def groups(self, stage: Stage) -> tuple[Group, ...]:
        """All groups ranked in a stage, ordered by group number."""
        return self.disc_groups if stage.is_disc else self.values_groups

    def group(self, stage: Stage, group_number: int) -> Group:
        """Get a group by stage and number.

        Raises:
            KeyError: If the stage has no such group.
        """
        for group in self.groups(stage):
            if group.group_number == group_number:
                return group
        raise KeyError(f"No group {group_number} in stage {stage.value}")

    def items(self, stage: Stage, group_number: int) -> tuple[Item, ...]:
        """Items of a group, in catalog order."""
        return self.group(stage, group_number).items

    def stage_info(self, stage: Stage) -> StageInfo:
        """Get the header for a stage."""
        for info in self.stages:
            if info.stage == stage:
                return info
        raise KeyError(f"No stage info for {stage.value}")

    def profile(self, factor: DiscFactor | str) -> ProfileSpec:
        """Get the profile sheet for a DISC factor."""
        factor = DiscFactor(factor)
        for profile in self.profiles:
            if profile.factor == factor:
                return profile
        raise KeyError(f"No profile for factor {factor.value}")

    def profile_named(self, name: str) -> ProfileSpec | None:
        """Get a profile sheet by its display name (e.g. ``Diretor``)."""
        for profile in self.profiles:
            if profile.name == name:
                return profile
        return None

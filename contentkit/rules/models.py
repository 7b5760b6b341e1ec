from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from contentkit.components.validation import ValidationConfig
from contentkit.components.workflow import WorkflowConfig


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid")


class ApiRules(_Section):
    version: str = "1.0.0"
    default_page: int = Field(default=1, ge=1)
    default_limit: int = Field(default=10, ge=1)
    max_limit: int = Field(default=100, ge=1)

    @model_validator(mode="after")
    def _default_within_max(self) -> "ApiRules":
        if self.default_limit > self.max_limit:
            raise ValueError("api.default_limit must not exceed api.max_limit")
        return self


class SchemaRules(_Section):
    # What deleting a content type does to its entries
    on_delete: Literal["restrict", "cascade", "orphan"] = "restrict"


class ValidationRules(_Section):
    enforce_field_formats: bool = False
    apply_defaults: bool = True

    def to_config(self) -> ValidationConfig:
        return ValidationConfig(
            enforce_field_formats=self.enforce_field_formats,
            apply_defaults=self.apply_defaults,
        )


class WorkflowRules(_Section):
    archived_is_terminal: bool = False
    require_future_schedule: bool = False
    schedule_grace_seconds: int = Field(default=0, ge=0)

    def to_config(self) -> WorkflowConfig:
        return WorkflowConfig(
            archived_is_terminal=self.archived_is_terminal,
            require_future_schedule=self.require_future_schedule,
            schedule_grace_seconds=self.schedule_grace_seconds,
        )


class SchedulerRules(_Section):
    enabled: bool = False
    poll_interval_seconds: float = Field(default=60.0, gt=0)


class Rules(_Section):
    api: ApiRules = Field(default_factory=ApiRules)
    schema_: SchemaRules = Field(default_factory=SchemaRules, alias="schema")
    validation: ValidationRules = Field(default_factory=ValidationRules)
    workflow: WorkflowRules = Field(default_factory=WorkflowRules)
    scheduler: SchedulerRules = Field(default_factory=SchedulerRules)

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

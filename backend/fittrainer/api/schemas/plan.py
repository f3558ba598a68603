"""Pydantic schemas for profiles, calendars, conversation turns and events."""
from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from fittrainer.services.date_math import parse_date

MEAL_NAMES = ("Breakfast", "Lunch", "Dinner")


def _check_iso_date(value: str) -> str:
    parse_date(value)
    return value


IsoDate = Annotated[str, AfterValidator(_check_iso_date)]


class CamelModel(BaseModel):
    """Accepts and emits camelCase JSON while keeping snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ContractModel(CamelModel):
    """Part of the oracle contract: undeclared fields are rejected."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class UserProfile(CamelModel):
    start_date: Optional[IsoDate] = None
    name: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    height_in: Optional[float] = None
    weight_lb: Optional[float] = None
    target_weight_lb: Optional[float] = None
    activity_level: Optional[str] = None
    hours_per_week: Optional[float] = None
    rest_days: List[str]
    train_days: List[str]
    goals: List[str]


class Meal(ContractModel):
    name: Literal["Breakfast", "Lunch", "Dinner"]
    items: List[str]


class Workout(ContractModel):
    duration: Optional[Annotated[int, Field(ge=5, le=180)]]
    items: List[str]


class DayPlan(ContractModel):
    date: IsoDate
    type: Optional[Literal["rest", "training"]]
    workout: Workout
    meals: List[Meal] = Field(..., min_length=3, max_length=3)

    @model_validator(mode="after")
    def _require_each_meal(self) -> "DayPlan":
        names = {meal.name for meal in self.meals}
        missing = [name for name in MEAL_NAMES if name not in names]
        if missing:
            raise ValueError(f"meals must include {', '.join(missing)}")
        return self

    @property
    def is_rest(self) -> bool:
        return self.type == "rest"


class PlanMeta(ContractModel):
    start_date: IsoDate


class Calendar(ContractModel):
    meta: PlanMeta
    calendar: List[DayPlan]
    overrides_summary: Optional[str] = None


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class TrainerRequest(BaseModel):
    input: Optional[str] = None


class TrainerResponse(BaseModel):
    messages: List[ChatMessage]


class CalendarEvent(CamelModel):
    id: str
    title: str
    all_day: bool
    start: str
    end: str
    color: str
    type: Literal["workout", "meal"]
    meta: Dict[str, Any] = Field(default_factory=dict)


class CalendarEventsResponse(BaseModel):
    year: int
    month: int
    events: List[CalendarEvent]

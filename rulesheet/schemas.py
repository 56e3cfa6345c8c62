from typing import Any

from pydantic import BaseModel, Field


class ArmyListForm(BaseModel):
    name: str = Field(..., max_length=120)
    game: str | None = Field(None, max_length=50)
    data: dict[str, Any] = Field(default_factory=dict)


class ArmyListOut(BaseModel):
    id: str
    name: str
    game: str | None = None
    data: dict[str, Any]


class SpecialRulesResponse(BaseModel):
    list_id: str
    language: str
    rules: list[str]
    loading: bool = False
    contents: dict[str, str] = Field(default_factory=dict)

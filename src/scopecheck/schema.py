from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, Field


class TokenDTO(BaseModel):
    startIndex: int = Field(validation_alias=AliasChoices("startIndex", "start"))
    endIndex: int = Field(validation_alias=AliasChoices("endIndex", "end"))
    scopes: List[str] = []


class LineDTO(BaseModel):
    text: str
    tokens: List[TokenDTO] = []


class FixtureCaseDTO(BaseModel):
    name: Optional[str] = None
    lines: List[LineDTO]
    spec: List[Dict[str, Any]]


class FixtureDocumentDTO(BaseModel):
    cases: List[FixtureCaseDTO]

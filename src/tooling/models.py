"""Pydantic models for the tool manifest and normalized tool results."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ParameterSpec(BaseModel):
    type: str
    default: Any = None
    maximum: Optional[int] = None
    items: Optional[Dict[str, str]] = None


class ReturnSpec(BaseModel):
    type: str
    properties: Optional[Dict[str, Dict[str, str]]] = None
    items: Optional[Dict[str, str]] = None


class ToolSpec(BaseModel):
    """A single manifest entry as advertised on ``/mcp/tools``."""

    name: str
    description: str
    parameters: Dict[str, ParameterSpec] = Field(default_factory=dict)
    returns: ReturnSpec


class ToolsFile(BaseModel):
    version: int = Field(default=1)
    tools: List[ToolSpec]

    @model_validator(mode="after")
    def _ensure_unique_names(self) -> "ToolsFile":
        seen = set()
        for tool in self.tools:
            if tool.name in seen:
                raise ValueError(f"Duplicate tool detected: {tool.name}")
            seen.add(tool.name)
        return self

    @classmethod
    def load(cls, path: Path) -> "ToolsFile":
        if not path.exists():
            raise FileNotFoundError(f"Tool configuration file not found: {path}")
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        return cls(**data)

    def names(self) -> List[str]:
        return [tool.name for tool in self.tools]

    def to_manifest(self) -> List[Dict[str, Any]]:
        # exclude_unset keeps declared defaults such as "" and [] while
        # dropping keys the manifest never mentioned.
        return [tool.model_dump(exclude_unset=True) for tool in self.tools]


class Account(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    description: Optional[str] = None
    created: Optional[str] = None
    user_id: Optional[str] = Field(default=None, alias="userId")


class Balance(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    balance: float
    total_balance: Optional[float] = Field(default=None, alias="totalBalance")
    currency: Optional[str] = None
    spend_today: Optional[float] = Field(default=None, alias="spendToday")


class Transaction(BaseModel):
    id: str
    amount: float
    description: Optional[str] = None
    date: Optional[str] = None
    currency: Optional[str] = None
    merchant: Any = None
    category: Optional[str] = None
    notes: Optional[str] = None


class Pot(BaseModel):
    id: str
    name: Optional[str] = None
    balance: float


class ToolDecision(BaseModel):
    """The assistant's choice of data tool, parsed from model output."""

    tool: str
    params: Dict[str, Any] = Field(default_factory=dict)
    response: Optional[str] = None

    @field_validator("params", mode="before")
    @classmethod
    def _default_params(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def is_direct_answer(self) -> bool:
        return self.tool == "none"

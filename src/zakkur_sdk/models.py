"""Pydantic wire models for request bodies and upstream error envelopes."""

from __future__ import annotations

from typing import Any, ClassVar, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # aliases left out of the body when unset
    omit_when_none: ClassVar[Tuple[str, ...]] = ()

    def to_payload(self) -> Dict[str, Any]:
        payload = self.model_dump(by_alias=True)
        for name in self.omit_when_none:
            if payload.get(name) is None:
                payload.pop(name, None)
        return payload


class DecisionRequest(WireModel):
    context: Any


class AgentConsultRequest(WireModel):
    context: Any
    thread_id: Any = Field(default=None, alias="threadId")

    omit_when_none: ClassVar[Tuple[str, ...]] = ("threadId",)


class AgentExecuteRequest(WireModel):
    task: Any
    thread_id: Any = Field(default=None, alias="threadId")

    omit_when_none: ClassVar[Tuple[str, ...]] = ("threadId",)


class UpstreamErrorBody(BaseModel):
    model_config = ConfigDict(extra="allow")

    message: Optional[str] = None
    code: Optional[str] = None
    errors: Any = None


def parse_error_body(body: Any) -> UpstreamErrorBody:
    """Best-effort view of an error response; unusable bodies yield empty fields."""
    if not isinstance(body, dict):
        return UpstreamErrorBody()
    try:
        return UpstreamErrorBody.model_validate(body)
    except ValidationError:
        return UpstreamErrorBody(errors=body.get("errors"))


__all__ = [
    "AgentConsultRequest",
    "AgentExecuteRequest",
    "DecisionRequest",
    "UpstreamErrorBody",
    "parse_error_body",
]

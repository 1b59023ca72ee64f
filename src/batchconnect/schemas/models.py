from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BatchConnectSpec(BaseModel):
    # `batch_connect` block of a rendered submit.yml
    model_config = ConfigDict(extra="allow")

    native: List[str] = Field(default_factory=list)

    @field_validator("native", mode="before")
    @classmethod
    def _coerce_native(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, (str, int, float)):
            return [str(v)]
        if isinstance(v, list):
            return [str(item) for item in v if item is not None]
        return v


class SubmitSpec(BaseModel):
    """
    Directive settings parsed from an app's rendered submit.yml.

    Only `batch_connect.native` and `email` drive the header; other keys
    (template, conn_params, ...) are accepted and ignored.
    """

    model_config = ConfigDict(extra="allow")

    batch_connect: BatchConnectSpec = Field(default_factory=BatchConnectSpec)
    email: Optional[str] = None

    @field_validator("batch_connect", mode="before")
    @classmethod
    def _none_is_empty(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("email", mode="before")
    @classmethod
    def _email_to_str(cls, v: Any) -> Any:
        return None if v is None else str(v)

    @property
    def native(self) -> List[str]:
        return self.batch_connect.native

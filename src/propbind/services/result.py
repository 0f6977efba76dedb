"""Result envelope returned by BindService to the command layer.

INVARIANT: CLI-facing service methods return a ServiceResult instead of
raising. A failed result always carries an error code, a successful one
never does.
"""

from __future__ import annotations

from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ServiceError(BaseModel):
    """Stable error code plus the message and context shown to the user."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one ``show``, ``check`` or ``template`` run.

    ``data`` holds the operation payload, ``warnings`` the non-fatal notes
    (an incomplete ``show --stump`` bind, for instance).
    """

    model_config = ConfigDict(frozen=True)

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None

    @model_validator(mode="after")
    def _error_matches_outcome(self) -> Self:
        if self.ok == (self.error is not None):
            msg = "a failed result needs an error and a successful one must not have one"
            raise ValueError(msg)
        return self

    @classmethod
    def success(cls, op: str, data: dict[str, Any], *, warnings: list[str] | None = None) -> ServiceResult:
        return cls(ok=True, op=op, data=data, warnings=warnings or [])

    @classmethod
    def failure(cls, op: str, code: str, message: object, **detail: Any) -> ServiceResult:
        """Failed result; *message* may be the exception that caused it."""
        return cls(ok=False, op=op, error=ServiceError(code=code, message=str(message), detail=detail))

    @property
    def error_code(self) -> str | None:
        return self.error.code if self.error is not None else None

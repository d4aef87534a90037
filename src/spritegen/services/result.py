"""ServiceResult and ServiceError: the contract between services and the CLI.

The core pipeline raises typed :class:`~spritegen.domain.errors.SpriteError`
subclasses; :class:`~spritegen.services.sprite.SpriteService` converts them
into these frozen models so output formatting never deals with exceptions.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from spritegen.domain.errors import SpriteError


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: SpriteError) -> ServiceError:
        detail: dict[str, Any] = {"type": type(exc).__name__}
        if exc.__cause__ is not None:
            detail["cause"] = repr(exc.__cause__)
        return cls(code=exc.code, message=str(exc), detail=detail)


class ServiceResult(BaseModel):
    """Return type of every service operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"build"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (timing spans).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

"""Tests for the error taxonomy."""

from __future__ import annotations

import pytest

from spritegen.domain.errors import (
    InvalidDimension,
    LayoutError,
    PersistenceError,
    RenderError,
    SourceResolutionError,
    SpriteError,
    StylesheetError,
    UnknownAdapterError,
)

ALL_ERRORS = [
    SourceResolutionError,
    InvalidDimension,
    LayoutError,
    RenderError,
    StylesheetError,
    PersistenceError,
    UnknownAdapterError,
]


class TestErrors:
    @pytest.mark.parametrize("error_cls", ALL_ERRORS)
    def test_subclass_of_sprite_error(self, error_cls: type[SpriteError]) -> None:
        assert issubclass(error_cls, SpriteError)

    def test_codes_are_unique(self) -> None:
        codes = [cls.code for cls in ALL_ERRORS]
        assert len(set(codes)) == len(codes)

    def test_builtin_compatibility(self) -> None:
        assert issubclass(InvalidDimension, ValueError)
        assert issubclass(UnknownAdapterError, LookupError)

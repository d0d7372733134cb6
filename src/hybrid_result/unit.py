"""UNIT: payload for successful operations that produce nothing meaningful."""

from __future__ import annotations

from typing import Final, final

__all__ = ['UNIT', 'UnitType']


@final
class UnitType:
    """Type of the UNIT singleton."""

    __slots__ = ()
    _instance: UnitType | None = None

    def __new__(cls) -> UnitType:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'UNIT'

    def __reduce__(self) -> str:
        return 'UNIT'


UNIT: Final = UnitType()

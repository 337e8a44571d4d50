"""Common types and helpers shared across models."""

from datetime import UTC, datetime
from enum import StrEnum


class CityKey(StrEnum):
    TAIPEI = "taipei"
    NEW_TAIPEI = "newtaipei"
    TAOYUAN = "taoyuan"
    TAICHUNG = "taichung"
    TAINAN = "tainan"
    KAOHSIUNG = "kaohsiung"


def utc_now() -> datetime:
    return datetime.now(UTC)


def utc_now_iso() -> str:
    return utc_now().isoformat()

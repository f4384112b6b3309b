"""Schemas for the third-party payloads proxied by this service.

Upstream JSON is validated at the boundary. A payload that does not fit its
schema is kept as :class:`Unparsed` so callers can still pass it through
without ever treating it as the typed value.
"""

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

M = TypeVar("M", bound=BaseModel)


@dataclass
class Parsed(Generic[M]):
    value: M


@dataclass
class Unparsed:
    raw: Any
    error: str


def parse_payload(model: type[M], payload: Any) -> Union[Parsed[M], Unparsed]:
    try:
        return Parsed(model.model_validate(payload))
    except ValidationError as exc:
        return Unparsed(raw=payload, error=str(exc))


# Aladhan

class AladhanEnvelope(BaseModel):
    model_config = ConfigDict(extra="allow")

    code: int
    status: str
    data: Any


# Hadith CDN

class HadithGrade(BaseModel):
    name: Optional[str] = None
    grade: Optional[str] = None


class HadithReference(BaseModel):
    book: Optional[int] = None
    hadith: Optional[int] = None


class HadithItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    hadithnumber: Optional[Union[int, float]] = None
    arabicnumber: Optional[Union[int, float, str]] = None
    text: str = ""
    grades: list[HadithGrade] = Field(default_factory=list)
    reference: Optional[HadithReference] = None


class HadithSectionDetail(BaseModel):
    model_config = ConfigDict(extra="ignore")

    hadithnumber_first: Optional[Union[int, float]] = None
    hadithnumber_last: Optional[Union[int, float]] = None


class HadithMetadata(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    section: dict[str, str] = Field(default_factory=dict)
    section_detail: dict[str, HadithSectionDetail] = Field(default_factory=dict)


class HadithEdition(BaseModel):
    metadata: HadithMetadata = Field(default_factory=HadithMetadata)
    hadiths: list[HadithItem] = Field(default_factory=list)


# Tafsir

class TafsirVerse(BaseModel):
    ayah: int = Field(0, validation_alias=AliasChoices("aya", "ayah", "verse", "id"))
    text: str = Field("", validation_alias=AliasChoices("text", "translation"))
    footnotes: Optional[str] = Field(
        None, validation_alias=AliasChoices("footnotes", "footnote")
    )

    @field_validator("ayah", mode="before")
    @classmethod
    def coerce_ayah(cls, value):
        try:
            return int(float(value))
        except (TypeError, ValueError):
            return 0

    @field_validator("text", mode="before")
    @classmethod
    def coerce_text(cls, value):
        return "" if value is None else str(value)

    @field_validator("footnotes", mode="before")
    @classmethod
    def coerce_footnotes(cls, value):
        return str(value) if value else None


class TafsirSura(BaseModel):
    lang: str
    sura: int
    verses: list[TafsirVerse]


def normalize_tafsir(payload: Any) -> list[TafsirVerse]:
    """Accepts ``{"result": [...]}``, a bare list, or an already normalized sura."""
    if isinstance(payload, dict) and isinstance(payload.get("result"), list):
        items = payload["result"]
    elif isinstance(payload, dict) and isinstance(payload.get("verses"), list):
        items = payload["verses"]
    elif isinstance(payload, list):
        items = payload
    else:
        items = []
    return [
        TafsirVerse.model_validate(item if isinstance(item, dict) else {})
        for item in items
    ]

"""Answer model — everything the user has entered during one wizard run.

The ``AnswerSet`` is frozen: every change produces a replacement instance via
``model_copy``.  The sequencer and photo intake hand back new instances, so a
snapshot given to the analysis pipeline can never change underneath it.

Closed sets are plain ``str`` enums; their values double as the option ids
used in the YAML catalog and the HTTP API.
"""

from __future__ import annotations

import base64
import enum
import re

from pydantic import BaseModel, ConfigDict, Field


# --- Closed sets ---

class HazardCheck(str, enum.Enum):
    """Safety-gate checkboxes; all must be ticked before the wizard continues."""

    EXPOSED_WIRING = "EXPOSED_WIRING"
    SAGGING_CEILING = "SAGGING_CEILING"
    BREAKER_TRIPPING = "BREAKER_TRIPPING"


class LeakLocation(str, enum.Enum):
    CEILING = "CEILING"
    WALL = "WALL"
    FLOOR = "FLOOR"
    BOILER = "BOILER"
    VERANDA = "VERANDA"
    ROOF = "ROOF"
    UNKNOWN = "UNKNOWN"


class Symptom(str, enum.Enum):
    DRIPPING = "DRIPPING"
    STAINED = "STAINED"
    MOLD = "MOLD"
    RAIN_ONLY = "RAIN_ONLY"
    CONSTANT = "CONSTANT"
    INTERMITTENT = "INTERMITTENT"


class Frequency(str, enum.Enum):
    FIRST_TIME = "FIRST_TIME"
    DAYS_AGO = "DAYS_AGO"
    RECURRING = "RECURRING"
    CONSTANT = "CONSTANT"


class UpperFloorRelation(str, enum.Enum):
    YES = "YES"
    NO = "NO"
    UNKNOWN = "UNKNOWN"


class RepairHistory(str, enum.Enum):
    NONE = "NONE"
    ONCE = "ONCE"
    MULTIPLE = "MULTIPLE"
    UNKNOWN = "UNKNOWN"


class BuildingType(str, enum.Enum):
    APARTMENT = "APARTMENT"
    VILLA = "VILLA"
    HOUSE = "HOUSE"
    OFFICETEL = "OFFICETEL"


class BuildingAge(str, enum.Enum):
    UNDER_10 = "UNDER_10"
    BETWEEN_10_20 = "BETWEEN_10_20"
    OVER_20 = "OVER_20"
    UNKNOWN = "UNKNOWN"


class LeakSeverity(str, enum.Enum):
    """SMALL = minor (damp/stain), MEDIUM = moderate (regular drips),
    LARGE = severe (pouring/pooling)."""

    SMALL = "SMALL"
    MEDIUM = "MEDIUM"
    LARGE = "LARGE"


# Bound AnswerSet field -> closed set.  Used by the catalog to validate
# option ids and by the sequencer to coerce raw values.
FIELD_ENUMS: dict[str, type[enum.Enum]] = {
    "hazard_checks": HazardCheck,
    "location": LeakLocation,
    "symptoms": Symptom,
    "frequency": Frequency,
    "upper_floor_relation": UpperFloorRelation,
    "repair_history": RepairHistory,
    "building_type": BuildingType,
    "building_age": BuildingAge,
    "leak_severity": LeakSeverity,
}


# --- Encoded photo payload ---

_DATA_URL_RE = re.compile(r"^data:(image/[a-z0-9.+-]+);base64,(.+)$", re.IGNORECASE)


class EncodedImage(BaseModel):
    """Self-contained image payload: media type plus base64-encoded bytes."""

    model_config = ConfigDict(frozen=True)

    media_type: str
    data: str

    @classmethod
    def from_bytes(cls, raw: bytes, media_type: str) -> EncodedImage:
        return cls(media_type=media_type, data=base64.b64encode(raw).decode("ascii"))

    @classmethod
    def from_data_url(cls, url: str) -> EncodedImage:
        """Parse a ``data:image/...;base64,...`` URL.

        Raises:
            ValueError: if the string is not an image data URL.
        """
        match = _DATA_URL_RE.match(url.strip())
        if match is None:
            raise ValueError("Not an image data URL")
        return cls(media_type=match.group(1).lower(), data=match.group(2))

    @property
    def data_url(self) -> str:
        return f"data:{self.media_type};base64,{self.data}"

    def raw_bytes(self) -> bytes:
        return base64.b64decode(self.data)


# --- Answer set ---

class AnswerSet(BaseModel):
    """Accumulated responses for one wizard run.

    ``None`` marks a single-select field the user has not answered yet.
    """

    model_config = ConfigDict(frozen=True)

    safety_acknowledged: bool = False
    hazard_checks: frozenset[HazardCheck] = frozenset()
    location: LeakLocation | None = None
    symptoms: frozenset[Symptom] = frozenset()
    frequency: Frequency | None = None
    upper_floor_relation: UpperFloorRelation | None = None
    repair_history: RepairHistory | None = None
    building_type: BuildingType | None = None
    building_age: BuildingAge | None = None
    leak_severity: LeakSeverity | None = None
    freeform_note: str = ""
    photos: tuple[EncodedImage, ...] = Field(default_factory=tuple)

    def replace(self, **changes) -> AnswerSet:
        """Return a copy with ``changes`` applied (validated)."""
        data = self.model_dump()
        data.update(changes)
        return AnswerSet.model_validate(data)

    def ordered_symptoms(self) -> list[Symptom]:
        """Symptoms in declaration order, for stable rendering."""
        return [s for s in Symptom if s in self.symptoms]

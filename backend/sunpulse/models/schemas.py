from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _ValueObject(BaseModel):
    """Immutable, camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class ImageRef(_ValueObject):
    url: str


class ImageSet(_ValueObject):
    near_now: ImageRef
    near_prev: ImageRef
    far: ImageRef


class Metrics(_ValueObject):
    xray_class: str = "B1.0"
    kp: float = 2.0
    vsw: float = 380.0  # km/s
    bz: float = -1.0  # nT
    stamp: str
    pulse: float = Field(ge=0.0, le=1.0)


class Marker(_ValueObject):
    lat: float = Field(ge=-90.0, le=90.0)
    lon: float = Field(ge=-180.0, le=180.0)
    strength: float = Field(ge=0.0)


class Snapshot(_ValueObject):
    generated_at: int  # epoch milliseconds
    images: ImageSet
    metrics: Metrics
    pulse: float = Field(ge=0.0, le=1.0)
    markers: List[Marker]


class AlertEntry(_ValueObject):
    text: str
    level: str
    source: str


class CmeEvent(_ValueObject):
    severity: Literal["minor", "moderate"]
    eta_hours: Optional[float] = None
    earth_directed: bool = False
    target: str = "Earth"
    impact_summary: str = "Speed unavailable"


class PlanetPosition(_ValueObject):
    name: str
    semi_major_axis_au: float = Field(alias="semiMajorAxisAU")
    angle_rad: float

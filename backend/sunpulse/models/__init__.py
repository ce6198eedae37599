from sunpulse.models.schemas import (
    AlertEntry,
    CmeEvent,
    ImageRef,
    ImageSet,
    Marker,
    Metrics,
    PlanetPosition,
    Snapshot,
)

__all__ = [
    "AlertEntry",
    "CmeEvent",
    "ImageRef",
    "ImageSet",
    "Marker",
    "Metrics",
    "PlanetPosition",
    "Snapshot",
]

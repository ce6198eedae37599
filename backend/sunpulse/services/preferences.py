"""
Presentation-layer preferences.

The gateway does not interpret these values; it only holds them for the
desktop shell and renderer, which read them back through the getters.
Persisting them across runs is left to the shell.
"""

import logging
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from sunpulse.core.errors import InvalidPreferences
from sunpulse.services.parsing import to_float

logger = logging.getLogger(__name__)

MIN_WINDOW_SIZE = 220
MAX_WINDOW_SIZE = 640


class _Section(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WindowPreferences(_Section):
    width: int = 280
    height: int = 280
    always_on_top: bool = True
    frame_rate: int = 30
    fov: float = 45
    quality: str = "balanced"


class RenderingPreferences(_Section):
    source: str = "auto"
    band: str = "auto"
    view: str = "norm"
    side: str = "near"


class HologramPreferences(_Section):
    preset: str = "off"
    streaming: bool = False
    webrtc: bool = False


class ClientPreferences(_Section):
    window: WindowPreferences = Field(default_factory=WindowPreferences)
    rendering: RenderingPreferences = Field(default_factory=RenderingPreferences)
    hologram: HologramPreferences = Field(default_factory=HologramPreferences)


def _clamp_size(value: float) -> int:
    return max(MIN_WINDOW_SIZE, min(MAX_WINDOW_SIZE, round(value)))


class PreferenceStore:
    def __init__(self, initial: Optional[ClientPreferences] = None):
        self._prefs = initial or ClientPreferences()

    def get(self) -> Dict[str, Any]:
        return self._prefs.model_dump(by_alias=True)

    def apply(self, incoming: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge a partial camelCase config (any of window/rendering/hologram)
        into the current preferences. Window size is clamped to 220-640.

        Raises InvalidPreferences and keeps the current values when the
        config is not an object or a field has the wrong type.
        """
        if not isinstance(incoming, dict):
            raise InvalidPreferences(f"expected an object, got {type(incoming).__name__}")

        merged = self.get()
        for section in ("window", "rendering", "hologram"):
            if section not in incoming:
                continue
            if not isinstance(incoming[section], dict):
                raise InvalidPreferences(f"{section} must be an object")
            merged[section].update(incoming[section])

        window = merged["window"]
        for dimension in ("width", "height"):
            size = to_float(window[dimension])
            if size is None:
                raise InvalidPreferences(f"window.{dimension} must be a number, got {window[dimension]!r}")
            window[dimension] = _clamp_size(size)

        try:
            self._prefs = ClientPreferences.model_validate(merged)
        except ValidationError as e:
            raise InvalidPreferences(str(e)) from e
        logger.info(f"Applied client preferences: {sorted(k for k in incoming if k in merged)}")
        return self.get()

    def window_geometry(self) -> Tuple[int, int]:
        return self._prefs.window.width, self._prefs.window.height

    def always_on_top(self) -> bool:
        return self._prefs.window.always_on_top

    def frame_rate(self) -> int:
        return self._prefs.window.frame_rate

    def field_of_view(self) -> float:
        return self._prefs.window.fov

    def streaming_enabled(self) -> bool:
        return self._prefs.hologram.streaming

    def preset(self) -> str:
        return self._prefs.hologram.preset

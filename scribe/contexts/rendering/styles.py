"""
Style profiles for the layout engine.

One configurable profile replaces the per-generator palettes: a profile is
`defaults` from style_profiles.yaml, overlaid with a named preset, overlaid
with dotlist overrides ("layout.margin=18", "colors.primary=[0,0,0]").
"""

import os
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from dotenv import load_dotenv

from scribe.contexts.rendering.keywords import KeywordCategory
from scribe.utils.config_loader import InvalidConfigError, load_config, merge_configs

load_dotenv()
DEFAULT_STYLE = os.getenv("SCRIBE_DEFAULT_STYLE", "professional")

# Line height in mm per point of font size, before line_spacing
LINE_HEIGHT_FACTOR = 0.35

OVERFLOW_POLICIES = ("spill", "truncate")

RGB = Tuple[int, int, int]


@dataclass(frozen=True)
class Palette:
    """RGB colors used by the layout engine."""

    primary: RGB
    secondary: RGB
    accent: RGB
    text: RGB
    muted: RGB
    rule: RGB
    header_background: RGB
    technical: RGB
    professional: RGB
    metric: RGB

    def for_category(self, category: KeywordCategory) -> RGB:
        """Emphasis color of a keyword category (body text color for none)."""
        if category == KeywordCategory.TECHNICAL:
            return self.technical
        if category == KeywordCategory.PROFESSIONAL:
            return self.professional
        if category == KeywordCategory.METRIC:
            return self.metric
        return self.text


@dataclass(frozen=True)
class Typography:
    """Font family and sizes in points."""

    family: str
    font_path: str
    name_size: float
    title_size: float
    contact_size: float
    header_size: float
    subheader_size: float
    body_size: float


@dataclass(frozen=True)
class LayoutSettings:
    """Spacing knobs in millimeters."""

    margin: float
    line_spacing: float
    left_column_ratio: float
    column_gap: float
    section_spacing: float
    paragraph_spacing: float
    bullet_indent: float
    bullet_radius: float
    overflow: str

    def line_height(self, font_size: float) -> float:
        """Vertical advance in mm for one line at font_size points."""
        return font_size * LINE_HEIGHT_FACTOR * self.line_spacing


@dataclass(frozen=True)
class Features:
    highlight_keywords: bool
    bold_keywords: bool
    header_band: bool
    section_rule: bool


@dataclass(frozen=True)
class StyleProfile:
    """
    Complete, immutable rendering style.

    Attributes:
        name: Preset name the profile was built from
        colors: Palette
        fonts: Typography
        layout: LayoutSettings
        features: Feature switches
    """

    name: str
    colors: Palette
    fonts: Typography
    layout: LayoutSettings
    features: Features

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def list_styles() -> List[str]:
    """Names of the available presets."""
    return list(load_config("style_profiles", required_keys=("defaults", "presets"))["presets"].keys())


def _rgb(name: str, value: Any) -> RGB:
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise InvalidConfigError(f"Color '{name}' must be an [r, g, b] list, got {value!r}")
    try:
        rgb = tuple(int(channel) for channel in value)
    except (TypeError, ValueError) as e:
        raise InvalidConfigError(f"Color '{name}' has a non-integer channel: {value!r}") from e
    if any(channel < 0 or channel > 255 for channel in rgb):
        raise InvalidConfigError(f"Color '{name}' channels must be 0-255, got {value!r}")
    return rgb


def _build_profile(name: str, data: Dict[str, Any]) -> StyleProfile:
    try:
        colors = Palette(**{key: _rgb(key, value) for key, value in data["colors"].items()})
        fonts = Typography(**data["fonts"])
        layout = LayoutSettings(**data["layout"])
        features = Features(**{key: bool(value) for key, value in data["features"].items()})
    except (KeyError, TypeError) as e:
        raise InvalidConfigError(f"Style '{name}' is incomplete or has unknown keys: {e}") from e

    if layout.overflow not in OVERFLOW_POLICIES:
        raise InvalidConfigError(f"layout.overflow must be one of {OVERFLOW_POLICIES}, got '{layout.overflow}'")
    if not 0 < layout.left_column_ratio < 1:
        raise InvalidConfigError(f"layout.left_column_ratio must be between 0 and 1, got {layout.left_column_ratio}")
    sizes = [fonts.name_size, fonts.title_size, fonts.contact_size, fonts.header_size, fonts.subheader_size, fonts.body_size]
    if any(float(size) <= 0 for size in sizes) or layout.line_spacing <= 0:
        raise InvalidConfigError(f"Style '{name}': font sizes and line_spacing must be positive")
    if layout.margin < 0 or layout.column_gap < 0:
        raise InvalidConfigError(f"Style '{name}': margin and column_gap must not be negative")

    return StyleProfile(name=name, colors=colors, fonts=fonts, layout=layout, features=features)


def resolve_style(name: Optional[str] = None, overrides: Optional[Sequence[str]] = None) -> StyleProfile:
    """
    Build a StyleProfile from defaults, a preset and dotlist overrides.

    Args:
        name: Preset name (default: SCRIBE_DEFAULT_STYLE or "professional")
        overrides: Dotlist overrides, e.g. ["layout.margin=18", "features.header_band=true"]

    Returns:
        Immutable StyleProfile

    Raises:
        InvalidConfigError: Unknown preset, malformed override, or invalid values

    Example:
        >>> style = resolve_style("modern", ["layout.overflow=truncate"])
        >>> style.layout.overflow
        'truncate'
    """
    name = name or DEFAULT_STYLE
    config = load_config("style_profiles", required_keys=("defaults", "presets"))
    presets = config["presets"]
    if name not in presets:
        raise InvalidConfigError(f"Unknown style '{name}'. Available: {sorted(presets)}")

    merged = merge_configs(config["defaults"], presets[name] or {}, dotlist=list(overrides or []))
    return _build_profile(name, merged)

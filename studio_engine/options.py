"""Enumerated user options, output variants and inspiration templates."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, TypeVar

from .errors import ValidationError


class RoomType(str, Enum):
    LIVING_ROOM = "Living Room"
    BEDROOM = "Bedroom"
    KITCHEN = "Kitchen"
    OFFICE = "Home Office"
    BATHROOM = "Bathroom"


class DecorStyle(str, Enum):
    MODERN = "Modern"
    SCANDINAVIAN = "Scandinavian"
    BOHEMIAN = "Bohemian"
    INDUSTRIAL = "Industrial"
    MINIMALIST = "Minimalist"


class LightingType(str, Enum):
    BRIGHT_NATURAL = "Bright Natural Light"
    WARM_AMBIENT = "Warm Ambient Lighting"
    DRAMATIC_ACCENT = "Dramatic Accent Lighting"


class Tone(str, Enum):
    PROFESSIONAL = "Professional"
    CASUAL = "Casual"
    WITTY = "Witty"
    INSPIRATIONAL = "Inspirational"
    URGENT = "Urgent"


class Audience(str, Enum):
    GENERAL = "General Public"
    PROFESSIONALS = "Industry Professionals"
    YOUNG_ADULTS = "Young Adults"
    SMALL_BUSINESS = "Small Business Owners"
    TECH = "Tech Enthusiasts"


class SocialPlatform(str, Enum):
    LINKEDIN = "LinkedIn"
    TWITTER = "Twitter/X"
    INSTAGRAM = "Instagram"


class AspectRatio(str, Enum):
    SQUARE = "1:1"
    WIDESCREEN = "16:9"
    PORTRAIT = "3:4"


class ImageQuality(str, Enum):
    ULTRA = "ultra"
    BALANCED = "balanced"
    FASTEST = "fastest"


@dataclass(frozen=True)
class QualityOption:
    quality: ImageQuality
    name: str
    description: str


IMAGE_QUALITY_OPTIONS: tuple[QualityOption, ...] = (
    QualityOption(ImageQuality.ULTRA, "Ultra Quality", "Highest detail, takes more time."),
    QualityOption(ImageQuality.BALANCED, "Balanced", "Good quality and speed."),
    QualityOption(ImageQuality.FASTEST, "Fastest", "Lower detail, quicker results."),
)


@dataclass(frozen=True)
class OutputVariant:
    """One named, aspect-ratio-tagged slot in a result set."""

    key: str
    label: str
    aspect_ratio: AspectRatio


DESIGN_VARIANTS: tuple[OutputVariant, ...] = (
    OutputVariant("design", "Design", AspectRatio.WIDESCREEN),
)

# Display order of the social flow. Results are always assembled in this order.
SOCIAL_VARIANTS: tuple[OutputVariant, ...] = (
    OutputVariant("linkedin", SocialPlatform.LINKEDIN.value, AspectRatio.SQUARE),
    OutputVariant("twitter", SocialPlatform.TWITTER.value, AspectRatio.WIDESCREEN),
    OutputVariant("instagram", SocialPlatform.INSTAGRAM.value, AspectRatio.PORTRAIT),
)

_PLATFORM_BY_KEY = {
    "linkedin": SocialPlatform.LINKEDIN,
    "twitter": SocialPlatform.TWITTER,
    "instagram": SocialPlatform.INSTAGRAM,
}

SOCIAL_VARIANT_KEYS = frozenset(_PLATFORM_BY_KEY)


def platform_for_variant(variant: OutputVariant) -> SocialPlatform:
    return _PLATFORM_BY_KEY[variant.key]


def design_variants(ratios: Iterable[AspectRatio]) -> tuple[OutputVariant, ...]:
    """One design slot per requested aspect ratio, in the order given."""
    unique: list[AspectRatio] = []
    for ratio in ratios:
        if ratio not in unique:
            unique.append(ratio)
    if not unique or unique == [AspectRatio.WIDESCREEN]:
        return DESIGN_VARIANTS
    return tuple(
        OutputVariant(f"design-{ratio.name.lower()}", f"Design {ratio.value}", ratio) for ratio in unique
    )


@dataclass(frozen=True)
class LightingTemplate:
    lighting: LightingType
    description: str


LIGHTING_TEMPLATES: tuple[LightingTemplate, ...] = (
    LightingTemplate(
        LightingType.BRIGHT_NATURAL,
        "Simulates a room filled with abundant daylight, creating a clean, airy, and energizing atmosphere.",
    ),
    LightingTemplate(
        LightingType.WARM_AMBIENT,
        "Creates a cozy and inviting mood with soft, warm light from lamps and indirect sources.",
    ),
    LightingTemplate(
        LightingType.DRAMATIC_ACCENT,
        "Uses focused spotlights and shadows to highlight specific architectural features or decor pieces.",
    ),
)


@dataclass(frozen=True)
class InspirationTemplate:
    name: str
    description: str
    room_type: RoomType
    decor_style: DecorStyle
    lighting: LightingType


INSPIRATION_TEMPLATES: tuple[InspirationTemplate, ...] = (
    InspirationTemplate(
        name="Cozy Reading Nook",
        description=(
            "A cozy corner in a living room with a comfortable armchair, a warm throw blanket, "
            "a small side table for a cup of tea, and a floor lamp providing soft, warm light. "
            "Bookshelves are filled with books in the background."
        ),
        room_type=RoomType.LIVING_ROOM,
        decor_style=DecorStyle.SCANDINAVIAN,
        lighting=LightingType.WARM_AMBIENT,
    ),
    InspirationTemplate(
        name="Sleek & Productive Office",
        description=(
            "A minimalist home office with a large wooden desk, an ergonomic chair, a sleek monitor, "
            "and a large window that lets in plenty of natural light. The color palette is neutral "
            "with black accents."
        ),
        room_type=RoomType.OFFICE,
        decor_style=DecorStyle.MINIMALIST,
        lighting=LightingType.BRIGHT_NATURAL,
    ),
    InspirationTemplate(
        name="Bohemian Dream Bedroom",
        description=(
            "A bedroom with a low-profile bed, macrame wall hangings, many potted plants (like snake "
            "plants and ferns), and layered textiles with different patterns and textures. The overall "
            "vibe is relaxed and eclectic."
        ),
        room_type=RoomType.BEDROOM,
        decor_style=DecorStyle.BOHEMIAN,
        lighting=LightingType.BRIGHT_NATURAL,
    ),
    InspirationTemplate(
        name="Industrial-Style Kitchen",
        description=(
            "A kitchen with exposed brick walls, open shelving with metal pipes, concrete countertops, "
            "and stainless steel appliances. Pendant lights with Edison bulbs hang over a central island."
        ),
        room_type=RoomType.KITCHEN,
        decor_style=DecorStyle.INDUSTRIAL,
        lighting=LightingType.DRAMATIC_ACCENT,
    ),
)


def find_template(name: str) -> InspirationTemplate:
    normalized = " ".join(str(name or "").split()).lower()
    for template in INSPIRATION_TEMPLATES:
        if template.name.lower() == normalized:
            return template
    raise ValidationError(f"Unknown inspiration template: {name!r}")


def describe_lighting(lighting: LightingType) -> str:
    for template in LIGHTING_TEMPLATES:
        if template.lighting is lighting:
            return template.description
    return ""


_E = TypeVar("_E", bound=Enum)


def parse_choice(enum_type: type[_E], value: str) -> _E:
    """Resolve a display value, member name or case variant to an enum member."""
    if isinstance(value, enum_type):
        return value
    raw = str(value or "").strip()
    lowered = raw.lower()
    for member in enum_type:
        if lowered in {str(member.value).lower(), member.name.lower()}:
            return member
    choices = ", ".join(_choice_labels(enum_type))
    raise ValidationError(f"Invalid {enum_type.__name__} {raw!r}; expected one of: {choices}")


def _choice_labels(enum_type: Iterable[Enum]) -> list[str]:
    return [str(member.value) for member in enum_type]

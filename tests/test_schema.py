from __future__ import annotations

from pathlib import Path

import pytest

from studio_engine.errors import ValidationError
from studio_engine.options import (
    DESIGN_VARIANTS,
    SOCIAL_VARIANTS,
    AspectRatio,
    Audience,
    DecorStyle,
    LightingType,
    OutputVariant,
    RoomType,
    Tone,
    design_variants,
    find_template,
    parse_choice,
)
from studio_engine.schema import (
    AnnotatedEdit,
    ArtifactVariant,
    Comment,
    DesignOptions,
    GeneratedArtifactSet,
    GeneratedImage,
    GenerationRequest,
    PlainEdit,
    SocialOptions,
    validate_edit,
)


def test_fixed_variant_tables() -> None:
    assert [(v.key, v.aspect_ratio) for v in DESIGN_VARIANTS] == [("design", AspectRatio.WIDESCREEN)]
    assert [(v.key, v.aspect_ratio) for v in SOCIAL_VARIANTS] == [
        ("linkedin", AspectRatio.SQUARE),
        ("twitter", AspectRatio.WIDESCREEN),
        ("instagram", AspectRatio.PORTRAIT),
    ]


def test_design_variants_dedupes_and_defaults() -> None:
    assert design_variants([]) == DESIGN_VARIANTS
    assert design_variants([AspectRatio.WIDESCREEN]) == DESIGN_VARIANTS
    variants = design_variants([AspectRatio.SQUARE, AspectRatio.SQUARE, AspectRatio.PORTRAIT])
    assert [v.key for v in variants] == ["design-square", "design-portrait"]


def test_parse_choice_accepts_value_or_name() -> None:
    assert parse_choice(RoomType, "home office") is RoomType.OFFICE
    assert parse_choice(RoomType, "OFFICE") is RoomType.OFFICE
    assert parse_choice(Audience, "Tech Enthusiasts") is Audience.TECH
    with pytest.raises(ValidationError, match="expected one of"):
        parse_choice(DecorStyle, "baroque")


def test_find_template() -> None:
    assert find_template("  industrial-style   KITCHEN ").room_type is RoomType.KITCHEN
    with pytest.raises(ValidationError):
        find_template("Beach House")


def test_request_validation_rules() -> None:
    design = DesignOptions(RoomType.BEDROOM, DecorStyle.BOHEMIAN, LightingType.BRIGHT_NATURAL)
    with pytest.raises(ValidationError, match="Please describe your room."):
        GenerationRequest(" ", design).validate()

    social = SocialOptions(Tone.URGENT, Audience.GENERAL)
    with pytest.raises(ValidationError, match="Please enter an idea."):
        GenerationRequest("", social).validate()

    duplicate = (OutputVariant("a", "A", AspectRatio.SQUARE), OutputVariant("a", "A", AspectRatio.PORTRAIT))
    with pytest.raises(ValidationError, match="Duplicate"):
        GenerationRequest("a room", design, output_variants=duplicate).validate()

    unknown = (OutputVariant("tiktok", "TikTok", AspectRatio.PORTRAIT),)
    with pytest.raises(ValidationError, match="tiktok"):
        GenerationRequest("an idea", social, output_variants=unknown).validate()

    GenerationRequest("an idea", social).validate()
    assert GenerationRequest("an idea", social).flow == "social"


def test_image_data_url_and_path(tmp_path: Path) -> None:
    image = GeneratedImage(b"\x89PNG-bytes")
    assert GeneratedImage.from_data_url(image.to_data_url()) == image
    with pytest.raises(ValidationError):
        GeneratedImage.from_data_url("not a data url")
    with pytest.raises(ValidationError):
        GeneratedImage.from_data_url("data:image/png;base64,@@@")

    path = GeneratedImage(b"jpeg", "image/jpeg").write(tmp_path / "nested" / "photo.jpg")
    loaded = GeneratedImage.from_path(path)
    assert loaded == GeneratedImage(b"jpeg", "image/jpeg")
    assert loaded.extension == "jpg"
    with pytest.raises(ValidationError):
        GeneratedImage.from_path(tmp_path / "missing.png")


def test_artifact_set_replacements_are_immutable() -> None:
    original = GeneratedArtifactSet(
        flow="social",
        text="LinkedIn:\nold li\n\nInstagram:\nold ig",
        variants=(
            ArtifactVariant("linkedin", "LinkedIn", AspectRatio.SQUARE, GeneratedImage(b"li"), "old li"),
            ArtifactVariant("instagram", "Instagram", AspectRatio.PORTRAIT, None, "old ig", "failed"),
        ),
    )
    edited = original.replace_image("instagram", GeneratedImage(b"ig"))
    assert original.variant("instagram").image is None
    assert edited.variant("instagram").image == GeneratedImage(b"ig")
    assert edited.variant("instagram").error is None

    rewritten = edited.replace_content("linkedin", "new li")
    assert rewritten.variant("linkedin").content == "new li"
    assert rewritten.text == "LinkedIn:\nnew li\n\nInstagram:\nold ig"
    assert original.text.startswith("LinkedIn:\nold li")
    with pytest.raises(KeyError):
        original.replace_image("twitter", GeneratedImage(b"x"))


def test_validate_edit() -> None:
    validate_edit(PlainEdit("Add a rug"))
    validate_edit(AnnotatedEdit(GeneratedImage(b"overlay"), (Comment(0, 100, "corner"),)))
    with pytest.raises(ValidationError):
        validate_edit(PlainEdit(""))
    with pytest.raises(ValidationError):
        validate_edit(AnnotatedEdit(GeneratedImage(b"")))
    with pytest.raises(ValidationError):
        validate_edit(AnnotatedEdit(GeneratedImage(b"overlay"), (Comment(-1, 50, "off"),)))

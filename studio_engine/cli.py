"""Studio CLI entrypoints."""

from __future__ import annotations

import argparse
import asyncio
import sys
import uuid
from dataclasses import replace
from pathlib import Path

from .config import StudioConfig
from .engine import StudioEngine
from .errors import StudioError, ValidationError
from .gallery.store import GalleryStore
from .options import (
    IMAGE_QUALITY_OPTIONS,
    INSPIRATION_TEMPLATES,
    LIGHTING_TEMPLATES,
    SOCIAL_VARIANTS,
    AspectRatio,
    Audience,
    DecorStyle,
    ImageQuality,
    LightingType,
    RoomType,
    Tone,
    design_variants,
    find_template,
    parse_choice,
)
from .providers import create_client
from .runs.events import EventWriter
from .runs.export import export_artifact_set
from .schema import (
    AnnotatedEdit,
    Comment,
    DesignOptions,
    GeneratedArtifactSet,
    GeneratedImage,
    GenerationRequest,
    PlainEdit,
    SocialOptions,
)
from .utils import load_dotenv, truncate


def _add_run_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--out", required=True, help="Output directory")
    parser.add_argument("--events", help="Path to events.jsonl")
    parser.add_argument("--provider", help="gemini or dryrun (default: STUDIO_PROVIDER or gemini)")


def _add_generation_args(parser: argparse.ArgumentParser) -> None:
    _add_run_args(parser)
    parser.add_argument("--grounding", action="store_true", help="Let the text step consult web search")
    parser.add_argument("--refine", action="store_true", help="Critique and correct each image once")
    parser.add_argument(
        "--quality",
        default=ImageQuality.BALANCED.value,
        choices=[quality.value for quality in ImageQuality],
    )
    parser.add_argument("--reference", action="append", default=[], help="Reference image (repeatable)")
    parser.add_argument("--save", action="store_true", help="Save the result to the gallery")
    parser.add_argument("--gallery", help="Gallery database path (default: STUDIO_GALLERY_PATH)")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="studio", description="Studio design and social content engine")
    sub = parser.add_subparsers(dest="command")

    design = sub.add_parser("design", help="Generate an interior design concept")
    design.add_argument("subject", nargs="?", help="Room description")
    design.add_argument("--template", help="Prefill from an inspiration template")
    design.add_argument("--room", help="Room type")
    design.add_argument("--style", help="Decor style")
    design.add_argument("--lighting", help="Lighting")
    design.add_argument(
        "--aspect",
        action="append",
        default=[],
        choices=[ratio.value for ratio in AspectRatio],
        help="Aspect ratio of a design image (repeatable, default 16:9)",
    )
    _add_generation_args(design)

    social = sub.add_parser("social", help="Generate a multi-platform social campaign")
    social.add_argument("subject", help="Content idea")
    social.add_argument("--tone", default=Tone.PROFESSIONAL.value)
    social.add_argument("--audience", default=Audience.GENERAL.value)
    social.add_argument(
        "--platform",
        action="append",
        default=[],
        choices=[variant.key for variant in SOCIAL_VARIANTS],
        help="Limit to a platform (repeatable, default all)",
    )
    _add_generation_args(social)

    edit = sub.add_parser("edit", help="Edit an image with a prompt or an annotated overlay")
    edit.add_argument("--image", required=True, help="Base image")
    edit.add_argument("--prompt", help="Plain edit instruction")
    edit.add_argument("--overlay", help="Transparent overlay marking areas to change")
    edit.add_argument("--comment", action="append", default=[], help="Annotation as 'x,y,text' in percent")
    _add_run_args(edit)

    edit_text = sub.add_parser("edit-text", help="Rewrite a rationale or post")
    edit_text.add_argument("--text", help="Text to rewrite")
    edit_text.add_argument("--text-file", dest="text_file", help="Read the text to rewrite from a file")
    edit_text.add_argument("--instruction", required=True)
    _add_run_args(edit_text)

    analyze = sub.add_parser("analyze", help="Ask a question about an image")
    analyze.add_argument("--image", required=True)
    analyze.add_argument("--question", required=True)
    _add_run_args(analyze)

    gallery = sub.add_parser("gallery", help="Manage saved artifacts")
    gallery.add_argument("--gallery", help="Gallery database path (default: STUDIO_GALLERY_PATH)")
    gallery_sub = gallery.add_subparsers(dest="gallery_command")
    gallery_sub.add_parser("list", help="List saved artifacts, newest first")
    gallery_delete = gallery_sub.add_parser("delete", help="Delete a saved artifact")
    gallery_delete.add_argument("artifact_id")

    sub.add_parser("templates", help="List inspiration and lighting templates")
    return parser


def _build_engine(args: argparse.Namespace) -> tuple[StudioEngine, Path]:
    config = StudioConfig.from_env()
    if args.provider:
        config = replace(config, provider=args.provider.strip().lower())
    run_dir = Path(args.out)
    run_dir.mkdir(parents=True, exist_ok=True)
    events_path = Path(args.events) if args.events else run_dir / "events.jsonl"
    events = EventWriter(events_path, run_dir.name or str(uuid.uuid4()))
    try:
        client = create_client(config.provider, config)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc
    return StudioEngine(client, events, config), run_dir


def _gallery(args: argparse.Namespace) -> GalleryStore:
    config = StudioConfig.from_env()
    path = Path(args.gallery).expanduser() if getattr(args, "gallery", None) else config.gallery_path
    store = GalleryStore(path, max_bytes=config.gallery_max_bytes)
    store.init_db()
    return store


def _load_references(paths: list[str]) -> tuple[GeneratedImage, ...]:
    return tuple(GeneratedImage.from_path(path) for path in paths)


def _parse_comment(raw: str) -> Comment:
    parts = [part.strip() for part in str(raw).split(",", 2)]
    if len(parts) != 3 or not parts[2]:
        raise ValidationError(f"Invalid comment {raw!r}; expected 'x,y,text'.")
    try:
        x, y = float(parts[0]), float(parts[1])
    except ValueError as exc:
        raise ValidationError(f"Invalid comment position in {raw!r}.") from exc
    return Comment(x=x, y=y, text=parts[2])


def _design_request(args: argparse.Namespace) -> GenerationRequest:
    template = find_template(args.template) if args.template else None
    subject = args.subject or (template.description if template else "")
    room = parse_choice(RoomType, args.room) if args.room else (template.room_type if template else RoomType.LIVING_ROOM)
    style = (
        parse_choice(DecorStyle, args.style) if args.style else (template.decor_style if template else DecorStyle.MODERN)
    )
    lighting = (
        parse_choice(LightingType, args.lighting)
        if args.lighting
        else (template.lighting if template else LightingType.BRIGHT_NATURAL)
    )
    return GenerationRequest(
        subject=subject,
        options=DesignOptions(room_type=room, decor_style=style, lighting=lighting),
        quality=ImageQuality(args.quality),
        reference_images=_load_references(args.reference),
        use_grounding=args.grounding,
        use_advanced_refinement=args.refine,
        output_variants=design_variants(AspectRatio(value) for value in args.aspect),
    )


def _social_request(args: argparse.Namespace) -> GenerationRequest:
    variants = tuple(variant for variant in SOCIAL_VARIANTS if not args.platform or variant.key in args.platform)
    return GenerationRequest(
        subject=args.subject,
        options=SocialOptions(tone=parse_choice(Tone, args.tone), audience=parse_choice(Audience, args.audience)),
        quality=ImageQuality(args.quality),
        reference_images=_load_references(args.reference),
        use_grounding=args.grounding,
        use_advanced_refinement=args.refine,
        output_variants=variants,
    )


def _report(result: GeneratedArtifactSet, out_dir: Path) -> None:
    exported = export_artifact_set(result, out_dir)
    print(result.text)
    print()
    for variant in result.variants:
        if variant.image is not None:
            print(f"{variant.label} ({variant.aspect_ratio.value}): {out_dir / f'{variant.key}.{variant.image.extension}'}")
        else:
            print(f"{variant.label} ({variant.aspect_ratio.value}): failed: {variant.error}")
    print(f"Exported to {exported['html_path']}")


def _handle_generate(args: argparse.Namespace, request: GenerationRequest) -> int:
    engine, run_dir = _build_engine(args)
    result = asyncio.run(engine.generate(request))
    _report(result, run_dir)
    if args.save:
        saved = _gallery(args).add(result, request.reference_images)
        print(f"Saved to gallery as {saved.id}")
    return 0


def _handle_design(args: argparse.Namespace) -> int:
    return _handle_generate(args, _design_request(args))


def _handle_social(args: argparse.Namespace) -> int:
    return _handle_generate(args, _social_request(args))


def _handle_edit(args: argparse.Namespace) -> int:
    base = GeneratedImage.from_path(args.image)
    if args.overlay:
        instruction = AnnotatedEdit(
            overlay=GeneratedImage.from_path(args.overlay),
            comments=tuple(_parse_comment(raw) for raw in args.comment),
        )
    else:
        instruction = PlainEdit(args.prompt or "")
    engine, run_dir = _build_engine(args)
    edited = asyncio.run(engine.apply_edit(base, instruction))
    out_path = edited.write(run_dir / f"edited.{edited.extension}")
    print(f"Edited image: {out_path}")
    return 0


def _handle_edit_text(args: argparse.Namespace) -> int:
    if args.text_file:
        try:
            text = Path(args.text_file).read_text(encoding="utf-8")
        except OSError as exc:
            raise ValidationError(f"Could not read {args.text_file}: {exc}") from exc
    else:
        text = args.text or ""
    engine, _ = _build_engine(args)
    print(asyncio.run(engine.edit_text(text, args.instruction)))
    return 0


def _handle_analyze(args: argparse.Namespace) -> int:
    engine, _ = _build_engine(args)
    print(asyncio.run(engine.analyze_image(GeneratedImage.from_path(args.image), args.question)))
    return 0


def _handle_gallery(args: argparse.Namespace) -> int:
    store = _gallery(args)
    if args.gallery_command == "delete":
        remaining = store.delete(args.artifact_id)
        print(f"Deleted {args.artifact_id}; {len(remaining)} item(s) left.")
        return 0
    items = store.list()
    if not items:
        print("Gallery is empty.")
    for item in items:
        images = sum(1 for variant in item.artifact.variants if variant.image is not None)
        print(f"{item.id}  {item.artifact.flow:<6}  {images} image(s)  {truncate(item.artifact.text, 80)}")
    return 0


def _handle_templates(_args: argparse.Namespace) -> int:
    print("Inspiration templates:")
    for template in INSPIRATION_TEMPLATES:
        print(
            f"- {template.name}: {template.room_type.value}, {template.decor_style.value}, "
            f"{template.lighting.value}"
        )
    print("Lighting:")
    for lighting in LIGHTING_TEMPLATES:
        print(f"- {lighting.lighting.value}: {lighting.description}")
    print("Image quality:")
    for option in IMAGE_QUALITY_OPTIONS:
        print(f"- {option.quality.value} ({option.name}): {option.description}")
    return 0


_HANDLERS = {
    "design": _handle_design,
    "social": _handle_social,
    "edit": _handle_edit,
    "edit-text": _handle_edit_text,
    "analyze": _handle_analyze,
    "gallery": _handle_gallery,
    "templates": _handle_templates,
}


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    parser = _build_parser()
    args = parser.parse_args(argv)
    handler = _HANDLERS.get(args.command)
    if handler is None:
        parser.print_help()
        raise SystemExit(1)
    try:
        raise SystemExit(handler(args))
    except StudioError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()

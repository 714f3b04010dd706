"""Export an artifact set to a directory with an HTML contact sheet."""

from __future__ import annotations

import html
from pathlib import Path
from typing import Any

from ..schema import GeneratedArtifactSet
from ..utils import ensure_dir, now_utc_iso, write_json


def export_artifact_set(artifact: GeneratedArtifactSet, out_dir: Path) -> dict[str, Any]:
    ensure_dir(out_dir)
    variants_meta: list[dict[str, Any]] = []
    cards: list[str] = []
    for variant in artifact.variants:
        image_path: Path | None = None
        if variant.image is not None:
            image_path = variant.image.write(out_dir / f"{variant.key}.{variant.image.extension}")
        variants_meta.append(
            {
                "key": variant.key,
                "label": variant.label,
                "aspect_ratio": variant.aspect_ratio.value,
                "image_path": image_path.name if image_path else None,
                "mime_type": variant.image.mime_type if variant.image else None,
                "content": variant.content,
                "error": variant.error,
            }
        )
        if image_path:
            thumb = f"<img src='{html.escape(image_path.name)}' alt='{html.escape(variant.label)}'>"
        else:
            thumb = f"<div class='failed'>{html.escape(variant.error or 'No image')}</div>"
        content = f"<div class='content'>{html.escape(variant.content)}</div>" if variant.content else ""
        cards.append(
            f"<div class='card'>"
            f"<div class='thumb'>{thumb}</div>"
            f"<div class='meta'><div class='label'>{html.escape(variant.label)} "
            f"<span class='ratio'>{html.escape(variant.aspect_ratio.value)}</span></div>"
            f"{content}</div>"
            f"</div>"
        )

    result = {
        "flow": artifact.flow,
        "text": artifact.text,
        "reference_style": artifact.reference_style,
        "exported_at": now_utc_iso(),
        "variants": variants_meta,
    }
    result_path = out_dir / "result.json"
    write_json(result_path, result)

    title = "Social Campaign" if artifact.flow == "social" else "Interior Design"
    html_doc = f"""
<!doctype html>
<html>
<head>
  <meta charset='utf-8'>
  <title>Studio Export</title>
  <style>
    body {{ font-family: Arial, sans-serif; background: #f6f6f6; margin: 0; padding: 20px; }}
    .text {{ background: white; border-radius: 10px; padding: 16px; white-space: pre-wrap; margin-bottom: 20px; }}
    .grid {{ display: grid; grid-template-columns: repeat(auto-fill, minmax(280px, 1fr)); gap: 16px; }}
    .card {{ background: white; border-radius: 10px; overflow: hidden; box-shadow: 0 2px 8px rgba(0,0,0,0.08); }}
    .thumb {{ width: 100%; height: 240px; background: #eee; display: flex; align-items: center; justify-content: center; }}
    .thumb img {{ max-width: 100%; max-height: 100%; }}
    .failed {{ color: #a00; font-size: 13px; padding: 12px; }}
    .meta {{ padding: 10px; }}
    .label {{ font-weight: bold; font-size: 13px; color: #333; }}
    .ratio {{ font-weight: normal; color: #888; }}
    .content {{ font-size: 13px; margin-top: 8px; white-space: pre-wrap; }}
  </style>
</head>
<body>
  <h1>{title}</h1>
  <div class='text'>{html.escape(artifact.text)}</div>
  <div class='grid'>
    {''.join(cards)}
  </div>
</body>
</html>
"""
    html_path = out_dir / "index.html"
    html_path.write_text(html_doc, encoding="utf-8")
    result["result_path"] = str(result_path)
    result["html_path"] = str(html_path)
    return result

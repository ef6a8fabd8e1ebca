import html
import json
from pathlib import Path
from typing import Dict, Any

def export_report(record, sample, annotation, out_dir: str | Path, fmt: str = "json") -> Path:
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    data = {
        "scan": {
            "file_name": record.file_name,
            "timestamp": record.timestamp.isoformat(),
            "verdict": record.verdict.value,
            "confidence": record.confidence,
        },
        "sample": {
            "path": str(sample.path),
            "size": sample.size,
            "sha256": sample.sha256,
            "mime": sample.mime,
        } if sample else None,
        "evidence": {
            "rect_box": {
                "left": annotation.rect_box.left,
                "top": annotation.rect_box.top,
                "width": annotation.rect_box.width,
                "height": annotation.rect_box.height,
            },
            "zoom_focus": {
                "x": annotation.zoom_focus.x,
                "y": annotation.zoom_focus.y,
                "magnification": annotation.zoom_focus.magnification,
            },
        } if annotation else None,
    }
    if fmt == "json":
        path = out_dir / "report.json"
        path.write_text(json.dumps(data, indent=2))
    elif fmt == "md":
        path = out_dir / "report.md"
        path.write_text(_to_markdown(data))
    elif fmt == "html":
        path = out_dir / "report.html"
        path.write_text(_to_html(data))
    else:
        raise ValueError(f"Unsupported format: {fmt}")
    return path

def _to_markdown(data: Dict[str, Any]) -> str:
    s = data["scan"]
    md = []
    md.append("# Forensic Report")
    md.append("")
    md.append(f"**File:** `{s['file_name']}`  ")
    md.append(f"**Scanned:** {s['timestamp']}  ")
    md.append(f"**Verdict:** {s['verdict'].upper()}  ")
    md.append(f"**Confidence:** {s['confidence']:.1f}%  ")
    md.append("")
    sample = data["sample"]
    if sample:
        md.append("## Sample")
        md.append(f"- Size: {sample['size']} bytes")
        md.append(f"- SHA-256: `{sample['sha256']}`")
        md.append(f"- MIME: {sample['mime']}")
        md.append("")
    md.append("## Evidence")
    ev = data["evidence"]
    if not ev:
        md.append("_No region annotated_")
    else:
        box = ev["rect_box"]
        zoom = ev["zoom_focus"]
        md.append(f"- Region: left {box['left']:.1f}%, top {box['top']:.1f}%, "
                  f"width {box['width']:.1f}%, height {box['height']:.1f}%")
        md.append(f"- Zoom focus: {zoom['x']:.1f}% {zoom['y']:.1f}% @ {zoom['magnification']:.0f}%")
    md.append("")
    return "\n".join(md)

def _to_html(data: Dict[str, Any]) -> str:
    md = _to_markdown(data)
    return "<pre>" + html.escape(md) + "</pre>"

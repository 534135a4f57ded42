#!/usr/bin/env python3
"""
Check a passport photo (or a document capture) from the command line.

Usage:
  photocheck photo.jpg
  photocheck photo.png --json
  photocheck scan.jpg --type document
  photocheck photo.jpg --threshold 0.7 --timeout 2 --sample-stride 2

Exit status: 0 when the photo passes (or the document is acceptable), 1 when it
does not, 2 when the file could not be validated at all.
"""

from __future__ import annotations

import argparse
import json
import logging
import mimetypes
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

from photocheck.core.errors import PhotoValidationError
from photocheck.core.models import ValidationConfig
from photocheck.validation.scan_quality import validate_document_scan
from photocheck.validation.validator import format_report_text, validate_passport_photo


def _build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Rule-based passport photo and document scan checks.")
    p.add_argument("image", help="Path to the image (jpg/png/webp)")
    p.add_argument("--mime", help="Content type to validate as (default: guessed from the file extension)")
    p.add_argument("--type", dest="validation_type", choices=("passport_photo", "document"),
                   default="passport_photo", help="What the image is (default: passport_photo)")
    p.add_argument("--json", action="store_true", help="Print the result as JSON")
    p.add_argument("--threshold", type=float, help="Confidence needed to pass (default: 0.6)")
    p.add_argument("--timeout", type=float, help="Pixel scan time budget in seconds (default: 5)")
    p.add_argument("--sample-stride", type=int, help="Scan every Nth row/column (default: 1)")
    p.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return p


def _config_from_args(args: argparse.Namespace) -> ValidationConfig:
    cfg = ValidationConfig()
    if args.threshold is not None:
        cfg = replace(cfg, pass_threshold=args.threshold)
    if args.timeout is not None:
        cfg = replace(cfg, timeout_seconds=args.timeout)
    if args.sample_stride is not None:
        cfg = replace(cfg, sample_stride=args.sample_stride)
    return cfg


def _format_document_text(quality) -> str:
    lines = [
        "Document Scan Quality Report",
        "-" * 28,
        f"Overall: {'ACCEPTABLE' if quality.is_acceptable else 'POOR'} ({quality.score * 100:.0f}%)",
        "",
        f"Brightness: {quality.brightness * 100:.0f}%",
        f"Contrast: {quality.contrast * 100:.0f}%",
        f"Sharpness: {quality.sharpness * 100:.0f}%",
        f"Document edges: {quality.document_edges * 100:.0f}%",
    ]
    return "\n".join(lines)


def main(argv: Optional[list[str]] = None) -> int:
    args = _build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    path = Path(args.image)
    mime = args.mime or mimetypes.guess_type(path.name)[0]

    try:
        cfg = _config_from_args(args)
        data = path.read_bytes()
        if args.validation_type == "document":
            quality = validate_document_scan(data, mime, cfg)
            ok = quality.is_acceptable
            text = json.dumps(quality.to_dict(), indent=2) if args.json else _format_document_text(quality)
        else:
            result = validate_passport_photo(data, mime, cfg)
            ok = result.passed
            text = json.dumps(result.to_dict(include_metrics=True), indent=2) if args.json else format_report_text(result)
    except PhotoValidationError as e:
        print(f"ERROR: {e.user_message}", file=sys.stderr)
        return 2
    except (OSError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    print(text)
    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(main())

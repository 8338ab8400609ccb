"""
Command-line interface for SlideVector.
"""

import sys
import json
import base64
import argparse
from pathlib import Path

from dotenv import load_dotenv

from slidevector import __version__
from slidevector.audit import AuditHTMLGenerator
from slidevector.config import ConversionSettings
from slidevector.errors import SlideVectorError
from slidevector.pipeline import SlideVectorPipeline


def write_slides(result, output_dir: Path) -> None:
    """Write each slide image as slide_NNN.svg."""
    output_dir.mkdir(parents=True, exist_ok=True)
    for image in result.images:
        _, encoded = image.image_data.split(",", 1)
        svg_path = output_dir / f"slide_{image.slide_number:03d}.svg"
        svg_path.write_bytes(base64.b64decode(encoded))


def main() -> int:
    """Main CLI entry point."""
    load_dotenv()  # Load .env file if present

    parser = argparse.ArgumentParser(
        description="SlideVector: Convert PPTX presentations into per-slide SVG images",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Basic usage
  slidevector deck.pptx

  # Render onto a 1280x720 canvas with 4 worker threads
  slidevector deck.pptx --width 1280 --height 720 --workers 4

  # Write an audit HTML page and the JSON result next to the SVGs
  slidevector deck.pptx --audit --json -o ./my_output

Environment Variables:
  SLIDEVECTOR_CANVAS_WIDTH    Output canvas width (default 1920)
  SLIDEVECTOR_CANVAS_HEIGHT   Output canvas height (default 1080)
  SLIDEVECTOR_MAX_WORKERS     Slides decoded in parallel (default 1)
  SLIDEVECTOR_EMBED_MEDIA     Inline picture data (default true)
        """,
    )

    parser.add_argument(
        "input",
        nargs="?",
        type=Path,
        help="Input PPTX file",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"SlideVector {__version__}",
    )

    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        help="Output directory (default: ./output/<deck_name>)",
    )

    parser.add_argument("--width", type=int, help="Canvas width in pixels")
    parser.add_argument("--height", type=int, help="Canvas height in pixels")

    parser.add_argument(
        "--workers",
        type=int,
        help="Number of slides decoded in parallel",
    )

    parser.add_argument(
        "--audit",
        action="store_true",
        help="Generate audit HTML report",
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Also write result.json in the host application's format",
    )

    parser.add_argument(
        "--no-media",
        action="store_true",
        help="Draw pictures as outlined boxes instead of embedding them",
    )

    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress progress output",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print tracebacks on errors",
    )

    args = parser.parse_args()

    # Validate input
    if not args.input:
        parser.print_help()
        return 1

    if not args.input.exists():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1

    output_dir = args.output or Path("output") / args.input.stem

    try:
        settings = ConversionSettings.from_env(
            canvas_width=args.width,
            canvas_height=args.height,
            max_workers=args.workers,
            embed_media=False if args.no_media else None,
            verbose=False if args.quiet else None,
        )
        pipeline = SlideVectorPipeline(settings)
        result = pipeline.convert_file(args.input)

        write_slides(result, output_dir)
        if settings.verbose:
            print(f"SVG slides: {output_dir}")

        if args.json:
            json_path = output_dir / "result.json"
            with open(json_path, "w", encoding="utf-8") as f:
                json.dump(result.to_dict(), f, indent=2)
            if settings.verbose:
                print(f"Result JSON: {json_path}")

        if args.audit:
            AuditHTMLGenerator().generate(
                result,
                output_dir / "audit.html",
                meta={
                    "source": args.input.name,
                    "canvas_width": settings.canvas_width,
                    "canvas_height": settings.canvas_height,
                },
            )

        return 0

    except KeyboardInterrupt:
        print("\n\nInterrupted by user", file=sys.stderr)
        return 130

    except (SlideVectorError, ValueError) as e:
        print(f"\nError: {e}", file=sys.stderr)
        if args.debug:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())

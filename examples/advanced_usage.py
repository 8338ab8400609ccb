"""
Advanced usage examples for SlideVector.

Shows how to:
- Change the output canvas and decode slides in parallel
- Track progress
- Produce an audit report
- Convert uploads held in memory
"""

import json
from pathlib import Path

from slidevector import ConversionSettings, SlideVectorError, SlideVectorPipeline
from slidevector.audit import AuditHTMLGenerator


def example_custom_canvas():
    """Render onto a 1280x720 canvas with 4 worker threads."""
    print("\n[Example 1] Custom canvas and workers")

    settings = ConversionSettings(
        canvas_width=1280,
        canvas_height=720,
        max_workers=4,  # Output order does not depend on this
    )
    pipeline = SlideVectorPipeline(settings)

    result = pipeline.convert_file(Path("examples/sample_deck.pptx"))
    print(f"✓ {result.message}")


def example_progress_and_audit():
    """Report progress and write an HTML page with every slide image."""
    print("\n[Example 2] Progress callback and audit report")

    def on_progress(percent: float, phase: str) -> None:
        print(f"  {percent:5.1f}% {phase}")

    settings = ConversionSettings(verbose=False)
    pipeline = SlideVectorPipeline(settings, progress_callback=on_progress)
    result = pipeline.convert_file(Path("examples/sample_deck.pptx"))

    AuditHTMLGenerator(preview_width=640).generate(
        result,
        Path("output/sample_deck/audit.html"),
        meta={
            "source": "sample_deck.pptx",
            "canvas_width": settings.canvas_width,
            "canvas_height": settings.canvas_height,
        },
    )


def example_in_memory_upload():
    """Convert raw bytes, the way the API server handles an upload."""
    print("\n[Example 3] In-memory conversion")

    data = Path("examples/sample_deck.pptx").read_bytes()
    pipeline = SlideVectorPipeline(ConversionSettings(embed_media=False))

    try:
        result = pipeline.convert(data, "upload.pptx")
    except SlideVectorError as e:
        print(json.dumps(e.to_dict(), indent=2))
        return

    # Same shape the HTTP endpoint returns
    body = result.to_dict()
    print(f"✓ {body['totalSlides']} slides, first image {len(body['images'][0]['imageData'])} chars")


if __name__ == "__main__":
    # Run examples
    # example_custom_canvas()
    # example_progress_and_audit()
    # example_in_memory_upload()

    print("\nUncomment the example you want to run in advanced_usage.py")

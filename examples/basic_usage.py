"""
Basic usage example for SlideVector.

This example shows how to convert a PPTX deck into one SVG image per
slide using the Python API.
"""

from pathlib import Path

from slidevector import SlideVectorPipeline
from slidevector.cli import write_slides


def main():
    # Default settings: 1920x1080 canvas, slides decoded one after another
    pipeline = SlideVectorPipeline()

    deck_path = Path("examples/sample_deck.pptx")
    output_dir = Path("output/sample_deck")

    result = pipeline.convert_file(deck_path)
    write_slides(result, output_dir)

    print("\n✓ Conversion complete!")
    print(f"  Slides: {result.total_slides}")
    print(f"  SVGs: {output_dir}")
    if result.fallback_slides:
        print(f"  Placeholders: {result.fallback_slides}")


if __name__ == "__main__":
    main()

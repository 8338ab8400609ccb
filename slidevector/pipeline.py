"""
Main orchestration pipeline for SlideVector.

Coordinates package reading, theme/media extraction, per-slide decoding and
SVG rendering.
"""

import base64
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Optional

from slidevector.config import ConversionSettings
from slidevector.decoder import ScaleFactors, SlideDecoder
from slidevector.errors import (
    NoSlidesFound,
    SlideDecodeFailure,
    SlideVectorError,
    UnsupportedInputFormat,
)
from slidevector.extractors import (
    MediaExtractor,
    PresentationPackage,
    list_slide_parts,
    resolve_relationships,
    resolve_theme,
    scan_canvas_size,
)
from slidevector.extractors.presentation import slide_part_path
from slidevector.models import ConversionResult, MediaAsset, SlideImage
from slidevector.renderers import SVGRenderer

PRESENTATION_EXTENSIONS = (".pptx", ".ppt")

PDF_MESSAGE = (
    "PDF files should be processed client-side for best quality. "
    "Please use the browser-based PDF renderer."
)
UNSUPPORTED_MESSAGE = "Unsupported file format. Please upload PPTX or PDF."


class PipelineStage(str, Enum):
    """Pipeline stage enum."""
    IDLE = "idle"
    READING_PACKAGE = "reading_package"
    SCANNING = "scanning_canvas_and_theme"
    PROCESSING_SLIDES = "processing_slides"
    AGGREGATING = "aggregating"
    DONE = "done"
    FAILED = "failed"


def check_input_format(filename: str) -> None:
    """Reject anything that is not a presentation package before reading it."""
    name = (filename or "").lower()
    if name.endswith(PRESENTATION_EXTENSIONS):
        return
    if name.endswith(".pdf"):
        raise UnsupportedInputFormat(PDF_MESSAGE)
    raise UnsupportedInputFormat(UNSUPPORTED_MESSAGE)


def to_data_url(svg: str) -> str:
    encoded = base64.b64encode(svg.encode("utf-8")).decode("ascii")
    return f"data:image/svg+xml;base64,{encoded}"


class _SlideJob:
    """Read-only state shared by every slide of one document."""

    def __init__(
        self,
        package: PresentationPackage,
        decoder: SlideDecoder,
        renderer: SVGRenderer,
        total_slides: int,
    ):
        self.package = package
        self.decoder = decoder
        self.renderer = renderer
        self.total_slides = total_slides


class SlideVectorPipeline:
    """
    End-to-end pipeline for converting PPTX decks into SVG slide images.

    Pipeline stages:
    1. Input check: reject non-presentation file names
    2. Package: open the ZIP container
    3. Scan: slide size, slide list, theme palette, media table (once per job)
    4. Per slide: relationships -> decode -> render (failures become placeholders)
    5. Aggregate: images in ascending slide order
    """

    def __init__(
        self,
        settings: Optional[ConversionSettings] = None,
        progress_callback: Optional[Callable[[float, str], None]] = None,
    ):
        """
        Initialize pipeline.

        Args:
            settings: Conversion settings (defaults: 1920x1080 canvas, sequential)
            progress_callback: Called with (percent, phase) as the job advances
        """
        self.settings = settings or ConversionSettings()
        self.progress_callback = progress_callback
        self.stage = PipelineStage.IDLE
        self.media_extractor = MediaExtractor()
        self.renderer = SVGRenderer(
            canvas_width=self.settings.canvas_width,
            canvas_height=self.settings.canvas_height,
            embed_media=self.settings.embed_media,
        )

    def convert_file(self, path: Path) -> ConversionResult:
        """Convert a presentation on disk."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Presentation not found: {path}")
        check_input_format(path.name)
        return self.convert(path.read_bytes(), path.name)

    def convert(self, data: bytes, filename: str) -> ConversionResult:
        """
        Convert an uploaded presentation.

        Args:
            data: Raw file bytes
            filename: Original file name (used for format detection)

        Returns:
            ConversionResult with one image per slide, numbered from 1

        Raises:
            UnsupportedInputFormat: file name is not .pptx/.ppt
            ArchiveUnreadable: bytes are not a ZIP container
            NoSlidesFound: package has no slide parts
        """
        try:
            check_input_format(filename)

            self._set_stage(PipelineStage.READING_PACKAGE, 5.0, f"Reading {filename}")
            with PresentationPackage.open(data) as package:
                return self._convert_package(package, filename)
        except SlideVectorError as e:
            self.stage = PipelineStage.FAILED
            self._log(f"[Pipeline] ✗ Conversion failed: {e.message}")
            raise

    def _convert_package(self, package: PresentationPackage, filename: str) -> ConversionResult:
        slide_parts = list_slide_parts(package)
        if not slide_parts:
            raise NoSlidesFound()

        self._set_stage(PipelineStage.SCANNING, 15.0, "Scanning slide size and theme")
        canvas = scan_canvas_size(package)
        palette = resolve_theme(package)
        media = self._extract_media(package)
        scale = ScaleFactors.between(canvas, self.settings.canvas_width, self.settings.canvas_height)

        self._log(f"\n{'='*60}")
        self._log("SlideVector Pipeline")
        self._log(f"{'='*60}")
        self._log(f"Input: {filename}")
        self._log(f"Slides: {len(slide_parts)}")
        self._log(f"Slide size (EMU): {canvas.width_units} x {canvas.height_units}")
        self._log(f"Canvas: {self.settings.canvas_width} x {self.settings.canvas_height}")
        self._log(f"Media files: {len(media)}")
        self._log(f"{'='*60}\n")

        job = _SlideJob(
            package=package,
            decoder=SlideDecoder(palette, scale, media),
            renderer=self.renderer,
            total_slides=len(slide_parts),
        )

        self._set_stage(PipelineStage.PROCESSING_SLIDES, 30.0, f"Rendering {len(slide_parts)} slides")
        numbers = range(1, len(slide_parts) + 1)
        if self.settings.max_workers > 1 and len(slide_parts) > 1:
            with ThreadPoolExecutor(max_workers=self.settings.max_workers) as pool:
                # map() yields in submission order whatever the completion order
                images = list(pool.map(lambda n: self._process_slide(job, n), numbers))
        else:
            images = [self._process_slide(job, n) for n in numbers]

        self._set_stage(PipelineStage.AGGREGATING, 95.0, "Collecting slide images")
        images.sort(key=lambda image: image.slide_number)
        result = ConversionResult(
            images=images,
            total_slides=len(images),
            message=f"Converted {len(images)} slides from PPTX",
        )

        self.stage = PipelineStage.DONE
        self._progress(100.0, "Completed")
        self._log(f"\n{'='*60}")
        self._log("✓ Pipeline Complete")
        self._log(f"{'='*60}")
        self._log(f"Slides rendered: {len(images) - len(result.fallback_slides)}/{len(images)}")
        if result.fallback_slides:
            self._log(f"Placeholders: {result.fallback_slides}")
        self._log(f"{'='*60}\n")
        return result

    def _extract_media(self, package: PresentationPackage) -> Dict[str, MediaAsset]:
        media = self.media_extractor.extract_all(package)
        skipped = [asset.part_path for asset in media.values() if not asset.renderable]
        self._log(f"[Media] Extracted {len(media)} media files")
        if skipped:
            self._log(f"[Media] Not renderable (metafile): {', '.join(skipped)}")
        return media

    def _process_slide(self, job: _SlideJob, slide_number: int) -> SlideImage:
        """Decode and render one slide; any failure becomes the placeholder image."""
        try:
            svg = self._render_slide(job, slide_number)
            placeholder = False
        except Exception as e:
            failure = SlideDecodeFailure(slide_number, e)
            self._log(f"[Slide {slide_number}] {failure.message}")
            svg = job.renderer.render_placeholder(slide_number, job.total_slides)
            placeholder = True

        return SlideImage(
            slide_number=slide_number,
            image_data=to_data_url(svg),
            placeholder=placeholder,
        )

    def _render_slide(self, job: _SlideJob, slide_number: int) -> str:
        relationships = resolve_relationships(job.package, slide_number)
        root = job.package.xml(slide_part_path(slide_number))
        if root is None:
            raise ValueError(f"slide{slide_number}.xml disappeared from the package")
        slide = job.decoder.decode(root, relationships, slide_number)
        self._log(f"  → Slide {slide_number}/{job.total_slides}: {len(slide.elements)} elements")
        return job.renderer.render(slide)

    def _set_stage(self, stage: PipelineStage, progress: float, phase: str) -> None:
        self.stage = stage
        self._progress(progress, phase)

    def _progress(self, progress: float, phase: str) -> None:
        if self.progress_callback:
            self.progress_callback(progress, phase)

    def _log(self, message: str) -> None:
        if self.settings.verbose:
            print(message)

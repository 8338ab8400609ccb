"""
Tests for the end-to-end conversion pipeline.
"""

import base64
import io

import pytest
from lxml import etree

from slidevector.config import ConversionSettings
from slidevector.errors import ArchiveUnreadable, NoSlidesFound, UnsupportedInputFormat
from slidevector.extractors import MediaExtractor
from slidevector.pipeline import PipelineStage, SlideVectorPipeline, check_input_format

QUIET = ConversionSettings(verbose=False)


def svg_of(image) -> str:
    prefix, encoded = image.image_data.split(",", 1)
    assert prefix == "data:image/svg+xml;base64"
    return base64.b64decode(encoded).decode("utf-8")


def _three_slide_deck(deck):
    for label in ("One", "Two", "Three"):
        deck.add_slide(deck.slide(deck.text_box(0, 0, 914400, 914400, deck.paragraph(deck.run(label)))))
    return deck.build()


def test_images_in_slide_order(deck):
    result = SlideVectorPipeline(QUIET).convert(_three_slide_deck(deck), "deck.pptx")

    assert result.total_slides == 3
    assert [image.slide_number for image in result.images] == [1, 2, 3]
    assert result.message == "Converted 3 slides from PPTX"
    assert result.fallback_slides == []
    for image, label in zip(result.images, ("One", "Two", "Three")):
        assert f">{label}</tspan>" in svg_of(image)


def test_output_is_deterministic(deck):
    data = _three_slide_deck(deck)
    first = SlideVectorPipeline(QUIET).convert(data, "deck.pptx").to_dict()
    second = SlideVectorPipeline(QUIET).convert(data, "deck.pptx").to_dict()
    assert first == second


def test_parallel_workers_keep_order(deck):
    data = _three_slide_deck(deck)
    sequential = SlideVectorPipeline(QUIET).convert(data, "deck.pptx")
    parallel = SlideVectorPipeline(ConversionSettings(max_workers=4, verbose=False)).convert(data, "deck.pptx")

    assert parallel.to_dict() == sequential.to_dict()


def test_malformed_slide_becomes_placeholder(deck):
    """One bad slide never sinks the job."""
    deck.add_slide(deck.slide(deck.text_box(0, 0, 914400, 914400, deck.paragraph(deck.run("ok")))))
    deck.add_slide("<p:sld><unclosed")
    deck.add_slide(deck.slide())

    result = SlideVectorPipeline(QUIET).convert(deck.build(), "deck.pptx")

    assert result.total_slides == 3
    assert result.fallback_slides == [2]
    placeholder = svg_of(result.images[1])
    assert "Slide 2" in placeholder
    assert "Content could not be rendered" in placeholder
    assert "2 / 3" in placeholder
    assert ">ok</tspan>" in svg_of(result.images[0])


def test_slide_without_body_becomes_placeholder(deck):
    deck.add_slide('<p:sld xmlns:p="http://schemas.openxmlformats.org/presentationml/2006/main"/>')
    result = SlideVectorPipeline(QUIET).convert(deck.build(), "deck.pptx")
    assert result.fallback_slides == [1]


def test_every_image_is_well_formed_svg(deck, tiny_png):
    deck.media["ppt/media/image1.png"] = tiny_png
    deck.add_slide(
        deck.slide(
            deck.picture(0, 0, 9144000, 6858000, r_id="rId2"),
            deck.text_box(0, 0, 914400, 914400, deck.paragraph(deck.run("A &amp; B"))),
            background=deck.solid_background(deck.srgb("000000")),
        ),
        rels={"rId2": "../media/image1.png"},
    )
    result = SlideVectorPipeline(QUIET).convert(deck.build(), "deck.pptx")

    root = etree.fromstring(svg_of(result.images[0]).encode())
    assert root.tag == "{http://www.w3.org/2000/svg}svg"
    assert "data:image/png;base64," in svg_of(result.images[0])


@pytest.mark.parametrize(
    "filename,message",
    [
        ("handout.pdf", "PDF files should be processed client-side"),
        ("notes.docx", "Unsupported file format"),
        ("", "Unsupported file format"),
    ],
)
def test_input_format_is_checked_first(filename, message):
    with pytest.raises(UnsupportedInputFormat, match=message):
        check_input_format(filename)

    pipeline = SlideVectorPipeline(QUIET)
    with pytest.raises(UnsupportedInputFormat):
        pipeline.convert(b"irrelevant", filename)
    assert pipeline.stage == PipelineStage.FAILED


def test_extension_check_is_case_insensitive(deck):
    deck.add_slide(deck.slide())
    result = SlideVectorPipeline(QUIET).convert(deck.build(), "DECK.PPTX")
    assert result.total_slides == 1


def test_unreadable_archive():
    with pytest.raises(ArchiveUnreadable):
        SlideVectorPipeline(QUIET).convert(b"not a zip at all", "deck.pptx")


def test_no_slides(deck):
    with pytest.raises(NoSlidesFound, match="No slides found"):
        SlideVectorPipeline(QUIET).convert(deck.build(), "deck.pptx")


def test_progress_callback_and_stage(deck):
    deck.add_slide(deck.slide())
    updates = []
    pipeline = SlideVectorPipeline(QUIET, progress_callback=lambda pct, phase: updates.append((pct, phase)))
    pipeline.convert(deck.build(), "deck.pptx")

    assert pipeline.stage == PipelineStage.DONE
    percents = [pct for pct, _ in updates]
    assert percents == sorted(percents)
    assert updates[-1] == (100.0, "Completed")


def test_verbose_logging(deck, capsys):
    deck.add_slide(deck.slide())
    SlideVectorPipeline(ConversionSettings()).convert(deck.build(), "deck.pptx")
    out = capsys.readouterr().out
    assert "SlideVector Pipeline" in out
    assert "Pipeline Complete" in out

    SlideVectorPipeline(QUIET).convert(deck.build(), "deck.pptx")
    assert capsys.readouterr().out == ""


def test_convert_file(tmp_path, deck):
    deck.add_slide(deck.slide())
    path = tmp_path / "deck.pptx"
    path.write_bytes(deck.build())

    result = SlideVectorPipeline(QUIET).convert_file(path)
    assert result.total_slides == 1

    with pytest.raises(FileNotFoundError):
        SlideVectorPipeline(QUIET).convert_file(tmp_path / "missing.pptx")


def test_python_pptx_deck_end_to_end():
    """A deck saved by python-pptx converts with text and picture intact."""
    from PIL import Image
    from pptx import Presentation
    from pptx.util import Inches, Pt

    image_bytes = io.BytesIO()
    Image.new("RGB", (8, 8), (255, 0, 0)).save(image_bytes, format="PNG")
    image_bytes.seek(0)

    prs = Presentation()
    blank = prs.slide_layouts[6]

    first = prs.slides.add_slide(blank)
    box = first.shapes.add_textbox(Inches(1), Inches(1), Inches(4), Inches(1))
    run = box.text_frame.paragraphs[0].add_run()
    run.text = "Quarterly results"
    run.font.size = Pt(32)
    run.font.bold = True

    second = prs.slides.add_slide(blank)
    second.shapes.add_picture(image_bytes, Inches(0), Inches(0), Inches(10), Inches(7.5))

    buffer = io.BytesIO()
    prs.save(buffer)

    result = SlideVectorPipeline(QUIET).convert(buffer.getvalue(), "generated.pptx")

    assert result.total_slides == 2
    assert result.fallback_slides == []

    text_svg = svg_of(result.images[0])
    assert ">Quarterly results</tspan>" in text_svg
    assert 'font-size="32px"' in text_svg
    assert 'font-weight="bold"' in text_svg

    picture_svg = svg_of(result.images[1])
    assert "data:image/png;base64," in picture_svg
    assert 'width="1920" height="1080" preserveAspectRatio' in picture_svg


def test_unreadable_optional_parts_do_not_fail_the_job(widescreen_deck):
    """Encrypted theme and presentation parts fall back to defaults."""
    d = widescreen_deck
    d.theme = d.theme_xml(accent1=d.srgb("FF0000"))
    d.add_slide(d.slide(d.shape(0, 0, 9144000, 6858000, fill_xml=d.scheme("accent1"))))
    d.add_slide(d.slide())
    d.encrypted.update({"ppt/theme/theme1.xml", "ppt/presentation.xml", "ppt/slides/slide2.xml"})

    result = SlideVectorPipeline(QUIET).convert(d.build(), "deck.pptx")

    assert result.total_slides == 2
    assert result.fallback_slides == [2]
    svg = svg_of(result.images[0])
    # 4:3 default size: the full-width 4:3 shape spans the whole canvas
    assert 'width="1920" height="1080" fill="#4472C4"' in svg


def test_media_extracted_once_per_job(deck, tiny_png, monkeypatch):
    calls = []
    extract_all = MediaExtractor.extract_all

    def counting_extract_all(self, package):
        calls.append(package)
        return extract_all(self, package)

    monkeypatch.setattr(MediaExtractor, "extract_all", counting_extract_all)

    deck.media["ppt/media/image1.png"] = tiny_png
    for _ in range(3):
        deck.add_slide(deck.slide(deck.picture(0, 0, 914400, 914400, r_id="rId2")), rels={"rId2": "../media/image1.png"})

    result = SlideVectorPipeline(ConversionSettings(max_workers=3, verbose=False)).convert(deck.build(), "deck.pptx")

    assert result.fallback_slides == []
    assert len(calls) == 1

"""
Generate audit HTML reports for QA.

Lays out every rendered slide image of a conversion on one page, marking
slides that were replaced by the placeholder.
"""

from pathlib import Path
from typing import Optional

from jinja2 import Template

from slidevector.models import ConversionResult


class AuditHTMLGenerator:
    """
    Generate HTML audit reports.

    Features:
    - All slide images in order, at a fixed preview width
    - Placeholder slides highlighted
    - Source file and canvas metadata
    """

    HTML_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>SlideVector Audit Report</title>
    <style>
        * {
            margin: 0;
            padding: 0;
            box-sizing: border-box;
        }

        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Oxygen, Ubuntu, Cantarell, sans-serif;
            background: #f5f5f5;
            padding: 20px;
        }

        .header {
            background: white;
            padding: 20px;
            border-radius: 8px;
            margin-bottom: 20px;
            box-shadow: 0 2px 4px rgba(0,0,0,0.1);
        }

        .header h1 {
            color: #333;
            margin-bottom: 10px;
        }

        .header .meta {
            color: #666;
            font-size: 14px;
        }

        .slide-container {
            background: white;
            padding: 20px;
            border-radius: 8px;
            margin-bottom: 30px;
            box-shadow: 0 2px 4px rgba(0,0,0,0.1);
        }

        .slide-container.placeholder {
            border-left: 4px solid #f44336;
        }

        .slide-header {
            margin-bottom: 15px;
            padding-bottom: 10px;
            border-bottom: 2px solid #eee;
        }

        .slide-header h2 {
            color: #333;
        }

        .status {
            display: inline-block;
            padding: 2px 6px;
            border-radius: 3px;
            font-size: 11px;
            font-weight: bold;
            color: white;
            background: #4CAF50;
        }

        .status.failed {
            background: #f44336;
        }

        .slide-image {
            max-width: 100%;
            border: 1px solid #ddd;
            display: block;
        }
    </style>
</head>
<body>
    <div class="header">
        <h1>SlideVector Audit Report</h1>
        <div class="meta">
            <strong>Source:</strong> {{ meta.source }} |
            <strong>Slides:</strong> {{ result.total_slides }} |
            <strong>Canvas:</strong> {{ meta.canvas_width }}×{{ meta.canvas_height }}px |
            <strong>Placeholders:</strong> {{ result.fallback_slides|length }}
        </div>
    </div>

    {% for image in result.images %}
    <div class="slide-container{{ ' placeholder' if image.placeholder else '' }}">
        <div class="slide-header">
            <h2>Slide {{ image.slide_number }}</h2>
            {% if image.placeholder %}
            <span class="status failed">content unavailable</span>
            {% else %}
            <span class="status">rendered</span>
            {% endif %}
        </div>
        <img src="{{ image.image_data }}" class="slide-image" width="{{ preview_width }}" alt="Slide {{ image.slide_number }}">
    </div>
    {% endfor %}
</body>
</html>
"""

    def __init__(self, preview_width: int = 960):
        self.preview_width = preview_width

    def generate(
        self,
        result: ConversionResult,
        output_path: Path,
        meta: Optional[dict] = None,
    ) -> Path:
        """
        Generate audit HTML report.

        Args:
            result: ConversionResult to display
            output_path: Path to save HTML file
            meta: Metadata dictionary (source, canvas_width, canvas_height)

        Returns:
            Path to generated HTML file
        """
        print(f"[Audit] Generating HTML report for {result.total_slides} slides")

        template = Template(self.HTML_TEMPLATE, autoescape=True)
        html_content = template.render(
            meta=meta or {},
            result=result,
            preview_width=self.preview_width,
        )

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(html_content)

        print(f"[Audit] Saved HTML report to {output_path}")
        return output_path

"""Meta page: a static HTML snapshot of the commit explorer.

Renders the current explorer state: summary stats, the cutoff slider
position, the scatterplot as inline SVG, the narrative steps, the brush
breakdown and the file distribution.
"""

import html
import logging
from pathlib import Path

from commitscope.explorer import Explorer
from commitscope.renderer import CircleMark, Scene

logger = logging.getLogger(__name__)


def _esc(s: str) -> str:
    return html.escape(str(s), quote=True)


def _circle(c: CircleMark, color: str) -> str:
    selected = ' class="selected"' if c.selected else ""
    return (
        f'<circle data-commit="{_esc(c.commit_id)}" cx="{c.cx:.2f}" cy="{c.cy:.2f}" '
        f'r="{c.r:.2f}" fill="{_esc(color)}" fill-opacity="{c.opacity}"{selected}/>'
    )


def render_svg(scene: Scene) -> str:
    """Draw a Scene as SVG, one <g> per layer in scene order."""
    area = scene.area
    parts: dict[str, str] = {}

    parts["gridlines"] = "".join(
        f'<line x1="{area.left:.2f}" x2="{area.right:.2f}" y1="{y:.2f}" y2="{y:.2f}"/>'
        for y in scene.gridlines
    )
    parts["x-axis"] = (
        f'<line x1="{area.left:.2f}" x2="{area.right:.2f}" '
        f'y1="{area.bottom:.2f}" y2="{area.bottom:.2f}" stroke="currentColor"/>'
        + "".join(
            f'<g class="tick" transform="translate({t.position:.2f},{area.bottom:.2f})">'
            f'<line y2="6" stroke="currentColor"/>'
            f'<text y="9" dy="0.71em" text-anchor="middle">{_esc(t.label)}</text></g>'
            for t in scene.x_ticks
        )
    )
    parts["y-axis"] = (
        f'<line x1="{area.left:.2f}" x2="{area.left:.2f}" '
        f'y1="{area.top:.2f}" y2="{area.bottom:.2f}" stroke="currentColor"/>'
        + "".join(
            f'<g class="tick" transform="translate({area.left:.2f},{t.position:.2f})">'
            f'<line x2="-6" stroke="currentColor"/>'
            f'<text x="-9" dy="0.32em" text-anchor="end">{_esc(t.label)}</text></g>'
            for t in scene.y_ticks
        )
    )
    parts["brush-overlay"] = (
        f'<rect class="overlay" x="{area.left:.2f}" y="{area.top:.2f}" '
        f'width="{area.width:.2f}" height="{area.height:.2f}" fill="none" pointer-events="all"/>'
    )
    parts["dots"] = "".join(_circle(c, scene.color) for c in scene.circles)
    parts["brush-selection"] = ""

    layers = "".join(
        f'<g class="{layer}">{parts.get(layer, "")}</g>' for layer in scene.layers
    )
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {scene.width} {scene.height}" '
        f'style="overflow: visible">{layers}</svg>'
    )


def _dl(items: list[tuple[str, str]], css_class: str) -> str:
    rows = "".join(f"<dt>{_esc(k)}</dt><dd>{_esc(v)}</dd>" for k, v in items)
    return f'<dl class="{css_class}">{rows}</dl>'


def render_meta_page(explorer: Explorer) -> str:
    w = explorer.widgets
    scene = explorer.scene or explorer.renderer.scene()
    stats = _dl(w.stats.items, "stats") if w.stats is not None else ""
    breakdown = _dl(w.language_breakdown.items, "breakdown") if w.language_breakdown is not None else ""
    files = _dl(w.file_distribution.items, "files") if w.file_distribution is not None else ""
    count = _esc(w.selection_count.text) if w.selection_count is not None else ""
    progress = explorer.controller.commit_progress
    time_text = _esc(w.time_display.text) if w.time_display is not None else ""

    steps = "".join(
        f'<div class="step{" active" if s.active else ""}" data-commit="{_esc(s.commit.id)}">'
        f'<p>{_esc(s.text)}</p></div>'
        for s in explorer.steps
    )

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Meta | Code History</title>
<style>
  body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
         max-width: 100ch; margin: 0 auto; padding: 20px; }}
  .stats {{ display: grid; grid-template-columns: repeat(auto-fill, minmax(10em, 1fr)); }}
  .stats dt {{ font-size: 12px; color: #6e7681; text-transform: uppercase; }}
  .stats dd {{ font-size: 24px; margin: 0 0 12px 0; }}
  .gridlines line {{ stroke: #ccc; stroke-opacity: 0.5; }}
  circle.selected {{ fill: #ff6b6b; }}
  .filter {{ display: flex; align-items: baseline; gap: 1em; }}
  .filter input {{ flex: 1; }}
  .scrolly {{ display: grid; grid-template-columns: 1fr 1fr; gap: 2em; }}
  .step {{ padding-bottom: {explorer.scroller.step_height // 2}px; opacity: 0.5; }}
  .step.active {{ opacity: 1; }}
</style>
</head>
<body>

<h1>Code history</h1>
<section id="stats">{stats}</section>

<div class="filter">
  <label for="commit-progress">Show commits until:</label>
  <input type="range" id="commit-progress" min="0" max="100" step="0.01" value="{progress:.2f}">
  <time id="commit-time">{time_text}</time>
</div>

<div class="scrolly">
  <div id="scatter-story">{steps}</div>
  <div>
    <div id="chart">{render_svg(scene)}</div>
    <p id="selection-count">{count}</p>
    <section id="language-breakdown">{breakdown}</section>
  </div>
</div>

<section id="files">{files}</section>

</body>
</html>"""


def generate_meta_page(explorer: Explorer, output_dir: Path) -> Path:
    """Write the meta page. Returns output path."""
    output_path = output_dir / "index.html"
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_meta_page(explorer), encoding="utf-8")
    logger.info(
        "Meta page saved to %s (%d commits, %d visible)",
        output_path, len(explorer.collection), len(explorer.visible),
    )
    return output_path

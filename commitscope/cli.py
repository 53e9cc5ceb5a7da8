"""CLI entry point for commitscope."""

import argparse
import logging
import sys
from pathlib import Path

from commitscope.config import load_config
from commitscope.explorer import BrushEvent, Explorer, SliderInput, StepEnter
from commitscope.extractors.csv_extractor import write_line_changes
from commitscope.extractors.git_extractor import GitExtractor
from commitscope.gallery import ProjectGallery, load_projects
from commitscope.selection import BrushSelection
from commitscope.widgets import Widgets


def _add_view_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("log_path", nargs="?", help="loc.csv to read (defaults to config log_path)")
    p.add_argument(
        "--progress", type=float, default=None,
        help="Cutoff position 0-100 (default: 100, all commits)",
    )
    p.add_argument(
        "--step", type=int, default=None,
        help="Activate narrative step N (overrides --progress)",
    )
    p.add_argument(
        "--brush", type=str, default=None,
        help="Brush rectangle in plot pixels as x0,y0,x1,y1",
    )


def _parse_brush(raw: str) -> BrushSelection:
    try:
        x0, y0, x1, y1 = (float(v) for v in raw.split(","))
    except ValueError as e:
        raise ValueError(f"--brush needs four comma-separated numbers, got {raw!r}") from e
    return BrushSelection.from_corners((x0, y0), (x1, y1))


def main() -> None:
    parser = argparse.ArgumentParser(description="Commit history explorer")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("-c", "--config", type=Path, default=None, help="Path to config.yaml")
    sub = parser.add_subparsers(dest="command")

    # extract command
    extract_parser = sub.add_parser("extract", help="Build loc.csv from a git repository")
    extract_parser.add_argument("repo_path", help="Path to the git repository")
    extract_parser.add_argument("-o", "--output", type=Path, default=None, help="Output CSV path")

    # stats command
    stats_parser = sub.add_parser("stats", help="Print summary stats for the visible commits")
    _add_view_args(stats_parser)

    # page command
    page_parser = sub.add_parser("page", help="Write the meta page HTML snapshot")
    _add_view_args(page_parser)
    page_parser.add_argument("-o", "--output-dir", type=Path, default=None)

    # plot command
    plot_parser = sub.add_parser("plot", help="Render the scatterplot as PNG")
    _add_view_args(plot_parser)
    plot_parser.add_argument("-o", "--output", type=Path, default=None)
    plot_parser.add_argument("--scale", type=int, default=1, help="Pixel scale factor")

    # narrative command
    narrative_parser = sub.add_parser("narrative", help="Print the narrative steps")
    narrative_parser.add_argument("log_path", nargs="?")

    # projects command
    projects_parser = sub.add_parser("projects", help="Search and filter the project gallery")
    projects_parser.add_argument("projects_path", nargs="?")
    projects_parser.add_argument("-q", "--query", default="", help="Search text")
    projects_parser.add_argument("--year", default=None, help="Only show this year")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)

    try:
        if args.command == "extract":
            output = args.output or config.resolved_log_path
            rows = GitExtractor(Path(args.repo_path).resolve(), config.extraction).extract()
            write_line_changes(rows, output)
            print(f"{len(rows)} line rows written to {output}")

        elif args.command in ("stats", "page", "plot"):
            log_path = Path(args.log_path) if args.log_path else config.resolved_log_path
            explorer = Explorer.from_csv(
                log_path, config,
                Widgets.full((config.plot.tooltip_width, config.plot.tooltip_height)),
            )
            if args.step is not None:
                explorer.dispatch(StepEnter(args.step))
            elif args.progress is not None:
                explorer.dispatch(SliderInput(args.progress))
            if args.brush:
                explorer.dispatch(BrushEvent(_parse_brush(args.brush)))

            if args.command == "stats":
                print(f"Cutoff: {explorer.widgets.time_display.text} "
                      f"({explorer.controller.commit_progress:.2f}%)")
                for label, value in explorer.widgets.stats.items:
                    print(f"  {label}: {value}")
                if args.brush:
                    print(explorer.widgets.selection_count.text)
                    for lang, label in explorer.widgets.language_breakdown.items:
                        print(f"  {lang}: {label}")

            elif args.command == "page":
                from commitscope.output.meta_page import generate_meta_page
                path = generate_meta_page(explorer, args.output_dir or config.resolved_output_dir)
                print(f"Output: {path}")

            else:
                from commitscope.output.scatter_png import render_scatter_png
                output = args.output or config.resolved_output_dir / "scatterplot.png"
                path = render_scatter_png(explorer.scene, output, scale=args.scale)
                print(f"Output: {path}")

        elif args.command == "narrative":
            log_path = Path(args.log_path) if args.log_path else config.resolved_log_path
            explorer = Explorer.from_csv(log_path, config)
            for step in explorer.steps:
                print(f"[{step.index:>3}] ({step.rule}) {step.text}")

        elif args.command == "projects":
            path = Path(args.projects_path) if args.projects_path else config.resolved_projects_path
            gallery = ProjectGallery(load_projects(path))
            gallery.search(args.query)
            if args.year:
                gallery.toggle_year(args.year)
            for s in gallery.slices:
                marker = "*" if s.selected else " "
                print(f" {marker} {s.label}: {s.value}")
            print(gallery.describe())
            for p in gallery.visible:
                print(f"  {p.year}  {p.title}")

        else:
            parser.print_help()
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

"""Tests for the scatterplot renderer: mark binding, hit testing and tooltip."""

import pytest

from commitscope.aggregator import process_commits
from commitscope.config import PlotConfig
from commitscope.renderer import LAYERS, ScatterplotRenderer, format_hour
from commitscope.scales import ScaleManager
from commitscope.widgets import TooltipWidget

from conftest import make_line

REPO = "https://github.com/tachiu33333/portfolio"


@pytest.fixture()
def plot():
    return PlotConfig()


@pytest.fixture()
def renderer(plot):
    return ScatterplotRenderer(ScaleManager(plot), plot, TooltipWidget(width=280, height=90))


@pytest.fixture()
def commits(scenario_lines):
    return process_commits(scenario_lines, REPO)


class TestFormatHour:
    def test_wraps_at_24(self):
        assert format_hour(0) == "00:00"
        assert format_hour(14) == "14:00"
        assert format_hour(24) == "00:00"


class TestRender:
    def test_largest_drawn_first(self, renderer, commits):
        scene = renderer.render(list(reversed(commits)))
        assert [c.commit_id for c in scene.circles] == ["aaa111", "bbb222"]
        assert scene.circles[0].r > scene.circles[1].r

    def test_first_render_enters_everything(self, renderer, commits):
        renderer.render(commits)
        assert renderer.last_join.entered == ["aaa111", "bbb222"]
        assert renderer.last_join.exited == []

    def test_marks_keyed_by_commit(self, renderer, commits):
        renderer.render(commits)
        mark_a = renderer.marks["aaa111"]
        renderer.render(commits[:1])
        assert renderer.marks["aaa111"] is mark_a
        assert renderer.last_join.updated == ["aaa111"]
        assert renderer.last_join.exited == ["bbb222"]
        assert "bbb222" not in renderer.marks

    def test_exited_mark_is_recreated(self, renderer, commits):
        renderer.render(commits)
        renderer.render(commits[:1])
        renderer.render(commits)
        assert renderer.last_join.entered == ["bbb222"]
        assert renderer.last_join.updated == ["aaa111"]

    def test_invalid_datetime_not_drawn(self, renderer, commits):
        (bad,) = process_commits([make_line("bad", None)], REPO)
        scene = renderer.render(commits + [bad])
        assert "bad" not in [c.commit_id for c in scene.circles]

    def test_marks_match_scales(self, renderer, commits):
        renderer.render(commits)
        for c in commits:
            mark = renderer.marks[c.id]
            assert (mark.cx, mark.cy) == renderer.scales.position(c)
            assert mark.r == renderer.scales.radius(c)

    def test_scene_axes(self, renderer, commits):
        scene = renderer.render(commits)
        assert scene.layers == LAYERS
        assert len(scene.y_ticks) == 13
        assert scene.y_ticks[0].label == "00:00"
        assert scene.y_ticks[6].label == "12:00"
        assert scene.y_ticks[-1].label == "00:00"
        assert scene.gridlines == [t.position for t in scene.y_ticks]
        assert scene.x_ticks
        assert scene.color == "steelblue"


class TestHitTest:
    def test_hits_dot_centre(self, renderer, commits):
        renderer.render(commits)
        mark = renderer.marks["bbb222"]
        assert renderer.hit_test(mark.cx, mark.cy) == "bbb222"

    def test_miss(self, renderer, commits):
        renderer.render(commits)
        assert renderer.hit_test(500, 590) is None


class TestTooltip:
    def test_hover_fills_tooltip(self, renderer, commits):
        renderer.render(commits)
        renderer.hover(commits[0], 100, 100)
        tip = renderer.tooltip
        assert not tip.hidden
        assert tip.link_text == "aaa111"
        assert tip.link_href == f"{REPO}/commit/aaa111"
        assert tip.date_text == "Monday, January 1, 2024 at 9:00 AM"
        assert (tip.left, tip.top) == (112, 112)
        assert renderer.marks["aaa111"].opacity == 1.0

    def test_flips_at_viewport_edge(self, renderer, commits):
        renderer.render(commits)
        renderer.hover(commits[0], 1200, 780)
        assert (renderer.tooltip.left, renderer.tooltip.top) == (908, 678)

    def test_leave_hides(self, renderer, commits, plot):
        renderer.render(commits)
        renderer.hover(commits[0], 100, 100)
        renderer.leave("aaa111")
        assert renderer.tooltip.hidden
        assert renderer.hovered is None
        assert renderer.marks["aaa111"].opacity == plot.dot_opacity

    def test_hovered_commit_filtered_out(self, renderer, commits):
        renderer.render(commits)
        renderer.hover(commits[1], 100, 100)
        renderer.render(commits[:1])
        assert renderer.tooltip.hidden
        assert renderer.hovered is None

    def test_without_tooltip_widget(self, plot, commits):
        renderer = ScatterplotRenderer(ScaleManager(plot), plot)
        renderer.render(commits)
        renderer.hover(commits[0], 100, 100)
        renderer.move(200, 200)
        renderer.leave("aaa111")
        assert renderer.hovered is None

    def test_switching_hover_resets_previous_dot(self, renderer, commits, plot):
        renderer.render(commits)
        renderer.hover(commits[0], 100, 100)
        renderer.hover(commits[1], 200, 200)
        assert renderer.marks["aaa111"].opacity == plot.dot_opacity
        assert renderer.marks["bbb222"].opacity == plot.hover_opacity
        assert renderer.hovered == "bbb222"

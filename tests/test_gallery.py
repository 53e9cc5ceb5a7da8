"""Tests for the project gallery search and year pie."""

import json
import math

import pytest

from commitscope.gallery import (
    PALETTE,
    ProjectGallery,
    _adjust,
    load_projects,
    matches_query,
    year_slices,
)
from commitscope.models import Project


@pytest.fixture()
def projects():
    return [
        Project(title="Lab 1", description="HTML basics", year="2024"),
        Project(title="Weather app", description="Fetches forecasts", year="2023"),
        Project(title="Portfolio", description="This very site, in D3", year=2024),
    ]


class TestLoadProjects:
    def test_loads_and_coerces_year(self, tmp_path):
        path = tmp_path / "projects.json"
        path.write_text(json.dumps([
            {"title": "A", "year": 2023, "image": "a.png"},
            {"title": "B", "year": "2024", "description": "b"},
        ]))
        loaded = load_projects(path)
        assert [p.year for p in loaded] == ["2023", "2024"]
        assert loaded[0].image == "a.png"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_projects(tmp_path / "projects.json")

    def test_invalid_entries(self, tmp_path):
        path = tmp_path / "projects.json"
        path.write_text(json.dumps([{"description": "no title"}]))
        with pytest.raises(ValueError, match="Invalid projects file"):
            load_projects(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "projects.json"
        path.write_text("{not json")
        with pytest.raises(ValueError):
            load_projects(path)


class TestSearch:
    def test_case_insensitive_any_field(self, projects):
        assert matches_query(projects[2], "d3")
        assert matches_query(projects[1], "WEATHER")
        assert matches_query(projects[0], "2024")
        assert not matches_query(projects[0], "forecast")

    def test_empty_query_matches(self, projects):
        assert all(matches_query(p, "") for p in projects)

    def test_gallery_search(self, projects):
        gallery = ProjectGallery(projects)
        assert [p.title for p in gallery.search("LAB")] == ["Lab 1"]
        assert [p.title for p in gallery.search("")] == ["Lab 1", "Weather app", "Portfolio"]


class TestYearSlices:
    def test_first_seen_labels(self, projects):
        slices = year_slices(projects)
        assert [(s.label, s.value) for s in slices] == [("2024", 2), ("2023", 1)]

    def test_angles_cover_circle_largest_first(self, projects):
        s2024, s2023 = year_slices(projects)
        assert s2024.start_angle == 0
        assert s2024.end_angle == pytest.approx(4 * math.pi / 3)
        assert s2023.start_angle == pytest.approx(4 * math.pi / 3)
        assert s2023.end_angle == pytest.approx(2 * math.pi)

    def test_selected_slice_is_darker(self, projects):
        plain = year_slices(projects)[1]
        picked = year_slices(projects, "2023")[1]
        assert picked.selected
        assert plain.color == _adjust(PALETTE[1], 1.5)
        assert picked.color == _adjust(plain.color, -0.3)
        assert picked.color != plain.color

    def test_adjust(self):
        assert _adjust("#4e79a7", 0) == "#4e79a7"
        assert _adjust("#000000", 2) == "#000000"
        assert _adjust("#ffffff", 1) == "#ffffff"

    def test_no_projects(self):
        assert year_slices([]) == []


class TestProjectGallery:
    def test_toggle_year(self, projects):
        gallery = ProjectGallery(projects)
        assert [p.title for p in gallery.toggle_year("2024")] == ["Lab 1", "Portfolio"]
        assert gallery.describe() == "Year: 2024, Projects: 2"
        assert [p.title for p in gallery.toggle_year("2024")] == ["Lab 1", "Weather app", "Portfolio"]
        assert gallery.selected_year is None

    def test_query_and_year_combine(self, projects):
        gallery = ProjectGallery(projects)
        gallery.search("a")
        gallery.toggle_year("2023")
        assert [p.title for p in gallery.visible] == ["Weather app"]

    def test_pie_summarizes_all_projects(self, projects):
        gallery = ProjectGallery(projects)
        gallery.search("weather")
        assert sum(s.value for s in gallery.slices) == 3

    def test_describe(self, projects):
        gallery = ProjectGallery(projects)
        assert gallery.describe() == "Hover or click on a slice to see details."
        assert gallery.describe("2023") == "Year: 2023, Projects: 1"

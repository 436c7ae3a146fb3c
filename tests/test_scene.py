"""Tests for the interactive scene state."""

import pytest

from py_voronoi.config import settings
from py_voronoi.core.polygon import polygon_area
from py_voronoi.core.scene import VoronoiScene
from py_voronoi.core.vector import Point2
from py_voronoi.utils.random import get_rng, set_random_seed


@pytest.fixture
def scene():
    return VoronoiScene(200, 100)


class TestSceneBasics:
    """Test construction and demand-gated recomputation."""

    def test_pointer_site_first(self, scene):
        assert len(scene.sites) == 1
        assert scene.sites[0] is scene.pointer
        assert scene.pointer.is_pointer
        assert (scene.pointer.x, scene.pointer.y) == (100, 50)

    def test_compute_is_cached(self, scene):
        first = scene.compute()
        assert scene.needs_recompute is False
        assert scene.compute() is first

    def test_mutation_triggers_rebuild(self, scene):
        first = scene.compute()
        scene.add_site(20, 20)
        assert scene.needs_recompute
        second = scene.compute()
        assert second is not first
        assert len(second.cells) == 2

    def test_ids_synced_on_compute(self, scene):
        scene.add_site(20, 20)
        scene.add_site(150, 80)
        scene.compute()
        assert [s.voronoi_id for s in scene.sites] == [0, 1, 2]

    def test_resize(self, scene):
        scene.resize(50, 40)
        diagram = scene.compute()
        assert polygon_area(diagram.cells[0].polygon) == pytest.approx(2000.0)


class TestSiteEditing:
    """Test adding, removing and picking sites."""

    def test_remove_site(self, scene):
        scene.add_site(20, 20)
        assert scene.remove_site(1) is True
        assert len(scene.sites) == 1

    def test_pointer_cannot_be_removed(self, scene):
        assert scene.remove_site(0) is False
        assert scene.remove_site(5) is False

    def test_clear_keeps_pointer(self, scene):
        scene.add_site(20, 20)
        scene.add_site(30, 30)
        scene.clear_sites()
        assert scene.sites == [scene.pointer]

    def test_find_site_at(self, scene):
        scene.add_site(20, 20)
        scene.add_site(60, 60)
        assert scene.find_site_at(Point2(22, 21)) == 1
        assert scene.find_site_at(Point2(61, 59)) == 2
        assert scene.find_site_at(Point2(150, 10)) == -1

    def test_find_site_ignores_pointer(self, scene):
        assert scene.find_site_at(Point2(100, 50)) == -1

    def test_press_adds_or_grabs(self, scene):
        index = scene.press(30, 30)
        assert index == 1
        assert not scene.is_dragging
        assert scene.press(31, 30) == 1
        assert scene.is_dragging

    def test_drag_moves_site(self, scene):
        scene.add_site(30, 30)
        assert scene.begin_drag(1)
        scene.drag_to(80, 40)
        assert (scene.sites[1].x, scene.sites[1].y) == (80, 40)
        assert (scene.pointer.x, scene.pointer.y) == (80, 40)
        assert scene.hovered_index() == 1
        scene.end_drag()
        assert not scene.is_dragging

    def test_cannot_drag_pointer(self, scene):
        assert scene.begin_drag(0) is False

    def test_pointer_cell(self, scene):
        scene.add_site(10, 50)
        scene.move_pointer(190, 50)
        cell = scene.pointer_cell()
        assert cell is not None
        assert cell.site is scene.pointer
        assert min(p.x for p in cell.polygon) == pytest.approx(100.0)


class TestRandomSites:
    """Test random layouts."""

    def test_count_and_margin(self, scene):
        scene.random_sites(40, seed="layout")
        assert len(scene.sites) == 41
        margin = settings.random_site_margin
        for site in scene.sites[1:]:
            assert margin <= site.x <= 200 - margin
            assert margin <= site.y <= 100 - margin

    def test_seed_reproducible(self):
        a = VoronoiScene(200, 100)
        b = VoronoiScene(200, 100)
        a.random_sites(10, seed=42)
        b.random_sites(10, seed=42)
        assert [(s.x, s.y) for s in a.sites] == [(s.x, s.y) for s in b.sites]

    def test_append(self, scene):
        scene.random_sites(5, seed=1)
        scene.random_sites(5, clear=False, seed=2)
        assert len(scene.sites) == 11

    def test_default_count(self, scene):
        scene.random_sites(seed=3)
        assert len(scene.sites) == settings.default_site_count + 1

    def test_negative_count_rejected(self, scene):
        with pytest.raises(ValueError):
            scene.random_sites(-1)

    def test_shared_generator(self):
        set_random_seed("shared")
        first = get_rng().random()
        set_random_seed("shared")
        assert get_rng().random() == first


class TestSceneRelaxation:
    """Test relaxation through the scene."""

    def test_relax_marks_dirty(self, scene):
        scene.add_site(10, 10)
        scene.compute()
        assert scene.relax() is True
        assert scene.needs_recompute

    def test_relax_skips_pointer(self, scene):
        scene.add_site(10, 10)
        scene.move_pointer(20, 20)
        scene.relax()
        assert (scene.pointer.x, scene.pointer.y) == (20, 20)

    def test_relax_computes_when_needed(self, scene):
        scene.add_site(10, 10)
        scene.relax()
        assert scene.diagram is not None

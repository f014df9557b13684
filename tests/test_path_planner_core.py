import numpy as np

from grid_nav.config.models import PlannerConfig
from grid_nav.core.grid_model import GridModel
from grid_nav.path_planner.map_model import PlanRequest, PlanStatus
from grid_nav.path_planner.path_planner_core import PathPlanningCore


def test_free_grid_diagonal(free_grid):
    core = PathPlanningCore(PlannerConfig())
    result = core.plan(free_grid, PlanRequest(start=(0.5, 0.5), goal=(4.2, 4.7)))

    assert result.status is PlanStatus.OK
    assert result.ok
    assert result.raw_path == [(0.0, 0.0), (1.0, 1.0), (2.0, 2.0), (3.0, 3.0), (4.0, 4.0)]
    assert result.simplified_path == [(0.0, 0.0), (4.0, 4.0)]
    assert result.nodes_expanded == 5
    assert result.elapsed_s >= 0.0
    assert result.binarized is not None and result.inflated is not None
    assert core.plan_count == 1


def test_single_gap_wall_without_inflation(wall_grid):
    core = PathPlanningCore(PlannerConfig(inflation_radius=0.0))
    result = core.plan(wall_grid, PlanRequest(start=(0.0, 0.0), goal=(4.0, 4.0)))
    assert result.status is PlanStatus.OK
    assert (2.0, 2.0) in result.raw_path
    assert result.simplified_path[0] == result.raw_path[0]
    assert result.simplified_path[-1] == result.raw_path[-1]


def test_inflation_closes_narrow_gap(wall_grid):
    core = PathPlanningCore(PlannerConfig(inflation_radius=0.5))
    result = core.plan(wall_grid, PlanRequest(start=(0.0, 0.0), goal=(4.0, 4.0)))
    assert result.status is PlanStatus.UNREACHABLE
    assert result.raw_path == []
    assert result.simplified_path == []
    assert result.inflated.value(2, 2) == 100


def test_goal_outside_grid(free_grid):
    result = PathPlanningCore().plan(free_grid, PlanRequest(start=(0.0, 0.0), goal=(10.0, 10.0)))
    assert result.status is PlanStatus.INVALID_GOAL
    assert result.raw_path == [] and result.simplified_path == []
    assert not result.ok


def test_no_map():
    result = PathPlanningCore().plan(None, PlanRequest(start=(0.0, 0.0), goal=(1.0, 1.0)))
    assert result.status is PlanStatus.NO_MAP
    assert result.raw_path == [] and result.simplified_path == []
    assert result.binarized is None


def test_goal_on_obstacle():
    cells = np.zeros((5, 5), dtype=np.int8)
    cells[4, 4] = 100
    grid = GridModel.from_array(cells, resolution=1.0)
    result = PathPlanningCore(PlannerConfig(inflation_radius=0.0)).plan(
        grid, PlanRequest(start=(0.0, 0.0), goal=(4.0, 4.0))
    )
    assert result.status is PlanStatus.UNREACHABLE


def test_start_outside_grid_is_unreachable(free_grid):
    result = PathPlanningCore().plan(free_grid, PlanRequest(start=(-5.0, -5.0), goal=(2.0, 2.0)))
    assert result.status is PlanStatus.UNREACHABLE


def test_start_equals_goal(free_grid):
    result = PathPlanningCore().plan(free_grid, PlanRequest(start=(2.3, 2.3), goal=(2.9, 2.1)))
    assert result.status is PlanStatus.OK
    assert result.raw_path == [(2.0, 2.0)]
    assert result.simplified_path == [(2.0, 2.0)]


def test_simplify_can_be_disabled(free_grid):
    core = PathPlanningCore(PlannerConfig(enable_simplify=False))
    result = core.plan(free_grid, PlanRequest(start=(0.0, 0.0), goal=(4.0, 4.0)))
    assert result.simplified_path == result.raw_path


def test_world_coordinates_follow_origin_and_resolution():
    grid = GridModel.from_array(np.zeros((4, 4)), resolution=0.5, origin=(-1.0, -1.0))
    core = PathPlanningCore(PlannerConfig(inflation_radius=0.0))
    result = core.plan(grid, PlanRequest(start=(-1.0, -1.0), goal=(0.6, 0.6)))
    assert result.status is PlanStatus.OK
    assert result.raw_path == [(-1.0, -1.0), (-0.5, -0.5), (0.0, 0.0), (0.5, 0.5)]


def test_on_pop_policy_from_config(wall_grid):
    core = PathPlanningCore(PlannerConfig(inflation_radius=0.0, visit_policy="on_pop"))
    result = core.plan(wall_grid, PlanRequest(start=(0.0, 0.0), goal=(4.0, 4.0)))
    assert result.status is PlanStatus.OK
    assert (2.0, 2.0) in result.raw_path


def test_raw_grid_is_left_untouched():
    cells = np.array([[-1, 0, 60], [0, 0, 0]], dtype=np.int8)
    grid = GridModel.from_array(cells, resolution=1.0)
    PathPlanningCore().plan(grid, PlanRequest(start=(0.0, 1.0), goal=(1.0, 1.0)))
    assert grid.cells.tolist() == [-1, 0, 60, 0, 0, 0]


def test_occupied_cell_as_start_and_goal():
    cells = np.zeros((5, 5), dtype=np.int8)
    cells[2, 2] = 100
    grid = GridModel.from_array(cells, resolution=1.0)
    core = PathPlanningCore(PlannerConfig(inflation_radius=0.0))
    result = core.plan(grid, PlanRequest(start=(2.5, 2.5), goal=(2.5, 2.5)))
    assert result.status is PlanStatus.UNREACHABLE
    assert result.raw_path == []


def test_corridor_on_fractional_resolution_collapses():
    cells = np.zeros((4, 40), dtype=np.int8)
    cells[1, :] = 100
    cells[3, :] = 100
    grid = GridModel.from_array(cells, resolution=0.05, origin=(-10.0, -10.0))
    core = PathPlanningCore(PlannerConfig(inflation_radius=0.0))
    start = (-10.0 + 0.5 * 0.05, -10.0 + 2.5 * 0.05)
    goal = (-10.0 + 39.5 * 0.05, -10.0 + 2.5 * 0.05)

    result = core.plan(grid, PlanRequest(start=start, goal=goal))
    assert result.status is PlanStatus.OK
    assert len(result.raw_path) == 40
    assert result.simplified_path == [result.raw_path[0], result.raw_path[-1]]

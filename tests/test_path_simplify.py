import numpy as np

from grid_nav.core.grid_model import GridModel
from grid_nav.core.path_simplify import cells_clear, segment_clear, simplify_path_los


def _grid(cells):
    return GridModel.from_array(np.asarray(cells, dtype=np.int8), resolution=1.0, origin=(0.0, 0.0))


def test_straight_diagonal_collapses_to_endpoints(free_grid):
    path = [(float(i), float(i)) for i in range(5)]
    assert simplify_path_los(path, free_grid) == [(0.0, 0.0), (4.0, 4.0)]


def test_empty_inputs(free_grid):
    assert simplify_path_los([], free_grid) == []
    assert simplify_path_los([(0.0, 0.0)], None) == []


def test_short_paths_are_returned_unchanged(free_grid):
    assert simplify_path_los([(1.0, 1.0)], free_grid) == [(1.0, 1.0)]
    path = [(0.0, 0.0), (3.0, 1.0)]
    out = simplify_path_los(path, free_grid)
    assert out == path
    assert out is not path


def test_keeps_corner_around_obstacle_block():
    cells = np.zeros((5, 5), dtype=np.int8)
    cells[1:4, 0:4] = 100
    grid = _grid(cells)
    path = [(float(x), 0.0) for x in range(5)] + [(4.0, float(y)) for y in range(1, 5)]

    out = simplify_path_los(path, grid)
    assert out == [(0.0, 0.0), (4.0, 0.0), (4.0, 4.0)]
    for a, b in zip(out, out[1:]):
        assert segment_clear(grid, a, b)


def test_blocked_neighbours_are_force_accepted():
    cells = np.zeros((1, 5), dtype=np.int8)
    cells[0, 1] = 100
    grid = _grid(cells)
    path = [(0.0, 0.0), (2.0, 0.0), (4.0, 0.0)]
    assert simplify_path_los(path, grid) == path


def test_output_is_subsequence_with_same_endpoints():
    rng = np.random.default_rng(5)
    cells = np.where(rng.random((20, 20)) < 0.15, 100, 0).astype(np.int8)
    cells[0, :] = 0
    cells[:, 19] = 0
    grid = _grid(cells)
    path = [(float(x), 0.0) for x in range(20)] + [(19.0, float(y)) for y in range(1, 20)]

    out = simplify_path_los(path, grid)
    assert out[0] == path[0]
    assert out[-1] == path[-1]
    indices = [path.index(p) for p in out]
    assert indices == sorted(indices)
    assert len(out) <= len(path)


def test_segment_clear_treats_out_of_bounds_as_blocked(free_grid):
    assert segment_clear(free_grid, (0.0, 0.0), (4.0, 0.0))
    assert not segment_clear(free_grid, (0.0, 0.0), (5.0, 0.0))
    assert not segment_clear(free_grid, (-1.0, 0.0), (2.0, 0.0))


def test_segment_clear_threshold():
    grid = _grid([[0, 49, 0]])
    assert segment_clear(grid, (0.0, 0.0), (2.0, 0.0))
    assert not segment_clear(grid, (0.0, 0.0), (2.0, 0.0), threshold=40)


def test_corners_with_fractional_resolution_stay_in_their_cells():
    # 0.05 分辨率下角点坐标存在浮点误差，不能落到下方的墙里
    cells = np.zeros((4, 40), dtype=np.int8)
    cells[1, :] = 100
    cells[3, :] = 100
    grid = GridModel.from_array(cells, resolution=0.05, origin=(-10.0, -10.0))
    path = [grid.cell_to_world(x, 2) for x in range(40)]

    assert segment_clear(grid, path[0], path[-1])
    assert simplify_path_los(path, grid) == [path[0], path[-1]]


def test_cells_clear_samples_cell_centres():
    grid = _grid([[0, 0, 0], [100, 0, 0]])
    assert cells_clear(grid, (0, 0), (2, 1))
    assert not cells_clear(grid, (0, 0), (0, 1))

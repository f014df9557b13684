import numpy as np
import pytest

from grid_nav.core.grid_model import GridModel


@pytest.fixture
def free_grid():
    """5x5 全空闲栅格，分辨率 1.0，原点 (0, 0)"""
    return GridModel.from_array(np.zeros((5, 5), dtype=np.int8), resolution=1.0, origin=(0.0, 0.0))


@pytest.fixture
def wall_grid():
    """5x5 栅格，y=2 整行为障碍，只在 (2, 2) 开口"""
    cells = np.zeros((5, 5), dtype=np.int8)
    cells[2, :] = 100
    cells[2, 2] = 0
    return GridModel.from_array(cells, resolution=1.0, origin=(0.0, 0.0))

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
栅格模型：占据栅格的不可变值类型

功能：
- 保存分辨率、原点、宽高和扁平占据数组（索引 = y * width + x）
- 世界坐标 <-> 栅格坐标转换（栅格角点，不是中心）
- 边界 / 占据查询
"""

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

import numpy as np

from grid_nav.common.exceptions import InvalidGridError

Coord = Tuple[int, int]  # (x, y)
Point = Tuple[float, float]  # (x, y)


@dataclass(frozen=True, eq=False)
class GridModel:
    """
    占据栅格（每个规划周期重新创建）

    cells 为只读 int8 数组，取值约定：
        < 0   未知，规划时视为空闲
        >= 阈值  障碍
        其它   已知代价（本规划器视为可通行）

    示例:
        ```python
        grid = GridModel.from_array(np.zeros((5, 5)), resolution=1.0, origin=(0.0, 0.0))
        cx, cy = grid.world_to_cell((2.5, 3.2))   # (2, 3)
        ```
    """
    resolution: float
    origin: Point
    width: int
    height: int
    cells: np.ndarray

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise InvalidGridError(f"栅格尺寸必须大于0: width={self.width}, height={self.height}")
        if not self.resolution > 0:
            raise InvalidGridError(f"分辨率必须大于0: {self.resolution}")
        cells = np.asarray(self.cells)
        if cells.ndim != 1 or cells.size != self.width * self.height:
            raise InvalidGridError(
                f"占据数组长度不匹配: len={cells.size}, 期望={self.width * self.height}"
            )
        if cells.dtype != np.int8:
            cells = np.clip(cells, -128, 127).astype(np.int8)
        elif cells is self.cells:
            cells = cells.copy()
        cells.setflags(write=False)
        object.__setattr__(self, "cells", cells)
        object.__setattr__(self, "origin", (float(self.origin[0]), float(self.origin[1])))

    # ------------------------------------------------------------------
    # 构造
    # ------------------------------------------------------------------
    @classmethod
    def from_flat(
        cls,
        width: int,
        height: int,
        resolution: float,
        origin: Point,
        data: Iterable[int],
    ) -> "GridModel":
        """从扁平占据序列（行优先，y * width + x）构造"""
        cells = np.fromiter((int(v) for v in data), dtype=np.int16)
        return cls(resolution=resolution, origin=origin, width=int(width), height=int(height), cells=cells)

    @classmethod
    def from_array(cls, array: np.ndarray, resolution: float, origin: Point = (0.0, 0.0)) -> "GridModel":
        """从 (height, width) 二维数组构造，array[y, x] 为格子 (x, y) 的占据值"""
        array = np.asarray(array)
        if array.ndim != 2:
            raise InvalidGridError(f"占据数组必须是2维: ndim={array.ndim}")
        height, width = array.shape
        return cls(resolution=resolution, origin=origin, width=width, height=height, cells=array.reshape(-1))

    def replace_cells(self, cells: np.ndarray) -> "GridModel":
        """保持几何信息不变，替换占据数据，返回新栅格"""
        return GridModel(
            resolution=self.resolution,
            origin=self.origin,
            width=self.width,
            height=self.height,
            cells=np.asarray(cells).reshape(-1),
        )

    # ------------------------------------------------------------------
    # 坐标转换
    # ------------------------------------------------------------------
    def world_to_cell(self, point: Point) -> Coord:
        """世界坐标 -> 栅格坐标（仅向下取整，不做边界检查）"""
        x = math.floor((point[0] - self.origin[0]) / self.resolution)
        y = math.floor((point[1] - self.origin[1]) / self.resolution)
        return (x, y)

    def cell_to_world(self, x: int, y: int) -> Point:
        """栅格坐标 -> 世界坐标（格子角点）"""
        return (x * self.resolution + self.origin[0], y * self.resolution + self.origin[1])

    def corner_to_cell(self, point: Point) -> Coord:
        """
        格子角点世界坐标 -> 栅格坐标（四舍五入）

        cell_to_world 的逆变换，角点经浮点运算后可能略小于整数倍分辨率。
        """
        x = int(round((point[0] - self.origin[0]) / self.resolution))
        y = int(round((point[1] - self.origin[1]) / self.resolution))
        return (x, y)

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------
    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def index(self, x: int, y: int) -> int:
        return y * self.width + x

    def value(self, x: int, y: int) -> Optional[int]:
        """格子占据值，越界返回 None"""
        if not self.in_bounds(x, y):
            return None
        return int(self.cells[self.index(x, y)])

    def is_occupied(self, x: int, y: int, threshold: int) -> bool:
        """在界内且占据值 >= threshold"""
        if not self.in_bounds(x, y):
            return False
        return int(self.cells[self.index(x, y)]) >= threshold

    def as_2d(self) -> np.ndarray:
        """(height, width) 只读视图"""
        return self.cells.reshape(self.height, self.width)

    def occupied_count(self, threshold: int) -> int:
        return int(np.count_nonzero(self.cells >= threshold))

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

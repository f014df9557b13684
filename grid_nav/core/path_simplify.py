#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
路径简化模块：基于视线（line-of-sight）去除A*路径中的多余点

功能：
- 栅格空间光线采样：路径点是格子角点，先还原为整数格子坐标，
  再沿格子中心连线按不超过一格的步长采样
- 贪心剪枝：从当前点出发，从路径尾部往回找最远的可直连点
"""

import math
from typing import List, Optional, Tuple

from loguru import logger

from grid_nav.common.constants import OBSTACLE_THRESHOLD
from grid_nav.core.grid_model import GridModel

Point = Tuple[float, float]  # (x, y)
Coord = Tuple[int, int]


def cells_clear(grid: GridModel, c0: Coord, c1: Coord, threshold: int = OBSTACLE_THRESHOLD) -> bool:
    """
    栅格空间视线检测

    采样点 c(t) = c0 + t * (c1 - c0)，t = k / n，k = 0..n，n = ceil(|c1 - c0|)，
    每个采样点归入中心最近的格子。

    Returns:
        True: 所有采样格子都在界内且占据值 < threshold
    """
    dx = c1[0] - c0[0]
    dy = c1[1] - c0[1]
    steps = max(1, int(math.ceil(math.hypot(dx, dy))))

    for k in range(steps + 1):
        t = k / steps
        cx = int(math.floor(c0[0] + dx * t + 0.5))
        cy = int(math.floor(c0[1] + dy * t + 0.5))
        value = grid.value(cx, cy)
        # 越界按障碍处理
        if value is None or value >= threshold:
            return False
    return True


def segment_clear(grid: GridModel, p0: Point, p1: Point, threshold: int = OBSTACLE_THRESHOLD) -> bool:
    """
    视线检测：两个路径点（格子角点世界坐标）之间是否无障碍

    Args:
        grid: 膨胀后的占据栅格
        p0: 起点世界坐标
        p1: 终点世界坐标
        threshold: 占据值 >= 该值视为障碍
    """
    return cells_clear(grid, grid.corner_to_cell(p0), grid.corner_to_cell(p1), threshold)


def simplify_path_los(
    path: List[Point],
    grid: Optional[GridModel],
    threshold: int = OBSTACLE_THRESHOLD,
) -> List[Point]:
    """
    基于 line-of-sight 的路径简化：
        尽量用更远的点替代中间折线点。

    从当前保留点 i 出发，从尾部 j = n-1 往回扫描到 i+1，
    接受第一个视线畅通的点；若一直扫到 i+1 都不通，则强制接受 i+1，
    保证每轮至少前进一个点，总轮数不超过路径长度。

    Args:
        path: 原始路径（世界坐标，格子角点）
        grid: 膨胀后的占据栅格
        threshold: 占据值 >= 该值视为障碍

    Returns:
        简化后的路径，首尾点与原路径一致；输入为空时返回 []
    """
    if not path or grid is None:
        logger.debug("LOS简化跳过: 路径或栅格为空")
        return []

    n = len(path)
    if n <= 2:
        return list(path)

    cells = [grid.corner_to_cell(p) for p in path]
    smoothed = [path[0]]
    i = 0
    forced = 0

    while i < n - 1:
        j = n - 1
        # 从尾部往回找最远可直连点
        while j > i + 1 and not cells_clear(grid, cells[i], cells[j], threshold):
            j -= 1
        if j == i + 1 and not cells_clear(grid, cells[i], cells[j], threshold):
            forced += 1
        smoothed.append(path[j])
        i = j

    if forced:
        logger.warning(f"LOS简化: {forced} 段相邻点之间视线受阻，已强制保留")
    logger.debug(f"LOS简化: 原始路径长度={n}, 简化后={len(smoothed)}")
    return smoothed

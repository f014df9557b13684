#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
栅格预处理模块：二值化和障碍膨胀

功能：
- 二值化：未知 -> 0，>= 阈值 -> 100，其余保持不变
- 障碍膨胀：沿 8 个主方向按整数步长外扩，为车辆预留安全距离

注意：膨胀使用 8 射线星形模板近似圆盘，不是完整圆形填充；
射线之间的格子不保证被膨胀。
"""

import math
from typing import Tuple

import cv2
import numpy as np
from loguru import logger

from grid_nav.common.constants import (
    FREE_VALUE,
    OCCUPIED_VALUE,
    OBSTACLE_THRESHOLD,
    DIRECTIONS_8WAY,
)
from grid_nav.core.grid_model import GridModel


def binarize(grid: GridModel, threshold: int = OBSTACLE_THRESHOLD) -> GridModel:
    """
    二值化占据栅格（返回新栅格，不修改输入）

    Args:
        grid: 原始占据栅格
        threshold: 障碍阈值，>= 该值记为 100

    Returns:
        二值化栅格：未知/负值 -> 0，>= threshold -> 100，其余不变
    """
    cells = grid.cells.astype(np.int16)
    out = cells.copy()
    out[cells < 0] = FREE_VALUE
    out[cells >= threshold] = OCCUPIED_VALUE
    return grid.replace_cells(out)


def inflation_cells(inflation_radius: float, resolution: float) -> int:
    """膨胀半径（米）换算为格子数：ceil(radius / resolution)"""
    if inflation_radius <= 0:
        return 0
    return int(math.ceil(inflation_radius / resolution))


def build_star_kernel(radius_cells: int) -> np.ndarray:
    """
    构建 8 射线星形膨胀核

    Args:
        radius_cells: 射线长度（格子数）

    Returns:
        (2r+1)x(2r+1) uint8 核，中心和 8 个方向上 1..r 步的格子为 1
    """
    k = 2 * radius_cells + 1
    kernel = np.zeros((k, k), np.uint8)
    kernel[radius_cells, radius_cells] = 1
    for step in range(1, radius_cells + 1):
        for dx, dy in DIRECTIONS_8WAY:
            kernel[radius_cells + dy * step, radius_cells + dx * step] = 1
    return kernel


def inflate(
    binarized: GridModel,
    inflation_radius: float,
    threshold: int = OBSTACLE_THRESHOLD,
) -> GridModel:
    """
    障碍膨胀（返回新栅格，不修改输入）

    Args:
        binarized: 二值化栅格
        inflation_radius: 膨胀半径（米）
        threshold: 障碍阈值

    Returns:
        膨胀后的栅格，被膨胀到的格子值为 100，写入自动裁剪到栅格范围内
    """
    radius_cells = inflation_cells(inflation_radius, binarized.resolution)
    out = binarized.as_2d().astype(np.int16)

    if radius_cells == 0:
        return binarized.replace_cells(out)

    obs = (out >= threshold).astype(np.uint8)
    kernel = build_star_kernel(radius_cells)
    # 边界外按空闲处理，避免地图边缘被误膨胀
    dilated = cv2.dilate(obs, kernel, iterations=1, borderType=cv2.BORDER_CONSTANT, borderValue=0)
    out[dilated != 0] = OCCUPIED_VALUE

    logger.debug(
        f"障碍膨胀完成: 半径={inflation_radius}m ({radius_cells}格), "
        f"障碍格数 {int(obs.sum())} -> {int(np.count_nonzero(dilated))}"
    )
    return binarized.replace_cells(out)


def preprocess(
    raw: GridModel,
    inflation_radius: float,
    threshold: int = OBSTACLE_THRESHOLD,
) -> Tuple[GridModel, GridModel]:
    """
    二值化 + 膨胀

    Returns:
        (binarized, inflated)
    """
    binarized = binarize(raw, threshold)
    inflated = inflate(binarized, inflation_radius, threshold)
    return binarized, inflated

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
A* 栅格路径规划器

功能：
- 8 邻接移动，单步代价统一为 1（对角线不计 sqrt(2)）
- 欧氏距离启发函数（栅格单位）
- 节点保存在整数句柄索引的数组中，父节点用句柄表示，搜索结束后整体释放
- 访问标记策略可切换：入队即标记（默认）或出队再标记

注意：
- 入队即标记会在最优 g 值确定之前锁定格子，结果路径连通但不保证全局最短。
- 代价相同的节点出队顺序未定义（当前实现按入队顺序打破平局）。
- 对角线代价为 1 时欧氏启发相对真实欧氏行程并非严格可采纳，属已知精度折中。
"""

import heapq
import itertools
import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from loguru import logger

from grid_nav.common.constants import (
    DIRECTIONS_8WAY,
    SEARCH_FREE_THRESHOLD,
    STEP_COST,
)
from grid_nav.common.exceptions import (
    InvalidGoalError,
    NoMapAvailableError,
    UnreachableError,
)
from grid_nav.core.grid_model import GridModel
from grid_nav.core.interfaces import IPlanner

Coord = Tuple[int, int]  # (x, y)

NO_PARENT = -1


class VisitPolicy(Enum):
    """访问标记策略"""
    ON_ENQUEUE = "on_enqueue"  # 首次入队即标记
    ON_POP = "on_pop"          # 出队时标记（修正版本）


@dataclass
class SearchNode:
    """搜索节点，parent 为父节点句柄（NO_PARENT 表示根节点）"""
    x: int
    y: int
    g: float
    h: float
    parent: int

    @property
    def f(self) -> float:
        return self.g + self.h


@dataclass
class SearchResult:
    """一次搜索的结果"""
    cells: List[Coord]                    # 起点 -> 终点的栅格路径
    nodes_expanded: int                   # 出队扩展的节点数
    expanded: Optional[List[Coord]] = None  # 出队顺序（record_expansions=True 时记录）


class AStarPlanner(IPlanner):
    """
    A* 算法路径规划器

    实现IPlanner接口，在膨胀后的占据栅格上搜索。

    示例:
        ```python
        planner = AStarPlanner(free_threshold=5, visit_policy=VisitPolicy.ON_ENQUEUE)
        cells = planner.Plan(inflated, start=(0, 0), goal=(4, 4))
        ```
    """

    def __init__(
        self,
        free_threshold: int = SEARCH_FREE_THRESHOLD,
        visit_policy: VisitPolicy = VisitPolicy.ON_ENQUEUE,
        record_expansions: bool = False,
    ):
        """
        初始化 A* 规划器

        Args:
            free_threshold: 占据值 < 该值的格子才可扩展
            visit_policy: 访问标记策略
            record_expansions: 是否记录出队顺序（调试用）

        Raises:
            ValueError: 输入参数无效
        """
        if not isinstance(visit_policy, VisitPolicy):
            raise ValueError("visit_policy必须是VisitPolicy枚举")

        self.free_threshold_ = free_threshold
        self.visit_policy_ = visit_policy
        self.record_expansions_ = record_expansions

        self.directions_ = DIRECTIONS_8WAY

    def Plan(self, grid: Optional[GridModel], start: Coord, goal: Coord) -> List[Coord]:
        """
        规划路径（实现IPlanner接口）

        Returns:
            栅格路径（含起点和终点）

        Raises:
            NoMapAvailableError: grid 为 None
            InvalidGoalError: 终点超出栅格范围
            UnreachableError: 终点不可通行，或队列耗尽仍未到达终点
        """
        return self.Search(grid, start, goal).cells

    def Search(self, grid: Optional[GridModel], start: Coord, goal: Coord) -> SearchResult:
        """
        A* 算法核心实现

        Args:
            grid: 膨胀后的占据栅格
            start: 起点（不做边界检查，越界起点只是扩展不出邻居）
            goal: 终点（必须在界内）

        Returns:
            SearchResult
        """
        if grid is None:
            raise NoMapAvailableError("尚未收到地图")

        gx, gy = goal
        if not grid.in_bounds(gx, gy):
            error_msg = f"终点超出地图范围: goal={goal}, grid_size=({grid.width}, {grid.height})"
            logger.warning(error_msg)
            raise InvalidGoalError(error_msg)

        if grid.value(gx, gy) >= self.free_threshold_:
            error_msg = f"终点位于障碍物上: goal={goal}, value={grid.value(gx, gy)}"
            logger.warning(error_msg)
            raise UnreachableError(error_msg)

        width = grid.width
        cells = grid.cells.tolist()
        visited = bytearray(grid.width * grid.height)
        on_enqueue = self.visit_policy_ is VisitPolicy.ON_ENQUEUE
        best_g = {}

        nodes: List[SearchNode] = []
        open_heap = []
        counter = itertools.count()
        expanded: Optional[List[Coord]] = [] if self.record_expansions_ else None

        def push(x: int, y: int, g: float, parent: int) -> None:
            node = SearchNode(x, y, g, self.Heuristic((x, y), goal), parent)
            nodes.append(node)
            heapq.heappush(open_heap, (node.f, next(counter), len(nodes) - 1))

        sx, sy = start
        push(sx, sy, 0, NO_PARENT)
        if on_enqueue and grid.in_bounds(sx, sy):
            visited[sy * width + sx] = 1

        logger.debug(f"[A*] 开始搜索: grid_size=({grid.width}, {grid.height}), start={start}, goal={goal}")

        nodes_expanded = 0
        while open_heap:
            _, _, handle = heapq.heappop(open_heap)
            node = nodes[handle]

            if not on_enqueue and grid.in_bounds(node.x, node.y):
                i = node.y * width + node.x
                if visited[i]:
                    continue
                visited[i] = 1

            nodes_expanded += 1
            if expanded is not None:
                expanded.append((node.x, node.y))

            # 到达终点
            if node.x == gx and node.y == gy:
                path = self._Reconstruct(nodes, handle)
                logger.debug(f"[A*] 路径规划成功: 路径长度={len(path)}, 探索节点数={nodes_expanded}")
                return SearchResult(cells=path, nodes_expanded=nodes_expanded, expanded=expanded)

            # 探索邻居
            for dx, dy in self.directions_:
                nx, ny = node.x + dx, node.y + dy

                # 检查边界
                if not grid.in_bounds(nx, ny):
                    continue

                ni = ny * width + nx
                if visited[ni]:
                    continue

                # 检查障碍物
                if cells[ni] >= self.free_threshold_:
                    continue

                new_g = node.g + STEP_COST
                if not on_enqueue:
                    if new_g >= best_g.get(ni, math.inf):
                        continue
                    best_g[ni] = new_g

                push(nx, ny, new_g, handle)
                if on_enqueue:
                    visited[ni] = 1

        # 无法到达终点
        error_msg = f"无法找到从起点到终点的路径: start={start}, goal={goal}, 探索节点数={nodes_expanded}"
        logger.warning(error_msg)
        raise UnreachableError(error_msg)

    @staticmethod
    def _Reconstruct(nodes: List[SearchNode], handle: int) -> List[Coord]:
        """沿父节点句柄回溯到根节点，返回起点 -> 终点的路径"""
        path: List[Coord] = []
        while handle != NO_PARENT:
            node = nodes[handle]
            path.append((node.x, node.y))
            handle = node.parent
        path.reverse()
        return path

    def Heuristic(self, a: Coord, b: Coord) -> float:
        """
        启发式函数（欧氏距离，栅格单位）

        Args:
            a: 点A坐标
            b: 点B坐标

        Returns:
            欧氏距离
        """
        return math.hypot(a[0] - b[0], a[1] - b[1])

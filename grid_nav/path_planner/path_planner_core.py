#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PathPlanningCore

底层规划流水线：预处理 -> A* -> 视线剪枝，所有失败都转换为 PlanResult 状态码。
"""

import time
from typing import Optional

from loguru import logger

from grid_nav.common.exceptions import NoMapAvailableError, PlanningError
from grid_nav.config.models import PlannerConfig
from grid_nav.core.grid_model import GridModel
from grid_nav.core.grid_preprocess import preprocess
from grid_nav.core.path_simplify import simplify_path_los
from grid_nav.core.planner_astar import AStarPlanner, VisitPolicy
from grid_nav.path_planner.map_model import PlanRequest, PlanResult, PlanStatus


class PathPlanningCore:
    """纯路径规划器：原始栅格 + 起终点世界坐标 -> 原始路径 / 简化路径 / 状态码。"""

    def __init__(self, cfg: Optional[PlannerConfig] = None) -> None:
        self.cfg = cfg or PlannerConfig()
        self._planner = AStarPlanner(
            free_threshold=self.cfg.search_free_threshold,
            visit_policy=VisitPolicy(self.cfg.visit_policy),
        )
        self._plan_count: int = 0
        self._fail_count: int = 0

    def plan(self, grid: Optional[GridModel], req: PlanRequest) -> PlanResult:
        """在给定原始栅格上做一次完整规划（二值化 -> 膨胀 -> A* -> 视线剪枝）。"""
        t0 = time.perf_counter()
        self._plan_count += 1

        binarized = inflated = None
        try:
            if grid is None:
                raise NoMapAvailableError("尚未收到地图")

            # 1) 预处理
            binarized, inflated = preprocess(grid, self.cfg.inflation_radius, self.cfg.obstacle_threshold)

            # 2) A*（世界坐标 -> 栅格坐标）
            start_cell = inflated.world_to_cell(req.start)
            goal_cell = inflated.world_to_cell(req.goal)
            search = self._planner.Search(inflated, start_cell, goal_cell)
            raw_path = [inflated.cell_to_world(x, y) for x, y in search.cells]

            # 3) 视线剪枝
            if self.cfg.enable_simplify:
                simplified = simplify_path_los(raw_path, inflated, self.cfg.obstacle_threshold)
            else:
                simplified = list(raw_path)

            elapsed = time.perf_counter() - t0
            logger.debug(
                f"规划成功: start_cell={start_cell}, goal_cell={goal_cell}, "
                f"原始路径={len(raw_path)}, 简化后={len(simplified)}, 耗时={elapsed * 1000:.1f}ms"
            )
            return PlanResult(
                status=PlanStatus.OK,
                raw_path=raw_path,
                simplified_path=simplified,
                binarized=binarized,
                inflated=inflated,
                nodes_expanded=search.nodes_expanded,
                elapsed_s=elapsed,
                reason="ok",
            )

        except PlanningError as e:
            self._fail_count += 1
            status = PlanStatus(e.status) if e.status else PlanStatus.UNREACHABLE
            logger.warning(f"规划失败 [{status.value}]: {e} (累计失败 {self._fail_count}/{self._plan_count})")
            return PlanResult(
                status=status,
                binarized=binarized,
                inflated=inflated,
                elapsed_s=time.perf_counter() - t0,
                reason=str(e),
            )

    @property
    def plan_count(self) -> int:
        return self._plan_count

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PathPlanningService

中间层：
- 从 PlannerDataHub 读取最新地图 / 位姿 / 目标
- 调用底层 PathPlanningCore 完成一次规划
- 保存结果并交给所有发布者
"""

from typing import List, Optional

from loguru import logger

from grid_nav.config.models import AppConfig
from grid_nav.core.interfaces import IPlanPublisher
from grid_nav.path_planner.map_model import PlanRequest, PlanResult, PlanStatus
from grid_nav.path_planner.path_planner_core import PathPlanningCore
from grid_nav.service.data_hub import PlannerDataHub


class PathPlanningService:
    """
    路径规划服务（中间层）

    生命周期大致是：

    1. 创建实例：pps = PathPlanningService(cfg, hub, publishers)
    2. 外部回调持续写入 hub.update_grid / update_pose / update_goal
    3. 规划循环每 tick 调用：pps.run_cycle()
    """

    def __init__(
        self,
        cfg: AppConfig,
        hub: Optional[PlannerDataHub] = None,
        publishers: Optional[List[IPlanPublisher]] = None,
    ) -> None:
        self.cfg = cfg
        self.hub = hub or PlannerDataHub()
        self.publishers: List[IPlanPublisher] = list(publishers or [])
        self._core = PathPlanningCore(cfg.planner)

    def add_publisher(self, publisher: IPlanPublisher) -> None:
        self.publishers.append(publisher)

    # ------------------------------------------------------------------
    # 路径规划主接口
    # ------------------------------------------------------------------
    def run_cycle(self) -> Optional[PlanResult]:
        """
        执行一个规划周期。

        Returns:
            PlanResult；位姿或目标尚未就绪时返回 None（不规划、不发布）
        """
        inputs = self.hub.snapshot(self.cfg.planner.max_input_age)

        if inputs.pose is None or inputs.goal is None:
            logger.debug("[PathPlanningService] 位姿或目标未就绪，跳过本周期")
            return None

        req = PlanRequest(start=inputs.pose, goal=inputs.goal)
        result = self._core.plan(inputs.grid, req)
        self.hub.result.put(result)

        if result.status is PlanStatus.NO_MAP:
            logger.warning("[PathPlanningService] 尚未收到地图")

        self._publish(result)
        return result

    def _publish(self, result: PlanResult) -> None:
        for publisher in self.publishers:
            try:
                publisher.Publish(result)
            except Exception as e:
                logger.error(f"[PathPlanningService] 发布失败 ({type(publisher).__name__}): {e}")

    @property
    def core(self) -> PathPlanningCore:
        return self._core

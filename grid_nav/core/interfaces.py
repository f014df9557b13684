#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
核心接口定义：定义规划模块的核心抽象接口
"""

from abc import ABC, abstractmethod
from typing import List, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from grid_nav.core.grid_model import GridModel
    from grid_nav.path_planner.map_model import PlanResult


class IPlanner(ABC):
    """路径规划器接口：定义栅格路径规划器的标准接口"""

    @abstractmethod
    def Plan(self, grid: "GridModel", start: Tuple[int, int], goal: Tuple[int, int]) -> List[Tuple[int, int]]:
        """
        规划路径

        Args:
            grid: 膨胀后的占据栅格
            start: 起点栅格坐标 (x, y)
            goal: 终点栅格坐标 (x, y)

        Returns:
            栅格路径（含起点和终点）

        Raises:
            PlanningError: 无地图、终点非法或不可达
        """
        pass


class IPlanPublisher(ABC):
    """结果发布接口：把每个周期的规划结果交给下游"""

    @abstractmethod
    def Publish(self, result: "PlanResult") -> None:
        """
        发布一次规划结果

        Args:
            result: 规划结果（含二值化栅格、膨胀栅格、原始路径、简化路径）
        """
        pass

#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import threading
import time
from dataclasses import dataclass
from typing import Generic, Iterable, Optional, Tuple, TypeVar

from loguru import logger

from grid_nav.common.exceptions import InvalidGridError
from grid_nav.core.grid_model import GridModel
from grid_nav.path_planner.map_model import PlanResult

T = TypeVar("T")
Point = Tuple[float, float]


class LatestValue(Generic[T]):
    """
    单槽最新值存储：
    - put 原子替换，get 原子读取
    - 可选 max_age 检查，避免旧数据污染规划
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._lock = threading.Lock()
        self._value: Optional[T] = None
        self._ts = 0.0

    def put(self, value: T) -> None:
        if value is None:
            return
        now = time.perf_counter()
        with self._lock:
            self._value = value
            self._ts = now

    def get(self, max_age: Optional[float] = None) -> Optional[T]:
        """
        读取最新值（如超过 max_age 秒则返回 None）
        """
        now = time.perf_counter()
        with self._lock:
            value = self._value
            ts = self._ts

        if value is None:
            return None

        if max_age is not None:
            age = now - ts
            if age > max_age:
                logger.warning(f"DataHub: {self.name} 过旧 age={age:.2f}s (max={max_age})")
                return None

        return value

    def age(self) -> Optional[float]:
        with self._lock:
            if self._value is None:
                return None
            return time.perf_counter() - self._ts

    def clear(self) -> None:
        with self._lock:
            self._value = None
            self._ts = 0.0


@dataclass
class PlanningInputs:
    grid: Optional[GridModel]            # 最新原始栅格
    pose: Optional[Point]                # 当前位置（世界坐标）
    goal: Optional[Point]                # 目标位置（世界坐标）


class PlannerDataHub:
    """
    PlannerDataHub：规划器的数据总线
    - 地图 / 位姿 / 目标由外部回调异步写入，后写覆盖先写
    - 规划周期开始时一次性读取快照
    - 保存最近一次规划结果
    """

    def __init__(self) -> None:
        self.grid = LatestValue[GridModel]("grid")
        self.pose = LatestValue[Point]("pose")
        self.goal = LatestValue[Point]("goal")
        self.result = LatestValue[PlanResult]("result")

    # ---------------- 地图 ----------------
    def update_grid(
        self,
        width: int,
        height: int,
        resolution: float,
        origin: Point,
        data: Iterable[int],
    ) -> bool:
        """
        写入一帧原始占据栅格（非法栅格被拒绝，保留上一帧）

        Returns:
            是否接受
        """
        try:
            grid = GridModel.from_flat(width, height, resolution, origin, data)
        except InvalidGridError as e:
            logger.warning(f"DataHub: 拒绝非法栅格: {e}")
            return False
        self.grid.put(grid)
        logger.info(f"DataHub: 收到地图 {width}x{height}, res={resolution:.3f}, origin={origin}")
        return True

    def set_grid(self, grid: GridModel) -> None:
        self.grid.put(grid)

    # ---------------- 位姿 / 目标 ----------------
    def update_pose(self, x: float, y: float) -> None:
        self.pose.put((float(x), float(y)))

    def update_goal(self, x: float, y: float) -> None:
        self.goal.put((float(x), float(y)))
        logger.info(f"DataHub: 新目标 ({x:.3f}, {y:.3f})")

    # ---------------- 快照 ----------------
    def snapshot(self, max_age: Optional[float] = None) -> PlanningInputs:
        return PlanningInputs(
            grid=self.grid.get(max_age),
            pose=self.pose.get(max_age),
            goal=self.goal.get(max_age),
        )

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, List

from grid_nav.core.grid_model import GridModel

Point = Tuple[float, float]

class PlanStatus(Enum):
    OK = "OK"
    NO_MAP = "NO_MAP"
    INVALID_GOAL = "INVALID_GOAL"
    UNREACHABLE = "UNREACHABLE"

@dataclass
class PlanRequest:
    start: Point                     # 当前位置（世界坐标）
    goal: Point                      # 目标位置（世界坐标）

@dataclass
class PlanResult:
    status: PlanStatus
    raw_path: List[Point] = field(default_factory=list)         # 每个格子一个点
    simplified_path: List[Point] = field(default_factory=list)  # 视线剪枝后
    binarized: Optional[GridModel] = None
    inflated: Optional[GridModel] = None
    nodes_expanded: int = 0
    elapsed_s: float = 0.0
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.status is PlanStatus.OK

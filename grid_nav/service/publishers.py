#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
结果发布模块

- LogPublisher: 每个周期输出一行日志
- SnapshotPublisher: 输出诊断快照（二值化 / 膨胀栅格 PNG，路径叠加；路径 JSON）
"""

import json
from pathlib import Path
from typing import List, Optional, Tuple

import cv2
import numpy as np
from loguru import logger

from grid_nav.core.grid_model import GridModel
from grid_nav.core.interfaces import IPlanPublisher
from grid_nav.path_planner.map_model import PlanResult

Point = Tuple[float, float]

# BGR
COLOR_RAW_PATH = (255, 0, 0)        # 蓝 = 原始路径
COLOR_SIMPLIFIED = (0, 0, 255)      # 红 = 简化路径
COLOR_START = (0, 255, 0)           # 绿 = 起点


class LogPublisher(IPlanPublisher):
    """把规划结果写入日志"""

    def Publish(self, result: PlanResult) -> None:
        if result.ok:
            logger.info(
                f"规划结果 OK: 原始路径={len(result.raw_path)}点, "
                f"简化路径={len(result.simplified_path)}点, "
                f"探索节点数={result.nodes_expanded}, 耗时={result.elapsed_s * 1000:.1f}ms"
            )
        else:
            logger.warning(f"规划结果 {result.status.value}: {result.reason}")


def render_grid(grid: GridModel, scale: int = 1) -> np.ndarray:
    """
    栅格 -> BGR 图像（向上为 +y）

    空闲 = 白，障碍(>=50) = 黑，未知 = 灰，其余按占据值线性变暗
    """
    cells = grid.as_2d().astype(np.int16)
    gray = np.full(cells.shape, 128, dtype=np.uint8)
    known = cells >= 0
    gray[known] = (255 - np.clip(cells[known], 0, 100) * 255 // 100).astype(np.uint8)
    gray[cells >= 50] = 0

    img = cv2.cvtColor(np.flipud(gray), cv2.COLOR_GRAY2BGR)
    if scale > 1:
        img = cv2.resize(img, (grid.width * scale, grid.height * scale), interpolation=cv2.INTER_NEAREST)
    return img


def _to_pixel(grid: GridModel, p: Point, scale: int) -> Tuple[int, int]:
    """路径点（格子角点）-> 图像像素（格子中心）"""
    cx, cy = grid.corner_to_cell(p)
    px = int((cx + 0.5) * scale)
    py = int((grid.height - 1 - cy + 0.5) * scale)
    return px, py


def draw_path(img: np.ndarray, grid: GridModel, path: List[Point], color, scale: int, thickness: int = 1) -> None:
    for i in range(1, len(path)):
        cv2.line(img, _to_pixel(grid, path[i - 1], scale), _to_pixel(grid, path[i], scale), color, thickness)
    for p in path:
        cv2.circle(img, _to_pixel(grid, p, scale), max(1, scale // 3), color, -1)


def _imwrite(path: Path, img: np.ndarray) -> None:
    """兼容中文路径的图像写入"""
    ok, buf = cv2.imencode(path.suffix, img)
    if not ok:
        raise IOError(f"图像编码失败: {path}")
    buf.tofile(str(path))


class SnapshotPublisher(IPlanPublisher):
    """
    诊断快照输出

    每 every 个周期在 out_dir 下写入：
        cycle_XXXXXX_binarized.png / cycle_XXXXXX_inflated.png / cycle_XXXXXX.json
    """

    def __init__(self, out_dir: Path, every: int = 1, min_image_size: int = 400) -> None:
        self.out_dir = Path(out_dir)
        self.out_dir.mkdir(parents=True, exist_ok=True)
        self.every = max(1, every)
        self.min_image_size = min_image_size
        self._cycle = 0
        self.last_written: Optional[Path] = None

    def _scale(self, grid: GridModel) -> int:
        return max(1, self.min_image_size // max(grid.width, grid.height))

    def Publish(self, result: PlanResult) -> None:
        self._cycle += 1
        if (self._cycle - 1) % self.every != 0:
            return

        stem = f"cycle_{self._cycle:06d}"

        for name, grid in (("binarized", result.binarized), ("inflated", result.inflated)):
            if grid is None:
                continue
            scale = self._scale(grid)
            img = render_grid(grid, scale)
            draw_path(img, grid, result.raw_path, COLOR_RAW_PATH, scale)
            draw_path(img, grid, result.simplified_path, COLOR_SIMPLIFIED, scale, thickness=2)
            if result.raw_path:
                cv2.circle(img, _to_pixel(grid, result.raw_path[0], scale), max(2, scale // 2), COLOR_START, -1)
            _imwrite(self.out_dir / f"{stem}_{name}.png", img)

        payload = {
            "cycle": self._cycle,
            "status": result.status.value,
            "reason": result.reason,
            "nodes_expanded": result.nodes_expanded,
            "elapsed_s": result.elapsed_s,
            "raw_path": [list(p) for p in result.raw_path],
            "simplified_path": [list(p) for p in result.simplified_path],
        }
        json_path = self.out_dir / f"{stem}.json"
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
        self.last_written = json_path
        logger.debug(f"诊断快照已写入: {json_path}")

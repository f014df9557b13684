#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
地图加载模块

读取 ROS map_server 格式的地图（YAML 元数据 + 灰度图），转换为占据栅格。
"""

from pathlib import Path
from typing import Any, Dict

import cv2
import numpy as np
import yaml
from loguru import logger

from grid_nav.common.constants import FREE_VALUE, OCCUPIED_VALUE, UNKNOWN_VALUE
from grid_nav.common.exceptions import InvalidGridError
from grid_nav.core.grid_model import GridModel


def _imread_gray(path: Path) -> np.ndarray:
    """兼容中文路径的灰度图读取"""
    path = Path(path)
    if not path.exists():
        raise InvalidGridError(f"文件不存在: {path}")

    data = np.fromfile(str(path), dtype=np.uint8)
    img = cv2.imdecode(data, cv2.IMREAD_GRAYSCALE)
    if img is None:
        raise InvalidGridError(f"无法读取地图图像: {path}")
    return img


def image_to_occupancy(
    img: np.ndarray,
    occupied_thresh: float = 0.65,
    free_thresh: float = 0.196,
    negate: bool = False,
) -> np.ndarray:
    """
    灰度图 -> 占据值（trinary 模式）

    p = (255 - v) / 255（negate 时 p = v / 255）；
    p > occupied_thresh -> 100，p < free_thresh -> 0，其余 -1（未知）。

    Returns:
        (H, W) int8 数组，行顺序与图像一致（第 0 行为图像顶部）
    """
    pixels = img.astype(np.float32)
    p = pixels / 255.0 if negate else (255.0 - pixels) / 255.0

    occ = np.full(img.shape, UNKNOWN_VALUE, dtype=np.int8)
    occ[p > occupied_thresh] = OCCUPIED_VALUE
    occ[p < free_thresh] = FREE_VALUE
    return occ


def load_map_yaml(yaml_path: Path) -> GridModel:
    """
    加载 map_server 格式地图

    Args:
        yaml_path: 地图 YAML 路径（image 字段可为相对路径，相对 YAML 所在目录）

    Returns:
        GridModel，栅格第 0 行对应图像底部

    Raises:
        InvalidGridError: 文件缺失、字段缺失或图像无法解码
    """
    yaml_path = Path(yaml_path)
    if not yaml_path.exists():
        raise InvalidGridError(f"地图文件不存在: {yaml_path}")

    try:
        with open(yaml_path, 'r', encoding='utf-8') as f:
            meta: Dict[str, Any] = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise InvalidGridError(f"地图 YAML 格式错误: {e}") from e

    for key in ('image', 'resolution', 'origin'):
        if key not in meta:
            raise InvalidGridError(f"地图 YAML 缺少字段: {key}")

    image_path = Path(meta['image'])
    if not image_path.is_absolute():
        image_path = yaml_path.parent / image_path

    img = _imread_gray(image_path)
    occ = image_to_occupancy(
        img,
        occupied_thresh=float(meta.get('occupied_thresh', 0.65)),
        free_thresh=float(meta.get('free_thresh', 0.196)),
        negate=bool(meta.get('negate', 0)),
    )

    origin = meta['origin']
    grid = GridModel.from_array(
        np.flipud(occ),
        resolution=float(meta['resolution']),
        origin=(float(origin[0]), float(origin[1])),
    )
    logger.info(
        f"地图加载成功: {yaml_path.name}, size={grid.width}x{grid.height}, "
        f"res={grid.resolution}, origin={grid.origin}"
    )
    return grid

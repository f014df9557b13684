#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
常量定义：集中管理占据栅格和规划相关的魔法数字
"""

# =============================
# 占据栅格取值
# =============================

# 二值化后的空闲 / 障碍取值
FREE_VALUE: int = 0
OCCUPIED_VALUE: int = 100

# 未知格子（ROS map_server 约定）
UNKNOWN_VALUE: int = -1

# 二值化阈值：>= 该值视为障碍
OBSTACLE_THRESHOLD: int = 50

# A* 可通行阈值：< 该值才允许扩展（比二值化阈值更保守）
SEARCH_FREE_THRESHOLD: int = 5

# =============================
# 规划相关常量
# =============================

# 默认膨胀半径（米）
DEFAULT_INFLATION_RADIUS: float = 0.5

# 默认规划频率（Hz）
DEFAULT_PLANNING_RATE: float = 1.0

# 8 邻接移动方向，代价统一为 1（对角线不计 sqrt(2)）
DIRECTIONS_8WAY = [
    (1, 0), (-1, 0), (0, 1), (0, -1),
    (1, 1), (1, -1), (-1, 1), (-1, -1),
]

# 单步代价
STEP_COST: int = 1

# =============================
# 其他常量
# =============================

# 线程超时时间（秒）
THREAD_JOIN_TIMEOUT: float = 2.0

# 默认配置文件路径（相对程序目录）
DEFAULT_CONFIG_PATH: str = "config/config.yaml"

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
自定义异常类：定义导航模块的专用异常
"""


class NavigationError(Exception):
    """导航模块基础异常类"""
    pass


class ConfigurationError(NavigationError):
    """配置错误异常"""
    pass


class InvalidGridError(NavigationError):
    """栅格地图非法（尺寸为 0、分辨率非正、数据长度不匹配）"""
    pass


class PlanningError(NavigationError):
    """
    路径规划失败异常

    status 为对应的 PlanStatus 名称，由规划核心映射为结果状态码。
    """
    status = None


class NoMapAvailableError(PlanningError):
    """尚未收到地图"""
    status = "NO_MAP"


class InvalidGoalError(PlanningError):
    """终点超出栅格范围"""
    status = "INVALID_GOAL"


class UnreachableError(PlanningError):
    """搜索队列耗尽，终点不可达"""
    status = "UNREACHABLE"


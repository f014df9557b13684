#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
规划配置模型

使用Pydantic定义类型安全的配置模型，可选小节缺省时使用默认值。
"""

from typing import Optional
from pydantic import BaseModel, Field, field_validator, AliasChoices

from grid_nav.common.constants import (
    DEFAULT_INFLATION_RADIUS,
    DEFAULT_PLANNING_RATE,
    OBSTACLE_THRESHOLD,
    SEARCH_FREE_THRESHOLD,
)


class PlannerConfig(BaseModel):
    """路径规划配置"""
    inflation_radius: float = Field(
        DEFAULT_INFLATION_RADIUS,
        description="障碍膨胀半径（米）",
        validation_alias=AliasChoices("inflation_radius", "inflationRadius"),
    )
    planning_rate: float = Field(
        DEFAULT_PLANNING_RATE,
        description="规划频率（Hz）",
        validation_alias=AliasChoices("planning_rate", "planningRate"),
    )
    obstacle_threshold: int = Field(OBSTACLE_THRESHOLD, description="二值化障碍阈值")
    search_free_threshold: int = Field(SEARCH_FREE_THRESHOLD, description="A*可通行阈值")
    visit_policy: str = Field("on_enqueue", description="访问标记策略: 'on_enqueue' 或 'on_pop'")
    enable_simplify: bool = Field(True, description="是否启用视线剪枝")
    max_input_age: Optional[float] = Field(None, description="位姿/目标/地图最大有效时长（秒），None 表示不检查")

    @field_validator('inflation_radius')
    @classmethod
    def validate_inflation_radius(cls, v: float) -> float:
        """验证膨胀半径"""
        if v < 0:
            raise ValueError(f"膨胀半径不能为负数: {v}")
        return v

    @field_validator('planning_rate')
    @classmethod
    def validate_planning_rate(cls, v: float) -> float:
        """验证规划频率"""
        if v <= 0:
            raise ValueError(f"规划频率必须大于0: {v}")
        return v

    @field_validator('obstacle_threshold', 'search_free_threshold')
    @classmethod
    def validate_threshold(cls, v: int) -> int:
        """验证占据阈值范围"""
        if not 0 < v <= 100:
            raise ValueError(f"占据阈值必须在1-100之间: {v}")
        return v

    @field_validator('visit_policy')
    @classmethod
    def validate_visit_policy(cls, v: str) -> str:
        """验证访问标记策略"""
        if v not in ['on_enqueue', 'on_pop']:
            raise ValueError(f"访问标记策略必须是 'on_enqueue' 或 'on_pop': {v}")
        return v

    @field_validator('max_input_age')
    @classmethod
    def validate_max_input_age(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError(f"max_input_age 必须大于0: {v}")
        return v


class LoggingConfig(BaseModel):
    """日志配置"""
    level: str = Field("INFO", description="日志级别")
    log_dir: str = Field("Logs", description="日志目录")
    rotation: str = Field("00:00", description="日志文件轮转时间或大小（loguru rotation）")
    retention: str = Field("7 days", description="日志文件保留时长（loguru retention）")
    console: bool = Field(True, description="是否输出到控制台")

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ['TRACE', 'DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR', 'CRITICAL']:
            raise ValueError(f"未知的日志级别: {v}")
        return v


class PublishConfig(BaseModel):
    """发布配置"""
    snapshot_dir: Optional[str] = Field(None, description="诊断快照输出目录（可选）")
    snapshot_every: int = Field(1, description="每 N 个周期输出一次快照")

    @field_validator('snapshot_every')
    @classmethod
    def validate_snapshot_every(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"snapshot_every 必须大于0: {v}")
        return v


class AppConfig(BaseModel):
    """规划主配置"""
    planner: PlannerConfig = Field(default_factory=PlannerConfig, description="路径规划配置")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="日志配置")
    publish: PublishConfig = Field(default_factory=PublishConfig, description="发布配置")

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
规划配置模块

提供类型安全的配置管理和验证。
"""

from grid_nav.config.models import (
    AppConfig,
    PlannerConfig,
    LoggingConfig,
    PublishConfig,
)
from grid_nav.config.loader import load_config

__all__ = [
    'AppConfig',
    'PlannerConfig',
    'LoggingConfig',
    'PublishConfig',
    'load_config'
]

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
规划主程序

命令:
    grid-nav plan --map map.yaml --start X Y --goal X Y    单次规划，输出路径 JSON
    grid-nav run  --map map.yaml --start X Y --goal X Y --cycles N    按 planning_rate 循环规划
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from grid_nav.common.constants import DEFAULT_CONFIG_PATH
from grid_nav.common.exceptions import ConfigurationError, InvalidGridError
from grid_nav.common.logger import SetupLogger
from grid_nav.config import AppConfig, load_config
from grid_nav.core.interfaces import IPlanPublisher
from grid_nav.path_planner.map_model import PlanResult
from grid_nav.runtime.planning_loop import PlanningLoop
from grid_nav.service.data_hub import PlannerDataHub
from grid_nav.service.map_loader import load_map_yaml
from grid_nav.service.path_planning_service import PathPlanningService
from grid_nav.service.publishers import LogPublisher, SnapshotPublisher


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="grid-nav", description="占据栅格全局路径规划")
    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (("plan", "单次规划"), ("run", "按固定频率循环规划")):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--map", required=True, type=Path, help="map_server 格式地图 YAML")
        p.add_argument("--start", required=True, type=float, nargs=2, metavar=("X", "Y"), help="起点（米）")
        p.add_argument("--goal", required=True, type=float, nargs=2, metavar=("X", "Y"), help="终点（米）")
        p.add_argument("--config", type=Path, default=None, help=f"配置文件（默认 {DEFAULT_CONFIG_PATH}，不存在时使用默认值）")
        p.add_argument("--snapshot-dir", type=Path, default=None, help="诊断快照输出目录")
        p.add_argument("--log-level", type=str, default=None, help="日志级别（覆盖配置）")
        if name == "run":
            p.add_argument("--cycles", type=int, default=5, help="循环次数")
    return parser


def _load_app_config(path: Optional[Path]) -> AppConfig:
    if path is not None:
        return load_config(path)
    default_path = Path(DEFAULT_CONFIG_PATH)
    if default_path.exists():
        return load_config(default_path)
    logger.info("未找到配置文件，使用默认配置")
    return AppConfig()


def _result_to_dict(result: Optional[PlanResult]) -> dict:
    if result is None:
        return {"status": None, "raw_path": [], "simplified_path": []}
    return {
        "status": result.status.value,
        "reason": result.reason,
        "raw_path": [list(p) for p in result.raw_path],
        "simplified_path": [list(p) for p in result.simplified_path],
    }


def main(argv: Optional[List[str]] = None) -> int:
    """主函数"""
    args = _build_parser().parse_args(argv)

    try:
        cfg = _load_app_config(args.config)
    except ConfigurationError as e:
        print(f"配置错误: {e}", file=sys.stderr)
        return 2

    SetupLogger(cfg.logging, args.log_level)

    try:
        grid = load_map_yaml(args.map)
    except InvalidGridError as e:
        logger.error(f"地图加载失败: {e}")
        return 2

    hub = PlannerDataHub()
    hub.set_grid(grid)
    hub.update_pose(*args.start)
    hub.update_goal(*args.goal)

    publishers: List[IPlanPublisher] = [LogPublisher()]
    snapshot_dir = args.snapshot_dir or cfg.publish.snapshot_dir
    if snapshot_dir:
        publishers.append(SnapshotPublisher(Path(snapshot_dir), every=cfg.publish.snapshot_every))

    service = PathPlanningService(cfg, hub, publishers)

    if args.command == "plan":
        result = service.run_cycle()
    else:
        loop = PlanningLoop(service, max_cycles=args.cycles)
        loop.start()
        try:
            loop.join()
        except KeyboardInterrupt:
            logger.info("收到键盘中断信号")
        finally:
            loop.stop()
        result = hub.result.get()

    print(json.dumps(_result_to_dict(result), ensure_ascii=False, indent=2))
    return 0 if result is not None and result.ok else 1


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
grid_nav: occupancy-grid global planner

Pipeline per cycle: binarize -> inflate -> A* -> line-of-sight pruning.
"""

__version__ = "0.1.0"

#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
binstream 核心模块

提供数值编解码、边界检查、扩容策略和四种 I/O 后端。
"""

from .codec import ByteOrder, LITTLE, BIG
from .bounds import (
    DEFAULT_CAPACITY, GROWTH_INCREMENT, SCRATCH_SIZE,
    check_bounds, grown_capacity, grow_buffer
)
from .binary_io import (
    InputBackend, OutputBackend,
    SequentialInput, BufferedInput,
    SequentialOutput, BufferedOutput,
)

__all__ = [
    "ByteOrder",
    "LITTLE",
    "BIG",
    "DEFAULT_CAPACITY",
    "GROWTH_INCREMENT",
    "SCRATCH_SIZE",
    "check_bounds",
    "grown_capacity",
    "grow_buffer",
    # 后端
    "InputBackend",
    "OutputBackend",
    "SequentialInput",
    "BufferedInput",
    "SequentialOutput",
    "BufferedOutput",
]

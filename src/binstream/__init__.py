#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
binstream - 带字节序控制的二进制流读写库

支持顺序流 (文件、socket、管道) 和可自动扩容的内存缓冲区两种后端
"""

import logging

__version__ = "0.1.0"
__author__ = "Virace"

# 异常类
from .exceptions import (
    BinStreamError,
    OutOfBoundsError,
    UnsupportedOperationError,
)

# 字节序与常量
from .core.codec import ByteOrder, LITTLE, BIG
from .core.bounds import DEFAULT_CAPACITY, GROWTH_INCREMENT

# 后端
from .core.binary_io import (
    SequentialInput,
    BufferedInput,
    SequentialOutput,
    BufferedOutput,
)

# 流门面
from .stream import InputStream, OutputStream, StreamKind

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # 版本
    "__version__",
    # 异常
    "BinStreamError",
    "OutOfBoundsError",
    "UnsupportedOperationError",
    # 字节序
    "ByteOrder",
    "LITTLE",
    "BIG",
    "DEFAULT_CAPACITY",
    "GROWTH_INCREMENT",
    # 后端
    "SequentialInput",
    "BufferedInput",
    "SequentialOutput",
    "BufferedOutput",
    # 门面
    "InputStream",
    "OutputStream",
    "StreamKind",
]

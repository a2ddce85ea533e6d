#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
binstream 异常定义

所有异常均继承自 BinStreamError，便于统一捕获。
"""

import io


class BinStreamError(Exception):
    """binstream 基础异常"""
    pass


class OutOfBoundsError(BinStreamError, EOFError):
    """
    越界读取异常
    
    当内存输入流的读取或跳过会超出缓冲区长度时抛出。
    同时继承 EOFError，与顺序流的读取不足保持一致的捕获方式。
    """
    def __init__(self, position: int, length: int, total: int):
        self.position = position
        self.length = length
        self.total = total
        super().__init__(
            f"越界访问: 当前位置 {position}, "
            f"请求 {length} 字节, 总长度 {total}"
        )


class UnsupportedOperationError(BinStreamError, io.UnsupportedOperation):
    """
    不支持的操作异常
    
    顺序流无法报告绝对位置，也无法暴露已写入区域。
    """
    def __init__(self, operation: str, message: str = None):
        self.operation = operation
        super().__init__(
            message or f"顺序流不支持操作: {operation}"
        )

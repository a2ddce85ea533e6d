#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
边界检查与扩容策略

- check_bounds: 内存输入流在每次读取 / 跳过前调用
- grow_buffer: 内存输出流在每次写入 / 跳过前调用
"""

import logging

from ..exceptions import OutOfBoundsError


logger = logging.getLogger(__name__)


# ==================== 常量定义 ====================

# 内存输出流的默认初始容量
DEFAULT_CAPACITY = 16 * 1024

# 每次扩容的固定增量
GROWTH_INCREMENT = 16 * 1024

# 顺序流暂存缓冲区大小 (可容纳最宽的字段 vec3f)
SCRATCH_SIZE = 16


# ==================== 边界检查 ====================

def check_bounds(position: int, length: int, total: int) -> None:
    """
    检查读取是否越界

    Args:
        position: 当前游标
        length: 请求读取的字节数
        total: 缓冲区总长度

    Raises:
        OutOfBoundsError: position + length > total
    """
    if position + length > total:
        raise OutOfBoundsError(position, length, total)


# ==================== 扩容策略 ====================

def grown_capacity(capacity: int, position: int, length: int,
                   increment: int = GROWTH_INCREMENT) -> int:
    """
    计算写入所需的容量

    容量足够时原样返回；否则至少增加一个增量，
    单个增量仍不够时按 "所需大小 + 增量" 计算。

    Args:
        capacity: 当前容量
        position: 当前游标
        length: 请求写入的字节数
        increment: 固定增量

    Returns:
        新容量 (不小于当前容量)
    """
    required = position + length
    if required <= capacity:
        return capacity
    new_capacity = capacity + increment
    if new_capacity < required:
        new_capacity = required + increment
    return new_capacity


def grow_buffer(buffer: bytearray, position: int, length: int,
                increment: int = GROWTH_INCREMENT) -> bytearray:
    """
    确保缓冲区能容纳 [position, position + length) 的写入

    需要扩容时分配新缓冲区并复制旧内容，旧缓冲区保持不变；
    不需要时直接返回原缓冲区。

    Args:
        buffer: 当前缓冲区
        position: 当前游标
        length: 请求写入的字节数
        increment: 固定增量

    Returns:
        可写入的缓冲区 (可能是新对象)
    """
    capacity = len(buffer)
    new_capacity = grown_capacity(capacity, position, length, increment)
    if new_capacity == capacity:
        return buffer

    logger.debug(
        "扩容: %d -> %d 字节 (游标 %d, 请求 %d)",
        capacity, new_capacity, position, length
    )
    grown = bytearray(new_capacity)
    grown[:capacity] = buffer
    return grown

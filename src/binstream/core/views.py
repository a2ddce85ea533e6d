#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
已写入区域的类型化只读视图

基于 numpy.frombuffer，零拷贝地把 [0, 高水位) 区域解释为定宽数组。
元素个数为 字节数 // 元素宽度，余下的尾部字节被忽略。
"""

from typing import Dict

import numpy as np

from .codec import ByteOrder


# 视图类型名 -> numpy 基础类型 (不含字节序)
VIEW_DTYPES: Dict[str, str] = {
    'uint8': 'u1',
    'int16': 'i2',
    'int32': 'i4',
    'float32': 'f4',
    'float64': 'f8',
}


def view_dtype(kind: str, order: ByteOrder = ByteOrder.LITTLE) -> np.dtype:
    """
    构造带字节序的 numpy dtype

    Args:
        kind: 视图类型名 (见 VIEW_DTYPES)
        order: 字节序

    Raises:
        ValueError: 未知的视图类型
    """
    try:
        code = VIEW_DTYPES[kind]
    except KeyError:
        supported = ", ".join(VIEW_DTYPES)
        raise ValueError(
            f"不支持的视图类型: '{kind}'. 支持的类型: {supported}"
        ) from None
    return np.dtype(order.value + code)


def typed_view(buffer, length: int, kind: str,
               order: ByteOrder = ByteOrder.LITTLE) -> np.ndarray:
    """
    在 buffer 的前 length 字节上创建只读类型化视图

    Args:
        buffer: 支持 buffer 协议的对象 (通常是 bytearray)
        length: 已写入字节数 (高水位)
        kind: 视图类型名
        order: 元素字节序

    Returns:
        只读 numpy 数组，与 buffer 共享内存
    """
    dtype = view_dtype(kind, order)
    count = length // dtype.itemsize
    if count == 0:
        array = np.empty(0, dtype=dtype)
    else:
        array = np.frombuffer(buffer, dtype=dtype, count=count)
    array.flags.writeable = False
    return array

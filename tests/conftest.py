#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
pytest 全局配置

提供共享 fixtures 和测试用的字节源。
"""

import io

import pytest

from binstream import ByteOrder


# ==================== 测试用字节源 ====================

class TrickleReader(io.RawIOBase):
    """
    每次 readinto 只返回 1 字节的只进数据源

    模拟管道 / socket 的短读，且不可 seek。
    """

    def __init__(self, data: bytes):
        super().__init__()
        self._data = data
        self._pos = 0

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        if self._pos >= len(self._data):
            return 0
        b[0] = self._data[self._pos]
        self._pos += 1
        return 1


# ==================== 基础 Fixtures ====================

@pytest.fixture(params=[ByteOrder.LITTLE, ByteOrder.BIG], ids=["le", "be"])
def order(request) -> ByteOrder:
    """两种字节序"""
    return request.param


@pytest.fixture
def sink() -> io.BytesIO:
    """内存字节汇"""
    return io.BytesIO()


@pytest.fixture
def trickle_reader():
    """
    创建 TrickleReader 的工厂

    Returns:
        接收 bytes 返回 TrickleReader 的函数
    """
    return TrickleReader


@pytest.fixture
def sample_record() -> bytes:
    """
    一条混合字段记录 (小端)

    布局: u8=7 | u16=0x0102 | u32=0xDEADBEEF | f32=1.0 | f64=1.0
    """
    return (
        b'\x07'
        b'\x02\x01'
        b'\xef\xbe\xad\xde'
        b'\x00\x00\x80\x3f'
        b'\x00\x00\x00\x00\x00\x00\xf0\x3f'
    )

#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
基础数值编解码

无状态的纯函数，在指定字节序下把数值写入字节窗口或从字节窗口读出。
调用方 (后端) 负责保证窗口大小合法，这里不做边界检查。

编码规则:
- u8: 单字节，无字节序
- u16 / u32: 小端低位字节在前，大端高位字节在前
- f32: IEEE-754 binary32 位模式，经 u32 编码
- f64: 拆为两个 u32 半字；小端先低后高，大端先高后低
- vec2f / vec3f: 连续 2 / 3 个 f32，无填充无长度前缀
"""

import struct
from enum import Enum
from typing import Union


class ByteOrder(Enum):
    """字节序，值即 struct 格式前缀"""
    LITTLE = '<'
    BIG = '>'

    @classmethod
    def coerce(cls, order: Union["ByteOrder", str]) -> "ByteOrder":
        """
        将字符串形式的字节序转换为 ByteOrder

        Args:
            order: ByteOrder 实例，或 'little' / 'big' / '<' / '>'

        Returns:
            ByteOrder 实例

        Raises:
            ValueError: 无法识别的字节序
        """
        if isinstance(order, cls):
            return order
        if order in ('little', '<'):
            return cls.LITTLE
        if order in ('big', '>'):
            return cls.BIG
        raise ValueError(f"未知的字节序: {order!r}")


LITTLE = ByteOrder.LITTLE
BIG = ByteOrder.BIG


# ==================== 字段宽度 ====================

U8_SIZE = 1
U16_SIZE = 2
U32_SIZE = 4
F32_SIZE = 4
F64_SIZE = 8
VEC2F_SIZE = 2 * F32_SIZE
VEC3F_SIZE = 3 * F32_SIZE

_U8_MASK = 0xFF
_U16_MASK = 0xFFFF
_U32_MASK = 0xFFFFFFFF


# ==================== 预编译 Struct ====================

_U16 = {order: struct.Struct(order.value + 'H') for order in ByteOrder}
_U32 = {order: struct.Struct(order.value + 'I') for order in ByteOrder}

# 位模式转换统一用小端，仅作内存内重解释
_F32_BITS = struct.Struct('<f')
_F64_BITS = struct.Struct('<d')
_U32_RAW = struct.Struct('<I')
_U64_RAW = struct.Struct('<Q')


# ==================== 位模式重解释 ====================

def float32_to_bits(value: float) -> int:
    """float32 → 32 位无符号整数位模式"""
    return _U32_RAW.unpack(_F32_BITS.pack(value))[0]


def bits_to_float32(bits: int) -> float:
    """32 位无符号整数位模式 → float32"""
    return _F32_BITS.unpack(_U32_RAW.pack(bits & _U32_MASK))[0]


def float64_to_bits(value: float) -> int:
    """float64 → 64 位无符号整数位模式"""
    return _U64_RAW.unpack(_F64_BITS.pack(value))[0]


def bits_to_float64(bits: int) -> float:
    """64 位无符号整数位模式 → float64"""
    return _F64_BITS.unpack(_U64_RAW.pack(bits & 0xFFFFFFFFFFFFFFFF))[0]


def as_signed(value: int, width: int) -> int:
    """
    将无符号整数按补码解释为有符号整数

    Args:
        value: 无符号值
        width: 字节宽度 (1, 2, 4)

    Returns:
        有符号值
    """
    bits = width * 8
    value &= (1 << bits) - 1
    if value >= 1 << (bits - 1):
        value -= 1 << bits
    return value


# ==================== 整数 ====================

def pack_u8_into(buffer, offset: int, value: int) -> None:
    """写入单字节 (超出 8 位的部分被截断)"""
    buffer[offset] = value & _U8_MASK


def unpack_u8_from(buffer, offset: int) -> int:
    """读取单字节"""
    return buffer[offset]


def pack_u16_into(buffer, offset: int, value: int, order: ByteOrder = LITTLE) -> None:
    """写入 u16 (超出 16 位的部分被截断)"""
    _U16[order].pack_into(buffer, offset, value & _U16_MASK)


def unpack_u16_from(buffer, offset: int, order: ByteOrder = LITTLE) -> int:
    """读取 u16"""
    return _U16[order].unpack_from(buffer, offset)[0]


def pack_u32_into(buffer, offset: int, value: int, order: ByteOrder = LITTLE) -> None:
    """写入 u32 (超出 32 位的部分被截断)"""
    _U32[order].pack_into(buffer, offset, value & _U32_MASK)


def unpack_u32_from(buffer, offset: int, order: ByteOrder = LITTLE) -> int:
    """读取 u32"""
    return _U32[order].unpack_from(buffer, offset)[0]


# ==================== 浮点 ====================

def pack_f32_into(buffer, offset: int, value: float, order: ByteOrder = LITTLE) -> None:
    """
    写入 float32

    先取 binary32 位模式，再按 u32 规则编码。

    Raises:
        OverflowError: 数值超出 binary32 表示范围
    """
    pack_u32_into(buffer, offset, float32_to_bits(value), order)


def unpack_f32_from(buffer, offset: int, order: ByteOrder = LITTLE) -> float:
    """读取 float32"""
    return bits_to_float32(unpack_u32_from(buffer, offset, order))


def pack_f64_into(buffer, offset: int, value: float, order: ByteOrder = LITTLE) -> None:
    """
    写入 float64

    拆为两个 u32 半字依次写入:
    小端先写低 32 位再写高 32 位，大端先写高 32 位再写低 32 位。
    """
    bits = float64_to_bits(value)
    low = bits & _U32_MASK
    high = bits >> 32
    if order is ByteOrder.LITTLE:
        first, second = low, high
    else:
        first, second = high, low
    pack_u32_into(buffer, offset, first, order)
    pack_u32_into(buffer, offset + U32_SIZE, second, order)


def unpack_f64_from(buffer, offset: int, order: ByteOrder = LITTLE) -> float:
    """读取 float64 (半字顺序与 pack_f64_into 一致)"""
    first = unpack_u32_from(buffer, offset, order)
    second = unpack_u32_from(buffer, offset + U32_SIZE, order)
    if order is ByteOrder.LITTLE:
        low, high = first, second
    else:
        high, low = first, second
    return bits_to_float64((high << 32) | low)

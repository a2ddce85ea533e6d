#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
流门面

InputStream / OutputStream 是调用方唯一使用的接口。
构造时根据传入对象选择后端 (顺序或内存)，之后每个操作原样转发给该后端。

示例:
    >>> out = OutputStream.with_capacity(2)
    >>> out.write_u32(0x01020304, ByteOrder.BIG).getvalue()
    b'\\x01\\x02\\x03\\x04'
    >>> InputStream.from_buffer(b'\\x04\\x03\\x02\\x01').read_u32()
    16909060
"""

import logging
from enum import Enum
from typing import BinaryIO, Sequence, Tuple, Union

import numpy as np

from .core.binary_io import (
    BufferedInput,
    BufferedOutput,
    InputBackend,
    OutputBackend,
    SequentialInput,
    SequentialOutput,
)
from .core.bounds import DEFAULT_CAPACITY, GROWTH_INCREMENT
from .core.codec import ByteOrder
from .exceptions import UnsupportedOperationError


logger = logging.getLogger(__name__)

OrderLike = Union[ByteOrder, str]


class StreamKind(Enum):
    """后端类型标签"""
    SEQUENTIAL = 'sequential'
    BUFFERED = 'buffered'


# ==================== 输入流 ====================

class InputStream:
    """
    输入流

    Examples:
        >>> with open('mesh.bin', 'rb') as f:
        ...     stream = InputStream.from_source(f)
        ...     count = stream.read_u32()
        >>> stream = InputStream.from_buffer(data, offset=16)
        >>> stream.read_vec3f(ByteOrder.BIG)
    """

    def __init__(self, backend: InputBackend):
        if isinstance(backend, SequentialInput):
            self._kind = StreamKind.SEQUENTIAL
        elif isinstance(backend, BufferedInput):
            self._kind = StreamKind.BUFFERED
        else:
            raise TypeError(f"未知的输入后端: {type(backend).__name__}")
        self._backend = backend
        logger.debug("创建输入流: %s", self._kind.value)

    @classmethod
    def from_source(cls, source: BinaryIO) -> "InputStream":
        """包装只进字节源"""
        return cls(SequentialInput(source))

    @classmethod
    def from_buffer(cls, data, offset: int = 0) -> "InputStream":
        """包装内存字节区域，从 offset 开始读取"""
        return cls(BufferedInput(data, offset))

    @property
    def kind(self) -> StreamKind:
        return self._kind

    @property
    def backend(self) -> InputBackend:
        return self._backend

    @property
    def position(self) -> int:
        """
        当前读取位置

        Raises:
            UnsupportedOperationError: 顺序流
        """
        return self._backend.position

    def get_position(self) -> int:
        return self._backend.position

    # ==================== 读取 ====================

    def read_u8(self) -> int:
        return self._backend.read_u8()

    def read_u16(self, order: OrderLike = ByteOrder.LITTLE) -> int:
        return self._backend.read_u16(ByteOrder.coerce(order))

    def read_u32(self, order: OrderLike = ByteOrder.LITTLE) -> int:
        return self._backend.read_u32(ByteOrder.coerce(order))

    def read_i8(self) -> int:
        return self._backend.read_i8()

    def read_i16(self, order: OrderLike = ByteOrder.LITTLE) -> int:
        return self._backend.read_i16(ByteOrder.coerce(order))

    def read_i32(self, order: OrderLike = ByteOrder.LITTLE) -> int:
        return self._backend.read_i32(ByteOrder.coerce(order))

    def read_f32(self, order: OrderLike = ByteOrder.LITTLE) -> float:
        return self._backend.read_f32(ByteOrder.coerce(order))

    def read_f64(self, order: OrderLike = ByteOrder.LITTLE) -> float:
        return self._backend.read_f64(ByteOrder.coerce(order))

    def read_vec2f(self, order: OrderLike = ByteOrder.LITTLE) -> Tuple[float, float]:
        return self._backend.read_vec2f(ByteOrder.coerce(order))

    def read_vec3f(self, order: OrderLike = ByteOrder.LITTLE) -> Tuple[float, float, float]:
        return self._backend.read_vec3f(ByteOrder.coerce(order))

    def read_bytes(self, size: int) -> bytes:
        return self._backend.read_bytes(size)

    def skip(self, size: int) -> "InputStream":
        """跳过 size 字节，返回自身以便链式调用"""
        self._backend.skip(size)
        return self

    # ==================== 生命周期 ====================

    def close(self) -> None:
        """关闭底层资源 (顺序流) 或释放缓冲区引用 (内存流)"""
        self._backend.close()

    def __enter__(self) -> "InputStream":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


# ==================== 输出流 ====================

class OutputStream:
    """
    输出流

    无参构造时分配默认容量的内存缓冲区。

    Examples:
        >>> out = OutputStream()
        >>> out.write_u16(7).write_vec2f((1.0, 2.0))
        >>> out.getvalue()
        >>> with open('mesh.bin', 'wb') as f:
        ...     OutputStream.from_sink(f).write_f64(3.5, ByteOrder.BIG)
    """

    def __init__(self, backend: OutputBackend = None):
        if backend is None:
            backend = BufferedOutput()
        if isinstance(backend, SequentialOutput):
            self._kind = StreamKind.SEQUENTIAL
        elif isinstance(backend, BufferedOutput):
            self._kind = StreamKind.BUFFERED
        else:
            raise TypeError(f"未知的输出后端: {type(backend).__name__}")
        self._backend = backend
        logger.debug("创建输出流: %s", self._kind.value)

    @classmethod
    def from_sink(cls, sink: BinaryIO) -> "OutputStream":
        """包装只进字节汇"""
        return cls(SequentialOutput(sink))

    @classmethod
    def from_buffer(cls, buffer: bytearray, offset: int = 0, *,
                    growth_increment: int = GROWTH_INCREMENT) -> "OutputStream":
        """在已有 bytearray 上从 offset 开始写入"""
        return cls(BufferedOutput(buffer, offset, growth_increment=growth_increment))

    @classmethod
    def with_capacity(cls, capacity: int = DEFAULT_CAPACITY, *,
                      growth_increment: int = GROWTH_INCREMENT) -> "OutputStream":
        """分配指定初始容量的零初始化缓冲区"""
        return cls(BufferedOutput(capacity=capacity, growth_increment=growth_increment))

    @property
    def kind(self) -> StreamKind:
        return self._kind

    @property
    def backend(self) -> OutputBackend:
        return self._backend

    @property
    def position(self) -> int:
        """
        当前写入位置

        Raises:
            UnsupportedOperationError: 顺序流
        """
        return self._backend.position

    def get_position(self) -> int:
        return self._backend.position

    def _buffered(self, operation: str) -> BufferedOutput:
        if self._kind is not StreamKind.BUFFERED:
            raise UnsupportedOperationError(operation)
        return self._backend

    # ==================== 写入 ====================

    def write_u8(self, value: int) -> "OutputStream":
        self._backend.write_u8(value)
        return self

    def write_u16(self, value: int, order: OrderLike = ByteOrder.LITTLE) -> "OutputStream":
        self._backend.write_u16(value, ByteOrder.coerce(order))
        return self

    def write_u32(self, value: int, order: OrderLike = ByteOrder.LITTLE) -> "OutputStream":
        self._backend.write_u32(value, ByteOrder.coerce(order))
        return self

    def write_f32(self, value: float, order: OrderLike = ByteOrder.LITTLE) -> "OutputStream":
        self._backend.write_f32(value, ByteOrder.coerce(order))
        return self

    def write_f64(self, value: float, order: OrderLike = ByteOrder.LITTLE) -> "OutputStream":
        self._backend.write_f64(value, ByteOrder.coerce(order))
        return self

    def write_vec2f(self, values: Sequence[float],
                    order: OrderLike = ByteOrder.LITTLE) -> "OutputStream":
        self._backend.write_vec2f(values, ByteOrder.coerce(order))
        return self

    def write_vec3f(self, values: Sequence[float],
                    order: OrderLike = ByteOrder.LITTLE) -> "OutputStream":
        self._backend.write_vec3f(values, ByteOrder.coerce(order))
        return self

    def write_bytes(self, data) -> "OutputStream":
        self._backend.write_bytes(data)
        return self

    def write_utf8_bytes(self, text: str) -> "OutputStream":
        """写入 UTF-8 编码的文本 (无长度前缀)"""
        self._backend.write_utf8_bytes(text)
        return self

    def skip(self, size: int) -> "OutputStream":
        self._backend.skip(size)
        return self

    # ==================== 内存流专用 ====================

    @property
    def capacity(self) -> int:
        return self._buffered("capacity").capacity

    @property
    def written_length(self) -> int:
        """已写入区域长度 (高水位)"""
        return self._buffered("written_length").written_length

    def getvalue(self) -> bytes:
        """
        返回已写入区域 [0, 高水位) 的副本

        Raises:
            UnsupportedOperationError: 顺序流
        """
        return self._buffered("getvalue").getvalue()

    def as_uint8(self) -> np.ndarray:
        return self._buffered("as_uint8").as_uint8()

    def as_int16(self, order: OrderLike = ByteOrder.LITTLE) -> np.ndarray:
        return self._buffered("as_int16").as_int16(ByteOrder.coerce(order))

    def as_int32(self, order: OrderLike = ByteOrder.LITTLE) -> np.ndarray:
        return self._buffered("as_int32").as_int32(ByteOrder.coerce(order))

    def as_float32(self, order: OrderLike = ByteOrder.LITTLE) -> np.ndarray:
        return self._buffered("as_float32").as_float32(ByteOrder.coerce(order))

    def as_float64(self, order: OrderLike = ByteOrder.LITTLE) -> np.ndarray:
        return self._buffered("as_float64").as_float64(ByteOrder.coerce(order))

    # ==================== 生命周期 ====================

    def flush(self) -> None:
        self._backend.flush()

    def close(self) -> None:
        """关闭底层资源 (顺序流)"""
        self._backend.close()

    def __enter__(self) -> "OutputStream":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

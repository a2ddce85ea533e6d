#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
二进制 I/O 后端

提供四种后端 (顺序 / 内存 × 输入 / 输出)，共享同一组类型化读写方法。
每个后端只需实现取字节窗口的原语，数值编解码统一交给 codec 模块。

- SequentialInput:  包装只进字节源，复用固定大小的暂存区，不支持 position
- BufferedInput:    包装可寻址字节区域 + 游标，读取前做边界检查
- SequentialOutput: 包装只进字节汇，在暂存区组装多字节字段后一次写出
- BufferedOutput:   包装可增长的 bytearray + 游标，写入前按需扩容
"""

import io
from abc import ABC, abstractmethod
from typing import Any, BinaryIO, Sequence, Tuple

import numpy as np

from . import codec
from .bounds import (
    DEFAULT_CAPACITY,
    GROWTH_INCREMENT,
    SCRATCH_SIZE,
    check_bounds,
    grow_buffer,
)
from .codec import ByteOrder, LITTLE
from .views import typed_view
from ..exceptions import UnsupportedOperationError


# 顺序流跳过时每次读取 / 写出的块大小
_SKIP_CHUNK = 64 * 1024


def _check_size(size: int, what: str) -> None:
    """游标只前进不后退"""
    if size < 0:
        raise ValueError(f"{what} 字节数不能为负: {size}")


# ==================== 输入接口 ====================

class InputBackend(ABC):
    """
    输入后端接口

    子类实现 _take / read_bytes / skip / position，
    类型化读取由本类基于 _take 统一提供。
    """

    @abstractmethod
    def _take(self, size: int) -> Tuple[Any, int]:
        """
        取出接下来 size 字节的窗口并推进游标

        Args:
            size: 字节数 (不超过 SCRATCH_SIZE 或缓冲区剩余长度)

        Returns:
            (缓冲区, 偏移) 元组，窗口为 缓冲区[偏移:偏移 + size]
        """
        pass

    @abstractmethod
    def read_bytes(self, size: int) -> bytes:
        """读取 size 字节原始数据"""
        pass

    @abstractmethod
    def skip(self, size: int) -> "InputBackend":
        """跳过 size 字节，返回自身以便链式调用"""
        pass

    @property
    @abstractmethod
    def position(self) -> int:
        """当前读取位置"""
        pass

    def close(self) -> None:
        """释放底层资源"""
        pass

    # ==================== 无符号整数 ====================

    def read_u8(self) -> int:
        """读取无符号 8 位整数"""
        return codec.unpack_u8_from(*self._take(codec.U8_SIZE))

    def read_u16(self, order: ByteOrder = LITTLE) -> int:
        """读取无符号 16 位整数"""
        buffer, offset = self._take(codec.U16_SIZE)
        return codec.unpack_u16_from(buffer, offset, order)

    def read_u32(self, order: ByteOrder = LITTLE) -> int:
        """读取无符号 32 位整数"""
        buffer, offset = self._take(codec.U32_SIZE)
        return codec.unpack_u32_from(buffer, offset, order)

    # ==================== 有符号整数 ====================

    def read_i8(self) -> int:
        """读取有符号 8 位整数"""
        return codec.as_signed(self.read_u8(), codec.U8_SIZE)

    def read_i16(self, order: ByteOrder = LITTLE) -> int:
        """读取有符号 16 位整数"""
        return codec.as_signed(self.read_u16(order), codec.U16_SIZE)

    def read_i32(self, order: ByteOrder = LITTLE) -> int:
        """读取有符号 32 位整数"""
        return codec.as_signed(self.read_u32(order), codec.U32_SIZE)

    # ==================== 浮点 ====================

    def read_f32(self, order: ByteOrder = LITTLE) -> float:
        """读取 float32"""
        buffer, offset = self._take(codec.F32_SIZE)
        return codec.unpack_f32_from(buffer, offset, order)

    def read_f64(self, order: ByteOrder = LITTLE) -> float:
        """读取 float64"""
        buffer, offset = self._take(codec.F64_SIZE)
        return codec.unpack_f64_from(buffer, offset, order)

    def read_vec2f(self, order: ByteOrder = LITTLE) -> Tuple[float, float]:
        """读取 2 个连续 float32"""
        return self._read_vector(2, order)

    def read_vec3f(self, order: ByteOrder = LITTLE) -> Tuple[float, float, float]:
        """读取 3 个连续 float32"""
        return self._read_vector(3, order)

    def _read_vector(self, count: int, order: ByteOrder) -> Tuple[float, ...]:
        buffer, offset = self._take(count * codec.F32_SIZE)
        return tuple(
            codec.unpack_f32_from(buffer, offset + i * codec.F32_SIZE, order)
            for i in range(count)
        )


# ==================== 输出接口 ====================

class OutputBackend(ABC):
    """
    输出后端接口

    子类实现 _reserve / _commit / write_bytes / skip / position。
    每次类型化写入的流程: _reserve 取得可写窗口 → codec 编码 → _commit 提交。
    编码失败时不会提交，游标保持不变。
    """

    @abstractmethod
    def _reserve(self, size: int) -> Tuple[Any, int]:
        """
        准备 size 字节的可写窗口 (不推进游标)

        Returns:
            (缓冲区, 偏移) 元组
        """
        pass

    @abstractmethod
    def _commit(self, size: int) -> None:
        """提交刚编码的 size 字节并推进游标"""
        pass

    @abstractmethod
    def write_bytes(self, data) -> "OutputBackend":
        """写入原始字节"""
        pass

    @abstractmethod
    def skip(self, size: int) -> "OutputBackend":
        """跳过 size 字节"""
        pass

    @property
    @abstractmethod
    def position(self) -> int:
        """当前写入位置"""
        pass

    def flush(self) -> None:
        """刷新底层资源"""
        pass

    def close(self) -> None:
        """释放底层资源"""
        pass

    def write_utf8_bytes(self, text: str) -> "OutputBackend":
        """
        写入 UTF-8 编码的文本

        不带长度前缀，也不带结束符。
        """
        return self.write_bytes(text.encode('utf-8'))

    # ==================== 整数 ====================

    def write_u8(self, value: int) -> "OutputBackend":
        """写入无符号 8 位整数"""
        buffer, offset = self._reserve(codec.U8_SIZE)
        codec.pack_u8_into(buffer, offset, value)
        self._commit(codec.U8_SIZE)
        return self

    def write_u16(self, value: int, order: ByteOrder = LITTLE) -> "OutputBackend":
        """写入无符号 16 位整数"""
        buffer, offset = self._reserve(codec.U16_SIZE)
        codec.pack_u16_into(buffer, offset, value, order)
        self._commit(codec.U16_SIZE)
        return self

    def write_u32(self, value: int, order: ByteOrder = LITTLE) -> "OutputBackend":
        """写入无符号 32 位整数"""
        buffer, offset = self._reserve(codec.U32_SIZE)
        codec.pack_u32_into(buffer, offset, value, order)
        self._commit(codec.U32_SIZE)
        return self

    # ==================== 浮点 ====================

    def write_f32(self, value: float, order: ByteOrder = LITTLE) -> "OutputBackend":
        """写入 float32"""
        buffer, offset = self._reserve(codec.F32_SIZE)
        codec.pack_f32_into(buffer, offset, value, order)
        self._commit(codec.F32_SIZE)
        return self

    def write_f64(self, value: float, order: ByteOrder = LITTLE) -> "OutputBackend":
        """写入 float64"""
        buffer, offset = self._reserve(codec.F64_SIZE)
        codec.pack_f64_into(buffer, offset, value, order)
        self._commit(codec.F64_SIZE)
        return self

    def write_vec2f(self, values: Sequence[float],
                    order: ByteOrder = LITTLE) -> "OutputBackend":
        """写入 2 个连续 float32"""
        return self._write_vector(values, 2, order)

    def write_vec3f(self, values: Sequence[float],
                    order: ByteOrder = LITTLE) -> "OutputBackend":
        """写入 3 个连续 float32"""
        return self._write_vector(values, 3, order)

    def _write_vector(self, values: Sequence[float], count: int,
                      order: ByteOrder) -> "OutputBackend":
        if len(values) != count:
            raise ValueError(f"向量长度应为 {count}, 实际 {len(values)}")
        size = count * codec.F32_SIZE
        buffer, offset = self._reserve(size)
        for i, value in enumerate(values):
            codec.pack_f32_into(buffer, offset + i * codec.F32_SIZE, value, order)
        self._commit(size)
        return self


# ==================== 顺序输入 ====================

class SequentialInput(InputBackend):
    """
    顺序输入后端

    包装只进字节源 (文件、socket、管道)。
    多字节读取先填满暂存区再解码；读取不足时抛出 EOFError。
    """

    def __init__(self, source: BinaryIO):
        """
        Args:
            source: 以 'rb' 模式打开的文件对象，需支持 readinto 和 read
        """
        self._source = source
        self._scratch = bytearray(SCRATCH_SIZE)
        self._scratch_view = memoryview(self._scratch)

    @property
    def source(self) -> BinaryIO:
        """底层字节源"""
        return self._source

    @property
    def position(self) -> int:
        raise UnsupportedOperationError("position")

    def _take(self, size: int) -> Tuple[Any, int]:
        window = self._scratch_view[:size]
        filled = 0
        while filled < size:
            count = self._source.readinto(window[filled:])
            if not count:
                raise EOFError(
                    f"数据结束: 期望读取 {size} 字节，实际只有 {filled} 字节"
                )
            filled += count
        return self._scratch, 0

    def read_bytes(self, size: int) -> bytes:
        """
        读取指定字节数

        Raises:
            EOFError: 数据源不足请求的字节数
        """
        _check_size(size, "读取")
        chunks = []
        remaining = size
        while remaining > 0:
            chunk = self._source.read(remaining)
            if not chunk:
                raise EOFError(
                    f"数据结束: 期望读取 {size} 字节，"
                    f"实际只有 {size - remaining} 字节"
                )
            chunks.append(chunk)
            remaining -= len(chunk)
        return b''.join(chunks)

    def skip(self, size: int) -> "SequentialInput":
        """
        跳过指定字节

        可 seek 的数据源直接相对移动；否则分块读取并丢弃。
        """
        _check_size(size, "跳过")
        seekable = getattr(self._source, 'seekable', None)
        if seekable is not None and seekable():
            self._source.seek(size, io.SEEK_CUR)
            return self

        remaining = size
        while remaining > 0:
            chunk = self._source.read(min(remaining, _SKIP_CHUNK))
            if not chunk:
                raise EOFError(
                    f"数据结束: 跳过 {size} 字节时提前结束，"
                    f"还剩 {remaining} 字节"
                )
            remaining -= len(chunk)
        return self

    def close(self) -> None:
        self._source.close()


# ==================== 内存输入 ====================

class BufferedInput(InputBackend):
    """
    内存输入后端

    包装任意 bytes-like 对象，直接在原内存上解码，不做复制。
    持有 memoryview 期间调用方的 bytearray 不能改变长度 (会抛出 BufferError)，
    需先调用 close() 释放。
    每次读取和跳过前都会做边界检查，越界时抛出 OutOfBoundsError 且游标不变。
    """

    def __init__(self, data, offset: int = 0):
        """
        Args:
            data: bytes / bytearray / memoryview 等支持 buffer 协议的对象
            offset: 起始游标
        """
        self._data = memoryview(data).cast('B')
        self._size = len(self._data)
        _check_size(offset, "起始偏移")
        check_bounds(offset, 0, self._size)
        self._position = offset

    @property
    def position(self) -> int:
        return self._position

    @property
    def size(self) -> int:
        """缓冲区总长度"""
        return self._size

    @property
    def remaining(self) -> int:
        """剩余可读字节数"""
        return self._size - self._position

    def _take(self, size: int) -> Tuple[Any, int]:
        check_bounds(self._position, size, self._size)
        offset = self._position
        self._position += size
        return self._data, offset

    def read_bytes(self, size: int) -> bytes:
        """
        读取指定字节数

        Raises:
            OutOfBoundsError: 剩余字节不足
        """
        _check_size(size, "读取")
        buffer, offset = self._take(size)
        return bytes(buffer[offset:offset + size])

    def skip(self, size: int) -> "BufferedInput":
        """
        跳过指定字节

        Raises:
            OutOfBoundsError: 剩余字节不足
        """
        _check_size(size, "跳过")
        check_bounds(self._position, size, self._size)
        self._position += size
        return self

    def close(self) -> None:
        self._data.release()


# ==================== 顺序输出 ====================

class SequentialOutput(OutputBackend):
    """
    顺序输出后端

    包装只进字节汇。多字节字段先在暂存区中编码，再把前 N 字节写出。
    """

    def __init__(self, sink: BinaryIO):
        """
        Args:
            sink: 以 'wb' 模式打开的文件对象
        """
        self._sink = sink
        self._scratch = bytearray(SCRATCH_SIZE)
        self._scratch_view = memoryview(self._scratch)

    @property
    def sink(self) -> BinaryIO:
        """底层字节汇"""
        return self._sink

    @property
    def position(self) -> int:
        raise UnsupportedOperationError("position")

    def _reserve(self, size: int) -> Tuple[Any, int]:
        return self._scratch, 0

    def _commit(self, size: int) -> None:
        self._sink.write(self._scratch_view[:size])

    def write_bytes(self, data) -> "SequentialOutput":
        """写入原始字节"""
        self._sink.write(data)
        return self

    def skip(self, size: int) -> "SequentialOutput":
        """跳过指定字节 (写出零字节)"""
        _check_size(size, "跳过")
        remaining = size
        while remaining > 0:
            chunk = min(remaining, _SKIP_CHUNK)
            self._sink.write(bytes(chunk))
            remaining -= chunk
        return self

    def flush(self) -> None:
        flush = getattr(self._sink, 'flush', None)
        if flush is not None:
            flush()

    def close(self) -> None:
        self._sink.close()


# ==================== 内存输出 ====================

class BufferedOutput(OutputBackend):
    """
    内存输出后端

    在可增长的 bytearray 上按游标写入。写入前若容量不足，
    按固定增量分配新缓冲区并复制旧内容，然后再编码。

    维护高水位 (已写入的最远偏移)，getvalue() 与类型化视图
    均只覆盖 [0, 高水位) 区域。

    跳过的区域不会清零：扩容产生的区域为零，复用的外部缓冲区则保留原内容。
    跳过的区域同样计入已写入区域，始终满足 游标 <= 高水位 <= 容量。
    """

    def __init__(self, buffer: bytearray = None, offset: int = 0, *,
                 capacity: int = DEFAULT_CAPACITY,
                 growth_increment: int = GROWTH_INCREMENT):
        """
        Args:
            buffer: 复用的 bytearray；为 None 时按 capacity 分配零初始化缓冲区
            offset: 起始游标，不能超过缓冲区长度 ([0, offset) 视为已写入)
            capacity: 新分配缓冲区的初始容量
            growth_increment: 扩容的固定增量
        """
        if buffer is None:
            _check_size(capacity, "初始容量")
            buffer = bytearray(capacity)
        elif not isinstance(buffer, bytearray):
            raise TypeError(
                f"输出缓冲区必须是 bytearray, 实际为 {type(buffer).__name__}"
            )
        _check_size(offset, "起始偏移")
        check_bounds(offset, 0, len(buffer))
        if growth_increment <= 0:
            raise ValueError(f"扩容增量必须为正数: {growth_increment}")

        self._buffer = buffer
        self._position = offset
        self._high_water = offset
        self._increment = growth_increment

    @property
    def position(self) -> int:
        return self._position

    @property
    def closed(self) -> bool:
        return self._buffer is None

    @property
    def capacity(self) -> int:
        """当前容量"""
        return len(self._open_buffer())

    @property
    def written_length(self) -> int:
        """高水位 (已写入区域长度)"""
        return self._high_water

    @property
    def buffer(self) -> bytearray:
        """底层缓冲区 (扩容后会替换为新对象)"""
        return self._buffer

    def _open_buffer(self) -> bytearray:
        if self._buffer is None:
            raise ValueError("输出流已关闭")
        return self._buffer

    def _reserve(self, size: int) -> Tuple[Any, int]:
        self._buffer = grow_buffer(
            self._open_buffer(), self._position, size, self._increment
        )
        return self._buffer, self._position

    def _commit(self, size: int) -> None:
        self._position += size
        if self._position > self._high_water:
            self._high_water = self._position

    def write_bytes(self, data) -> "BufferedOutput":
        """写入原始字节"""
        data = memoryview(data).cast('B')
        size = len(data)
        buffer, offset = self._reserve(size)
        buffer[offset:offset + size] = data
        self._commit(size)
        return self

    def skip(self, size: int) -> "BufferedOutput":
        """
        跳过指定字节

        按需扩容后推进游标，不写入也不清零；跳过的区域计入已写入区域。
        """
        _check_size(size, "跳过")
        self._reserve(size)
        self._commit(size)
        return self

    def getvalue(self) -> bytes:
        """返回已写入区域的副本"""
        return bytes(self._open_buffer()[:self._high_water])

    # ==================== 类型化视图 ====================

    def as_array(self, kind: str, order: ByteOrder = LITTLE) -> np.ndarray:
        """
        已写入区域的只读类型化视图

        调用方需保证高水位能被元素宽度整除，余下的尾部字节会被忽略。
        视图与当前缓冲区共享内存，之后的扩容不会反映到已创建的视图中。

        Args:
            kind: 'uint8' / 'int16' / 'int32' / 'float32' / 'float64'
            order: 元素字节序
        """
        return typed_view(self._open_buffer(), self._high_water, kind, order)

    def as_uint8(self) -> np.ndarray:
        return self.as_array('uint8')

    def as_int16(self, order: ByteOrder = LITTLE) -> np.ndarray:
        return self.as_array('int16', order)

    def as_int32(self, order: ByteOrder = LITTLE) -> np.ndarray:
        return self.as_array('int32', order)

    def as_float32(self, order: ByteOrder = LITTLE) -> np.ndarray:
        return self.as_array('float32', order)

    def as_float64(self, order: ByteOrder = LITTLE) -> np.ndarray:
        return self.as_array('float64', order)

    def close(self) -> None:
        """丢弃缓冲区引用，之后的读写均抛出 ValueError (已创建的视图不受影响)"""
        self._buffer = None

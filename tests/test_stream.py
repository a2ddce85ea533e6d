#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
流门面测试

测试构造入口、后端分派、游标单调性和生命周期。
"""

import io

import pytest

from binstream import (
    DEFAULT_CAPACITY,
    ByteOrder,
    InputStream,
    OutOfBoundsError,
    OutputStream,
    StreamKind,
    UnsupportedOperationError,
)


# ==================== 构造测试 ====================

class TestConstruction:
    """构造入口选择后端"""

    def test_default_output(self):
        """无参构造为默认容量的内存流"""
        out = OutputStream()
        assert out.kind is StreamKind.BUFFERED
        assert out.capacity == DEFAULT_CAPACITY
        assert out.position == 0

    def test_with_capacity(self):
        out = OutputStream.with_capacity(8)
        assert out.kind is StreamKind.BUFFERED
        assert out.capacity == 8

    def test_from_sink(self, sink):
        out = OutputStream.from_sink(sink)
        assert out.kind is StreamKind.SEQUENTIAL

    def test_from_buffer(self):
        out = OutputStream.from_buffer(bytearray(4), offset=1)
        assert out.kind is StreamKind.BUFFERED
        assert out.position == 1

    def test_input_kinds(self):
        assert InputStream.from_source(io.BytesIO()).kind is StreamKind.SEQUENTIAL
        assert InputStream.from_buffer(b'').kind is StreamKind.BUFFERED

    def test_unknown_backend(self):
        """拒绝未知后端"""
        with pytest.raises(TypeError):
            InputStream(object())
        with pytest.raises(TypeError):
            OutputStream(object())


# ==================== 读写场景测试 ====================

class TestScenarios:
    """端到端读写"""

    def test_u32_growth_little_endian(self):
        """容量 2 的内存流写入小端 u32"""
        out = OutputStream.with_capacity(2)
        out.write_u32(0x01020304, ByteOrder.LITTLE)
        assert out.capacity > 2
        assert out.getvalue() == bytes([0x04, 0x03, 0x02, 0x01])

    def test_u32_big_endian(self):
        """大端 u32"""
        out = OutputStream()
        out.write_u32(0x01020304, 'big')
        assert out.getvalue() == bytes([0x01, 0x02, 0x03, 0x04])

    def test_vec3f_roundtrip(self, order):
        """vec3f 写入后从同一偏移读回"""
        out = OutputStream.with_capacity(4)
        out.write_u8(0xEE)
        start = out.position
        out.write_vec3f([1.0, 2.0, 3.0], order)

        stream = InputStream.from_buffer(out.getvalue(), offset=start)
        assert stream.read_vec3f(order) == (1.0, 2.0, 3.0)

    def test_length_four_then_out_of_bounds(self):
        """长度 4 的输入读 u32 后再读 u8 越界"""
        stream = InputStream.from_buffer(b'\x01\x02\x03\x04')
        stream.read_u32()
        with pytest.raises(OutOfBoundsError) as exc_info:
            stream.read_u8()
        assert exc_info.value.length == 1
        assert exc_info.value.total == 4

    def test_sequential_roundtrip(self, order):
        """顺序流写出后顺序读回"""
        sink = io.BytesIO()
        out = OutputStream.from_sink(sink)
        (out.write_u8(255)
            .write_u16(0xABCD, order)
            .write_u32(123456789, order)
            .write_f32(-0.5, order)
            .write_f64(1e-10, order)
            .write_vec2f((4.0, -8.0), order)
            .skip(2)
            .write_utf8_bytes("ok"))

        stream = InputStream.from_source(io.BytesIO(sink.getvalue()))
        assert stream.read_u8() == 255
        assert stream.read_u16(order) == 0xABCD
        assert stream.read_u32(order) == 123456789
        assert stream.read_f32(order) == -0.5
        assert stream.read_f64(order) == 1e-10
        assert stream.read_vec2f(order) == (4.0, -8.0)
        assert stream.skip(2) is stream
        assert stream.read_bytes(2) == b'ok'

    def test_signed_interpretation(self):
        """-1 写入 u16 后按有符号读回"""
        out = OutputStream().write_u16(-1).write_u32(-2, 'big')
        stream = InputStream.from_buffer(out.getvalue())
        assert stream.read_i16() == -1
        assert stream.read_i32('big') == -2


# ==================== 游标测试 ====================

class TestCursor:
    """游标单调递增且等于请求宽度之和"""

    def test_output_cursor(self):
        out = OutputStream.with_capacity(1)
        steps = [
            (lambda: out.write_u8(1), 1),
            (lambda: out.write_u16(2), 2),
            (lambda: out.skip(5), 5),
            (lambda: out.write_f64(3.0), 8),
            (lambda: out.write_vec3f((1.0, 1.0, 1.0)), 12),
            (lambda: out.write_bytes(b'xyz'), 3),
            (lambda: out.write_f32(0.0), 4),
        ]
        total = 0
        for step, width in steps:
            before = out.position
            step()
            total += width
            assert out.position >= before
            assert out.position == total

    def test_input_cursor(self):
        stream = InputStream.from_buffer(bytes(40))
        widths = []
        for name, width in [('read_u8', 1), ('read_u32', 4), ('read_vec2f', 8),
                            ('read_f64', 8), ('read_u16', 2)]:
            getattr(stream, name)()
            widths.append(width)
            assert stream.position == sum(widths)
        stream.skip(10)
        assert stream.get_position() == sum(widths) + 10


# ==================== 顺序流限制测试 ====================

class TestSequentialLimits:
    """顺序流不支持位置和内存区域访问"""

    @pytest.mark.parametrize("operation", [
        "getvalue", "as_uint8", "as_int16", "as_int32", "as_float32", "as_float64",
    ])
    def test_buffer_only_methods(self, sink, operation):
        out = OutputStream.from_sink(sink)
        with pytest.raises(UnsupportedOperationError) as exc_info:
            getattr(out, operation)()
        assert exc_info.value.operation == operation

    def test_position(self, sink):
        with pytest.raises(UnsupportedOperationError):
            OutputStream.from_sink(sink).get_position()
        with pytest.raises(UnsupportedOperationError):
            InputStream.from_source(io.BytesIO()).position

    def test_written_length(self, sink):
        with pytest.raises(UnsupportedOperationError):
            OutputStream.from_sink(sink).written_length


# ==================== 生命周期测试 ====================

class TestLifecycle:
    """close 与上下文管理器"""

    def test_output_context_closes_sink(self):
        sink = io.BytesIO()
        with OutputStream.from_sink(sink) as out:
            out.write_u8(1)
            out.flush()
        assert sink.closed

    def test_input_context_closes_source(self):
        source = io.BytesIO(b'\x01')
        with InputStream.from_source(source) as stream:
            assert stream.read_u8() == 1
        assert source.closed

    def test_buffered_input_close_releases(self):
        stream = InputStream.from_buffer(b'\x01\x02')
        stream.close()
        with pytest.raises(ValueError):
            stream.read_u8()

    def test_buffered_output_close(self):
        """关闭后丢弃缓冲区"""
        with OutputStream() as out:
            out.write_u8(9)
            assert out.getvalue() == b"\x09"
        with pytest.raises(ValueError):
            out.getvalue()

    def test_trailing_skip_is_written(self):
        """末尾填充计入已写入区域"""
        out = OutputStream.with_capacity(8).write_u8(1).skip(3)
        assert out.position == out.written_length == 4
        assert out.getvalue() == b"\x01\x00\x00\x00"

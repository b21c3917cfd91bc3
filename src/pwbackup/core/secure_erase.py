"""Best-effort zeroing of sensitive buffers.

Overwrites key material in place once it is no longer needed. This is hygiene,
not a guarantee: the interpreter, the cipher backend or the OS may already
hold copies (immutable ``bytes`` produced along the way cannot be wiped at
all), so only buffers we own as ``bytearray``/writable ``memoryview`` are
cleared.
"""

import ctypes
from contextlib import contextmanager
from typing import Iterator, Union

Buffer = Union[bytearray, memoryview]


def secure_zero(data: Buffer) -> None:
    """Overwrite ``data`` with zero bytes in place.

    Only the bytes the view covers are cleared; a strided 1-D view (e.g.
    ``memoryview(buf)[::2]``) zeroes just its own elements.

    Raises:
        TypeError: If ``data`` is immutable (e.g. ``bytes``), or is a
            non-contiguous multi-dimensional memoryview.
    """
    if isinstance(data, memoryview):
        if data.readonly:
            raise TypeError("Cannot zero a read-only memoryview")
        if data.c_contiguous:
            flat = data.cast("B")
            for i in range(len(flat)):
                flat[i] = 0
            return
        if data.ndim != 1:
            raise TypeError("Cannot zero a non-contiguous multi-dimensional memoryview")
        zero = b"\x00" if data.format == "c" else 0
        for i in range(len(data)):
            data[i] = zero
        return
    if not isinstance(data, bytearray):
        raise TypeError(f"Cannot zero immutable buffer of type {type(data).__name__}")

    size = len(data)
    if size == 0:
        return
    # memset through ctypes is an opaque call the interpreter cannot elide
    view = (ctypes.c_char * size).from_buffer(data)
    try:
        ctypes.memset(ctypes.addressof(view), 0, size)
    finally:
        del view


@contextmanager
def wiped(data: Buffer) -> Iterator[Buffer]:
    """Yield ``data`` and zero it when the block exits, however it exits."""
    try:
        yield data
    finally:
        secure_zero(data)

"""
Общие фикстуры: сборка тестовых PNG файлов в памяти
"""
import zlib
import pytest
from png_chunks import PNG_SIGNATURE, build_chunk
from png_header import build_ihdr, get_scanline_size


# Минимальный PNG 1x1 с одним чёрным пикселем (grayscale, 8 бит)
ONE_BLACK_PIXEL_PNG = bytes.fromhex(
    '89504e470d0a1a0a'
    '0000000d49484452000000010000000108000000003a7e9b55'
    '0000000d49444154081d010200fdff000000020001cde3d12b'
    '0000000049454e44ae426082'
)


def make_rows(width, height, bit_depth=8, color_type=0, filter_type=0):
    """Строки развёртки, в которых каждый байт пикселя равен номеру строки"""
    scanline_size = get_scanline_size(width, bit_depth, color_type)
    return [bytes([filter_type]) + bytes([y % 256]) * (scanline_size - 1) for y in range(height)]


def make_png(width, height, bit_depth=8, color_type=0, rows=None, idat_size=None,
             top_chunks=(), bottom_chunks=(), raw_data=None):
    """
    Собирает PNG: IHDR, дополнительные чанки, IDAT (при idat_size - несколько),
    дополнительные чанки после данных и IEND
    """
    if raw_data is None:
        if rows is None:
            rows = make_rows(width, height, bit_depth, color_type)
        raw_data = b''.join(rows)
    compressed = zlib.compress(raw_data, 9)
    if idat_size:
        pieces = [compressed[i:i + idat_size] for i in range(0, len(compressed), idat_size)]
    else:
        pieces = [compressed]

    parts = [PNG_SIGNATURE, build_ihdr(width=width, height=height, bit_depth=bit_depth, color_type=color_type)]
    parts.extend(top_chunks)
    parts.extend(build_chunk(b'IDAT', piece) for piece in pieces)
    parts.extend(bottom_chunks)
    parts.append(build_chunk(b'IEND', b''))
    return b''.join(parts)


@pytest.fixture
def one_pixel_png():
    """PNG 1x1 с одним чёрным пикселем"""
    return ONE_BLACK_PIXEL_PNG


@pytest.fixture
def png_factory():
    """Фабрика тестовых PNG"""
    return make_png

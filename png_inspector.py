"""
Текстовый отчёт о структуре PNG файла (чанки, CRC, заголовок, строки развёртки).
"""

from typing import Callable, List, Optional

from byte_utils import format_hex, uint32_to_bytes
from png_chunks import Chunk
from png_parser import PNGParser


def chunk_summary(buffer: bytes) -> List[dict]:
    """Сведения о каждом чанке в порядке следования"""
    parser = PNGParser(buffer)
    return [
        {
            'index': index,
            'type': chunk.type_name,
            'size': chunk.size,
            'crc': f'{chunk.crc_value:08x}',
            'computed_crc': f'{chunk.computed_crc:08x}',
            'crc_ok': chunk.crc_ok,
        }
        for index, chunk in enumerate(parser.parse_chunks())
    ]


def _describe_chunk(chunk: Chunk) -> List[str]:
    return [
        'Chunk',
        format_hex(chunk.bytes),
        f'size: {chunk.size}',
        f'type: {chunk.type_name}',
        f'data: {format_hex(chunk.data)}',
        f'crc: {format_hex(chunk.crc)}',
        f'computed crc: {format_hex(uint32_to_bytes(chunk.computed_crc))}',
        '',
    ]


def inspect_png(buffer: bytes, output: Optional[Callable[[str], None]] = None) -> str:
    """
    Строит отчёт о PNG файле.

    output вызывается для каждой строки отчёта по мере её появления,
    весь отчёт также возвращается одной строкой.
    """
    lines = []

    def emit(line: str = ''):
        lines.append(line)
        if output is not None:
            output(line)

    parser = PNGParser(buffer)
    chunks = parser.parse_chunks()

    emit('Signature')
    emit(format_hex(parser.signature))
    emit()

    for chunk in chunks:
        for line in _describe_chunk(chunk):
            emit(line)

    parser.classify_chunks()
    idat_chunks = [chunk for chunk in chunks if chunk.type == b'IDAT']
    emit(f'Total IDAT Chunks: {len(idat_chunks)}')
    emit(f'Total IDAT Compressed Size: {sum(chunk.size for chunk in idat_chunks)}')

    header = parser.parse_header()
    parser.read_image_data()
    emit(f'Decompressed Data Size: {len(parser.image_data)}')
    emit()

    emit(f'Width: {header.width}')
    emit(f'Height: {header.height}')
    emit(f'BitDepth: {header.bit_depth}')
    emit(f'ColorType: {header.color_type}')
    emit(f'CompressionMethod: {header.compression_method}')
    emit(f'FilterMethod: {header.filter_method}')
    emit(f'InterlaceMethod: {header.interlace_method}')
    emit()

    emit(f'Scanline Size: {header.scanline_size}')
    emit(f'Expected Data Size: {parser.expected_image_size}')
    scanlines = parser.split_scanlines()
    parser.validate_scanlines()
    emit(f'{len(scanlines)} Scanlines Extracted')

    if parser.report.issues:
        emit()
        emit('Issues')
        for issue in parser.report:
            emit(f'{issue.code}: {issue.message}')

    return '\n'.join(lines)

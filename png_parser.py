"""
Парсер PNG файлов без использования готовых библиотек.
Разбирает поток на чанки, распаковывает IDAT и делит данные на строки развёртки.
"""

import zlib
from typing import List, Optional

from byte_utils import concat_bytes, format_hex, split_bytes
from png_chunks import Chunk, extract_chunks, has_png_signature, split_signature
from png_errors import PNGCodecError, PNGStructureError
from png_header import INTERLACE_NONE, IHDRHeader, parse_ihdr

MAX_FILTER_TYPE = 4

# Коды замечаний, которые в строгом режиме становятся ошибками
STRICT_ISSUES = frozenset({
    'signature',
    'idat-not-contiguous',
    'filter-byte',
    'scanline-length',
    'trailing-bytes',
    'row-count',
})


def decompress_image_data(data: bytes) -> bytes:
    """Распаковывает склеенные данные IDAT"""
    try:
        return zlib.decompress(data)
    except zlib.error as e:
        raise PNGCodecError(f"Ошибка распаковки данных IDAT: {e}") from e


class ValidationIssue:
    """Одно замечание проверки (не прерывает обработку)"""

    def __init__(self, code: str, message: str, index: Optional[int] = None):
        self.code = code
        self.message = message
        self.index = index

    def as_dict(self) -> dict:
        return {'code': self.code, 'message': self.message, 'index': self.index}

    def __repr__(self):
        return f'ValidationIssue({self.code!r}, {self.message!r}, index={self.index})'


class ValidationReport:
    """Замечания, собранные при разборе файла"""

    def __init__(self, strict: bool = False):
        self.strict = strict
        self.issues: List[ValidationIssue] = []

    def add(self, code: str, message: str, index: Optional[int] = None):
        issue = ValidationIssue(code, message, index)
        if self.strict and code in STRICT_ISSUES:
            raise PNGStructureError(message)
        self.issues.append(issue)
        return issue

    def by_code(self, code: str) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.code == code]

    @property
    def ok(self) -> bool:
        return not self.issues

    def __len__(self):
        return len(self.issues)

    def __iter__(self):
        return iter(self.issues)


class PNGParser:
    """Парсер для PNG файлов, целиком находящихся в памяти"""

    def __init__(self, buffer: bytes, strict: bool = False):
        self.buffer = bytes(buffer)
        self.strict = strict
        self.signature = b''
        self.chunks: List[Chunk] = []
        self.top_chunks: List[Chunk] = []
        self.data_chunks: List[Chunk] = []
        self.bottom_chunks: List[Chunk] = []
        self.header: Optional[IHDRHeader] = None
        self.image_data = b''
        self.scanlines: List[bytes] = []
        self.report = ValidationReport(strict)

    def parse_chunks(self) -> List[Chunk]:
        """Отделяет сигнатуру и разбирает все чанки"""
        self.signature, rest = split_signature(self.buffer)
        if not has_png_signature(self.signature):
            self.report.add('signature', f"Неверная сигнатура PNG: {format_hex(self.signature)}")
        self.chunks = [Chunk(raw) for raw in extract_chunks(rest)]
        for index, chunk in enumerate(self.chunks):
            if not chunk.crc_ok:
                self.report.add(
                    'crc-mismatch',
                    f"Неверный CRC чанка {chunk.type_name}: "
                    f"записан {chunk.crc_value:08x}, вычислен {chunk.computed_crc:08x}",
                    index,
                )
        return self.chunks

    def classify_chunks(self):
        """
        Делит чанки на три группы одним проходом: до первого IDAT,
        непрерывная серия IDAT и всё остальное.
        """
        top, data, bottom = [], [], []
        index = 0
        while index < len(self.chunks) and self.chunks[index].type != b'IDAT':
            top.append(self.chunks[index])
            index += 1
        while index < len(self.chunks) and self.chunks[index].type == b'IDAT':
            data.append(self.chunks[index])
            index += 1
        bottom.extend(self.chunks[index:])

        for offset, chunk in enumerate(bottom):
            if chunk.type == b'IDAT':
                self.report.add(
                    'idat-not-contiguous',
                    "Чанк IDAT после конца непрерывной серии IDAT будет скопирован без изменений",
                    index + offset,
                )

        self.top_chunks = top
        self.data_chunks = data
        self.bottom_chunks = bottom
        return top, data, bottom

    def parse_header(self) -> IHDRHeader:
        """Находит IHDR среди чанков перед данными"""
        for chunk in self.top_chunks:
            if chunk.type == b'IHDR':
                self.header = parse_ihdr(chunk)
                return self.header
        raise PNGStructureError("Чанк IHDR не найден")

    def read_image_data(self) -> bytes:
        """Склеивает данные всех IDAT и распаковывает их"""
        if not self.data_chunks:
            raise PNGStructureError("Чанк IDAT не найден")
        compressed = concat_bytes(chunk.data for chunk in self.data_chunks)
        self.image_data = decompress_image_data(compressed)
        return self.image_data

    def split_scanlines(self) -> List[bytes]:
        """Делит распакованные данные на строки развёртки"""
        scanline_size = self.header.scanline_size
        remainder = len(self.image_data) % scanline_size
        if remainder:
            self.report.add(
                'trailing-bytes',
                f"Размер данных {len(self.image_data)} не кратен размеру строки {scanline_size}",
            )
        self.scanlines = split_bytes(self.image_data, scanline_size) if self.image_data else []
        return self.scanlines

    def validate_scanlines(self) -> ValidationReport:
        """Проверяет байт фильтра и длину каждой строки"""
        expected = self.header.scanline_size
        for index, scanline in enumerate(self.scanlines):
            filter_byte = scanline[0]
            if filter_byte > MAX_FILTER_TYPE:
                self.report.add(
                    'filter-byte',
                    f"Неверный байт фильтра в строке {index}: {filter_byte}",
                    index,
                )
            if len(scanline) != expected:
                self.report.add(
                    'scanline-length',
                    f"Неверная длина строки {index}: ожидается {expected}, получено {len(scanline)}",
                    index,
                )
        # При чередовании Adam7 число строк данных не равно высоте
        if self.header.interlace_method == INTERLACE_NONE and len(self.scanlines) != self.header.height:
            self.report.add(
                'row-count',
                f"Число строк {len(self.scanlines)} не совпадает с высотой в IHDR {self.header.height}",
            )
        return self.report

    def parse(self) -> List[bytes]:
        """Парсит весь PNG и возвращает список строк развёртки"""
        self.report = ValidationReport(self.strict)
        self.parse_chunks()
        self.classify_chunks()
        self.parse_header()
        self.read_image_data()
        self.split_scanlines()
        self.validate_scanlines()
        return self.scanlines

    @property
    def top_chunks_without_ihdr(self) -> List[Chunk]:
        return [chunk for chunk in self.top_chunks if chunk.type != b'IHDR']

    @property
    def expected_image_size(self) -> int:
        """Ожидаемый размер распакованных данных по заголовку (без чередования)"""
        if self.header is None:
            return 0
        return self.header.height * self.header.scanline_size

"""
Разделение PNG на горизонтальные полосы.
Каждая полоса сохраняется как самостоятельный корректный PNG файл.
"""

import os
from typing import Iterator, List

from byte_utils import split_list
from png_parser import PNGParser, ValidationReport
from png_writer import PNGWriter

DEFAULT_MAX_ROWS_PER_FILE = 4096


def band_file_name(source_name: str, index: int) -> str:
    """Имя файла полосы: image.png -> image__split00.png"""
    stem, _ = os.path.splitext(os.path.basename(source_name or 'image.png'))
    return f'{stem or "image"}__split{index:02d}.png'


class PNGSplitter:
    """Делит PNG на полосы не более max_rows_per_file строк"""

    def __init__(self, buffer: bytes, max_rows_per_file: int = DEFAULT_MAX_ROWS_PER_FILE,
                 strict: bool = False, compression_level: int = 6):
        self.parser = PNGParser(buffer, strict=strict)
        self.max_rows_per_file = max_rows_per_file
        self.compression_level = compression_level
        self._groups = None

    def _prepare(self) -> List[List[bytes]]:
        if self._groups is None:
            scanlines = self.parser.parse()
            # Пустое изображение даёт одну пустую группу, поэтому результат всегда не пуст
            self._groups = split_list(scanlines, self.max_rows_per_file)
        return self._groups

    @property
    def report(self) -> ValidationReport:
        self._prepare()
        return self.parser.report

    @property
    def band_count(self) -> int:
        return len(self._prepare())

    @property
    def band_heights(self) -> List[int]:
        return [len(group) for group in self._prepare()]

    def _writer(self) -> PNGWriter:
        return PNGWriter(
            self.parser.header,
            top_chunks=self.parser.top_chunks,
            bottom_chunks=self.parser.bottom_chunks,
            signature=self.parser.signature,
            compression_level=self.compression_level,
        )

    def iter_bands(self) -> Iterator[bytes]:
        """Отдаёт PNG полосы по одной, в порядке сверху вниз"""
        groups = self._prepare()
        writer = self._writer()
        for group in groups:
            yield writer.build(group)

    def get_band(self, index: int) -> bytes:
        groups = self._prepare()
        if index < 0 or index >= len(groups):
            raise IndexError(f"Неверный номер полосы {index}. Доступно: 0-{len(groups) - 1}")
        return self._writer().build(groups[index])

    def split(self) -> List[bytes]:
        return list(self.iter_bands())


def split_png(buffer: bytes, max_rows_per_file: int = DEFAULT_MAX_ROWS_PER_FILE,
              strict: bool = False) -> List[bytes]:
    """Делит PNG на полосы и возвращает байты каждого нового файла"""
    return PNGSplitter(buffer, max_rows_per_file, strict=strict).split()

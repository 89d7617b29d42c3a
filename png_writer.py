"""
Запись PNG файлов без использования готовых библиотек.
Собирает самостоятельный PNG из полосы строк развёртки исходного файла.
"""

import zlib
from typing import List, Sequence

from byte_utils import concat_bytes
from png_chunks import PNG_SIGNATURE, Chunk, build_chunk
from png_errors import PNGCodecError
from png_header import IHDRHeader, build_ihdr


def compress_image_data(data: bytes, level: int = 6) -> bytes:
    """Сжимает данные строк развёртки для IDAT"""
    try:
        return zlib.compress(data, level)
    except zlib.error as e:
        raise PNGCodecError(f"Ошибка сжатия данных IDAT: {e}") from e


class PNGWriter:
    """Класс для записи PNG файлов из полос исходного изображения"""

    PNG_SIGNATURE = PNG_SIGNATURE

    def __init__(self, header: IHDRHeader, top_chunks: Sequence[Chunk] = (),
                 bottom_chunks: Sequence[Chunk] = (), signature: bytes = PNG_SIGNATURE,
                 compression_level: int = 6):
        self.header = header
        # IHDR всегда пишется заново
        self.top_chunks: List[Chunk] = [chunk for chunk in top_chunks if chunk.type != b'IHDR']
        self.bottom_chunks: List[Chunk] = list(bottom_chunks)
        self.signature = signature
        self.compression_level = compression_level

    def create_ihdr_chunk(self, height: int) -> bytes:
        """Создаёт IHDR chunk с исходными полями и новой высотой"""
        return build_ihdr(self.header, height=height)

    def create_idat_chunk(self, image_data: bytes) -> bytes:
        """Создаёт IDAT chunk (данные изображения)"""
        return build_chunk(b'IDAT', compress_image_data(image_data, self.compression_level))

    def build(self, scanlines: Sequence[bytes]) -> bytes:
        """
        Собирает PNG из строк развёртки:
        сигнатура, новый IHDR, чанки до данных, новый IDAT, чанки после данных.
        """
        parts = [
            self.signature,
            self.create_ihdr_chunk(len(scanlines)),
        ]
        parts.extend(chunk.bytes for chunk in self.top_chunks)
        parts.append(self.create_idat_chunk(concat_bytes(scanlines)))
        parts.extend(chunk.bytes for chunk in self.bottom_chunks)
        return concat_bytes(parts)

    def write(self, file_path: str, scanlines: Sequence[bytes]):
        """Записывает PNG файл"""
        with open(file_path, 'wb') as f:
            f.write(self.build(scanlines))

"""
Заголовок PNG (IHDR) и геометрия строк развёртки.
"""

import struct
from typing import Union

from png_chunks import Chunk, build_chunk
from png_errors import PNGStructureError, PNGValidationError

IHDR_SIZE = 13

VALID_BIT_DEPTHS = (1, 2, 4, 8, 16)

# Количество каналов на пиксель для каждого типа цвета
SAMPLES_PER_PIXEL = {
    0: 1,  # Grayscale
    2: 3,  # Truecolor (RGB)
    3: 1,  # Indexed (индекс в палитре)
    4: 2,  # Grayscale + alpha
    6: 4,  # Truecolor + alpha (RGBA)
}

INTERLACE_NONE = 0
INTERLACE_ADAM7 = 1


def samples_per_pixel(color_type: int) -> int:
    """Количество каналов на пиксель для типа цвета"""
    try:
        return SAMPLES_PER_PIXEL[color_type]
    except KeyError:
        raise PNGValidationError(f"Неизвестный тип цвета: {color_type}") from None


def get_scanline_size(width: int, bit_depth: int, color_type: int) -> int:
    """
    Размер строки развёртки в байтах: байт фильтра + данные пикселей.

    Каждая строка выравнивается до целого байта, поэтому для глубины
    1, 2 и 4 бита используется округление вверх, а не байты на пиксель.
    """
    bits_per_row = width * bit_depth * samples_per_pixel(color_type)
    return 1 + (bits_per_row + 7) // 8


class IHDRHeader:
    """Разобранный заголовок IHDR. Поля проверяются при создании."""

    FIELDS = (
        'width',
        'height',
        'bit_depth',
        'color_type',
        'compression_method',
        'filter_method',
        'interlace_method',
    )

    def __init__(self, width: int, height: int, bit_depth: int, color_type: int,
                 compression_method: int = 0, filter_method: int = 0, interlace_method: int = 0):
        for name, value in (('width', width), ('height', height)):
            if not 0 <= value <= 0xFFFFFFFF:
                raise PNGValidationError(f"Недопустимое значение {name}: {value}")
        if bit_depth not in VALID_BIT_DEPTHS:
            raise PNGValidationError(
                f"Недопустимая глубина цвета: {bit_depth}. Допустимо 1, 2, 4, 8 или 16"
            )
        if color_type not in SAMPLES_PER_PIXEL:
            raise PNGValidationError(
                f"Недопустимый тип цвета: {color_type}. Допустимо 0, 2, 3, 4 или 6"
            )
        if compression_method != 0:
            raise PNGValidationError(
                f"Недопустимый метод сжатия: {compression_method}. Поддерживается только 0"
            )
        if filter_method != 0:
            raise PNGValidationError(
                f"Недопустимый метод фильтрации: {filter_method}. Поддерживается только 0"
            )
        if interlace_method not in (INTERLACE_NONE, INTERLACE_ADAM7):
            raise PNGValidationError(
                f"Недопустимый метод чередования: {interlace_method}. Допустимо 0 или 1 (Adam7)"
            )

        self.width = width
        self.height = height
        self.bit_depth = bit_depth
        self.color_type = color_type
        self.compression_method = compression_method
        self.filter_method = filter_method
        self.interlace_method = interlace_method

    @classmethod
    def from_bytes(cls, payload: bytes) -> 'IHDRHeader':
        """Декодирует 13 байт данных IHDR"""
        if len(payload) != IHDR_SIZE:
            raise PNGStructureError(
                f"Неверная длина IHDR: {len(payload)} байт, ожидается {IHDR_SIZE}"
            )
        return cls(*struct.unpack('>IIBBBBB', bytes(payload)))

    def to_bytes(self) -> bytes:
        """Кодирует заголовок в 13 байт данных IHDR"""
        return struct.pack('>IIBBBBB', *self.as_tuple())

    def as_tuple(self) -> tuple:
        return tuple(getattr(self, name) for name in self.FIELDS)

    def as_dict(self) -> dict:
        return {name: getattr(self, name) for name in self.FIELDS}

    def replace(self, **changes) -> 'IHDRHeader':
        """Копия заголовка с заменёнными полями"""
        fields = self.as_dict()
        fields.update(changes)
        return IHDRHeader(**fields)

    @property
    def samples_per_pixel(self) -> int:
        return samples_per_pixel(self.color_type)

    @property
    def scanline_size(self) -> int:
        return get_scanline_size(self.width, self.bit_depth, self.color_type)

    def __eq__(self, other):
        if not isinstance(other, IHDRHeader):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def __hash__(self):
        return hash(self.as_tuple())

    def __repr__(self):
        fields = ', '.join(f'{name}={value}' for name, value in self.as_dict().items())
        return f'IHDRHeader({fields})'


def parse_ihdr(chunk: Union[Chunk, bytes]) -> IHDRHeader:
    """Разбирает чанк IHDR"""
    if not isinstance(chunk, Chunk):
        chunk = Chunk(chunk)
    if chunk.type != b'IHDR':
        raise PNGStructureError(f"Ожидался чанк IHDR, получен {chunk.type_name}")
    return IHDRHeader.from_bytes(chunk.data)


def build_ihdr(header: IHDRHeader = None, **fields) -> bytes:
    """Создаёт IHDR chunk из заголовка или из отдельных полей"""
    if header is None:
        header = IHDRHeader(**fields)
    elif fields:
        header = header.replace(**fields)
    return build_chunk(b'IHDR', header.to_bytes())

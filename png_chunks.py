"""
Чтение и запись чанков PNG.

Формат чанка: [длина u32][тип 4 байта][данные][CRC32 от типа и данных].
"""

from typing import List, Tuple, Union

from byte_utils import bytes_to_ascii, bytes_to_uint32, take_bytes, uint32_to_bytes
from png_crc import chunk_crc
from png_errors import PNGStructureError

PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'

# длина + тип + CRC
CHUNK_OVERHEAD = 12


class Chunk:
    """Неизменяемое представление одного чанка поверх его сырых байт"""

    __slots__ = ('_bytes', '_size', '_type', '_data', '_crc')

    def __init__(self, raw: bytes):
        raw = bytes(raw)
        if len(raw) < CHUNK_OVERHEAD:
            raise PNGStructureError(f"Чанк слишком короткий: {len(raw)} байт")
        fields = analyze_chunk(raw)
        if len(raw) != CHUNK_OVERHEAD + fields['size']:
            raise PNGStructureError(
                f"Длина чанка {len(raw)} не соответствует объявленному размеру {fields['size']}"
            )
        self._bytes = raw
        self._size = fields['size']
        self._type = fields['type']
        self._data = fields['data']
        self._crc = fields['crc']

    @classmethod
    def build(cls, chunk_type: Union[bytes, str], data: bytes) -> 'Chunk':
        return cls(build_chunk(chunk_type, data))

    @property
    def bytes(self):
        return self._bytes

    @property
    def size(self) -> int:
        return self._size

    @property
    def type(self):
        return self._type

    @property
    def type_name(self) -> str:
        return bytes_to_ascii(self._type)

    @property
    def data(self):
        return self._data

    @property
    def crc(self):
        return self._crc

    @property
    def crc_value(self) -> int:
        return bytes_to_uint32(self._crc)

    @property
    def computed_crc(self) -> int:
        return chunk_crc(self._type, self._data)

    @property
    def crc_ok(self) -> bool:
        return self.crc_value == self.computed_crc

    def __eq__(self, other):
        if not isinstance(other, Chunk):
            return NotImplemented
        return self._bytes == other._bytes

    def __hash__(self):
        return hash(self._bytes)

    def __repr__(self):
        return f'Chunk(type={self.type_name!r}, size={self._size})'


def _type_bytes(chunk_type: Union[bytes, str]) -> bytes:
    if isinstance(chunk_type, str):
        chunk_type = chunk_type.encode('ascii')
    chunk_type = bytes(chunk_type)
    if len(chunk_type) != 4:
        raise ValueError(f"Тип чанка должен занимать 4 байта: {chunk_type!r}")
    return chunk_type


def analyze_chunk(raw: bytes) -> dict:
    """Раскладывает байты чанка на size, type, data, crc без проверок"""
    size = bytes_to_uint32(raw)
    chunk_type = bytes(raw[4:8])
    _, rest = take_bytes(raw, 8)
    data, crc = take_bytes(rest, size)
    return {
        'size': size,
        'type': chunk_type,
        'data': data,
        'crc': crc,
    }


def build_chunk(chunk_type: Union[bytes, str], data: bytes) -> bytes:
    """Создаёт PNG chunk с контрольной суммой CRC32"""
    chunk_type = _type_bytes(chunk_type)
    data = bytes(data)
    crc_bytes = uint32_to_bytes(chunk_crc(chunk_type, data))
    return uint32_to_bytes(len(data)) + chunk_type + data + crc_bytes


def extract_chunk(data: bytes) -> Tuple[bytes, bytes]:
    """Отделяет первый чанк от остатка потока"""
    if len(data) < CHUNK_OVERHEAD:
        raise PNGStructureError(f"Неожиданный конец файла: осталось {len(data)} байт")
    size = bytes_to_uint32(data)
    total = CHUNK_OVERHEAD + size
    if len(data) < total:
        raise PNGStructureError(
            f"Чанк обрезан: объявлено {size} байт данных, доступно {len(data) - CHUNK_OVERHEAD}"
        )
    return take_bytes(data, total)


def extract_chunks(data: bytes) -> List[bytes]:
    """Разбирает поток чанков (после сигнатуры) в порядке следования"""
    chunks = []
    rest = bytes(data)
    while rest:
        chunk, rest = extract_chunk(rest)
        chunks.append(chunk)
    return chunks


def split_signature(buffer: bytes) -> Tuple[bytes, bytes]:
    return take_bytes(buffer, len(PNG_SIGNATURE))


def has_png_signature(buffer: bytes) -> bool:
    return bytes(buffer[:len(PNG_SIGNATURE)]) == PNG_SIGNATURE

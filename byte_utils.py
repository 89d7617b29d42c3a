"""
Вспомогательные функции для работы с байтовыми последовательностями.
Одна семантика граничных случаев для всех модулей PNG.
"""

import struct
from typing import Iterable, List, Sequence, Tuple, TypeVar

T = TypeVar('T')


def take_bytes(buf: bytes, count: int) -> Tuple[bytes, bytes]:
    """
    Делит буфер по смещению count.

    Если count больше длины буфера, возвращается (buf, b''),
    если count <= 0, возвращается (b'', buf).
    """
    if count <= 0:
        return b'', bytes(buf)
    return bytes(buf[:count]), bytes(buf[count:])


def concat_bytes(buffers: Iterable[bytes]) -> bytes:
    """Склеивает буферы в один, сохраняя порядок"""
    return b''.join(buffers)


def uint32_to_bytes(value: int) -> bytes:
    """Кодирует 32-битное беззнаковое число (big-endian)"""
    if not 0 <= value <= 0xFFFFFFFF:
        raise ValueError(f"Число вне диапазона uint32: {value}")
    return struct.pack('>I', value)


def bytes_to_uint32(data: bytes) -> int:
    """Читает 32-битное беззнаковое число (big-endian) из первых 4 байт"""
    if len(data) < 4:
        raise ValueError(f"Для uint32 нужно 4 байта, получено {len(data)}")
    return struct.unpack('>I', bytes(data[:4]))[0]


def bytes_to_ascii(data: bytes) -> str:
    """Один байт - один символ (только для типов чанков)"""
    return ''.join(chr(b) for b in data)


def ascii_to_bytes(text: str) -> bytes:
    """Один символ - один байт (только для типов чанков)"""
    return text.encode('ascii')


def bytes_to_hex(data: bytes) -> List[str]:
    """Список двузначных hex строк для каждого байта"""
    return [f'{b:02x}' for b in data]


def format_hex(data: bytes) -> str:
    """Hex строка через пробел, например '89 50 4e 47'"""
    return ' '.join(bytes_to_hex(data))


def split_bytes(buf: bytes, size: int) -> List[bytes]:
    """
    Делит буфер на куски по size байт (последний может быть короче).
    При size <= 0 весь буфер - один кусок.
    """
    if size <= 0:
        return [bytes(buf)]
    return [bytes(buf[i:i + size]) for i in range(0, len(buf), size)]


def split_list(items: Sequence[T], size: int) -> List[List[T]]:
    """
    Делит последовательность на группы не более size элементов.
    При size <= 0 все элементы - одна группа; пустой вход даёт [[]].
    """
    items = list(items)
    if size <= 0 or len(items) <= size:
        return [items]
    return [items[i:i + size] for i in range(0, len(items), size)]

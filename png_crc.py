"""
CRC-32 (полином 0xEDB88320), как в zlib и спецификации PNG.
"""

from typing import Tuple

CRC_POLYNOMIAL = 0xEDB88320


def _make_crc_table() -> Tuple[int, ...]:
    """Таблица CRC для всех 8-битных значений"""
    crc_table = []
    for n in range(256):
        crc = n
        for _ in range(8):
            if crc & 1:
                crc = (crc >> 1) ^ CRC_POLYNOMIAL
            else:
                crc >>= 1
        crc_table.append(crc)
    return tuple(crc_table)


CRC_TABLE = _make_crc_table()


def update_crc(crc: int, data: bytes) -> int:
    """Прогоняет байты через регистр CRC (без начальной и финальной инверсии)"""
    crc &= 0xFFFFFFFF
    for byte in data:
        crc = CRC_TABLE[(crc ^ byte) & 0xFF] ^ (crc >> 8)
    return crc


def crc32(data: bytes) -> int:
    """Вычисляет CRC32 контрольную сумму"""
    return update_crc(0xFFFFFFFF, data) ^ 0xFFFFFFFF


def chunk_crc(chunk_type: bytes, data: bytes) -> int:
    """CRC чанка считается по типу и данным (без поля длины)"""
    return update_crc(update_crc(0xFFFFFFFF, chunk_type), data) ^ 0xFFFFFFFF

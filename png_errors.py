"""
Исключения обработки PNG.
"""


class PNGError(ValueError):
    """Базовая ошибка обработки PNG"""


class PNGStructureError(PNGError):
    """Повреждённая структура файла: обрезанный чанк, нет IHDR или IDAT и т.п."""


class PNGCodecError(PNGError):
    """Ошибка сжатия или распаковки данных изображения (zlib)"""


class PNGValidationError(PNGError):
    """Недопустимое значение поля заголовка"""

"""
Flask веб-приложение для разделения PNG файлов на горизонтальные полосы
"""

from flask import Flask, request, jsonify, send_file, render_template, Response
import base64
import io
import json
from png_errors import PNGError
from png_inspector import chunk_summary, inspect_png
from png_splitter import DEFAULT_MAX_ROWS_PER_FILE, PNGSplitter, band_file_name

app = Flask(__name__)
app.config['MAX_CONTENT_LENGTH'] = 64 * 1024 * 1024  # 64MB максимум
app.config['MAX_ROWS_PER_FILE'] = DEFAULT_MAX_ROWS_PER_FILE
app.config['STRICT_SCANLINES'] = False


def read_uploaded_png():
    """Возвращает (имя, байты) загруженного файла или (None, ответ с ошибкой)"""
    if 'file' not in request.files:
        return None, (jsonify({'error': 'Файл не загружен'}), 400)

    file = request.files['file']
    if file.filename == '':
        return None, (jsonify({'error': 'Файл не выбран'}), 400)

    return (file.filename, file.read()), None


def read_int_field(name):
    """Возвращает (число или None, None) или (None, ответ с ошибкой), если поле не число"""
    raw = request.form.get(name)
    if raw is None or raw.strip() == '':
        return None, None
    try:
        return int(raw), None
    except ValueError:
        return None, (jsonify({'error': f'Неверное значение поля {name}: {raw}'}), 400)


def split_options():
    """
    Читает max_rows и strict из формы, подставляя значения из конфигурации.
    Возвращает ((max_rows, strict), None) или (None, ответ с ошибкой).
    """
    max_rows, error = read_int_field('max_rows')
    if error:
        return None, error
    if max_rows is None:
        max_rows = app.config['MAX_ROWS_PER_FILE']
    strict = request.form.get('strict')
    if strict is None:
        strict = app.config['STRICT_SCANLINES']
    else:
        strict = strict.lower() in ('1', 'true', 'yes', 'on')
    return (max_rows, strict), None


def to_data_url(png_bytes: bytes) -> str:
    image_base64 = base64.b64encode(png_bytes).decode('utf-8')
    return f'data:image/png;base64,{image_base64}'


def log_report(filename, report):
    for issue in report:
        app.logger.warning('%s: %s', filename, issue.message)


@app.route('/')
def index():
    """Главная страница"""
    return render_template('index.html', max_rows=app.config['MAX_ROWS_PER_FILE'])


@app.route('/api/info', methods=['POST'])
def get_png_info():
    """Информация о PNG: заголовок, чанки и количество строк"""
    upload, error = read_uploaded_png()
    if error:
        return error
    filename, data = upload
    options, error = split_options()
    if error:
        return error
    max_rows, _ = options

    try:
        splitter = PNGSplitter(data, max_rows)
        band_count = splitter.band_count
        header = splitter.parser.header
        return jsonify({
            'header': header.as_dict(),
            'chunks': chunk_summary(data),
            'scanline_size': header.scanline_size,
            'row_count': len(splitter.parser.scanlines),
            'band_count': band_count,
            'issues': [issue.as_dict() for issue in splitter.report],
        })
    except PNGError as e:
        return jsonify({'error': f'Ошибка парсинга: {str(e)}'}), 400
    except Exception as e:
        app.logger.exception('Ошибка парсинга %s', filename)
        return jsonify({'error': f'Ошибка парсинга: {str(e)}'}), 500


@app.route('/api/inspect', methods=['POST'])
def inspect():
    """Текстовый отчёт о чанках PNG"""
    upload, error = read_uploaded_png()
    if error:
        return error
    filename, data = upload

    try:
        return jsonify({'report': inspect_png(data)})
    except PNGError as e:
        return jsonify({'error': f'Ошибка парсинга: {str(e)}'}), 400
    except Exception as e:
        app.logger.exception('Ошибка анализа %s', filename)
        return jsonify({'error': f'Ошибка обработки: {str(e)}'}), 500


@app.route('/api/split', methods=['POST'])
def split():
    """Делит PNG на полосы и возвращает их в base64"""
    upload, error = read_uploaded_png()
    if error:
        return error
    filename, data = upload
    options, error = split_options()
    if error:
        return error
    max_rows, strict = options

    try:
        splitter = PNGSplitter(data, max_rows, strict=strict)
        bands = splitter.split()
        log_report(filename, splitter.report)

        return jsonify({
            'files': [
                {'name': band_file_name(filename, index), 'height': height, 'image': to_data_url(band)}
                for index, (band, height) in enumerate(zip(bands, splitter.band_heights))
            ],
            'file_count': len(bands),
            'issues': [issue.as_dict() for issue in splitter.report],
        })
    except PNGError as e:
        return jsonify({'error': f'Ошибка обработки: {str(e)}'}), 400
    except Exception as e:
        app.logger.exception('Ошибка разделения %s', filename)
        return jsonify({'error': f'Ошибка обработки: {str(e)}'}), 500


@app.route('/api/split-stream', methods=['POST'])
def split_stream():
    """Делит PNG на полосы с отправкой прогресса через Server-Sent Events"""
    upload, error = read_uploaded_png()
    if error:
        return error
    filename, data = upload
    # Параметры формы читаются до начала генерации, пока доступен request
    options, error = split_options()
    if error:
        return error
    max_rows, strict = options

    def generate():
        try:
            splitter = PNGSplitter(data, max_rows, strict=strict)
            total = splitter.band_count
            log_report(filename, splitter.report)

            yield f"data: {json.dumps({'type': 'progress', 'done': 0, 'total': total})}\n\n"

            for index, band in enumerate(splitter.iter_bands()):
                yield f"data: {json.dumps({'type': 'band', 'index': index, 'name': band_file_name(filename, index), 'image': to_data_url(band)})}\n\n"
                yield f"data: {json.dumps({'type': 'progress', 'done': index + 1, 'total': total})}\n\n"

            issues = [issue.as_dict() for issue in splitter.report]
            yield f"data: {json.dumps({'type': 'complete', 'file_count': total, 'issues': issues})}\n\n"

        except PNGError as e:
            yield f"data: {json.dumps({'type': 'error', 'error': str(e)})}\n\n"
        except Exception as e:
            app.logger.exception('Ошибка разделения %s', filename)
            yield f"data: {json.dumps({'type': 'error', 'error': str(e)})}\n\n"

    response = Response(generate(), mimetype='text/event-stream')
    response.headers['Cache-Control'] = 'no-cache'
    response.headers['X-Accel-Buffering'] = 'no'
    return response


@app.route('/api/band', methods=['POST'])
def extract_band():
    """Возвращает одну полосу как PNG файл"""
    upload, error = read_uploaded_png()
    if error:
        return error
    filename, data = upload

    band_index, error = read_int_field('band_index')
    if error:
        return error
    if band_index is None:
        return jsonify({'error': 'Не указан номер полосы'}), 400
    options, error = split_options()
    if error:
        return error
    max_rows, strict = options

    try:
        splitter = PNGSplitter(data, max_rows, strict=strict)
        if band_index < 0 or band_index >= splitter.band_count:
            return jsonify({'error': f'Неверный номер полосы. Доступно: 0-{splitter.band_count - 1}'}), 400

        band = splitter.get_band(band_index)
        return send_file(
            io.BytesIO(band),
            mimetype='image/png',
            as_attachment=True,
            download_name=band_file_name(filename, band_index)
        )
    except PNGError as e:
        return jsonify({'error': f'Ошибка обработки: {str(e)}'}), 400
    except Exception as e:
        app.logger.exception('Ошибка извлечения полосы %s из %s', band_index, filename)
        return jsonify({'error': f'Ошибка обработки: {str(e)}'}), 500


if __name__ == '__main__':
    # Для Docker используем 0.0.0.0, чтобы принимать подключения извне
    app.run(debug=True, host='0.0.0.0', port=5000)

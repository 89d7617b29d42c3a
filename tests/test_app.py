"""
Тесты для app.py (Flask приложение)
"""
import pytest
import io
import json
import base64
from app import app
from png_chunks import Chunk, extract_chunks
from png_header import parse_ihdr


@pytest.fixture
def client():
    """Фикстура для тестового клиента Flask"""
    app.config['TESTING'] = True
    app.config['MAX_ROWS_PER_FILE'] = 4096
    app.config['STRICT_SCANLINES'] = False
    with app.test_client() as client:
        yield client


def upload(data, name='test.png', **form):
    form['file'] = (io.BytesIO(data), name)
    return form


def band_height(png_bytes):
    return parse_ihdr(Chunk(extract_chunks(png_bytes[8:])[0])).height


class TestApp:
    """Тесты для Flask приложения"""

    def test_index_page(self, client):
        """Тест главной страницы"""
        response = client.get('/')
        assert response.status_code == 200
        assert b'<html' in response.data or b'<!DOCTYPE' in response.data

    def test_info_endpoint_no_file(self, client):
        """Тест /api/info без файла"""
        response = client.post('/api/info')
        assert response.status_code == 400
        data = response.get_json()
        assert 'error' in data

    def test_info_endpoint_empty_file(self, client):
        """Тест /api/info с пустой формой"""
        response = client.post('/api/info', data={})
        assert response.status_code == 400

    def test_info_endpoint(self, client, png_factory):
        response = client.post('/api/info', data=upload(png_factory(3, 10), max_rows='4'))
        assert response.status_code == 200
        data = response.get_json()
        assert data['header']['width'] == 3
        assert data['header']['height'] == 10
        assert data['scanline_size'] == 4
        assert data['row_count'] == 10
        assert data['band_count'] == 3
        assert [chunk['type'] for chunk in data['chunks']] == ['IHDR', 'IDAT', 'IEND']
        assert data['issues'] == []

    def test_info_endpoint_invalid_png(self, client):
        response = client.post('/api/info', data=upload(b'\x89PNG\r\n\x1a\n\x00\x00'))
        assert response.status_code == 400
        assert 'error' in response.get_json()

    def test_inspect_endpoint(self, client, one_pixel_png):
        response = client.post('/api/inspect', data=upload(one_pixel_png))
        assert response.status_code == 200
        assert 'Scanline Size: 2' in response.get_json()['report']

    def test_inspect_endpoint_no_file(self, client):
        response = client.post('/api/inspect')
        assert response.status_code == 400

    def test_split_endpoint(self, client, png_factory):
        response = client.post('/api/split', data=upload(png_factory(2, 5), name='bands.png', max_rows='2'))
        assert response.status_code == 200
        data = response.get_json()
        assert data['file_count'] == 3
        assert [item['name'] for item in data['files']] == [
            'bands__split00.png', 'bands__split01.png', 'bands__split02.png',
        ]
        assert [item['height'] for item in data['files']] == [2, 2, 1]

        prefix = 'data:image/png;base64,'
        assert all(item['image'].startswith(prefix) for item in data['files'])
        first = base64.b64decode(data['files'][0]['image'][len(prefix):])
        assert band_height(first) == 2

    def test_split_endpoint_uses_config(self, client, png_factory):
        app.config['MAX_ROWS_PER_FILE'] = 1
        response = client.post('/api/split', data=upload(png_factory(2, 4)))
        assert response.get_json()['file_count'] == 4

    def test_split_endpoint_strict(self, client, png_factory):
        rows = [b'\x00\x00\x00', b'\x08\x00\x00']
        data = png_factory(2, 2, rows=rows)

        response = client.post('/api/split', data=upload(data))
        assert response.status_code == 200
        assert [issue['code'] for issue in response.get_json()['issues']] == ['filter-byte']

        response = client.post('/api/split', data=upload(data, strict='true'))
        assert response.status_code == 400

    def test_split_endpoint_invalid_max_rows(self, client, png_factory):
        """Нечисловое max_rows - ошибка, а не значение по умолчанию"""
        response = client.post('/api/split', data=upload(png_factory(2, 3), max_rows='abc'))
        assert response.status_code == 400
        assert 'max_rows' in response.get_json()['error']

    def test_info_endpoint_invalid_max_rows(self, client, png_factory):
        response = client.post('/api/info', data=upload(png_factory(2, 3), max_rows='1.5'))
        assert response.status_code == 400

    def test_split_stream_invalid_max_rows(self, client, png_factory):
        response = client.post('/api/split-stream', data=upload(png_factory(2, 3), max_rows='abc'))
        assert response.status_code == 400

    def test_split_endpoint_no_file(self, client):
        response = client.post('/api/split')
        assert response.status_code == 400

    def test_split_stream_endpoint(self, client, png_factory):
        response = client.post('/api/split-stream', data=upload(png_factory(2, 3), max_rows='1'))
        assert response.status_code == 200
        assert response.mimetype == 'text/event-stream'

        events = [
            json.loads(line[len('data: '):])
            for line in response.get_data(as_text=True).split('\n')
            if line.startswith('data: ')
        ]
        assert [event['index'] for event in events if event['type'] == 'band'] == [0, 1, 2]
        assert events[-1]['type'] == 'complete'
        assert events[-1]['file_count'] == 3

    def test_split_stream_error(self, client):
        response = client.post('/api/split-stream', data=upload(b'not a png at all'))
        text = response.get_data(as_text=True)
        assert '"type": "error"' in text

    def test_band_endpoint(self, client, png_factory):
        response = client.post('/api/band', data=upload(png_factory(2, 5), name='x.png', max_rows='2', band_index='2'))
        assert response.status_code == 200
        assert response.mimetype == 'image/png'
        assert 'x__split02.png' in response.headers['Content-Disposition']
        assert band_height(response.data) == 1

    def test_band_endpoint_no_index(self, client, one_pixel_png):
        response = client.post('/api/band', data=upload(one_pixel_png))
        assert response.status_code == 400

    def test_band_endpoint_malformed_index(self, client, one_pixel_png):
        """Нечисловой номер полосы отличается от отсутствующего"""
        malformed = client.post('/api/band', data=upload(one_pixel_png, band_index='first'))
        missing = client.post('/api/band', data=upload(one_pixel_png))
        assert malformed.status_code == 400
        assert missing.status_code == 400
        assert 'band_index' in malformed.get_json()['error']
        assert malformed.get_json()['error'] != missing.get_json()['error']

    def test_band_endpoint_bad_index(self, client, one_pixel_png):
        response = client.post('/api/band', data=upload(one_pixel_png, band_index='5'))
        assert response.status_code == 400

    def test_404_page(self, client):
        """Тест несуществующей страницы"""
        response = client.get('/nonexistent')
        assert response.status_code == 404

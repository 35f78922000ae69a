"""Unit tests for filedrop.api.modules.files.service."""
import os
from pathlib import Path

import pytest

from filedrop.api.config import APIConfig
from filedrop.api.errors import (
    FileNotFound,
    InvalidInputError,
    NameConflictError,
    StorageIOError,
)
from filedrop.api.modules.files.service import FileService, content_disposition
from filedrop.api.storage import LocalStorage
from filedrop.observability.metrics import REGISTRY


def _operation_count(operation, outcome):
    labels = {'operation': operation, 'outcome': outcome}
    return REGISTRY.get_sample_value('filedrop_file_operations_total', labels) or 0.0


@pytest.fixture
def service(storage_root, fixed_clock):
    config = APIConfig(storage_root=storage_root)
    return FileService(config, LocalStorage(storage_root), clock=fixed_clock)


class TestUpload:
    """Tests for FileService.upload_file."""

    def test_upload_writes_timestamped_file(self, service, storage_root):
        result = service.upload_file('report.pdf', b'%PDF-1.4')
        assert result == {
            'success': True,
            'message': 'File uploaded successfully',
            'fileName': 'report_1000.pdf',
            'originalName': 'report.pdf',
            'size': 8,
        }
        assert (storage_root / 'report_1000.pdf').read_bytes() == b'%PDF-1.4'

    def test_upload_creates_missing_root(self, tmp_path, fixed_clock):
        root = tmp_path / 'not' / 'yet'
        service = FileService(APIConfig(storage_root=root), LocalStorage(root), clock=fixed_clock)
        service.upload_file('a.txt', b'a')
        assert (root / 'a_1000.txt').exists()

    def test_same_name_twice_gets_distinct_storage_names(self, service):
        first = service.upload_file('a.txt', b'1')
        second = service.upload_file('a.txt', b'2')
        assert first['fileName'] != second['fileName']

    @pytest.mark.parametrize('sent', ['C:\\docs\\report.pdf', '/home/me/report.pdf'])
    def test_client_path_is_dropped_from_both_names(self, service, storage_root, sent):
        result = service.upload_file(sent, b'pdf')
        assert result['fileName'] == 'report_1000.pdf'
        assert result['originalName'] == 'report.pdf'
        listed = service.list_files()['files']
        assert [f['originalName'] for f in listed] == [result['originalName']]

    def test_empty_file_is_accepted(self, service, storage_root):
        result = service.upload_file('empty.txt', b'')
        assert result['size'] == 0
        assert (storage_root / 'empty_1000.txt').read_bytes() == b''

    @pytest.mark.parametrize('name,data', [(None, None), ('', b'x'), ('a.txt', None), ('C:\\', b'x')])
    def test_missing_file_is_invalid(self, service, storage_root, name, data):
        with pytest.raises(InvalidInputError) as exc_info:
            service.upload_file(name, data)
        assert exc_info.value.status_code == 400
        assert exc_info.value.message == 'No file received'
        assert list(storage_root.iterdir()) == []

    def test_upload_limit(self, storage_root, fixed_clock):
        config = APIConfig(storage_root=storage_root, max_upload_bytes=4)
        service = FileService(config, LocalStorage(storage_root), clock=fixed_clock)
        with pytest.raises(InvalidInputError):
            service.upload_file('big.bin', b'12345')
        assert list(storage_root.iterdir()) == []
        assert service.upload_file('ok.bin', b'1234')['size'] == 4

    def test_write_failure_is_storage_error(self, service, monkeypatch):
        def fail(name, data):
            raise PermissionError('read-only filesystem')

        monkeypatch.setattr(service.storage, 'write', fail)
        with pytest.raises(StorageIOError) as exc_info:
            service.upload_file('a.txt', b'a')
        assert exc_info.value.status_code == 500
        assert exc_info.value.message == 'Error uploading file'


class TestList:
    """Tests for FileService.list_files."""

    def test_missing_root_is_empty(self, tmp_path):
        root = tmp_path / 'missing'
        service = FileService(APIConfig(storage_root=root), LocalStorage(root))
        assert service.list_files() == {'success': True, 'files': []}

    def test_lists_display_names_newest_first(self, service, storage_root):
        (storage_root / 'old_1000.txt').write_bytes(b'old')
        (storage_root / 'new_2000.txt').write_bytes(b'newer')
        os.utime(storage_root / 'old_1000.txt', (1_600_000_000, 1_600_000_000))
        os.utime(storage_root / 'new_2000.txt', (1_700_000_000, 1_700_000_000))

        result = service.list_files()
        assert result['success'] is True
        assert [f['fileName'] for f in result['files']] == ['new_2000.txt', 'old_1000.txt']
        newest = result['files'][0]
        assert newest['originalName'] == 'new.txt'
        assert newest['size'] == 5
        assert newest['uploadDate'] == '2023-11-14T22:13:20.000Z'

    def test_list_is_stable_without_changes(self, service, storage_root):
        for i in range(5):
            (storage_root / f'f{i}_{i}.txt').write_bytes(b'x' * i)
            os.utime(storage_root / f'f{i}_{i}.txt', (1_600_000_000 + i, 1_600_000_000 + i))
        assert service.list_files() == service.list_files()

    def test_list_failure_is_storage_error(self, service, monkeypatch):
        def fail():
            raise PermissionError('denied')

        monkeypatch.setattr(service.storage, 'list_entries', fail)
        with pytest.raises(StorageIOError):
            service.list_files()


class TestRename:
    """Tests for FileService.rename_file."""

    def test_rename(self, service, storage_root):
        (storage_root / 'report_1000.pdf').write_bytes(b'pdf')
        result = service.rename_file('report_1000.pdf', 'final report!')
        assert result == {
            'success': True,
            'message': 'File renamed successfully',
            'oldFileName': 'report_1000.pdf',
            'newFileName': 'final_report__1000.pdf',
            'newDisplayName': 'final_report_.pdf',
        }
        assert not (storage_root / 'report_1000.pdf').exists()
        assert (storage_root / 'final_report__1000.pdf').read_bytes() == b'pdf'

    def test_sanitizes_path_characters(self, service, storage_root):
        (storage_root / 'x_5.txt').write_bytes(b'x')
        result = service.rename_file('x_5.txt', 'a/b*c')
        assert result['newFileName'] == 'a_b_c_5.txt'
        assert (storage_root / 'a_b_c_5.txt').exists()

    @pytest.mark.parametrize('current,new', [(None, 'a'), ('a_1.txt', None), ('', 'a'), ('a_1.txt', '')])
    def test_missing_fields(self, service, current, new):
        with pytest.raises(InvalidInputError) as exc_info:
            service.rename_file(current, new)
        assert exc_info.value.message == 'Current filename and new name are required'

    def test_not_found_creates_nothing(self, service, storage_root):
        with pytest.raises(FileNotFound):
            service.rename_file('ghost_1000.txt', 'new')
        assert list(storage_root.iterdir()) == []

    def test_conflict_leaves_both_files(self, service, storage_root):
        (storage_root / 'a_1000.txt').write_bytes(b'a')
        (storage_root / 'b_1000.txt').write_bytes(b'b')
        with pytest.raises(NameConflictError) as exc_info:
            service.rename_file('a_1000.txt', 'b')
        assert exc_info.value.status_code == 409
        assert (storage_root / 'a_1000.txt').read_bytes() == b'a'
        assert (storage_root / 'b_1000.txt').read_bytes() == b'b'

    def test_conflict_after_sanitization(self, service, storage_root):
        (storage_root / 'a_1000.txt').write_bytes(b'a')
        (storage_root / 'my_file_1000.txt').write_bytes(b'b')
        with pytest.raises(NameConflictError):
            service.rename_file('a_1000.txt', 'my file')

    def test_traversal_in_current_name_is_invalid(self, service):
        with pytest.raises(InvalidInputError):
            service.rename_file('../outside.txt', 'new')

    def test_rejections_are_counted_as_invalid(self, service):
        before = _operation_count('rename', 'invalid')
        with pytest.raises(InvalidInputError):
            service.rename_file('', 'new')
        with pytest.raises(InvalidInputError):
            service.rename_file('../outside.txt', 'new')
        assert _operation_count('rename', 'invalid') == before + 2


class TestDownload:
    """Tests for FileService.download_file."""

    def test_download(self, service, storage_root):
        (storage_root / 'report_1000.pdf').write_bytes(b'\x00\x01pdf')
        data, display_name = service.download_file('report_1000.pdf')
        assert data == b'\x00\x01pdf'
        assert display_name == 'report.pdf'

    def test_missing(self, service):
        with pytest.raises(FileNotFound):
            service.download_file('nope_1.txt')

    def test_traversal_is_invalid(self, service):
        before = _operation_count('download', 'invalid')
        with pytest.raises(InvalidInputError):
            service.download_file('../secret')
        assert _operation_count('download', 'invalid') == before + 1

    def test_read_failure_is_storage_error(self, service, storage_root, monkeypatch):
        (storage_root / 'a_1.txt').write_bytes(b'a')

        def fail(name):
            raise PermissionError('denied')

        monkeypatch.setattr(service.storage, 'read', fail)
        with pytest.raises(StorageIOError):
            service.download_file('a_1.txt')


class TestContentDisposition:
    """Tests for the download header builder."""

    def test_ascii(self):
        assert content_disposition('report.pdf') == 'attachment; filename="report.pdf"'

    def test_quotes_are_escaped(self):
        assert content_disposition('a"b.txt') == 'attachment; filename="a\\"b.txt"'

    def test_non_ascii_adds_encoded_name(self):
        header = content_disposition('отчет.pdf')
        assert header.startswith('attachment; filename="')
        assert "filename*=UTF-8''%D0%BE%D1%82%D1%87%D0%B5%D1%82.pdf" in header
        header.encode('latin-1')

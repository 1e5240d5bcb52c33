import pytest

from shortlinks.dao.file import JsonFileStore, UrlRecordFileDAO


@pytest.fixture
def data_path(tmp_path):
    return tmp_path / 'data' / 'urls.json'


@pytest.fixture
def store(data_path):
    return JsonFileStore(data_path, lock_timeout_ms=200).initialize()


@pytest.fixture
def dao(store):
    return UrlRecordFileDAO(store=store, base_url='https://sho.rt')

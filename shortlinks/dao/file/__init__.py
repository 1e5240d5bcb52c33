from shortlinks.dao.file.json_store import JsonFileStore
from shortlinks.dao.file.url_record_file_dao import UrlRecordFileDAO


__all__ = [
    'JsonFileStore',
    'UrlRecordFileDAO',
]

from shortlinks.models.url_record_model import UrlRecordModel
from shortlinks.models.store_model import StoreModel


__all__ = [
    'UrlRecordModel',
    'StoreModel',
]

from typing import Any, TypeAlias


# Type aliases for Python dictionaries
AppConfig: TypeAlias = dict[str, Any]
StoreDocument: TypeAlias = dict[str, Any]
UrlRecordDocument: TypeAlias = dict[str, Any]

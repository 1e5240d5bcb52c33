from dataclasses import dataclass

from shortlinks.types import UrlRecordDocument


@dataclass(frozen=True)
class UrlRecordModel:
    """Represent a shortened URL mapping.

    Attributes:
        original (str):
            The original long URL that the short code redirects to.
        code (str):
            The unique short identifier representing the shortened URL.
        short (str):
            Public short URL, e.g. 'http://localhost:3000/r/ab12cd'.
        created_at (str):
            ISO 8601 UTC creation timestamp, e.g. '2025-10-15T00:00:00.000Z'.
        clicks (int):
            Number of registered redirects. Never negative, never decremented.

    Example:
        >>> record = UrlRecordModel(
        ...     original="https://example.com/article/123",
        ...     code="ab12cd",
        ...     short="http://localhost:3000/r/ab12cd",
        ...     created_at="2025-10-15T00:00:00.000Z",
        ... )
        >>> record.clicks
        0
        >>> record.to_document()['createdAt']
        '2025-10-15T00:00:00.000Z'
    """

    original: str
    code: str
    short: str
    created_at: str
    clicks: int = 0

    def to_document(self) -> UrlRecordDocument:
        """Return the persisted (JSON) representation of this record."""
        return {
            'original': self.original,
            'short': self.short,
            'code': self.code,
            'createdAt': self.created_at,
            'clicks': self.clicks,
        }

    @classmethod
    def from_document(cls, document: UrlRecordDocument) -> 'UrlRecordModel':
        """Build a record from its persisted representation.

        A missing 'clicks' field reads as 0 and a missing 'short' or 'createdAt'
        field reads as an empty string. Type and range checks are left to
        StoreModel.from_document(), which knows how to report corrupt data.
        """
        return cls(
            original=document['original'],
            code=document['code'],
            short=document.get('short', ''),
            created_at=document.get('createdAt', ''),
            clicks=document.get('clicks', 0),
        )

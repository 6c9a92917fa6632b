from .igdb import IgdbClient, igdb_client, category_where_clause

__all__ = [
    'IgdbClient',
    'igdb_client',
    'category_where_clause',
]

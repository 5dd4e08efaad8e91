"""
DUECh - Diccionario del uso del español de Chile.

Dictionary search and editorial backend:
- core: configuration, SQLite storage, schemas, vocabularies
- search: faceted search with match-type ranking, lookups, word of the day
- editorial: word mutations, notes, workflow rules
- auth: users, signed sessions, roles, account administration
- web: Flask JSON API
"""

__version__ = "0.1.0"

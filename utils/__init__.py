"""
Low-level helpers: SQLite access (utils.db) and image validation (utils.image_ops).
"""

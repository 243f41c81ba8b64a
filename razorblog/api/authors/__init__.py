# razorblog/api/authors/__init__.py

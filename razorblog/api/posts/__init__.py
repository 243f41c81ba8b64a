# razorblog/api/posts/__init__.py

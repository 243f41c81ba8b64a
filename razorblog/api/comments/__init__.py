# razorblog/api/comments/__init__.py

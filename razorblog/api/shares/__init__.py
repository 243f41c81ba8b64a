# razorblog/api/shares/__init__.py

# razorblog/api/health/__init__.py

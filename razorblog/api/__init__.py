# razorblog/api/__init__.py

# razorblog/core/__init__.py

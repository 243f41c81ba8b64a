# razorblog/migrations/__init__.py

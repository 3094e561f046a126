# schooldash/core/__init__.py

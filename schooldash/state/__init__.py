# schooldash/state/__init__.py

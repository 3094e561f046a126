# schooldash/pages/__init__.py

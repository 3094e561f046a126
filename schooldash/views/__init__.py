# schooldash/views/__init__.py

# schooldash/schemas/__init__.py

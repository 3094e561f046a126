# schooldash/services/__init__.py

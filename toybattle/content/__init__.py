# toybattle/content/__init__.py

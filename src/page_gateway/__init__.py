# 📖 page_gateway/__init__.py
"""
📖 Page Gateway: шлюз сторінок манґи з фолбеком через headless-браузер.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]

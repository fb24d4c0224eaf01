"""카테고리 매칭 엔진"""

__version__ = "1.0.0"

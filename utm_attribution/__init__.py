"""UTM attribution middleware for Starlette / FastAPI applications"""

__version__ = "0.1.0"

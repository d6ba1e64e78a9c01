# Routes package __init__.py - re-exports routers for main.py convenience
from .accounts import router as accounts_router
from .subjects import router as subjects_router
from .weeks import router as weeks_router
from .progress import router as progress_router

__all__ = ['accounts_router', 'subjects_router', 'weeks_router', 'progress_router']

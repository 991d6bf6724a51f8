from .report_routes import report_router

__all__ = ['report_router']

from .insw_routes import insw_router

__all__ = ['insw_router']

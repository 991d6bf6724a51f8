from .stock_opname_routes import stock_opname_router

__all__ = ['stock_opname_router']

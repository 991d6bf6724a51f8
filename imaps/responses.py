"""
API Response Models
===================

Standardized API response envelopes.
"""


class APIResponse:
    """Standard API response format"""

    @staticmethod
    def success(data=None, message="Success"):
        return {
            "status": "success",
            "message": message,
            "data": data
        }

    @staticmethod
    def failed(message="Error", errors=None):
        return {
            "status": "failed",
            "message": message,
            "errors": errors or []
        }

    @staticmethod
    def paginated(data, pagination, message="Success"):
        return {
            "status": "success",
            "message": message,
            "data": data,
            "pagination": pagination
        }

"""
Custom Exceptions untuk iMAPS Services
======================================

Definisi semua custom exceptions yang digunakan dalam business logic
"""

class IMAPSException(Exception):
    """Base exception untuk semua iMAPS errors"""
    def __init__(self, message, error_code=None, details=None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_errors(self):
        """Daftar error untuk failure envelope: [{field, code, message}]"""
        return [{
            'field': getattr(self, 'field', None),
            'code': self.error_code,
            'message': self.message
        }]

    def to_dict(self):
        return {
            'status': 'failed',
            'message': self.message,
            'errors': self.to_errors()
        }

class ValidationError(IMAPSException):
    """Error untuk validation failures"""
    def __init__(self, message, field=None, details=None, errors=None):
        super().__init__(message, 'VALIDATION_ERROR', details)
        self.field = field
        self.errors = errors

    def to_errors(self):
        if self.errors:
            return self.errors
        return super().to_errors()

class BusinessRuleError(IMAPSException):
    """Error untuk business rule violations"""
    def __init__(self, message, rule_code=None, details=None):
        super().__init__(message, rule_code or 'BUSINESS_RULE_ERROR', details)
        self.rule_code = rule_code

class StateConflictError(BusinessRuleError):
    """Error ketika transisi status tidak valid (mis. confirm opname yang bukan ACTIVE)"""
    def __init__(self, message, current_status=None, details=None):
        super().__init__(message, 'STATE_CONFLICT', details)
        self.current_status = current_status

class AuthenticationError(IMAPSException):
    """Error untuk authentication failures"""
    def __init__(self, message="Authentication failed", details=None):
        super().__init__(message, 'AUTHENTICATION_ERROR', details)

class AuthorizationError(IMAPSException):
    """Error untuk authorization failures"""
    def __init__(self, message="Access denied", required_role=None, details=None):
        super().__init__(message, 'AUTHORIZATION_ERROR', details)
        self.required_role = required_role

class CompanyContextError(IMAPSException):
    """Error ketika user tidak punya company_code yang valid"""
    def __init__(self, message="Company code is missing for this account", details=None):
        super().__init__(message, 'COMPANY_CODE_MISSING', details)
        self.field = 'company_code'

class INSWIntegrationError(IMAPSException):
    """Error untuk kegagalan transport / HTTP ke INSW"""
    def __init__(self, message, status_code=None, insw_response=None, details=None):
        super().__init__(message, 'INSW_INTEGRATION_ERROR', details)
        self.status_code = status_code
        self.insw_response = insw_response

class NotFoundError(IMAPSException):
    """Error ketika resource tidak ditemukan"""
    def __init__(self, resource_type, resource_id, details=None):
        message = f"{resource_type} with ID {resource_id} not found"
        super().__init__(message, 'NOT_FOUND', details)
        self.resource_type = resource_type
        self.resource_id = resource_id

class ConflictError(IMAPSException):
    """Error untuk resource conflicts"""
    def __init__(self, message, resource_type=None, field=None, details=None):
        super().__init__(message, 'CONFLICT_ERROR', details)
        self.resource_type = resource_type
        self.field = field

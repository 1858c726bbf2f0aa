class ApiException(Exception):
    """Base exception for API errors"""
    def __init__(self, status_code, message):
        self.status_code = status_code
        self.message = message
        super().__init__(self.message)

class BadRequestException(ApiException):
    """Exception for invalid request errors"""
    def __init__(self, message="Invalid request parameters"):
        super().__init__(400, message)

class ResourceNotFoundException(ApiException):
    """Exception for resource not found errors"""
    def __init__(self, resource_type, resource_id):
        message = f"{resource_type} {resource_id} not found"
        super().__init__(404, message)

class MethodNotAllowedException(ApiException):
    def __init__(self, method, path):
        super().__init__(405, f"Method {method} is not allowed on {path}")

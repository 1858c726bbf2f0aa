from .exceptions import ApiException, BadRequestException, MethodNotAllowedException, ResourceNotFoundException

__all__ = ["ApiException", "BadRequestException", "MethodNotAllowedException", "ResourceNotFoundException"]

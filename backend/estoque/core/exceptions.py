from enum import Enum
from typing import Any, Optional

from fastapi import HTTPException, status


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    EMAIL_ALREADY_REGISTERED = "EMAIL_ALREADY_REGISTERED"

    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"
    DUPLICATE_PRODUCT_CODE = "DUPLICATE_PRODUCT_CODE"
    PRODUCT_IN_USE = "PRODUCT_IN_USE"
    CATEGORY_NOT_FOUND = "CATEGORY_NOT_FOUND"
    DUPLICATE_CATEGORY = "DUPLICATE_CATEGORY"

    INVALID_QUANTITY = "INVALID_QUANTITY"
    INVALID_MOVEMENT = "INVALID_MOVEMENT"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    PERSISTENCE_FAILURE = "PERSISTENCE_FAILURE"


class AppException(HTTPException):
    status_code_default = status.HTTP_400_BAD_REQUEST
    error_code_default = ErrorCode.VALIDATION_ERROR
    message_default = "Operação inválida"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        error_code: Optional[ErrorCode] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            status_code=status_code or self.status_code_default,
            detail=message or self.message_default,
        )
        self.error_code = error_code or self.error_code_default
        self.details = details


class InvalidCredentials(AppException):
    status_code_default = status.HTTP_401_UNAUTHORIZED
    error_code_default = ErrorCode.INVALID_CREDENTIALS
    message_default = "Email ou senha incorretos"


class EmailAlreadyRegistered(AppException):
    error_code_default = ErrorCode.EMAIL_ALREADY_REGISTERED
    message_default = "Este email já está cadastrado"


class ProductNotFound(AppException):
    status_code_default = status.HTTP_404_NOT_FOUND
    error_code_default = ErrorCode.PRODUCT_NOT_FOUND
    message_default = "Produto não encontrado"


class DuplicateProductCode(AppException):
    status_code_default = status.HTTP_409_CONFLICT
    error_code_default = ErrorCode.DUPLICATE_PRODUCT_CODE
    message_default = "Já existe um produto com este código"


class ProductInUse(AppException):
    status_code_default = status.HTTP_409_CONFLICT
    error_code_default = ErrorCode.PRODUCT_IN_USE
    message_default = "Produto possui movimentações registradas; arquive-o em vez de excluir"


class CategoryNotFound(AppException):
    status_code_default = status.HTTP_404_NOT_FOUND
    error_code_default = ErrorCode.CATEGORY_NOT_FOUND
    message_default = "Categoria não encontrada"


class DuplicateCategory(AppException):
    status_code_default = status.HTTP_409_CONFLICT
    error_code_default = ErrorCode.DUPLICATE_CATEGORY
    message_default = "Já existe uma categoria com este nome"


class InvalidQuantity(AppException):
    error_code_default = ErrorCode.INVALID_QUANTITY
    message_default = "A quantidade deve ser maior que zero"


class InvalidMovement(AppException):
    error_code_default = ErrorCode.INVALID_MOVEMENT
    message_default = "Preencha todos os campos obrigatórios"


class InsufficientStock(AppException):
    error_code_default = ErrorCode.INSUFFICIENT_STOCK
    message_default = "Estoque insuficiente para esta operação"


class PersistenceFailure(AppException):
    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code_default = ErrorCode.PERSISTENCE_FAILURE
    message_default = "Erro ao registrar movimentação"

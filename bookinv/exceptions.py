class BookInvException(Exception):
    """系统基础异常类"""
    def __init__(self, message, code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        rv['code'] = self.code
        rv['success'] = False
        return rv

class ValidationError(BookInvException):
    """表单/参数校验错误 (发生在任何写操作之前)"""
    def __init__(self, message="Invalid data", payload=None):
        super().__init__(message, code=400, payload=payload)

class PermissionDenied(BookInvException):
    """权限不足"""
    def __init__(self, message="Access denied", payload=None):
        super().__init__(message, code=403, payload=payload)

class NotFoundError(BookInvException):
    """引用的记录不存在"""
    def __init__(self, message="Record not found", payload=None):
        super().__init__(message, code=404, payload=payload)

class InvalidStateError(BookInvException):
    """单据状态不允许该操作"""
    def __init__(self, message="Invalid state transition", payload=None):
        super().__init__(message, code=409, payload=payload)

class InsufficientStockError(BookInvException):
    """批次库存不足"""
    def __init__(self, message="Insufficient stock", payload=None):
        super().__init__(message, code=409, payload=payload)

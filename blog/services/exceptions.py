"""Domain-specific exceptions."""


class ServiceError(Exception):
    pass


class NotFound(ServiceError):
    """No record matched a lookup that expects exactly one."""


class NonUniqueResult(NotFound):
    """More than one record matched a lookup that expects exactly one."""

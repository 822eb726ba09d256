class AppError(Exception):
    """Base class for all application-level errors."""
    pass


class DomainError(AppError):
    """Base for domain logic errors."""
    pass

class InvalidDomainFormatError(DomainError):
    def __init__(self, domain: str):
        self.domain = domain
        self.message = f"The domain '{domain}' has an invalid format."
        super().__init__(self.message)

class SiteNotFoundError(DomainError):
    def __init__(self, domain: str):
        self.domain = domain
        self.message = f"Site '{domain}' not found."
        super().__init__(self.message)



class InfrastructureError(AppError):
    """Base for infrastructure-related errors (DB, API, etc)."""
    pass

class StoreError(InfrastructureError):
    """Any database failure raised while running a store operation."""
    def __init__(self, operation: str, detail: str = ""):
        self.operation = operation
        self.detail = detail
        self.message = f"Store operation '{operation}' failed: {detail}"
        super().__init__(self.message)

class SiteAlreadyExistsError(StoreError):
    def __init__(self, domain: str):
        self.domain = domain
        super().__init__("insert_site", f"site '{domain}' already exists")


from app.repositories.tenant.tenant_repository import TenantRepository

__all__ = ["TenantRepository"]

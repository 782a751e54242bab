from app.models.tenant.tenant import Tenant

__all__ = ["Tenant"]

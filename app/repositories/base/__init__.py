from app.repositories.base.base_repository import BaseRepository, TenantScopedRepository

__all__ = ["BaseRepository", "TenantScopedRepository"]

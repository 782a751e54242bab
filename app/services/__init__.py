# app/services/__init__.py
"""
Service layer root package.

Each subpackage implements application use-cases on top of:

- SQLAlchemy models (app.models.*)
- Repositories (app.repositories.*)
- Pydantic schemas (app.schemas.*)
- Common service infrastructure (app.services.base.*)

Services own the transaction: repositories flush, services commit or roll
back and report the outcome as a ServiceResult.
"""

# app/services/__init__.py
"""
Service layer root package.

Each subpackage implements fee engine use-cases on top of:

- SQLAlchemy models (app.models.*)
- Repositories (app.repositories.*)
- Pydantic schemas (app.schemas.*)
- Common service infrastructure (app.services.base.*)

Typical pattern for a service:

    class SomeService(BaseService[SomeRepository]):
        def some_use_case(self, scope, data) -> ServiceResult[Thing]:
            def _work() -> Thing:
                request = self._validate_input(SomeInput, data)
                ...
            return self._run("some use case", _work)
"""

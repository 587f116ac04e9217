"""Service layer for business logic.

Services encapsulate the business rules, keeping callers thin. This
separation provides:
- Clear business rules in one place
- Orchestration of multiple repositories
- Typed failures for every rule violation

Layer hierarchy:
    TripShareApp (validation + unit of work) -> Services -> Repositories

Services should:
- Receive their repositories and hasher at construction time
- Assume their input already passed services/validation.py
- Raise the exceptions defined next to them; never swallow them

Services should NOT:
- Directly execute SQL queries (use repositories)
- Commit or roll back (the unit of work owns the transaction)
"""

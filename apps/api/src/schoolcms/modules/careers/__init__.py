"""
Careers Module

Job postings shown on the school website, each visible only inside an
optional [starts_from, ends_at] window:
1. Creation with status resolved from the window (pending / active / inactive)
2. Partial updates; a changed window re-resolves the status
3. Soft delete (deactivate) and permanent delete
4. Creator / updater display names on every response

API Endpoints:
- GET /careers/active, GET /careers/pending, GET /careers/{id} - Public
- POST /careers, GET /careers, PUT /careers/{id} - Admin
- DELETE /careers/{id}, DELETE /careers/{id}/permanent - Admin
- POST /careers/update-statuses - Admin, rate limited

Background Jobs (via APScheduler):
- careers_reconcile_statuses: activates started careers and expires ended
  ones (every 5 minutes in development, hourly otherwise)
- careers_reconcile_statuses_daily: production-only midnight backup run
"""

from .jobs import register_career_jobs
from .router import router

__all__ = ["router", "register_career_jobs"]

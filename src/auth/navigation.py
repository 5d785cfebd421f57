"""Role-based page visibility and row scoping."""

from enum import Enum

from src.data.models import Role

from .session import Session


class Page(str, Enum):
    USERS = "users"
    SCHOOLS = "schools"
    RESULTS = "results"
    REPORTS = "reports"
    PROFILE = "profile"


PAGE_TITLES = {
    Page.USERS: "إدارة المستخدمين",
    Page.SCHOOLS: "إدارة المدارس",
    Page.RESULTS: "نتائج الاختبارات",
    Page.REPORTS: "التقارير",
    Page.PROFILE: "الملف الشخصي",
}

_ROLE_PAGES = {
    Role.ADMIN: (Page.USERS, Page.SCHOOLS, Page.RESULTS, Page.REPORTS),
    Role.MANAGER: (Page.SCHOOLS, Page.RESULTS),
    Role.SUPERVISOR: (Page.REPORTS,),
}


def visible_pages(session: Session) -> list[Page]:
    """Pages in menu order; the profile page is always last."""
    return list(_ROLE_PAGES.get(session.role, ())) + [Page.PROFILE]


def default_page(session: Session) -> Page:
    if session.role == Role.SUPERVISOR:
        return Page.REPORTS
    return Page.SCHOOLS


def can_access(session: Session, page: Page) -> bool:
    return Page(page) in visible_pages(session)


def scope_results(session: Session, rows: list[dict]) -> list[dict]:
    """Managers only see rows of their own school."""
    if not session.is_manager:
        return list(rows)
    return [r for r in rows if str(r.get("schoolNationalId", "")) == str(session.school_id)]


def scope_schools(session: Session, schools: list[dict]) -> list[dict]:
    if not session.is_manager:
        return list(schools)
    return [s for s in schools if str(s.get("nationalId", "")) == str(session.school_id)]

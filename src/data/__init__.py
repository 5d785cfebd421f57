from .errors import SchoolDataError, ValidationError, ConflictError, NotFoundError
from .models import School, ManagedUser, TestType, TestResult, ReportData
from .test_types import TEST_TYPES, TestTypeConfig, get_test_type

__all__ = [
    "SchoolDataError",
    "ValidationError",
    "ConflictError",
    "NotFoundError",
    "School",
    "ManagedUser",
    "TestType",
    "TestResult",
    "ReportData",
    "TEST_TYPES",
    "TestTypeConfig",
    "get_test_type",
]

from .controller import TestManager, Message
from .forms import initial_form, coerce_form, validate_payload
from .importer import ImportReport, run_import
from .listing import filter_rows, to_frame

__all__ = [
    "TestManager",
    "Message",
    "initial_form",
    "coerce_form",
    "validate_payload",
    "ImportReport",
    "run_import",
    "filter_rows",
    "to_frame",
]

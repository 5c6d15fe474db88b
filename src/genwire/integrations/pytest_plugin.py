from genwire._internal.integrations.pytest_plugin import (
    genwire_catalog,
    genwire_settings,
    pytest_report_header,
)

__all__ = ["genwire_catalog", "genwire_settings", "pytest_report_header"]

from tablesplit.reference.projects import (
    fetch_reference_data,
    parse_reference_csv,
    projects_by_developers,
)

__all__ = ["fetch_reference_data", "parse_reference_csv", "projects_by_developers"]

"""
Default authorization filters.

Turns an accessibility selector and the caller's authorized resources into
a plain filter expression, compiled like any client filter.
"""

from typing import Any, Dict, Iterable, Optional

from query_gateway.core.exceptions import InputError
from query_gateway.core.models import Accessibility


def build_accessibility_filter(
    accessibility: Accessibility,
    auth_field: str,
    authorized_resources: Iterable[str],
    all_resources: Optional[Iterable[str]] = None,
) -> Optional[Dict[str, Any]]:
    """
    Build the filter scoping a query to an accessibility selector.

    "Is not" is not a supported operator, so the unaccessible set is
    expressed as membership in the complement of the authorized resources.

    Args:
        accessibility: Which documents to include
        auth_field: Field holding each document's resource path
        authorized_resources: Resource paths the caller may access
        all_resources: Every resource path in the index (for UNACCESSIBLE)

    Returns:
        Filter expression, or None when no scoping applies
    """
    try:
        accessibility = Accessibility(accessibility)
    except ValueError as e:
        raise InputError(f"Invalid accessibility \"{accessibility}\"") from e
    if accessibility is Accessibility.ALL:
        return None

    authorized = list(authorized_resources)
    if accessibility is Accessibility.ACCESSIBLE:
        return {"in": {auth_field: authorized}}

    if all_resources is None:
        raise InputError("All resource paths are required for an unaccessible filter")
    authorized_set = set(authorized)
    return {"in": {auth_field: [r for r in all_resources if r not in authorized_set]}}

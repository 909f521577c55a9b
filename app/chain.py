"""
Request Chain Helpers

Host-side construction of chained requests: internal redirects and
sub-requests. Every new node re-enters the accounting start hook, exactly
like the initial request does.

The accounting core only reads these links; creating them is the host's job.
"""

from typing import Optional

from accounting.controller import AccountingController
from schemas.request import RequestNode


def internal_redirect(
    node: RequestNode,
    uri: str,
    controller: Optional[AccountingController] = None,
) -> RequestNode:
    """
    Continue node's transaction under a new URI.

    Args:
        node: Request being redirected; must be the end of its redirect sequence.
        uri: Target of the redirect.
        controller: If given, its start hook runs for the new node.

    Returns:
        The new request, now the tail of the sequence.
    """
    if node.next is not None:
        raise ValueError(f"{node!r} was already redirected to {node.next!r}")

    redirected = RequestNode(method=node.method, uri=uri, previous=node)
    node.next = redirected

    if controller is not None:
        controller.start(redirected)
    return redirected


def subrequest(
    node: RequestNode,
    uri: str,
    controller: Optional[AccountingController] = None,
) -> RequestNode:
    """Generate a sub-request of node (e.g. an include or a lookup)."""
    child = RequestNode(method="GET", uri=uri, parent=node)

    if controller is not None:
        controller.start(child)
    return child

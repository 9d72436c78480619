# engine/ancestors.py

from typing import Any, List


def ancestor_chain(target: Any) -> List[Any]:
    """
    Returns `[outermost locatable container, ..., target]`.

    The walk follows `parent` links for as long as the parent has a selector
    of its own. A page has none, so a chain never includes the page, and an
    element sitting directly on a page yields a chain of one.
    """
    chain = [target]
    node = target.parent
    while node is not None and getattr(node, "selector", None):
        chain.insert(0, node)
        node = node.parent
    return chain

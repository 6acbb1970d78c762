"""
Turn extracted nodes into lxml elements.

Nodes are raw byte slices of the source document. They may carry leading
whitespace, and namespace prefixes declared on an ancestor that was never
captured; recover mode tolerates both.
"""

from typing import Optional

from lxml import etree

from .exceptions import NodeParseError
from .logger import get_module_logger

logger = get_module_logger("elements")


def node_to_element(node: bytes, recover: bool = True) -> Optional[etree._Element]:
    """
    Parse one extracted node.

    Args:
        node: Node bytes as returned by the parser
        recover: Let lxml repair broken markup instead of failing

    Returns:
        The parsed element, or None if recover mode could not salvage anything

    Raises:
        NodeParseError: if recover is False and the node is not well-formed
    """
    parser = etree.XMLParser(recover=recover, resolve_entities=False, no_network=True)

    try:
        element = etree.fromstring(node.strip(), parser=parser)
    except etree.XMLSyntaxError as e:
        if recover:
            logger.warning(f"Could not recover node of {len(node)} bytes: {e}")
            return None
        raise NodeParseError(
            f"Node is not well-formed XML: {e}",
            node=node,
            details={"line": e.lineno, "column": e.offset}
        ) from e

    if element is None:
        logger.warning(f"Could not recover node of {len(node)} bytes")
    return element

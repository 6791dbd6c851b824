import re
from typing import Any, Callable, Dict, List, Optional

AXNode = Dict[str, Any]
Predicate = Callable[[AXNode], bool]

MEDIA_NAME_RE = re.compile(r"\.(jpe?g|png|gif|heic|mp4|mov)\b", re.IGNORECASE)


def find_ax_node(tree: Optional[AXNode], predicate: Predicate) -> Optional[AXNode]:
    """
    First node of an accessibility tree matching `predicate`.

    Nodes are visited pre-order (node, then its children in document order).
    Returns None for an empty tree or when nothing matches.
    """
    if not tree:
        return None

    # Explicit stack so deeply nested trees do not hit the recursion limit.
    stack = [tree]
    while stack:
        node = stack.pop()
        if predicate(node):
            return node
        children = node.get("children") or []
        stack.extend(reversed(children))
    return None


def is_media_preview(node: AXNode) -> bool:
    # Previews are unlabeled buttons whose accessible name is the file name.
    if node.get("role") != "button":
        return False
    return bool(MEDIA_NAME_RE.search(node.get("name") or ""))


def _ax_value(node: Dict[str, Any], key: str) -> str:
    return str((node.get(key) or {}).get("value") or "")


def ax_tree_from_cdp(nodes: List[Dict[str, Any]]) -> Optional[AXNode]:
    """
    Nest the flat node list of CDP `Accessibility.getFullAXTree`.

    Produces {"role", "name", "children"} dicts. Ignored nodes are dropped
    and their children lifted into the nearest kept ancestor, in order.
    """
    if not nodes:
        return None

    by_id = {n["nodeId"]: n for n in nodes}
    root = next((n for n in nodes if not n.get("parentId")), nodes[0])

    top: AXNode = {"role": "", "name": ""}
    stack = [(root, top)]
    while stack:
        node, parent = stack.pop()
        if node.get("ignored"):
            out = parent
        else:
            out = {"role": _ax_value(node, "role"), "name": _ax_value(node, "name")}
            parent.setdefault("children", []).append(out)
        children = [by_id[c] for c in node.get("childIds") or [] if c in by_id]
        stack.extend((child, out) for child in reversed(children))

    kept = top.get("children") or []
    if len(kept) == 1:
        return kept[0]
    return top if kept else None

"""Assemble the flat category list into a tree and flatten it back.

Both directions are iterative. Ordering contract: roots in input order, each
node's children in input order, flattening is depth-first pre-order.
"""

from typing import Dict, List, Sequence, Tuple

from app.models.category import Category, FlatCategory


def build_category_tree(categories: Sequence[Category]) -> List[Category]:
    """Return root categories with ``children`` populated.

    Input categories are copied, not mutated. Categories whose parent id is
    not in the list are left out of the tree.
    """
    nodes: Dict[str, Category] = {}
    for category in categories:
        nodes[category.id] = category.model_copy(update={"children": []})

    children_of: Dict[str, List[str]] = {}
    roots: List[str] = []
    for category in categories:
        if category.is_root:
            roots.append(category.id)
        elif category.parent_id in nodes:
            children_of.setdefault(category.parent_id, []).append(category.id)

    for parent_id, child_ids in children_of.items():
        nodes[parent_id].children = [nodes[child_id] for child_id in child_ids]

    return [nodes[root_id] for root_id in roots]


def flatten_categories(roots: Sequence[Category]) -> List[FlatCategory]:
    """Depth-first pre-order listing of the tree with each node's depth."""
    flat: List[FlatCategory] = []
    stack: List[Tuple[Category, int]] = [(root, 0) for root in reversed(roots)]

    while stack:
        category, level = stack.pop()
        flat.append(FlatCategory(id=category.id, name=category.name, level=level))
        for child in reversed(category.children):
            stack.append((child, level + 1))

    return flat

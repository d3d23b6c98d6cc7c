"""Tree builder: turns a flat, org-scoped list of pages into a sorted forest."""

from sqlalchemy.orm import Session
from typing import Dict, Iterable, List, Set
from pagetree.models.page import Page
from pagetree.schemas.page import PageNode
from pagetree.core.app_logger import get_logger

logger = get_logger(__name__)


def _sort_key(node: PageNode):
    return (node.position, node.id)


def _mark_reachable(nodes: List[PageNode], reached: Set[int]) -> None:
    stack = list(nodes)
    while stack:
        node = stack.pop()
        if node.id in reached:
            continue
        reached.add(node.id)
        stack.extend(node.children)


def build_tree(pages: Iterable[Page]) -> List[PageNode]:
    """
    Build a forest from a flat list of pages.

    A page whose parent is not part of ``pages`` (trashed, other org, deleted)
    is returned as a root: it is detached in this view only, its ``parent_id``
    is left untouched. Pages caught in a parent cycle are unreachable from
    any root; the first of them is surfaced as a root so none go missing.
    """
    pages = list(pages)
    nodes: Dict[int, PageNode] = {page.id: PageNode.model_validate(page) for page in pages}

    roots: List[PageNode] = []
    for page in pages:
        node = nodes[page.id]
        parent = nodes.get(page.parent_id) if page.parent_id is not None else None
        if parent is not None and parent is not node:
            parent.children.append(node)
        else:
            roots.append(node)

    reached: Set[int] = set()
    _mark_reachable(roots, reached)
    for page in pages:
        if page.id in reached:
            continue
        # cycle : on coupe le lien vers le parent dans cette vue uniquement
        node = nodes[page.id]
        parent = nodes[page.parent_id]
        parent.children = [child for child in parent.children if child is not node]
        roots.append(node)
        logger.warning("Cycle detected in page tree at page %s (parent %s), shown as root", page.id, page.parent_id)
        _mark_reachable([node], reached)

    # tri par position à chaque niveau, sans récursion
    stack = [roots]
    while stack:
        siblings = stack.pop()
        siblings.sort(key=_sort_key)
        stack.extend(node.children for node in siblings if node.children)

    return roots


def get_page_tree(db: Session, org_id: int) -> List[PageNode]:
    pages = db.query(Page).filter(
        Page.organization_id == org_id,
        Page.trashed_at.is_(None)
    ).order_by(Page.parent_id, Page.position).all()

    logger.debug("Building tree for org=%s from %d live pages", org_id, len(pages))
    return build_tree(pages)

import pytest
from sqlalchemy.exc import OperationalError
from pagetree.core.exceptions import PageNotFound, PageInTrash, InvalidParent
from pagetree.schemas.page import PageMove
from pagetree.services.hierarchy_service import get_ancestors, validate_move, move_page
from conftest import ORG_ID, OTHER_ORG_ID


@pytest.fixture
def chain(make_page):
    """root -> middle -> leaf"""
    root = make_page("Root")
    middle = make_page("Middle", parent=root)
    leaf = make_page("Leaf", parent=middle)
    return root, middle, leaf

# ========== ANCESTORS ==========

def test_ancestors_of_root_page_is_empty(db, make_page):
    root = make_page("Root")
    assert get_ancestors(db, ORG_ID, root.id) == []

def test_ancestors_depth_three_root_first(db, chain):
    root, middle, leaf = chain
    ancestors = get_ancestors(db, ORG_ID, leaf.id)
    assert [p.id for p in ancestors] == [root.id, middle.id]

def test_ancestors_page_not_found(db, make_page):
    with pytest.raises(PageNotFound):
        get_ancestors(db, ORG_ID, 9999)

def test_ancestors_other_org_is_not_found(db, make_page):
    page = make_page("Elsewhere", org_id=OTHER_ORG_ID)
    with pytest.raises(PageNotFound):
        get_ancestors(db, ORG_ID, page.id)

def test_ancestors_include_trashed_parents(db, make_page):
    root = make_page("Root", trashed=True)
    child = make_page("Child", parent=root)
    assert [p.id for p in get_ancestors(db, ORG_ID, child.id)] == [root.id]

def test_ancestors_stop_at_unreachable_parent(db, make_page):
    foreign = make_page("Foreign parent", org_id=OTHER_ORG_ID)
    page = make_page("Page", parent=foreign)
    assert get_ancestors(db, ORG_ID, page.id) == []

def test_ancestors_stop_on_cycle(db, make_page):
    a = make_page("A")
    b = make_page("B", parent=a)
    a.parent_id = b.id
    db.commit()

    ancestors = get_ancestors(db, ORG_ID, a.id)

    assert [p.id for p in ancestors] == [b.id]

# ========== VALIDATE MOVE ==========

def test_validate_move_to_root_always_valid(db, chain):
    _, _, leaf = chain
    validate_move(db, ORG_ID, leaf.id, None)
    validate_move(db, ORG_ID, 9999, None)

def test_validate_move_self_parent(db, chain):
    root, _, _ = chain
    with pytest.raises(InvalidParent):
        validate_move(db, ORG_ID, root.id, root.id)

def test_validate_move_missing_parent(db, chain):
    root, _, _ = chain
    with pytest.raises(InvalidParent):
        validate_move(db, ORG_ID, root.id, 9999)

def test_validate_move_trashed_parent(db, make_page):
    page = make_page("Page")
    trashed = make_page("Trashed", position=1, trashed=True)
    with pytest.raises(InvalidParent):
        validate_move(db, ORG_ID, page.id, trashed.id)

def test_validate_move_parent_in_other_org(db, make_page):
    page = make_page("Page")
    foreign = make_page("Foreign", org_id=OTHER_ORG_ID)
    with pytest.raises(InvalidParent):
        validate_move(db, ORG_ID, page.id, foreign.id)

@pytest.mark.parametrize("target", ["middle", "leaf"])
def test_validate_move_under_descendant(db, chain, target):
    root, middle, leaf = chain
    new_parent = {"middle": middle, "leaf": leaf}[target]
    with pytest.raises(InvalidParent):
        validate_move(db, ORG_ID, root.id, new_parent.id)

def test_validate_move_under_trashed_descendant(db, make_page):
    root = make_page("Root")
    trashed_child = make_page("Trashed child", parent=root, trashed=True)
    with pytest.raises(InvalidParent):
        validate_move(db, ORG_ID, root.id, trashed_child.id)

def test_validate_move_to_sibling_branch(db, chain, make_page):
    root, middle, leaf = chain
    other = make_page("Other", parent=root, position=1)
    validate_move(db, ORG_ID, middle.id, other.id)
    validate_move(db, ORG_ID, leaf.id, root.id)

# ========== MOVE PAGE ==========

def test_move_page_to_new_parent_appends(db, make_page):
    target = make_page("Target")
    make_page("Existing", parent=target, position=0)
    make_page("Existing 2", parent=target, position=1)
    page = make_page("Page", position=1)

    moved = move_page(db, ORG_ID, page.id, PageMove(parent_id=target.id))

    assert moved.parent_id == target.id
    assert moved.position == 2

def test_move_page_to_root(db, chain, make_page):
    root, middle, _ = chain

    moved = move_page(db, ORG_ID, middle.id, PageMove(parent_id=None))

    assert moved.parent_id is None
    assert moved.position == 1

def test_move_page_without_parent_keeps_parent(db, chain):
    _, middle, leaf = chain

    moved = move_page(db, ORG_ID, leaf.id, PageMove(position=3))

    assert moved.parent_id == middle.id
    assert moved.position == 3

def test_move_page_explicit_position_shifts_siblings(db, make_page):
    parent = make_page("Parent")
    a = make_page("a", parent=parent, position=0)
    b = make_page("b", parent=parent, position=1)
    c = make_page("c", parent=parent, position=2)
    trashed = make_page("t", parent=parent, position=1, trashed=True)

    move_page(db, ORG_ID, c.id, PageMove(parent_id=parent.id, position=0))

    assert (c.position, a.position, b.position) == (0, 1, 2)
    assert trashed.position == 1

def test_move_page_into_other_group_at_position(db, make_page):
    source = make_page("Source")
    dest = make_page("Dest", position=1)
    left = make_page("left", parent=source, position=0)
    moving = make_page("moving", parent=source, position=1)
    stay = make_page("stay", parent=source, position=2)
    d0 = make_page("d0", parent=dest, position=0)
    d1 = make_page("d1", parent=dest, position=1)

    move_page(db, ORG_ID, moving.id, PageMove(parent_id=dest.id, position=1))

    assert (moving.parent_id, moving.position) == (dest.id, 1)
    assert (d0.position, d1.position) == (0, 2)
    # le groupe source n'est pas compacté
    assert (left.position, stay.position) == (0, 2)

def test_move_page_not_found(db):
    with pytest.raises(PageNotFound):
        move_page(db, ORG_ID, 9999, PageMove(parent_id=None))

def test_move_page_trashed(db, make_page):
    page = make_page("Page", trashed=True)
    with pytest.raises(PageInTrash):
        move_page(db, ORG_ID, page.id, PageMove(parent_id=None))

def test_move_page_under_descendant_changes_nothing(db, chain):
    root, middle, leaf = chain

    with pytest.raises(InvalidParent):
        move_page(db, ORG_ID, root.id, PageMove(parent_id=leaf.id, position=0))

    assert root.parent_id is None
    assert leaf.position == 0

def test_move_page_failed_commit_leaves_siblings_untouched(db, make_page, monkeypatch):
    parent = make_page("Parent")
    a = make_page("a", parent=parent, position=0)
    b = make_page("b", parent=parent, position=1)
    c = make_page("c", parent=parent, position=2)

    def failing_commit():
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db, "commit", failing_commit)

    with pytest.raises(OperationalError):
        move_page(db, ORG_ID, c.id, PageMove(position=0))

    # le décalage des frères a été annulé avec le reste
    assert (a.position, b.position, c.position) == (0, 1, 2)

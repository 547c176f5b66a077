import pytest

from koalagraph.graph import DirectedTree, Graph
from koalagraph.lca import OptimalLCA


def _tree(n, parent_of):
    tree = DirectedTree(Graph(n))
    for child, parent in parent_of.items():
        tree.tree.add_edge(parent, child, 1.0)
    return tree


def _chain(n):
    return _tree(n, {i: i + 1 for i in range(n - 1)})


def _heap_tree(n):
    # heap index h is stored as node n - 1 - h, so heap index 0 is the root
    return _tree(n, {n - 1 - h: n - 1 - (h - 1) // 2 for h in range(1, n)})


def _ancestors(tree, u):
    result = []
    while u is not None:
        result.append(u)
        u = tree.parent(u)
    return result


@pytest.mark.parametrize("a, b", [(0, 1), (0, 199), (5, 150), (42, 43), (120, 17), (7, 7)])
def test_chain_lca_is_the_higher_node(a, b):
    lca = OptimalLCA(_chain(200))
    assert lca.query(a, b) == max(a, b)


def test_star_leaves_meet_at_root():
    n = 101
    root = n - 1
    lca = OptimalLCA(_tree(n, {i: root for i in range(n - 1)}))
    lca.verify()
    assert lca.query(3, 97) == root
    assert lca.query(0, root) == root
    assert lca.query(55, 55) == 55


def test_small_tree_uses_parent_chain():
    tree = _tree(5, {2: 4, 3: 4, 0: 2, 1: 2})
    lca = OptimalLCA(tree)
    assert lca.query(0, 1) == 2
    assert lca.query(0, 3) == 4
    assert lca.query(1, 2) == 2


def test_heap_tree_results_are_common_ancestors():
    n = 127
    tree = _heap_tree(n)
    lca = OptimalLCA(tree)
    lca.verify()
    for u in range(0, n, 5):
        for v in range(0, n, 7):
            w = lca.query(u, v)
            assert w == lca.query(v, u)
            assert w in _ancestors(tree, u)
            assert w in _ancestors(tree, v)


def test_heap_tree_siblings_meet_at_parent():
    n = 127
    tree = _heap_tree(n)
    lca = OptimalLCA(tree)
    for u in range(n - 1):
        parent = tree.parent(u)
        assert lca.query(u, parent) == parent
    siblings = [u for u in range(n) if tree.parent(u) == n - 1]
    assert len(siblings) == 2
    assert lca.query(*siblings) == n - 1


def test_heap_tree_deep_leaves_from_different_subtrees():
    n = 127
    tree = _heap_tree(n)
    lca = OptimalLCA(tree)
    left_leaf, right_leaf = n - 1 - 63, n - 1 - 126
    assert lca.query(left_leaf, right_leaf) == n - 1


def test_verify_rejects_unreachable_node():
    tree = _tree(3, {0: 2})
    lca = OptimalLCA(tree)
    with pytest.raises(ValueError):
        lca.verify()


def test_query_unknown_node_raises():
    lca = OptimalLCA(_chain(200))
    with pytest.raises(KeyError):
        lca.query(0, 500)


def test_query_unreachable_node_raises():
    lca = OptimalLCA(_tree(3, {0: 2}))
    with pytest.raises(KeyError):
        lca.query(0, 1)
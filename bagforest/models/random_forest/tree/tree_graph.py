from typing import Optional

from graphviz import Digraph

import bagforest.const as bconst
from .tree import Tree
from .node import Node


def build_graph(tree: Tree, filename: str = "tree", path: Optional[str] = None, view: bool = False) -> Digraph:
    """
    Builds a graphviz Digraph of a fitted ID3 tree, one edge per attribute value of a split.

    The graph is only rendered when `view` is set, otherwise the caller decides what to do with it.
    """
    if not tree.is_fitted_:
        raise ValueError("The tree must be trained before building its graph")

    graph = Digraph('ID3Tree',
                    filename=filename,
                    directory=path or "",
                    format=bconst.BF_GRAPH_FORMAT,
                    node_attr=bconst.BF_GRAPH_NODE_ATTR)

    _traverse_tree(graph, tree.root)

    if view:
        graph.view()

    return graph


def _traverse_tree(graph: Digraph, node: Node):
    node_id = _node_id(node)
    graph.node(node_id, label=_format_node_label(node))

    for value, child in node.children.items():
        child_id = _node_id(child)
        graph.node(child_id, label=_format_node_label(child))
        graph.edge(node_id, child_id, label=f"= {value}")
        _traverse_tree(graph, child)


def _node_id(node: Node) -> str:
    return str(id(node))


def _format_node_label(node: Node) -> str:
    lines = [
        f"Impurity: {node.impurity:.4f}",
        f"Samples: {node.n}",
        f"Labels: {list(node.class_count_dict.keys())}",
        f"Counts: {list(node.class_count_dict.values())}",
    ]

    if node.split_attribute is not None:
        lines.append(f"Split: {node.split_attribute} (gain {node.gain:.4f})")

    lines.append(f"Predict: {node.best_label} ({node.best_percentage * 100:.1f}%)")

    return '\\n'.join(lines)

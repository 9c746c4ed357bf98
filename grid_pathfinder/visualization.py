from graphviz import Digraph


def _label(point):
    return str(point)


def search_tree_graph(result, name="search_tree"):
    """Builds a graphviz Digraph of the search tree held in result.came_from.

    One node per discovered tile, one edge from each tile's predecessor to
    the tile. Edges along the found path are drawn bold.
    """
    dot = Digraph(name=name)
    path_edges = set(zip(result.path, result.path[1:]))

    for child, parent in result.came_from.items():
        dot.node(_label(child))
        if parent is None:
            continue
        dot.node(_label(parent))
        if (parent, child) in path_edges:
            dot.edge(_label(parent), _label(child), style="bold", color="blue")
        else:
            dot.edge(_label(parent), _label(child))
    return dot


def render_search_tree(result, filename, view=False):
    """Renders the search tree to disk; needs the Graphviz binaries."""
    return search_tree_graph(result).render(filename, view=view)

from Syntax.tree import MetavarNode


def tree_to_sexpr(tree) -> str:
    """
    Render a tree as a fully parenthesised prefix expression.
    e.g. ("and", "phi", ("not", "psi")) -> "( and phi ( not psi ) )"
    """
    if isinstance(tree, MetavarNode):
        return tree_to_sexpr(("_metavar", tree.name, *tree.free_vars))
    if isinstance(tree, tuple):
        return f"( {' '.join(tree_to_sexpr(child) for child in tree)} )"
    return tree


def tree_to_json_compatible(tree):
    """Convert a tree into nested lists so it can be stored as JSON."""
    if isinstance(tree, MetavarNode):
        return ["_metavar", tree.name, *tree.free_vars]
    if isinstance(tree, tuple):
        return [tree_to_json_compatible(child) for child in tree]
    return tree

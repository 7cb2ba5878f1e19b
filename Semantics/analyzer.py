"""
Binding checks run on a parsed formula tree.

The passes run in this order, and the first failure wins:

1. `check_free_variables`: every ordinary variable (s-z) must be bound.
2. `check_allowed_subs`: each metavariable is declared with the same set of
   free variables everywhere; strips metavariable nodes to their names.
3. `check_double_bindings`: no variable is bound twice on one branch, and
   sibling subtrees don't bind the same variable.
4. `check_eigenvars`: no eigenvariable (a-r) is declared free. Reads the
   unstripped tree so the first offender is reported as written.
"""

from typing import Dict, FrozenSet, Iterator, Tuple

from Syntax.errors import DoubleBound, EigenvarDeclaredFree, InconsistentAllowedSubs
from Syntax.syntax_table import SyntaxTable
from Syntax.tree import MetavarNode, Tree, is_eigenvar, is_regvar

AllowedSubs = Dict[str, FrozenSet[str]]


def _is_quantified(tree: tuple, syntax: SyntaxTable) -> bool:
    return len(tree) == 3 and tree[0] in syntax.quantifier_labels


def check_free_variables(tree: Tree, syntax: SyntaxTable) -> Dict[str, None]:
    """
    Collect the ordinary variables occurring free in `tree`.

    Variables declared free in a metavariable count as occurrences. The result
    is an ordered set (a dict with `None` values) in left-to-right order.
    """
    if isinstance(tree, str):
        return {tree: None} if is_regvar(tree) else {}
    if isinstance(tree, MetavarNode):
        return dict.fromkeys(v for v in tree.free_vars if is_regvar(v))
    if _is_quantified(tree, syntax):
        _, variable, scope = tree
        free = check_free_variables(scope, syntax)
        free.pop(variable, None)
        return free
    free = {}
    for arg in tree[1:]:
        free.update(check_free_variables(arg, syntax))
    return free


def find_inconsistency(a: AllowedSubs, b: AllowedSubs):
    """Return the first metavariable of `a` that `b` declares with a different set, if any."""
    for metavar, allowed in a.items():
        other = b.get(metavar)
        if other is not None and other != allowed:
            return metavar
    return None


def check_allowed_subs(tree: Tree) -> Tuple[Tree, AllowedSubs]:
    """
    Replace metavariable nodes by their names and collect their declared free variables.

    Returns:
        Tuple[Tree, AllowedSubs]: The stripped tree and a map from each
            metavariable to the set of variables it may have free.

    Raises:
        InconsistentAllowedSubs: If one metavariable is declared with two
            different sets. Order and repetition within a declaration don't matter.
    """
    if isinstance(tree, str):
        return tree, {}
    if isinstance(tree, MetavarNode):
        return tree.name, {tree.name: frozenset(tree.free_vars)}

    args = []
    allowed_subs = {}
    for arg in tree[1:]:
        stripped, subs = check_allowed_subs(arg)
        conflict = find_inconsistency(allowed_subs, subs)
        if conflict is not None:
            raise InconsistentAllowedSubs(conflict)
        args.append(stripped)
        allowed_subs.update(subs)
    return (tree[0], *args), allowed_subs


def check_double_bindings(tree: Tree, syntax: SyntaxTable) -> Dict[str, None]:
    """
    Return the variables bound anywhere in `tree`, as an ordered set.

    Raises:
        DoubleBound: If a quantifier rebinds a variable already bound inside its
            scope, or two arguments of one node both bind the same variable.
    """
    if isinstance(tree, (str, MetavarNode)):
        return {}
    if _is_quantified(tree, syntax):
        _, variable, scope = tree
        bound = check_double_bindings(scope, syntax)
        if variable in bound:
            raise DoubleBound(variable)
        bound[variable] = None
        return bound
    bound = {}
    for arg in tree[1:]:
        inner = check_double_bindings(arg, syntax)
        shared = next((v for v in bound if v in inner), None)
        if shared is not None:
            raise DoubleBound(shared)
        bound.update(inner)
    return bound


def _metavariables(tree: Tree) -> Iterator[MetavarNode]:
    """Yield the metavariable nodes of `tree` in left-to-right order."""
    if isinstance(tree, MetavarNode):
        yield tree
    elif not isinstance(tree, str):
        for arg in tree[1:]:
            yield from _metavariables(arg)


def check_eigenvars(tree: Tree):
    """
    Check the declarations of the unstripped tree, as written.

    Raises:
        EigenvarDeclaredFree: For the first eigenvariable declared free, reading
            left to right. Eigenvariables are always free, so declaring one is an error.
    """
    for node in _metavariables(tree):
        for variable in node.free_vars:
            if is_eigenvar(variable):
                raise EigenvarDeclaredFree(variable, node.name)

"""
Tests for the binding checks in Semantics/analyzer.py, run directly on hand-built trees.
"""

import pytest

from Semantics.analyzer import (
    check_allowed_subs,
    check_double_bindings,
    check_eigenvars,
    check_free_variables,
    find_inconsistency,
)
from Syntax.errors import DoubleBound, EigenvarDeclaredFree, InconsistentAllowedSubs
from Syntax.tree import MetavarNode


class TestFreeVariables:
    def test_atoms(self, sample_syntax):
        assert list(check_free_variables("x", sample_syntax)) == ["x"]
        assert list(check_free_variables("x_12", sample_syntax)) == ["x_12"]
        assert list(check_free_variables("a", sample_syntax)) == []
        assert list(check_free_variables("phi", sample_syntax)) == []

    def test_left_to_right_order(self, sample_syntax):
        tree = ("and", ("eq", "z", "a"), ("eq", "s", "z"))
        assert list(check_free_variables(tree, sample_syntax)) == ["z", "s"]

    def test_quantifier_removes_only_its_variable(self, sample_syntax):
        tree = ("forall", "x", ("eq", "x", "y"))
        assert list(check_free_variables(tree, sample_syntax)) == ["y"]

    def test_binding_does_not_reach_siblings(self, sample_syntax):
        tree = ("and", ("forall", "x", ("eq", "x", "a")), ("eq", "x", "a"))
        assert list(check_free_variables(tree, sample_syntax)) == ["x"]

    def test_metavariable_declarations_count(self, sample_syntax):
        assert list(check_free_variables(MetavarNode("phi", ("a", "y")), sample_syntax)) == ["y"]
        tree = ("exists", "y", MetavarNode("phi", ("y",)))
        assert list(check_free_variables(tree, sample_syntax)) == []


class TestAllowedSubs:
    def test_strips_metavariables(self):
        tree = ("and", MetavarNode("phi", ("x", "y")), ("not", MetavarNode("psi")))
        stripped, subs = check_allowed_subs(tree)
        assert stripped == ("and", "phi", ("not", "psi"))
        assert subs == {"phi": frozenset({"x", "y"}), "psi": frozenset()}

    def test_set_comparison(self):
        tree = ("and", MetavarNode("phi", ("x", "y")), ("or", MetavarNode("phi", ("y", "x", "y")), "true"))
        _, subs = check_allowed_subs(tree)
        assert subs == {"phi": frozenset({"x", "y"})}

    def test_inconsistency_names_metavariable(self):
        tree = ("and", MetavarNode("psi"), ("and", MetavarNode("phi", ("x",)), MetavarNode("phi", ("y",))))
        with pytest.raises(InconsistentAllowedSubs) as excinfo:
            check_allowed_subs(tree)
        assert excinfo.value.metavar == "phi"

    def test_subscripted_names_are_distinct(self):
        tree = ("and", MetavarNode("phi_1", ("x",)), MetavarNode("phi_2", ("y",)))
        _, subs = check_allowed_subs(tree)
        assert subs == {"phi_1": frozenset({"x"}), "phi_2": frozenset({"y"})}

    def test_find_inconsistency(self):
        a = {"phi": frozenset({"x"}), "psi": frozenset()}
        assert find_inconsistency(a, {"psi": frozenset()}) is None
        assert find_inconsistency(a, {"chi": frozenset({"z"})}) is None
        assert find_inconsistency(a, {"psi": frozenset({"z"}), "phi": frozenset()}) == "phi"


class TestDoubleBindings:
    def test_collects_bound_variables(self, sample_syntax):
        tree = ("forall", "x", ("exists", "y", ("eq", "x", "y")))
        assert list(check_double_bindings(tree, sample_syntax)) == ["y", "x"]

    def test_shadowing(self, sample_syntax):
        tree = ("forall", "x", ("not", ("exists", "x", "phi")))
        with pytest.raises(DoubleBound) as excinfo:
            check_double_bindings(tree, sample_syntax)
        assert excinfo.value.variable == "x"

    def test_siblings_binding_same_variable(self, sample_syntax):
        tree = ("or", ("exists", "y", "phi"), ("and", "psi", ("forall", "y", "chi")))
        with pytest.raises(DoubleBound):
            check_double_bindings(tree, sample_syntax)

    def test_siblings_binding_different_variables(self, sample_syntax):
        tree = ("or", ("exists", "y", "phi"), ("forall", "z", "chi"))
        assert list(check_double_bindings(tree, sample_syntax)) == ["y", "z"]


class TestEigenvars:
    def test_passes_without_eigenvariables(self):
        check_eigenvars(("and", MetavarNode("phi", ("x", "y_2")), ("not", MetavarNode("psi"))))

    def test_reports_first_offender_as_written(self):
        tree = ("and", MetavarNode("phi", ("x",)), MetavarNode("psi", ("z", "c", "b_1")))
        with pytest.raises(EigenvarDeclaredFree) as excinfo:
            check_eigenvars(tree)
        assert (excinfo.value.variable, excinfo.value.metavariable) == ("c", "psi")

    def test_scans_under_quantifiers(self):
        tree = ("forall", "x", ("or", MetavarNode("chi", ("x",)), MetavarNode("phi", ("r", "a"))))
        with pytest.raises(EigenvarDeclaredFree) as excinfo:
            check_eigenvars(tree)
        assert (excinfo.value.variable, excinfo.value.metavariable) == ("r", "phi")

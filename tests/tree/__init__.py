"""
Tests for the flow tree.

Test organization:
- test_models.py: TreeNode / FlowNode structure
- test_selection.py: Branch selection and short-circuiting
- test_validation.py: Branching invariant checks
"""

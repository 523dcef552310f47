"""Shape check for the render tree: one root, one style node, one script node."""

from __future__ import annotations

import logging

from storymod_manager.config import settings
from storymod_manager.errors import StructuralError
from storymod_manager.render.tree import RenderTree
from storymod_manager.schemas.patch import IssueLevel, StructureIssue, StructureReport

logger = logging.getLogger(__name__)


def _issue(error: StructuralError, level: IssueLevel = IssueLevel.error) -> StructureIssue:
    return StructureIssue(code=error.code, level=level, message=str(error))


def validate_structure(tree: RenderTree, *, warn_unknown: bool | None = None) -> StructureReport:
    """Flag a tree whose node counts do not match the expected shape.

    Never raises; every problem is logged and listed in the report.  Only
    error-level issues make the report invalid.
    """
    issues: list[StructureIssue] = []

    roots = tree.root_count()
    if roots != 1:
        issues.append(_issue(StructuralError("root_count", f"expected 1 story root, found {roots}")))

    styles = len(tree.style_nodes())
    scripts = len(tree.script_nodes())
    passages = len(tree.passage_nodes())
    if styles != 1:
        issues.append(_issue(StructuralError("style_count", f"expected 1 style node, found {styles}")))
    if scripts != 1:
        issues.append(
            _issue(StructuralError("script_count", f"expected 1 script node, found {scripts}"))
        )

    if warn_unknown is None:
        warn_unknown = settings.unknown_node_warning
    if warn_unknown:
        unknown = [
            n.tag
            for n in tree.children()
            if not (n.is_passage or n.is_style or n.is_script)
        ]
        if unknown:
            issues.append(
                _issue(
                    StructuralError("unknown_nodes", f"unexpected nodes in story root: {unknown}"),
                    IssueLevel.warning,
                )
            )

    for issue in issues:
        if issue.level == IssueLevel.error:
            logger.error("Render tree structure: %s", issue.message)
        else:
            logger.warning("Render tree structure: %s", issue.message)

    return StructureReport(
        valid=not any(i.level == IssueLevel.error for i in issues),
        style_nodes=styles,
        script_nodes=scripts,
        passage_nodes=passages,
        issues=issues,
    )

"""Line diffing, structured rendering and line comments for document revisions."""

from plan_review.comments import AddressResolver, Comment, CommentStore
from plan_review.diff import (
    DiffOp,
    HunkBuilder,
    LineDiffer,
    SectionReconciler,
    flatten_sections,
)
from plan_review.render import BlockBuilder, MarkdownLeafRenderer
from plan_review.session import ReviewSession, build_pipeline

__all__ = [
    "AddressResolver",
    "BlockBuilder",
    "Comment",
    "CommentStore",
    "DiffOp",
    "HunkBuilder",
    "LineDiffer",
    "MarkdownLeafRenderer",
    "ReviewSession",
    "SectionReconciler",
    "build_pipeline",
    "flatten_sections",
]

"""Result of a policy run, as reported back to the workflow."""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field


COMMENT_SEPARATOR = "\n\n"


class RemediationOutcome(BaseModel):
    """Everything a run reports through action outputs."""

    wrong_target: Optional[bool] = Field(default=None, description="PR failed the include/exclude check")
    new_target: Optional[str] = Field(default=None, description="Branch the PR was redirected to")
    comments_posted: List[str] = Field(default_factory=list, description="Comments posted on the current PR")
    pr_already_exists: Optional[bool] = Field(default=None, description="A duplicate PR was found")

    def record_comment(self, body: str) -> None:
        self.comments_posted.append(body)

    def to_outputs(self) -> Dict[str, str]:
        """Convert to action output format, skipping values that were never determined."""
        outputs = {}
        if self.wrong_target is not None:
            outputs['wrong-target'] = _bool_output(self.wrong_target)
        if self.new_target:
            outputs['new-target'] = self.new_target
        if self.comments_posted:
            outputs['comment-posted'] = COMMENT_SEPARATOR.join(self.comments_posted)
        if self.pr_already_exists is not None:
            outputs['pr-already-exists'] = _bool_output(self.pr_already_exists)
        return outputs


def _bool_output(value: bool) -> str:
    return "true" if value else "false"

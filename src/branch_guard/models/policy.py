"""Policy configuration model."""

from enum import Enum
from typing import Callable, List, Optional, Tuple
from pydantic import BaseModel, Field, PrivateAttr, ValidationError, field_validator, model_validator

from branch_guard.utils.patterns import BranchPattern, parse_patterns


class ConfigurationError(Exception):
    """Exception raised for invalid configuration or an unusable trigger context."""
    pass


class AlreadyExistsAction(str, Enum):
    """What to do when the redirect target already has an open PR from the same head."""
    ERROR = "error"
    CLOSE_THIS = "close_this"
    CLOSE_OTHER = "close_other"
    CLOSE_OTHER_CONTINUE = "close_other_continue"
    NOTHING = "nothing"
    UNRECOGNIZED = "unrecognized"

    @classmethod
    def parse(cls, value: Optional[str]) -> 'AlreadyExistsAction':
        if not value:
            return cls.NOTHING
        try:
            action = cls(value)
        except ValueError:
            return cls.UNRECOGNIZED
        return action


class PolicyConfig(BaseModel):
    """Branch policy options, loaded once per run."""

    target: Tuple[str, ...] = Field(default=(), description="Required base branch patterns")
    include: Tuple[str, ...] = Field(default=(), description="Allowed source patterns")
    exclude: Tuple[str, ...] = Field(default=(), description="Excluded source patterns")
    change_to: Optional[str] = Field(default=None, description="Branch to redirect the PR base to")
    comment: Optional[str] = Field(default=None, description="Comment posted on remediation")
    already_exists_comment: Optional[str] = Field(default=None, description="Comment template when a duplicate PR exists")
    already_exists_other_comment: Optional[str] = Field(default=None, description="Comment template for the duplicate PR")
    already_exists_action: AlreadyExistsAction = Field(default=AlreadyExistsAction.NOTHING, description="Duplicate PR policy")
    already_exists_action_input: str = Field(default="", description="Raw already-exists-action value")

    _required_targets: List[BranchPattern] = PrivateAttr(default_factory=list)
    _include_patterns: List[BranchPattern] = PrivateAttr(default_factory=list)
    _exclude_patterns: List[BranchPattern] = PrivateAttr(default_factory=list)

    class Config:
        """Pydantic configuration."""
        frozen = True

    @field_validator('target', 'include', 'exclude', mode='before')
    @classmethod
    def split_patterns(cls, value):
        if value is None:
            return ()
        if isinstance(value, str):
            value = value.split()
        return tuple(item.strip() for item in value if item and item.strip())

    @field_validator('target', 'include', 'exclude')
    @classmethod
    def compile_patterns(cls, value):
        parse_patterns(value)
        return value

    @field_validator('change_to', 'comment', 'already_exists_comment', 'already_exists_other_comment', mode='before')
    @classmethod
    def empty_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator('already_exists_action', mode='before')
    @classmethod
    def parse_action(cls, value):
        if isinstance(value, AlreadyExistsAction):
            return value
        return AlreadyExistsAction.parse(value)

    @model_validator(mode='after')
    def check_include_exclude(self) -> 'PolicyConfig':
        if self.include and self.exclude:
            raise ValueError("exclude and include cannot be given at the same time")
        return self

    def model_post_init(self, __context) -> None:
        self._required_targets = parse_patterns(self.target)
        self._include_patterns = parse_patterns(self.include)
        self._exclude_patterns = parse_patterns(self.exclude)

    @property
    def required_targets(self) -> List[BranchPattern]:
        return self._required_targets

    @property
    def include_patterns(self) -> List[BranchPattern]:
        return self._include_patterns

    @property
    def exclude_patterns(self) -> List[BranchPattern]:
        return self._exclude_patterns

    @property
    def remediation_enabled(self) -> bool:
        """True if the PR will be redirected or commented on."""
        return bool(self.change_to or self.comment)

    @classmethod
    def from_inputs(cls, get_input: Callable[[str], str]) -> 'PolicyConfig':
        """
        Build the configuration from named action inputs.

        Args:
            get_input: Callable returning the raw string value of an input ('' when unset)

        Returns:
            Validated PolicyConfig

        Raises:
            ConfigurationError: If the inputs are invalid
        """
        action = get_input("already-exists-action")
        try:
            return cls(
                target=get_input("target"),
                include=get_input("include"),
                exclude=get_input("exclude"),
                change_to=get_input("change-to"),
                comment=get_input("comment"),
                already_exists_comment=get_input("already-exists-comment"),
                already_exists_other_comment=get_input("already-exists-other-comment"),
                already_exists_action=action,
                already_exists_action_input=action,
            )
        except ValidationError as e:
            messages = []
            for error in e.errors():
                cause = error.get('ctx', {}).get('error')
                messages.append(str(cause) if cause is not None else error['msg'])
            raise ConfigurationError("; ".join(messages))

"""Tests for policy configuration and outcome models."""

import pytest
from branch_guard.models.outcome import RemediationOutcome
from branch_guard.models.policy import AlreadyExistsAction, ConfigurationError, PolicyConfig
from branch_guard.utils.patterns import LabelPattern, RefPattern, RegexPattern


def inputs(**values):
    """Build a get_input callable from keyword arguments (underscores become hyphens)."""
    values = {key.replace("_", "-"): value for key, value in values.items()}
    return lambda name: values.get(name, "")


class TestPolicyConfig:
    """Test cases for PolicyConfig."""

    def test_defaults(self):
        """Test configuration with no inputs."""
        config = PolicyConfig.from_inputs(inputs())

        assert config.required_targets == []
        assert config.include_patterns == []
        assert config.exclude_patterns == []
        assert config.change_to is None
        assert config.comment is None
        assert config.already_exists_action is AlreadyExistsAction.NOTHING
        assert config.remediation_enabled is False

    def test_patterns_parsed_at_load(self):
        """Test list inputs are split and classified once."""
        config = PolicyConfig.from_inputs(inputs(target="main  develop", exclude="/^release\\// me:hotfix"))

        assert config.target == ("main", "develop")
        assert config.required_targets == [RefPattern(raw="main"), RefPattern(raw="develop")]
        assert isinstance(config.exclude_patterns[0], RegexPattern)
        assert config.exclude_patterns[1] == LabelPattern(raw="me:hotfix")

    def test_include_and_exclude_conflict(self):
        """Test include and exclude together raise ConfigurationError."""
        with pytest.raises(ConfigurationError, match="exclude and include cannot be given at the same time"):
            PolicyConfig.from_inputs(inputs(include="a", exclude="b"))

    def test_include_and_exclude_conflict_direct(self):
        """Test the conflict is rejected on direct construction too."""
        with pytest.raises(ValueError):
            PolicyConfig(include=["a"], exclude=["b"])

    def test_invalid_regex(self):
        """Test invalid regex raises ConfigurationError."""
        with pytest.raises(ConfigurationError, match="Invalid regular expression"):
            PolicyConfig.from_inputs(inputs(include="/[unclosed/"))

    def test_remediation_enabled(self):
        """Test change-to or comment enables remediation."""
        assert PolicyConfig.from_inputs(inputs(change_to="develop")).remediation_enabled is True
        assert PolicyConfig.from_inputs(inputs(comment="Wrong branch")).remediation_enabled is True

    def test_blank_text_is_none(self):
        """Test whitespace-only text inputs are treated as unset."""
        config = PolicyConfig(change_to="  ", comment="")

        assert config.change_to is None
        assert config.comment is None

    @pytest.mark.parametrize("value,expected", [
        ("error", AlreadyExistsAction.ERROR),
        ("close_this", AlreadyExistsAction.CLOSE_THIS),
        ("close_other", AlreadyExistsAction.CLOSE_OTHER),
        ("close_other_continue", AlreadyExistsAction.CLOSE_OTHER_CONTINUE),
        ("nothing", AlreadyExistsAction.NOTHING),
        ("explode", AlreadyExistsAction.UNRECOGNIZED),
    ])
    def test_already_exists_action(self, value, expected):
        """Test already-exists-action parsing."""
        config = PolicyConfig.from_inputs(inputs(already_exists_action=value))

        assert config.already_exists_action is expected
        assert config.already_exists_action_input == value


class TestRemediationOutcome:
    """Test cases for RemediationOutcome."""

    def test_empty_outcome_has_no_outputs(self):
        """Test nothing is reported when nothing was decided."""
        assert RemediationOutcome().to_outputs() == {}

    def test_full_outcome(self):
        """Test every output is rendered."""
        outcome = RemediationOutcome(wrong_target=True, new_target="develop", pr_already_exists=False)
        outcome.record_comment("first")
        outcome.record_comment("second")

        assert outcome.to_outputs() == {
            "wrong-target": "true",
            "new-target": "develop",
            "comment-posted": "first\n\nsecond",
            "pr-already-exists": "false",
        }

    def test_false_wrong_target_is_reported(self):
        """Test a false boolean is still an output."""
        assert RemediationOutcome(wrong_target=False).to_outputs() == {"wrong-target": "false"}

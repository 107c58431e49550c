"""Action validation: composable checks run before a reducer touches the state."""

from hideseek.rules.validators import ValidationContext, ValidatorPipeline, pipeline_for_action

__all__ = ["ValidationContext", "ValidatorPipeline", "pipeline_for_action"]

# octave_poet/interface/cli_interface.py

import argparse
import logging
import sys
from typing import List, Optional

import yaml

from octave_poet import __version__
from octave_poet.config.config_manager import ConfigManager
from octave_poet.core.orchestrator import PoemOrchestrator
from octave_poet.errors import PipelineError
from octave_poet.evaluation.poem_validator import PoemValidator
from octave_poet.generation.poem_generator import PoemGenerator
from octave_poet.llm.base_llm import LLMError
from octave_poet.llm.llm_factory import CollaboratorPair, create_collaborators
from octave_poet.models.outcome import PipelineOutcome, RunStatus
from octave_poet.models.topic import parse_topic
from octave_poet.prompts import PromptManager, get_global_prompt_manager
from octave_poet.refinement.poem_repairer import PoemRepairer
from octave_poet.utils.logging_config import configure_logging

EXIT_DONE = 0
EXIT_ERROR = 1
EXIT_EXHAUSTED = 2
EXIT_CLARIFICATION = 3

EXIT_CODES = {
    RunStatus.DONE: EXIT_DONE,
    RunStatus.EXHAUSTED: EXIT_EXHAUSTED,
    RunStatus.CLARIFICATION: EXIT_CLARIFICATION,
}

logger = logging.getLogger(__name__)


def build_pipeline(collaborators: CollaboratorPair, max_repair_attempts: int,
                   prompt_manager: Optional[PromptManager] = None) -> PoemOrchestrator:
    """Wire generator, validator and repairer onto a collaborator pair."""
    prompt_manager = prompt_manager or get_global_prompt_manager()
    return PoemOrchestrator(
        generator=PoemGenerator(collaborators.creative, prompt_manager),
        validator=PoemValidator(collaborators.deterministic, prompt_manager),
        repairer=PoemRepairer(collaborators.creative, prompt_manager),
        max_repair_attempts=max_repair_attempts
    )


def format_outcome(outcome: PipelineOutcome) -> str:
    """Render a pipeline outcome for the terminal."""
    lines = []

    if outcome.status is RunStatus.CLARIFICATION:
        lines.append("❓ The poet needs a clearer topic:")
        lines.append(outcome.clarification.text)
        return "\n".join(lines)

    if outcome.status is RunStatus.DONE:
        lines.append(f"🎉 Poem accepted after {outcome.repair_attempts} repair attempts")
    else:
        lines.append(f"⏹️ Repair budget of {outcome.max_repair_attempts} exhausted; "
                     f"still failing: {', '.join(outcome.validation.failed_checks)}")

    lines.append("")
    lines.append(outcome.poem.get_text())
    lines.append("")
    lines.append(f"📊 {outcome.validation.explanation}")
    return "\n".join(lines)


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="octave-poet",
        description="Octave Poet - 8-line English poems about romance or world peace",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Romance poem with the default configuration
  octave-poet

  # World peace poem, at most two repairs
  octave-poet -t "world peace" --max-repairs 2

  # Custom configuration file
  octave-poet -c my_config.yaml -t romance
        """
    )

    parser.add_argument(
        "-c", "--config",
        type=str,
        default=None,
        help="Path to configuration file (default: bundled default_config.yaml)"
    )

    parser.add_argument(
        "-t", "--topic",
        type=str,
        default="romance",
        help="Poem topic: romance or world peace; anything else is sent as a freeform request (default: romance)"
    )

    parser.add_argument(
        "--max-repairs",
        type=int,
        default=None,
        help="Override the repair budget from the configuration"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Override the log level from the configuration (e.g. DEBUG)"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Octave Poet {__version__}"
    )

    args = parser.parse_args(argv)
    if args.max_repairs is not None and args.max_repairs < 0:
        parser.error("--max-repairs must be non-negative")
    return args


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point; returns the process exit code."""
    args = _parse_args(argv)

    try:
        config_manager = ConfigManager(args.config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"❌ Error loading configuration: {e}", file=sys.stderr)
        return EXIT_ERROR

    log_config = config_manager.get_logging_config()
    try:
        configure_logging(args.log_level or log_config.level, log_config.format)
    except ValueError as e:
        print(f"❌ {e}", file=sys.stderr)
        return EXIT_ERROR

    errors = config_manager.get_config_errors()
    max_repairs = args.max_repairs
    if max_repairs is not None:
        # Command line budget replaces the configured one
        errors = [error for error in errors if not error.startswith("pipeline.max_repair_attempts")]
    else:
        max_repairs = config_manager.get_pipeline_config().max_repair_attempts

    if errors:
        for error in errors:
            print(f"❌ Configuration error: {error}", file=sys.stderr)
        return EXIT_ERROR

    try:
        topic = parse_topic(args.topic)
    except ValueError as e:
        print(f"❌ {e}", file=sys.stderr)
        return EXIT_ERROR

    settings = config_manager.get_llm_settings()
    print(f"🎭 Octave Poet: {topic.display_name} ({settings.provider}/{settings.model})")

    try:
        with create_collaborators(settings) as collaborators:
            orchestrator = build_pipeline(collaborators, max_repairs)
            outcome = orchestrator.run(topic)
    except PipelineError as e:
        print(f"❌ Pipeline failed ({e.__class__.__name__}): {e}", file=sys.stderr)
        if e.poem is not None:
            print(f"\nLast poem after {e.repair_attempts} repair attempts:\n{e.poem.get_text()}", file=sys.stderr)
        return EXIT_ERROR
    except LLMError as e:
        print(f"❌ Could not create LLM clients: {e}", file=sys.stderr)
        return EXIT_ERROR
    except KeyboardInterrupt:
        print("\n⏹️ Interrupted by user", file=sys.stderr)
        return EXIT_ERROR

    print(format_outcome(outcome))
    return EXIT_CODES[outcome.status]


if __name__ == "__main__":
    sys.exit(main())

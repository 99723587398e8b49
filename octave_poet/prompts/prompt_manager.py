# octave_poet/prompts/prompt_manager.py

import logging
import string
import yaml
from typing import Dict, Any, Optional, List
from pathlib import Path
from dataclasses import dataclass, field
from enum import Enum


class PromptCategory(Enum):
    """Categories of prompts for different tasks"""
    GENERATION = "generation"
    EVALUATION = "evaluation"
    REFINEMENT = "refinement"

@dataclass
class PromptTemplate:
    """Represents a single prompt template"""
    name: str
    description: str
    template: str
    category: PromptCategory
    parameters: List[str]
    metadata: Dict[str, Any] = field(default_factory=dict)

    def format(self, **kwargs) -> str:
        """Format the template with provided parameters"""
        # Validate required parameters
        missing_params = set(self.parameters) - set(kwargs.keys())
        if missing_params:
            raise ValueError(f"Missing required parameters: {missing_params}")

        return self.template.format(**kwargs)

class PromptManager:
    """
    Manages prompt templates for the generate, validate and repair steps.

    Loads YAML templates from category subdirectories of the templates
    directory (the directory name is the category) and formats them.
    """

    def __init__(self, prompts_dir: Optional[str] = None):
        self.prompts_dir = Path(prompts_dir or self._get_default_prompts_dir())
        self.logger = logging.getLogger(self.__class__.__name__)
        self._templates: Dict[str, PromptTemplate] = {}
        self._load_all_templates()

    def _get_default_prompts_dir(self) -> Path:
        """Get default prompts directory path"""
        return Path(__file__).parent / "templates"

    def _load_all_templates(self):
        """Load all prompt templates from the templates directory"""
        if not self.prompts_dir.exists():
            raise FileNotFoundError(f"Prompts directory not found: {self.prompts_dir}")

        for yaml_file in sorted(self.prompts_dir.rglob("*.yaml")):
            self._load_template_file(yaml_file)

        self.logger.debug(f"Loaded {len(self._templates)} prompt templates from {self.prompts_dir}")

    def _load_template_file(self, yaml_file: Path):
        """Load a single template file"""
        with open(yaml_file, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict) or 'name' not in data or 'template' not in data:
            raise ValueError(f"Template file {yaml_file} must define 'name' and 'template'")

        # Determine category from directory structure
        category = PromptCategory(yaml_file.parent.name)

        template = PromptTemplate(
            name=data['name'],
            description=data.get('description', ''),
            template=data['template'],
            category=category,
            parameters=self._extract_parameters(data['template']),
            metadata=data.get('metadata') or {}
        )

        self._templates[template.name] = template

    def _extract_parameters(self, template_str: str) -> List[str]:
        """Extract parameter names from template string, ignoring escaped braces"""
        parameters = {
            field_name
            for _, field_name, _, _ in string.Formatter().parse(template_str)
            if field_name
        }
        return sorted(parameters)

    def get_template(self, name: str) -> PromptTemplate:
        """Get a template by name"""
        if name not in self._templates:
            raise KeyError(f"Template '{name}' not found")
        return self._templates[name]

    def get_templates_by_category(self, category: PromptCategory) -> List[PromptTemplate]:
        """Get all templates in a specific category"""
        return [t for t in self._templates.values() if t.category == category]

    def list_templates(self) -> List[str]:
        """List all available template names"""
        return list(self._templates.keys())

    def format_prompt(self, template_name: str, **kwargs) -> str:
        """Format a prompt template with parameters"""
        template = self.get_template(template_name)
        return template.format(**kwargs)

    def reload_templates(self):
        """Reload all templates from disk"""
        self._templates.clear()
        self._load_all_templates()

    def add_template(self, template: PromptTemplate):
        """Add a template programmatically"""
        self._templates[template.name] = template

    def validate_template(self, template_name: str, **kwargs) -> bool:
        """Validate that all required parameters are provided for a template"""
        try:
            template = self.get_template(template_name)
        except KeyError:
            return False
        missing_params = set(template.parameters) - set(kwargs.keys())
        return len(missing_params) == 0

    def get_template_info(self, template_name: str) -> Dict[str, Any]:
        """Get information about a template"""
        template = self.get_template(template_name)
        return {
            'name': template.name,
            'description': template.description,
            'category': template.category.value,
            'parameters': template.parameters,
            'metadata': template.metadata
        }

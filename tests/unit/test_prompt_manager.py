import pytest
from octave_poet.prompts.prompt_manager import PromptCategory, PromptManager, PromptTemplate


class TestPromptManager:

    def test_get_template_octave_poet_system(self, prompt_manager):
        """Test getting the poet system template"""
        template = prompt_manager.get_template('octave_poet_system')
        assert template.name == 'octave_poet_system'
        assert template.category == PromptCategory.GENERATION
        assert template.parameters == ['disambiguation_response', 'line_count', 'refusal_response']

    def test_get_template_octave_inspector_system(self, prompt_manager):
        """Test getting the validator system template"""
        template = prompt_manager.get_template('octave_inspector_system')
        assert template.category == PromptCategory.EVALUATION
        assert set(template.parameters) == {'line_count', 'language', 'themes', 'theme_values', 'detected_values'}
        assert template.metadata['collaborator'] == 'deterministic'

    def test_get_template_octave_fixer(self, prompt_manager):
        """Test getting the repair templates"""
        system = prompt_manager.get_template('octave_fixer_system')
        request = prompt_manager.get_template('octave_fixer_request')
        assert system.category == PromptCategory.REFINEMENT
        assert system.parameters == ['line_count']
        assert request.parameters == ['poem', 'validation_issues']

    def test_get_template_not_found(self, prompt_manager):
        """Test getting a non-existent template raises KeyError"""
        with pytest.raises(KeyError, match="Template 'nonexistent' not found"):
            prompt_manager.get_template('nonexistent')

    def test_get_templates_by_category(self, prompt_manager):
        """Test getting templates by category"""
        refinement = prompt_manager.get_templates_by_category(PromptCategory.REFINEMENT)
        assert sorted(t.name for t in refinement) == ['octave_fixer_request', 'octave_fixer_system']
        assert len(prompt_manager.get_templates_by_category(PromptCategory.GENERATION)) == 1

    def test_list_templates(self, prompt_manager):
        assert sorted(prompt_manager.list_templates()) == [
            'octave_fixer_request', 'octave_fixer_system', 'octave_inspector_system', 'octave_poet_system'
        ]

    def test_format_prompt(self, prompt_manager):
        """Test formatting the repair request"""
        prompt = prompt_manager.format_prompt('octave_fixer_request', poem="a\nb", validation_issues="- too short")
        assert "a\nb" in prompt
        assert "- too short" in prompt

    def test_format_prompt_missing_parameter(self, prompt_manager):
        with pytest.raises(ValueError, match="Missing required parameters"):
            prompt_manager.format_prompt('octave_fixer_request', poem="a")

    def test_validate_template(self, prompt_manager):
        assert prompt_manager.validate_template('octave_fixer_system', line_count=8)
        assert not prompt_manager.validate_template('octave_fixer_system')
        assert not prompt_manager.validate_template('nonexistent')

    def test_get_template_info(self, prompt_manager):
        info = prompt_manager.get_template_info('octave_fixer_system')
        assert info['category'] == 'refinement'
        assert info['parameters'] == ['line_count']

    def test_add_template(self, prompt_manager):
        prompt_manager.add_template(PromptTemplate(
            name='custom', description='', template='Hi {name}',
            category=PromptCategory.GENERATION, parameters=['name']
        ))
        assert prompt_manager.format_prompt('custom', name='there') == 'Hi there'

    def test_custom_directory(self, tmp_path):
        (tmp_path / "generation").mkdir()
        (tmp_path / "generation" / "greeting.yaml").write_text(
            "name: greeting\ndescription: test\ntemplate: 'Hello {{literal}} {who}'\n", encoding="utf-8"
        )

        manager = PromptManager(str(tmp_path))

        assert manager.get_template('greeting').parameters == ['who']
        assert manager.format_prompt('greeting', who='world') == 'Hello {literal} world'

    def test_missing_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            PromptManager(str(tmp_path / "missing"))

    def test_reload_templates(self, prompt_manager):
        prompt_manager.add_template(PromptTemplate(
            name='custom', description='', template='x', category=PromptCategory.GENERATION, parameters=[]
        ))
        prompt_manager.reload_templates()
        assert 'custom' not in prompt_manager.list_templates()

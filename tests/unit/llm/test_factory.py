import pytest

from ragviz.config.models import GeneratorConfig
from ragviz.core.chunk import Chunk
from ragviz.errors import ConfigurationError
from ragviz.llm import GeneratorFactory, MockGenerator, OpenAICompatibleGenerator
from ragviz.llm.base import BaseGenerator
from ragviz.llm.prompts import build_grounded_prompt, build_mock_rows_prompt, build_sql_prompt


class TestGeneratorFactory:

    def test_list_types(self):
        assert {"mock", "openai"} <= set(GeneratorFactory.list_types())

    def test_create_mock(self):
        assert isinstance(GeneratorFactory.create("mock"), MockGenerator)

    @pytest.mark.asyncio
    async def test_from_config_openai(self):
        generator = GeneratorFactory.from_config(GeneratorConfig(
            type="openai",
            params={"base_url": "http://llm.test/v1", "api_key": "sk-secret", "model": "m"},
        ))
        assert isinstance(generator, OpenAICompatibleGenerator)
        assert generator.sql_model == "m"
        await generator.aclose()

    def test_api_key_is_masked_in_logs(self, mocker):
        class KeyedGenerator(MockGenerator):
            def __init__(self, api_key=None):
                super().__init__()
                self.api_key = api_key

        mocker.patch.object(GeneratorFactory, "_registry", {"keyed": KeyedGenerator})
        mock_logger = mocker.patch("ragviz.llm.factory.logger")

        generator = GeneratorFactory.create("keyed", api_key="sk-secret")

        assert generator.api_key == "sk-secret"
        logged = mock_logger.debug.call_args[0][0]
        assert "sk-secret" not in logged
        assert "***" in logged

    def test_unknown_type(self):
        with pytest.raises(ConfigurationError, match="Unknown generator type"):
            GeneratorFactory.create("gemini")

    def test_register_rejects_non_generator(self):
        with pytest.raises(TypeError):
            GeneratorFactory.register("bad", object)

    def test_register_custom(self, monkeypatch):
        monkeypatch.setattr(GeneratorFactory, "_registry", dict(GeneratorFactory._registry))

        class EchoGenerator(MockGenerator):
            pass

        GeneratorFactory.register("echo", EchoGenerator)
        assert isinstance(GeneratorFactory.create("echo"), EchoGenerator)
        assert issubclass(EchoGenerator, BaseGenerator)


class TestPrompts:

    def test_grounded_prompt_contains_context_and_query(self):
        prompt = build_grounded_prompt("What is rule 4?", [Chunk(text="Rule 4: cite."), Chunk(text="Rule 5: hybrid.")])
        assert "Rule 4: cite.\n\nRule 5: hybrid." in prompt
        assert prompt.endswith("Query: What is rule 4?")
        assert "say you don't know" in prompt

    def test_sql_prompt(self):
        prompt = build_sql_prompt("revenue?", '[{"name": "t"}]')
        assert "'sql' and 'explanation'" in prompt
        assert '[{"name": "t"}]' in prompt

    def test_rows_prompt(self):
        assert "SELECT 1;" in build_mock_rows_prompt("SELECT 1;")

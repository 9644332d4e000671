"""
Tests for llmfactory.py - provider table, compatibility checks and client creation.
"""

import unittest

from shaid.core.configs import Configuration, ModelSettings, ProviderKind
from shaid.llmfactory import BACKENDS, LLMFactory, ProviderBackend


class TestLLMFactory(unittest.TestCase):
    """Test cases for LLMFactory class."""

    def setUp(self):
        self.factory = LLMFactory()

    def test_every_provider_kind_has_backend(self):
        self.assertEqual(set(BACKENDS), set(ProviderKind))
        self.assertEqual(
            self.factory.get_available_providers(), ["OpenAI", "Claude", "Gemini", "Custom"]
        )

    def test_compatibility_table(self):
        servable = [
            (ProviderKind.OPENAI, "gpt-4o"),
            (ProviderKind.OPENAI, "o4-mini"),
            (ProviderKind.CLAUDE, "claude-3-5-sonnet-20241022"),
            (ProviderKind.GEMINI, "gemini-2.0-flash"),
            (ProviderKind.CUSTOM, "llama3.1:8b"),
        ]
        for provider, model in servable:
            self.assertTrue(self.factory.is_servable(provider, model), (provider, model))

        unservable = [
            (ProviderKind.OPENAI, "claude-3-5-sonnet-20241022"),
            (ProviderKind.CLAUDE, "gpt-4o"),
            (ProviderKind.GEMINI, "gpt-4o"),
            (ProviderKind.CUSTOM, ""),
        ]
        for provider, model in unservable:
            self.assertFalse(self.factory.is_servable(provider, model), (provider, model))

    def test_default_models_are_servable(self):
        for provider, backend in BACKENDS.items():
            self.assertTrue(self.factory.is_servable(provider, backend.default_model))

    def test_env_vars(self):
        self.assertEqual(BACKENDS[ProviderKind.OPENAI].env_var, "OPENAI_API_KEY")
        self.assertEqual(BACKENDS[ProviderKind.CLAUDE].env_var, "ANTHROPIC_API_KEY")
        self.assertEqual(BACKENDS[ProviderKind.GEMINI].env_var, "GOOGLE_API_KEY")
        self.assertEqual(BACKENDS[ProviderKind.CUSTOM].env_var, "OPENAI_API_KEY")

    def test_create_llm_uses_backend_builder(self):
        calls = []

        def builder(config, settings):
            calls.append((config, settings))
            return "llm"

        factory = LLMFactory(
            {
                ProviderKind.OPENAI: ProviderBackend(
                    name="OpenAI",
                    builder=builder,
                    env_var="OPENAI_API_KEY",
                    default_model="gpt-4o",
                    model_prefixes=("gpt-",),
                )
            }
        )
        config = Configuration(api_key="k")

        self.assertEqual(factory.create_llm(config), "llm")
        self.assertEqual(calls[0][0], config)
        self.assertIsInstance(calls[0][1], ModelSettings)

    def test_unsupported_provider_raises(self):
        factory = LLMFactory({})
        with self.assertRaises(ValueError):
            factory.create_llm(Configuration(api_key="k"))
        self.assertFalse(factory.is_servable(ProviderKind.OPENAI, "gpt-4o"))

    def test_create_openai_client(self):
        from langchain_openai import ChatOpenAI

        llm = self.factory.create_llm(Configuration(api_key="sk-test"), ModelSettings())
        self.assertIsInstance(llm, ChatOpenAI)
        self.assertEqual(llm.model_name, "gpt-4o")

    def test_create_custom_client_uses_base_url(self):
        from langchain_openai import ChatOpenAI

        config = Configuration(
            provider=ProviderKind.CUSTOM,
            model="llama3",
            base_url="http://localhost:11434/v1",
        )
        llm = self.factory.create_llm(config, ModelSettings())
        self.assertIsInstance(llm, ChatOpenAI)
        self.assertEqual(llm.openai_api_base, "http://localhost:11434/v1")

    def test_create_claude_client(self):
        from langchain_anthropic import ChatAnthropic

        config = Configuration(
            provider=ProviderKind.CLAUDE, model="claude-3-5-sonnet-20241022", api_key="sk-ant"
        )
        llm = self.factory.create_llm(config, ModelSettings())
        self.assertIsInstance(llm, ChatAnthropic)

    def test_create_gemini_client(self):
        from langchain_google_genai import ChatGoogleGenerativeAI

        config = Configuration(
            provider=ProviderKind.GEMINI, model="gemini-2.0-flash", api_key="AIza-test"
        )
        llm = self.factory.create_llm(config, ModelSettings(max_tokens=256))
        self.assertIsInstance(llm, ChatGoogleGenerativeAI)
        self.assertTrue(llm.model.endswith("gemini-2.0-flash"))
        self.assertEqual(llm.max_output_tokens, 256)

    def test_example_models_listed(self):
        self.assertIn("gpt-4o", self.factory.get_available_models(ProviderKind.OPENAI))


if __name__ == "__main__":
    unittest.main()

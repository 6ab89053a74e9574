"""Tests for token suggestion synthesis"""
import random
import re

import pytest

from launchpad.prompt_analyzer import analyze
from launchpad.synthesizer import (
    SuggestionSynthesizer,
    THEME_NAMES,
    assess_risk_level,
    calculate_viral_potential,
    derive_symbol,
    generate_marketing_hooks,
    generate_tags,
    validate_prompt,
)

SYMBOL_RE = re.compile(r"^[A-Z0-9]{1,8}$")


class TestDeriveSymbol:
    def test_two_words(self):
        assert derive_symbol("Moon Rocket") == "MOOROC"

    def test_one_word(self):
        assert derive_symbol("Quantum") == "QUANTU"

    def test_three_words(self):
        assert derive_symbol("Epic Legendary Chad") == "ELC"

    def test_strips_punctuation(self):
        assert derive_symbol("Doge-Coin!") == "DOGECO"

    def test_empty_falls_back(self):
        assert derive_symbol("") == "TOKEN"
        assert derive_symbol("!!! ???") == "TOKEN"


class TestScoring:
    def test_viral_potential_clamped(self):
        assert calculate_viral_potential(analyze("amazing moon rocket dog ape chad")) == 10

    def test_viral_potential_baseline(self):
        assert calculate_viral_potential(analyze("hello world")) == 5

    def test_meme_is_high_risk(self):
        assert assess_risk_level(analyze("ape together")) == "high"

    def test_tech_is_low_risk(self):
        assert assess_risk_level(analyze("quantum computing")) == "low"

    def test_no_theme_is_medium_risk(self):
        assert assess_risk_level(analyze("hello world")) == "medium"

    def test_theme_hooks_first(self):
        hooks = generate_marketing_hooks(analyze("elite dog"), "Elite Dog")
        assert len(hooks) == 3
        assert hooks[0].startswith("💎 Experience luxury")
        assert "pack is growing" in hooks[2]

    def test_tags_deduplicated_and_capped(self):
        tags = generate_tags(analyze("moon dog"))
        assert tags == ["Solana", "DeFi", "Community", "Pet", "Animal", "Cute"]


class TestSynthesize:
    def test_keyword_variant_uses_first_keyword(self):
        synth = SuggestionSynthesizer(random.Random(1))
        first = synth.suggest("a very good dog", 1)[0]
        assert first.name.endswith(" Dog")
        assert first.category == "animals"

    def test_variants_cycle_strategies(self):
        synth = SuggestionSynthesizer(random.Random(7))
        suggestions = synth.suggest("a very good dog", 3)
        assert " " not in suggestions[1].name
        assert suggestions[2].name in THEME_NAMES["animals"]

    def test_no_theme_uses_fallback(self):
        s = SuggestionSynthesizer(random.Random(3)).preview("hello world")
        assert s.category == "tech"
        assert s.risk_level == "medium"

    def test_symbol_derived_from_name(self):
        for s in SuggestionSynthesizer(random.Random(5)).suggest("luxury rolex for cats", 6):
            assert s.symbol == derive_symbol(s.name)

    @pytest.mark.parametrize("seed", range(20))
    def test_structurally_valid_across_seeds(self, seed):
        prompts = ["moon dog", "quantum finance", "", "elite rolex bank", "just vibes"]
        synth = SuggestionSynthesizer(random.Random(seed))
        for prompt in prompts:
            for s in synth.suggest(prompt, 4):
                assert s.name
                assert SYMBOL_RE.match(s.symbol)
                assert s.description
                assert len(s.tags) <= 6
                assert len(set(s.tags)) == len(s.tags)
                assert len(s.marketing_hooks) <= 3
                assert s.risk_level in ("low", "medium", "high")
                assert 1 <= s.viral_potential <= 10

    def test_seeded_runs_reproducible(self):
        a = SuggestionSynthesizer(random.Random(42)).suggest("a rocket penguin", 5)
        b = SuggestionSynthesizer(random.Random(42)).suggest("a rocket penguin", 5)
        assert a == b

    def test_count_zero(self):
        assert SuggestionSynthesizer().suggest("moon dog", 0) == []

    def test_to_dict_keys(self):
        d = SuggestionSynthesizer(random.Random(0)).preview("moon dog").to_dict()
        assert d["riskLevel"] == "high"
        assert d["viralPotential"] == 10
        assert "marketingHooks" in d and "suggestedTags" in d


class TestValidatePrompt:
    def test_empty(self):
        result = validate_prompt("")
        assert not result["isValid"]
        assert result["errors"] == ["Please provide a description for your token"]

    def test_too_short(self):
        assert not validate_prompt("short")["isValid"]

    def test_too_long(self):
        assert not validate_prompt("x" * 501)["isValid"]

    def test_valid(self):
        assert validate_prompt("A penguin that surfs") == {"isValid": True, "errors": []}
